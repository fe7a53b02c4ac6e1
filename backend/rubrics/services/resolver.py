"""Rubric resolution: which reviews a unit has, and which of them a role may score.

A rubric belongs to one (school, department). Reviews carry the faculty type
that scores them. Guides see every review but can only edit guide reviews;
panel members see panel reviews only.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from django.core.exceptions import ValidationError

from reviews.exceptions import NotFoundError, ReviewValidationError
from rubrics.models import FacultyType, ReviewSpec, RubricDefinition


@dataclass(frozen=True)
class ResolvedReview:
    review_name: str
    display_name: str
    faculty_type: str
    components: List[dict] = field(default_factory=list)
    deadline_from: Optional[datetime] = None
    deadline_to: Optional[datetime] = None
    requires_ppt: bool = False
    editable: bool = False
    order: int = 0

    @property
    def deadline(self):
        if self.deadline_from is None and self.deadline_to is None:
            return None
        return {'from': self.deadline_from, 'to': self.deadline_to}


def normalize_faculty_type(value) -> str:
    role = str(value or '').strip().lower()
    if role not in FacultyType.values:
        raise ReviewValidationError(f"Invalid faculty type '{value}'. Must be 'guide' or 'panel'.")
    return role


def validate_components(components) -> None:
    """Raise django ValidationError unless components is a list of {name, weight>0} with unique names."""
    if not isinstance(components, list):
        raise ValidationError('Components must be a list.')
    seen = set()
    for comp in components:
        if not isinstance(comp, dict):
            raise ValidationError('Each component must be an object with "name" and "weight".')
        name = comp.get('name')
        if not isinstance(name, str) or not name.strip():
            raise ValidationError('Component name is required.')
        if name in seen:
            raise ValidationError(f'Duplicate component name: {name}')
        seen.add(name)
        weight = comp.get('weight')
        if isinstance(weight, bool) or not isinstance(weight, (int, float)) or not math.isfinite(weight):
            raise ValidationError(f'Component "{name}" weight must be a number.')
        if weight <= 0:
            raise ValidationError(f'Component "{name}" weight must be positive.')


def component_weights(spec: ReviewSpec) -> Dict[str, float]:
    return {c['name']: c['weight'] for c in (spec.components or []) if isinstance(c, dict) and 'name' in c}


def get_rubric(school: str, department: str) -> Optional[RubricDefinition]:
    if not school or not department:
        return None
    return RubricDefinition.objects.filter(school=school, department=department).first()


def get_review_spec(student, review_name: str) -> ReviewSpec:
    """Return the ReviewSpec named `review_name` in the rubric of the student's unit."""
    spec = (
        ReviewSpec.objects.select_related('rubric')
        .filter(rubric__school=student.school, rubric__department=student.department, review_name=review_name)
        .first()
    )
    if spec is None:
        raise NotFoundError(f"Review '{review_name}' is not configured for {student.school} / {student.department}.")
    return spec


def _resolve(spec: ReviewSpec, role: str) -> ResolvedReview:
    return ResolvedReview(
        review_name=spec.review_name,
        display_name=spec.label,
        faculty_type=spec.faculty_type,
        components=[dict(c) for c in (spec.components or [])],
        deadline_from=spec.deadline_from,
        deadline_to=spec.deadline_to,
        requires_ppt=spec.requires_ppt,
        editable=spec.faculty_type == role,
        order=spec.order,
    )


def resolve_rubric_reviews(rubric: Optional[RubricDefinition], role) -> List[ResolvedReview]:
    """Filter a rubric's reviews for a role.

    guide: all reviews, panel ones flagged read-only.
    panel: panel reviews only.
    No rubric yields an empty list.
    """
    role = normalize_faculty_type(role)
    if rubric is None:
        return []

    specs = rubric.reviews.all().order_by('order', 'id')
    if role == FacultyType.PANEL:
        specs = specs.filter(faculty_type=FacultyType.PANEL)
    return [_resolve(spec, role) for spec in specs]


def resolve_reviews(school: str, department: str, role) -> List[ResolvedReview]:
    return resolve_rubric_reviews(get_rubric(school, department), role)
