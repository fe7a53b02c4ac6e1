import logging
from typing import Iterable, List, Optional

from django.db import IntegrityError, transaction

from projects.models import Panel, Project, ReviewRecord, Student
from reviews.exceptions import ReviewValidationError, StateConflictError
from rubrics.services.resolver import get_rubric

logger = logging.getLogger(__name__)


def zeroed_marks(spec) -> dict:
    return {c['name']: 0 for c in (spec.components or []) if isinstance(c, dict) and c.get('name')}


def ensure_review_records(student: Student, rubric=None) -> List[ReviewRecord]:
    """Create the zeroed ReviewRecord rows a student is missing. Existing rows are left untouched."""
    rubric = rubric or get_rubric(student.school, student.department)
    if rubric is None:
        return []

    existing = set(student.review_records.values_list('review_spec_id', flat=True))
    created = []
    for spec in rubric.reviews.all():
        if spec.pk in existing:
            continue
        created.append(ReviewRecord.objects.create(
            student=student,
            review_spec=spec,
            marks=zeroed_marks(spec),
            comments='',
            attendance_value=False,
            locked=False,
        ))
    return created


@transaction.atomic
def create_project(name: str, guide, students: Iterable[dict], school: str, department: str,
                   panel: Optional[Panel] = None) -> Project:
    """Create a project with its students and seed every review record from the unit's rubric.

    `students` items carry `reg_no`, `name` and optionally `email`.
    """
    name = (name or '').strip()
    if not name:
        raise ReviewValidationError('Project name is required.')

    rubric = get_rubric(school, department)
    if rubric is None:
        raise ReviewValidationError(f'No marking schema configured for {school} / {department}.')

    students = list(students or [])
    if not students:
        raise ReviewValidationError('A project needs at least one student.')

    reg_nos = [str(s.get('reg_no') or '').strip() for s in students]
    if any(not r for r in reg_nos):
        raise ReviewValidationError('Every student needs a register number.')
    if len(set(reg_nos)) != len(reg_nos):
        raise ReviewValidationError('Duplicate register numbers in request.')

    if Project.objects.filter(name=name).exists():
        raise StateConflictError(f"Project '{name}' already exists.")
    taken = list(Student.objects.filter(reg_no__in=reg_nos).values_list('reg_no', flat=True))
    if taken:
        raise StateConflictError(f"Students already assigned to a project: {', '.join(sorted(taken))}")

    try:
        project = Project.objects.create(
            name=name, school=school, department=department, guide_faculty=guide, panel=panel,
        )
    except IntegrityError:
        raise StateConflictError(f"Project '{name}' already exists.")

    for reg_no, data in zip(reg_nos, students):
        student = Student.objects.create(
            reg_no=reg_no,
            name=data.get('name') or reg_no,
            email=data.get('email') or '',
            project=project,
            school=school,
            department=department,
        )
        ensure_review_records(student, rubric)

    logger.info('Project %s created with %s students for %s/%s', project.name, len(reg_nos), school, department)
    return project
