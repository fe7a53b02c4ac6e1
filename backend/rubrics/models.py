from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import UniqueConstraint


class FacultyType(models.TextChoices):
    GUIDE = 'guide', 'Guide'
    PANEL = 'panel', 'Panel'


class RubricDefinition(models.Model):
    """Marking scheme for one organizational unit (school + department)."""

    school = models.CharField(max_length=100)
    department = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            UniqueConstraint(fields=['school', 'department'], name='unique_rubric_per_unit'),
        ]

    def __str__(self):
        return f"{self.school} / {self.department}"


class ReviewSpec(models.Model):
    """One review of a rubric: who scores it, its components and its deadline."""

    rubric = models.ForeignKey(RubricDefinition, on_delete=models.CASCADE, related_name='reviews')
    review_name = models.CharField(max_length=64)
    display_name = models.CharField(max_length=150, blank=True, default='')
    faculty_type = models.CharField(max_length=8, choices=FacultyType.choices, default=FacultyType.GUIDE)
    # [{"name": "Presentation", "weight": 10}, ...]
    components = models.JSONField(default=list, blank=True)
    deadline_from = models.DateTimeField(null=True, blank=True)
    deadline_to = models.DateTimeField(null=True, blank=True)
    requires_ppt = models.BooleanField(default=False)
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ('rubric', 'order', 'id')
        constraints = [
            UniqueConstraint(fields=['rubric', 'review_name'], name='unique_review_name_per_rubric'),
        ]

    def __str__(self):
        return f"{self.rubric}: {self.label} ({self.faculty_type})"

    @property
    def label(self) -> str:
        return self.display_name or self.review_name

    @property
    def component_names(self):
        return [c.get('name') for c in (self.components or [])]

    def clean(self):
        from rubrics.services.resolver import validate_components

        validate_components(self.components)
        if (self.deadline_from is None) != (self.deadline_to is None):
            raise ValidationError('Deadline needs both "from" and "to", or neither.')
        if self.deadline_from and self.deadline_to and self.deadline_from > self.deadline_to:
            raise ValidationError('Deadline "from" must not be after "to".')
