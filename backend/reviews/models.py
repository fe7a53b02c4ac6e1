from django.conf import settings
from django.db import models
from django.db.models import Q, UniqueConstraint
from django.utils import timezone

from rubrics.models import FacultyType


class ExtensionRequestQuerySet(models.QuerySet):
    def for_review(self, student, review_spec, faculty_type):
        return self.filter(student=student, review_spec=review_spec, faculty_type=faculty_type)

    def pending(self):
        return self.filter(status=ExtensionRequest.Status.PENDING)

    def latest_for(self, student, review_spec, faculty_type):
        """Most recently created request for the tuple, or None."""
        return self.for_review(student, review_spec, faculty_type).order_by('-created_at', '-id').first()


class ExtensionRequest(models.Model):
    """Faculty request to reopen a locked review for one student.

    pending -> approved | rejected; both outcomes are terminal.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'

    student = models.ForeignKey('projects.Student', on_delete=models.CASCADE, related_name='extension_requests')
    faculty = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='extension_requests')
    faculty_type = models.CharField(max_length=8, choices=FacultyType.choices)
    review_spec = models.ForeignKey('rubrics.ReviewSpec', on_delete=models.PROTECT, related_name='extension_requests')
    reason = models.TextField(blank=True, default='')

    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING, db_index=True)
    new_deadline = models.DateTimeField(null=True, blank=True)
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='resolved_extension_requests',
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    objects = ExtensionRequestQuerySet.as_manager()

    class Meta:
        ordering = ('-created_at', '-id')
        indexes = [
            models.Index(fields=['status', 'created_at'], name='extreq_status_created_idx'),
            models.Index(fields=['faculty_type', 'status'], name='extreq_type_status_idx'),
        ]
        constraints = [
            UniqueConstraint(
                fields=['student', 'review_spec', 'faculty_type'],
                condition=Q(status='pending'),
                name='unique_pending_extension_request',
            ),
        ]

    def __str__(self):
        return f"{self.student.reg_no} {self.review_spec.review_name} ({self.faculty_type}): {self.status}"

    @property
    def is_resolved(self) -> bool:
        return self.status != self.Status.PENDING

    def mark_approved(self, resolver, new_deadline, now=None):
        self.status = self.Status.APPROVED
        self.resolved_by = resolver
        self.resolved_at = now or timezone.now()
        self.new_deadline = new_deadline

    def mark_rejected(self, resolver, now=None):
        self.status = self.Status.REJECTED
        self.resolved_by = resolver
        self.resolved_at = now or timezone.now()
