"""Deadline, hard-lock and PPT gating for review records.

Every surface that decides whether marks may be written (single submission,
team submission, extension requests, summaries) goes through this module.
Nothing is cached: each call reads the current rows and compares against
``now``.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.db.models import Max
from django.utils import timezone

from projects.models import DeadlineOverride, Project, ReviewRecord
from reviews.models import ExtensionRequest
from reviews.services.lookups import get_review_record
from rubrics.models import FacultyType
from rubrics.services.resolver import normalize_faculty_type

HARD_LOCKED = 'hard_locked'
READ_ONLY = 'read_only'
DEADLINE_PASSED = 'deadline_passed'
PPT_PENDING = 'ppt_pending'
PPT_PARTIAL = 'ppt_partial'

PPT_APPROVED = 'approved'
PPT_STATUS_PARTIAL = 'partial'
PPT_STATUS_NONE = 'none'


@dataclass(frozen=True)
class EditDecision:
    editable: bool
    reason: Optional[str] = None
    effective_deadline: Optional[datetime] = None


def team_override_deadline(project: Project, review_spec) -> Optional[datetime]:
    """Latest override `to_at` among the project's students, or None when nobody has one."""
    return (
        DeadlineOverride.objects
        .filter(student__project=project, review_spec=review_spec)
        .aggregate(latest=Max('to_at'))['latest']
    )


def latest_request_status_for(record: ReviewRecord, role: str) -> str:
    req = ExtensionRequest.objects.latest_for(record.student, record.review_spec, role)
    return req.status if req is not None else 'none'


def effective_deadline(record: ReviewRecord, role: str) -> Optional[datetime]:
    spec = record.review_spec
    if latest_request_status_for(record, role) == ExtensionRequest.Status.APPROVED:
        override = team_override_deadline(record.student.project, spec)
        if override is not None:
            return override
    return spec.deadline_to


def record_is_locked(record: ReviewRecord, role, now: Optional[datetime] = None) -> bool:
    role = normalize_faculty_type(role)
    if record.locked:
        return True
    # guides only look at panel reviews
    if role == FacultyType.GUIDE and record.review_spec.faculty_type == FacultyType.PANEL:
        return False
    deadline = effective_deadline(record, role)
    if deadline is None:
        return False
    now = now or timezone.now()
    return now > deadline


def is_locked(student, review_name: str, role, now: Optional[datetime] = None) -> bool:
    """True when the review is hard-locked or its effective deadline has passed for `role`."""
    return record_is_locked(get_review_record(student, review_name), role, now)


def ppt_gate_status(project: Project) -> str:
    """'approved' when every student's PPT is approved, 'partial' when only some are, else 'none'."""
    flags = list(project.students.values_list('ppt_approved', flat=True))
    if not flags:
        return PPT_STATUS_NONE
    if all(flags):
        return PPT_APPROVED
    if any(flags):
        return PPT_STATUS_PARTIAL
    return PPT_STATUS_NONE


def evaluate_record(record: ReviewRecord, role, now: Optional[datetime] = None) -> EditDecision:
    role = normalize_faculty_type(role)
    spec = record.review_spec
    deadline = effective_deadline(record, role)

    if record.locked:
        return EditDecision(False, HARD_LOCKED, deadline)
    if spec.faculty_type != role:
        return EditDecision(False, READ_ONLY, deadline)
    if record_is_locked(record, role, now):
        return EditDecision(False, DEADLINE_PASSED, deadline)
    if role == FacultyType.PANEL and spec.requires_ppt:
        gate = ppt_gate_status(record.student.project)
        if gate == PPT_STATUS_PARTIAL:
            return EditDecision(False, PPT_PARTIAL, deadline)
        if gate != PPT_APPROVED:
            return EditDecision(False, PPT_PENDING, deadline)
    return EditDecision(True, None, deadline)


def evaluate_edit(student, review_name: str, role, now: Optional[datetime] = None) -> EditDecision:
    return evaluate_record(get_review_record(student, review_name), role, now)


def describe(decision: EditDecision, review_label: str) -> str:
    if decision.reason == HARD_LOCKED:
        return f'{review_label} is locked. Request an extension to edit.'
    if decision.reason == DEADLINE_PASSED:
        return f'The deadline for {review_label} has passed. Request an extension to edit.'
    if decision.reason == READ_ONLY:
        return f'{review_label} is read-only for this faculty type.'
    if decision.reason == PPT_PARTIAL:
        return f'{review_label} requires PPT approval for every team member; only some are approved.'
    if decision.reason == PPT_PENDING:
        return f'{review_label} requires PPT approval before marks can be entered.'
    return f'{review_label} is open.'
