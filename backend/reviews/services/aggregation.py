"""Team-level read models built from per-student lock and request state.

Pure projections: nothing here writes, and every call re-reads the rows.
A student missing a record for a review (rubric edited after provisioning)
is shown with the zeroed record provisioning would create.
"""
from datetime import datetime
from typing import List, Optional

from django.utils import timezone

from projects.models import Project, ReviewRecord
from projects.services.provisioning import zeroed_marks
from reviews.exceptions import NotFoundError
from reviews.models import ExtensionRequest
from reviews.services import lock_evaluator
from rubrics.models import ReviewSpec
from rubrics.services.resolver import get_rubric, normalize_faculty_type, resolve_rubric_reviews

STATUS_COMPLETED = 'completed'
STATUS_PARTIAL = 'partial'
STATUS_AVAILABLE = 'available'
STATUS_LOCKED = 'locked'

NOT_PROVISIONED = 'not_provisioned'


def _team_spec(project: Project, review_name: str) -> ReviewSpec:
    spec = ReviewSpec.objects.filter(
        rubric__school=project.school, rubric__department=project.department, review_name=review_name,
    ).first()
    if spec is None:
        raise NotFoundError(f"Review '{review_name}' is not configured for project {project.name}.")
    return spec


def _team_records(project: Project, spec: ReviewSpec) -> List[ReviewRecord]:
    """One record per student, unsaved and zeroed where the row does not exist yet."""
    stored = {
        r.student_id: r
        for r in ReviewRecord.objects.filter(student__project=project, review_spec=spec).select_related('student')
    }
    records = []
    for student in project.students.all():
        record = stored.get(student.pk)
        if record is None:
            record = ReviewRecord(student=student, review_spec=spec, marks=zeroed_marks(spec))
        else:
            record.review_spec = spec
            record.student = student
        records.append(record)
    return records


def _team_status(records: List[ReviewRecord], role: str) -> str:
    statuses = {
        lock_evaluator.latest_request_status_for(r, role) for r in records
    }
    if ExtensionRequest.Status.PENDING in statuses:
        return ExtensionRequest.Status.PENDING
    if ExtensionRequest.Status.APPROVED in statuses:
        return ExtensionRequest.Status.APPROVED
    return 'none'


def _team_deadline(spec: ReviewSpec, project: Project, status: str) -> Optional[datetime]:
    if status == ExtensionRequest.Status.APPROVED:
        override = lock_evaluator.team_override_deadline(project, spec)
        if override is not None:
            return override
    return spec.deadline_to


def _deadline_passed(deadline: Optional[datetime], now: datetime) -> bool:
    return deadline is not None and now > deadline


def _locked(records: List[ReviewRecord], status: str, role: str, now: datetime) -> bool:
    if status == ExtensionRequest.Status.APPROVED:
        return False
    return any(lock_evaluator.record_is_locked(r, role, now) for r in records)


def team_request_status(project: Project, review_name: str, role) -> str:
    """'pending' if any student has a pending request, else 'approved' if any approved, else 'none'."""
    role = normalize_faculty_type(role)
    return _team_status(_team_records(project, _team_spec(project, review_name)), role)


def team_deadline_passed(project: Project, review_name: str, role, now: Optional[datetime] = None) -> bool:
    role = normalize_faculty_type(role)
    spec = _team_spec(project, review_name)
    status = _team_status(_team_records(project, spec), role)
    return _deadline_passed(_team_deadline(spec, project, status), now or timezone.now())


def team_locked(project: Project, review_name: str, role, now: Optional[datetime] = None) -> bool:
    """Any student locked, unless the team already holds an approved extension."""
    role = normalize_faculty_type(role)
    records = _team_records(project, _team_spec(project, review_name))
    return _locked(records, _team_status(records, role), role, now or timezone.now())


def team_review_summary(project: Project, role, now: Optional[datetime] = None) -> dict:
    role = normalize_faculty_type(role)
    now = now or timezone.now()
    rubric = get_rubric(project.school, project.department)
    ppt_status = lock_evaluator.ppt_gate_status(project)
    specs = {s.review_name: s for s in rubric.reviews.all()} if rubric is not None else {}

    reviews = []
    for resolved in resolve_rubric_reviews(rubric, role):
        spec = specs[resolved.review_name]
        records = _team_records(project, spec)
        status = _team_status(records, role)
        deadline = _team_deadline(spec, project, status)
        decisions = [lock_evaluator.evaluate_record(r, role, now) for r in records]
        blocked = next((d.reason for d in decisions if not d.editable), None)
        if blocked is None and any(r.pk is None for r in records):
            blocked = NOT_PROVISIONED
        reviews.append({
            'review_name': resolved.review_name,
            'display_name': resolved.display_name,
            'faculty_type': resolved.faculty_type,
            'editable': resolved.editable,
            'requires_ppt': resolved.requires_ppt,
            'request_status': status,
            'deadline': deadline,
            'deadline_passed': _deadline_passed(deadline, now),
            'locked': _locked(records, status, role, now),
            'ppt_status': ppt_status if resolved.requires_ppt else None,
            'can_submit': bool(records) and blocked is None,
            'blocked_reason': blocked,
            'students': [
                {
                    'reg_no': r.student.reg_no,
                    'name': r.student.name,
                    'marks': r.marks,
                    'comments': r.comments,
                    'attendance': {'value': r.attendance_value, 'locked': r.attendance_locked},
                    'locked': r.locked,
                    'provisioned': r.pk is not None,
                    'status': student_review_status(r, role, now),
                }
                for r in records
            ],
        })

    return {
        'project_id': project.pk,
        'project_name': project.name,
        'faculty_type': role,
        'ppt_status': ppt_status,
        'best_project': project.best_project,
        'reviews': reviews,
    }


def student_review_status(record: ReviewRecord, role=None, now: Optional[datetime] = None) -> str:
    """Admin table status for one record: completed, partial, available or locked."""
    role = role or record.review_spec.faculty_type
    locked = lock_evaluator.record_is_locked(record, role, now)
    entered = record.has_marks or bool(record.comments)
    if locked and record.has_marks and record.attendance_value:
        return STATUS_COMPLETED
    if entered:
        return STATUS_PARTIAL
    if not locked:
        return STATUS_AVAILABLE
    return STATUS_LOCKED
