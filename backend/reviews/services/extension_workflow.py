"""Extension requests: faculty ask to reopen a locked review, admins resolve.

A request moves pending -> approved | rejected exactly once. Approval clears
the hard lock and creates or extends the student's deadline override in the
same transaction.
"""
import logging
from collections import OrderedDict
from datetime import datetime, time
from typing import Iterable, List, Mapping, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from projects.models import DeadlineOverride, ReviewRecord, Student
from reviews.exceptions import NotFoundError, ReviewValidationError, StateConflictError
from reviews.models import ExtensionRequest
from reviews.services import access_control, lock_evaluator
from reviews.services.lookups import get_review_record
from rubrics.services.resolver import normalize_faculty_type

logger = logging.getLogger(__name__)

NO_REQUEST = 'none'


def parse_deadline(value, now: Optional[datetime] = None) -> datetime:
    """Parse an ISO 8601 datetime (or date) into an aware datetime not earlier than `now`.

    Naive values are read in the current time zone; a bare date means
    midnight at the start of that day.
    """
    if value in (None, ''):
        raise ReviewValidationError('new_deadline is required when approving a request.')

    parsed = None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            parsed = parse_datetime(text)
            if parsed is None:
                day = parse_date(text)
                if day is not None:
                    parsed = datetime.combine(day, time.min)
        except ValueError:
            parsed = None
    if parsed is None:
        raise ReviewValidationError(f'Invalid new_deadline: {value!r}')

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, timezone.get_current_timezone())

    now = now or timezone.now()
    if parsed < now:
        raise ReviewValidationError('new_deadline cannot be in the past.')
    return parsed


def _request_id(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ReviewValidationError(f'Invalid request id: {value!r}')


def _get_pending_for_update(request_id, admin) -> ExtensionRequest:
    """Lock the request row, check the admin may act on its unit, then require it to be pending."""
    req = (
        ExtensionRequest.objects.select_for_update(of=('self',))
        .select_related('student', 'review_spec')
        .filter(pk=_request_id(request_id))
        .first()
    )
    if req is None:
        raise NotFoundError(f'Extension request {request_id} not found.')
    access_control.assert_admin(admin, req.student.school, req.student.department)
    if req.is_resolved:
        raise StateConflictError(f'Request {req.pk} has already been {req.status}.')
    return req


def create_request(student: Student, review_name: str, faculty, role, reason,
                   now: Optional[datetime] = None) -> ExtensionRequest:
    """Open a pending request for a locked review. One pending request per (student, review, role)."""
    role = normalize_faculty_type(role)
    if not isinstance(reason, str) or not reason.strip():
        raise ReviewValidationError('A reason is required for an extension request.')

    with transaction.atomic():
        # serializes concurrent requests for the same student
        Student.objects.select_for_update().filter(pk=student.pk).first()
        record = get_review_record(student, review_name)
        access_control.assert_can_act(faculty, record.student.project, record.review_spec, role)

        if ExtensionRequest.objects.for_review(student, record.review_spec, role).pending().exists():
            raise StateConflictError(f'A pending request already exists for {student.reg_no} / {review_name}.')
        if not lock_evaluator.record_is_locked(record, role, now):
            raise StateConflictError(f'{record.review_spec.label} is still open; no extension is needed.')

        try:
            with transaction.atomic():
                req = ExtensionRequest.objects.create(
                    student=student,
                    faculty=faculty,
                    faculty_type=role,
                    review_spec=record.review_spec,
                    reason=reason.strip(),
                    created_at=now or timezone.now(),
                )
        except IntegrityError:
            raise StateConflictError(f'A pending request already exists for {student.reg_no} / {review_name}.')

    logger.info('Extension request %s created for %s/%s by %s (%s)', req.pk, student.reg_no, review_name, faculty.pk, role)
    return req


def approve_request(request_id, admin, new_deadline, now: Optional[datetime] = None) -> ExtensionRequest:
    access_control.assert_admin(admin)
    now = now or timezone.now()

    with transaction.atomic():
        req = _get_pending_for_update(request_id, admin)
        deadline = parse_deadline(new_deadline, now)

        record = (
            ReviewRecord.objects.select_for_update()
            .filter(student=req.student, review_spec=req.review_spec)
            .first()
        )
        if record is None:
            raise NotFoundError(f'Review record for request {req.pk} not found.')

        override = (
            DeadlineOverride.objects.select_for_update()
            .filter(student=req.student, review_spec=req.review_spec)
            .first()
        )
        if override is not None and deadline < override.to_at:
            raise ReviewValidationError('new_deadline cannot be earlier than the current extended deadline.')

        req.mark_approved(admin, deadline, now)
        req.save(update_fields=['status', 'resolved_by', 'resolved_at', 'new_deadline'])

        record.locked = False
        record.save(update_fields=['locked', 'updated_at'])

        if override is None:
            DeadlineOverride.objects.create(
                student=req.student, review_spec=req.review_spec, from_at=now, to_at=deadline,
            )
        else:
            override.to_at = deadline
            override.save(update_fields=['to_at', 'updated_at'])

    logger.info(
        'Extension request %s approved by %s; %s/%s open until %s',
        req.pk, admin.pk, req.student.reg_no, req.review_spec.review_name, deadline.isoformat(),
    )
    return req


def reject_request(request_id, admin, now: Optional[datetime] = None) -> ExtensionRequest:
    access_control.assert_admin(admin)
    with transaction.atomic():
        req = _get_pending_for_update(request_id, admin)
        req.mark_rejected(admin, now)
        req.save(update_fields=['status', 'resolved_by', 'resolved_at'])

    logger.info('Extension request %s rejected by %s', req.pk, admin.pk)
    return req


def resolve_request(request_id, admin, status, new_deadline=None, now: Optional[datetime] = None) -> ExtensionRequest:
    access_control.assert_admin(admin)
    status = str(status or '').strip().lower()
    if status == ExtensionRequest.Status.APPROVED:
        return approve_request(request_id, admin, new_deadline, now)
    if status == ExtensionRequest.Status.REJECTED:
        return reject_request(request_id, admin, now)
    raise ReviewValidationError("Invalid status. Must be 'approved' or 'rejected'.")


def latest_request_status(student: Student, review_name: str, role) -> str:
    role = normalize_faculty_type(role)
    record = get_review_record(student, review_name)
    return lock_evaluator.latest_request_status_for(record, role)


def batch_request_status(items: Iterable[Mapping], viewer=None) -> dict:
    """Status per ``"<reg_no>_<review_name>"``. Unknown students, reviews or roles report 'none'.

    With a `viewer`, every known student must be visible to them or the whole batch is refused.
    """
    statuses = {}
    for item in items or []:
        if not isinstance(item, Mapping):
            continue
        reg_no = item.get('reg_no') or item.get('regNo')
        review_name = item.get('review_name') or item.get('reviewType')
        role = item.get('faculty_type') or item.get('facultyType')
        if not reg_no or not review_name:
            continue

        key = f'{reg_no}_{review_name}'
        student = Student.objects.select_related('project__panel').filter(reg_no=reg_no).first()
        if student is None:
            statuses[key] = NO_REQUEST
            continue
        if viewer is not None:
            access_control.assert_can_view_student(viewer, student)
        try:
            statuses[key] = latest_request_status(student, review_name, role)
        except (NotFoundError, ReviewValidationError):
            statuses[key] = NO_REQUEST
    return statuses


def requests_by_faculty(faculty_type, school: str = None, department: str = None) -> List[dict]:
    """Admin inbox: requests of one faculty type grouped by requesting faculty.

    Each request carries ``approved``: True/False once resolved, None while pending.
    """
    role = normalize_faculty_type(faculty_type)
    qs = (
        ExtensionRequest.objects.filter(faculty_type=role)
        .select_related('student', 'faculty', 'review_spec')
        .order_by('faculty_id', '-created_at', '-id')
    )
    if school:
        qs = qs.filter(student__school=school)
    if department:
        qs = qs.filter(student__department=department)

    grouped = OrderedDict()
    for req in qs:
        entry = grouped.get(req.faculty_id)
        if entry is None:
            entry = grouped[req.faculty_id] = {
                'faculty_id': req.faculty_id,
                'faculty_name': req.faculty.display_name,
                'employee_id': req.faculty.employee_id,
                'requests': [],
            }
        approved = None
        if req.status == ExtensionRequest.Status.APPROVED:
            approved = True
        elif req.status == ExtensionRequest.Status.REJECTED:
            approved = False
        entry['requests'].append({
            'id': req.pk,
            'reg_no': req.student.reg_no,
            'student_name': req.student.name,
            'review_name': req.review_spec.review_name,
            'display_name': req.review_spec.label,
            'reason': req.reason,
            'status': req.status,
            'approved': approved,
            'new_deadline': req.new_deadline,
            'created_at': req.created_at,
            'resolved_at': req.resolved_at,
        })
    return list(grouped.values())


def pending_requests_by_faculty(faculty_type, school: str = None, department: str = None) -> List[dict]:
    """Same grouping as requests_by_faculty, pending requests only."""
    groups = []
    for group in requests_by_faculty(faculty_type, school, department):
        pending = [r for r in group['requests'] if r['status'] == ExtensionRequest.Status.PENDING]
        if pending:
            groups.append(dict(group, requests=pending))
    return groups


def set_hard_lock(student: Student, review_name: str, admin, locked: bool) -> ReviewRecord:
    access_control.assert_admin(admin, student.school, student.department)
    if not isinstance(locked, bool):
        raise ReviewValidationError('locked must be true or false.')

    with transaction.atomic():
        record = get_review_record(student, review_name, for_update=True)
        if record.locked != locked:
            record.locked = locked
            record.save(update_fields=['locked', 'updated_at'])

    logger.info('Hard lock on %s/%s set to %s by %s', student.reg_no, review_name, locked, admin.pk)
    return record
