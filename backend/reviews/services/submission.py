import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from django.db import transaction

from projects.models import Project, ReviewRecord
from reviews.exceptions import NotFoundError, ReviewValidationError, StateConflictError
from reviews.services import access_control, lock_evaluator
from reviews.services.lookups import get_review_record
from rubrics.services.resolver import component_weights, normalize_faculty_type

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    record: ReviewRecord
    reset_components: List[str] = field(default_factory=list)


@dataclass
class _PreparedWrite:
    marks: Dict[str, float]
    comments: str
    attendance_value: bool
    reset_components: List[str]


def _coerce_mark(name: str, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ReviewValidationError(f'Mark for "{name}" must be a number.')
    if not math.isfinite(value):
        raise ReviewValidationError(f'Mark for "{name}" must be a finite number.')
    if value < 0:
        raise ReviewValidationError(f'Mark for "{name}" cannot be negative.')
    return value


def _read_attendance(raw, stored: bool) -> bool:
    if raw is None:
        return stored
    if isinstance(raw, Mapping):
        raw = raw.get('value', stored)
    if not isinstance(raw, bool):
        raise ReviewValidationError('Attendance value must be true or false.')
    return raw


def prepare_submission(record: ReviewRecord, payload: Mapping) -> _PreparedWrite:
    """Validate `payload` against the record's rubric and compute the values to store.

    Marks above a component's weight are stored as 0 and reported back.
    Absent attendance reads the stored value; absent attendance zeroes all
    marks and comments.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ReviewValidationError('Submission must be an object.')

    weights = component_weights(record.review_spec)
    marks_in = payload.get('marks')
    if marks_in is None:
        marks_in = {}
    if not isinstance(marks_in, Mapping):
        raise ReviewValidationError('Marks must be an object of component name to mark.')

    unknown = sorted(set(marks_in) - set(weights))
    if unknown:
        raise ReviewValidationError(f"Unknown components for {record.review_spec.label}: {', '.join(unknown)}")

    marks = dict(record.marks or {})
    reset = []
    for name, value in marks_in.items():
        value = _coerce_mark(name, value)
        if value > weights[name]:
            marks[name] = 0
            reset.append(name)
        else:
            marks[name] = value

    if 'comments' in payload and payload['comments'] is not None:
        comments = payload['comments']
        if not isinstance(comments, str):
            raise ReviewValidationError('Comments must be text.')
    else:
        comments = record.comments

    attendance = _read_attendance(payload.get('attendance'), record.attendance_value)
    if record.attendance_locked and attendance != record.attendance_value:
        raise StateConflictError(f'Attendance for {record.review_spec.label} is locked.')

    if not attendance:
        marks = {name: 0 for name in marks}
        comments = ''

    return _PreparedWrite(marks=marks, comments=comments, attendance_value=attendance, reset_components=reset)


def _assert_editable(record: ReviewRecord, role: str, now: Optional[datetime]) -> None:
    decision = lock_evaluator.evaluate_record(record, role, now)
    if not decision.editable:
        logger.warning(
            'Submission refused for %s/%s (%s): %s',
            record.student.reg_no, record.review_spec.review_name, role, decision.reason,
        )
        raise StateConflictError(
            lock_evaluator.describe(decision, record.review_spec.label),
            reason=decision.reason,
        )


def _write(record: ReviewRecord, prepared: _PreparedWrite) -> ReviewRecord:
    record.marks = prepared.marks
    record.comments = prepared.comments
    record.attendance_value = prepared.attendance_value
    record.save(update_fields=['marks', 'comments', 'attendance_value', 'updated_at'])
    return record


def apply_submission(student, review_name: str, faculty, role, payload: Mapping,
                     now: Optional[datetime] = None) -> SubmissionResult:
    role = normalize_faculty_type(role)
    with transaction.atomic():
        record = get_review_record(student, review_name, for_update=True)
        access_control.assert_can_act(faculty, record.student.project, record.review_spec, role)
        _assert_editable(record, role, now)
        prepared = prepare_submission(record, payload)
        _write(record, prepared)

    if prepared.reset_components:
        logger.info(
            'Marks reset to 0 for %s/%s, over weight: %s',
            student.reg_no, review_name, ', '.join(prepared.reset_components),
        )
    logger.info('Review %s saved for %s by %s (%s)', review_name, student.reg_no, getattr(faculty, 'pk', None), role)
    return SubmissionResult(record=record, reset_components=prepared.reset_components)


def apply_team_submission(project: Project, review_name: str, faculty, role, entries: Mapping,
                          now: Optional[datetime] = None) -> Dict[str, SubmissionResult]:
    """Validate every student's entry, then write them all in one transaction.

    `entries` maps reg_no to a submission payload. Any failure leaves every
    record unchanged.
    """
    role = normalize_faculty_type(role)
    if not isinstance(entries, Mapping) or not entries:
        raise ReviewValidationError('Provide at least one student entry.')

    with transaction.atomic():
        students = {s.reg_no: s for s in project.students.all()}
        unknown = sorted(str(r) for r in entries if r not in students)
        if unknown:
            raise NotFoundError(f"Students not in project {project.name}: {', '.join(unknown)}")

        staged = []
        for reg_no, payload in entries.items():
            record = get_review_record(students[reg_no], review_name, for_update=True)
            access_control.assert_can_act(faculty, project, record.review_spec, role)
            _assert_editable(record, role, now)
            staged.append((reg_no, record, prepare_submission(record, payload)))

        results = {}
        for reg_no, record, prepared in staged:
            _write(record, prepared)
            results[reg_no] = SubmissionResult(record=record, reset_components=prepared.reset_components)

    logger.info(
        'Team review %s saved for project %s (%s students) by %s (%s)',
        review_name, project.name, len(results), getattr(faculty, 'pk', None), role,
    )
    return results
