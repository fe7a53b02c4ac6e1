from django.db import IntegrityError, transaction
from django.test import TestCase

from projects.models import DeadlineOverride
from reviews.exceptions import AuthorizationError, NotFoundError, ReviewValidationError, StateConflictError
from reviews.models import ExtensionRequest
from reviews.services import extension_workflow, lock_evaluator
from reviews.tests.factories import ReviewFixtureMixin, make_admin, utc
from rubrics.models import ReviewSpec

AFTER_DEADLINE = utc(2025, 1, 11)


class CreateRequestTests(ReviewFixtureMixin, TestCase):
    def create(self, now=AFTER_DEADLINE, faculty=None, role='guide', review='draftReview'):
        return extension_workflow.create_request(
            self.student, review, faculty or self.guide, role, 'Student was on medical leave', now=now,
        )

    def test_create_pending_request_for_locked_review(self):
        req = self.create()
        self.assertEqual(req.status, ExtensionRequest.Status.PENDING)
        self.assertEqual(req.faculty_type, 'guide')
        self.assertEqual(extension_workflow.latest_request_status(self.student, 'draftReview', 'guide'), 'pending')

    def test_open_review_needs_no_extension(self):
        with self.assertRaises(StateConflictError):
            self.create(now=utc(2025, 1, 5))

    def test_duplicate_pending_is_rejected(self):
        self.create()
        with self.assertRaises(StateConflictError):
            self.create()
        self.assertEqual(ExtensionRequest.objects.count(), 1)

    def test_database_allows_single_pending_per_tuple(self):
        req = self.create()
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                ExtensionRequest.objects.create(
                    student=self.student, faculty=self.guide, faculty_type='guide', review_spec=req.review_spec,
                )

    def test_requires_reason(self):
        with self.assertRaises(ReviewValidationError):
            extension_workflow.create_request(self.student, 'draftReview', self.guide, 'guide', '  ', now=AFTER_DEADLINE)

    def test_faculty_must_hold_role(self):
        with self.assertRaises(AuthorizationError):
            self.create(faculty=self.outsider)
        with self.assertRaises(AuthorizationError):
            self.create(faculty=self.panel_a, role='panel')

    def test_unknown_review(self):
        with self.assertRaises(NotFoundError):
            self.create(review='finalReview')

    def test_status_none_without_requests(self):
        self.assertEqual(extension_workflow.latest_request_status(self.student, 'draftReview', 'guide'), 'none')


class ResolveRequestTests(ReviewFixtureMixin, TestCase):
    def setUp(self):
        super().setUp()
        self.req = extension_workflow.create_request(
            self.student, 'draftReview', self.guide, 'guide', 'Late submission', now=AFTER_DEADLINE,
        )

    def test_scenario_lock_then_extension(self):
        self.assertTrue(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=AFTER_DEADLINE))

        req = extension_workflow.resolve_request(
            self.req.pk, self.admin, 'approved', '2025-01-20T00:00:00Z', now=utc(2025, 1, 11, 12),
        )
        self.assertEqual(req.status, 'approved')
        self.assertEqual(req.resolved_by, self.admin)
        self.assertEqual(req.new_deadline, utc(2025, 1, 20))
        self.assertFalse(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 15)))
        self.assertTrue(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 21)))

        override = DeadlineOverride.objects.get(student=self.student)
        self.assertEqual(override.from_at, utc(2025, 1, 11, 12))
        self.assertEqual(override.to_at, utc(2025, 1, 20))

    def test_approval_clears_hard_lock(self):
        record = self.record(self.student, 'draftReview')
        record.locked = True
        record.save()
        extension_workflow.approve_request(self.req.pk, self.admin, '2025-01-20T00:00:00Z', now=AFTER_DEADLINE)
        self.assertFalse(self.record(self.student, 'draftReview').locked)

    def test_missing_or_bad_deadline_changes_nothing(self):
        for value in (None, '', 'not-a-date', '2025-01-01T00:00:00Z'):
            with self.assertRaises(ReviewValidationError):
                extension_workflow.approve_request(self.req.pk, self.admin, value, now=AFTER_DEADLINE)
        self.req.refresh_from_db()
        self.assertEqual(self.req.status, 'pending')
        self.assertFalse(DeadlineOverride.objects.exists())

    def test_naive_deadline_read_in_project_time_zone(self):
        req = extension_workflow.approve_request(self.req.pk, self.admin, '2025-01-20T05:30:00', now=AFTER_DEADLINE)
        # Asia/Kolkata is UTC+05:30
        self.assertEqual(req.new_deadline, utc(2025, 1, 20))

    def test_reject_changes_only_status(self):
        req = extension_workflow.resolve_request(self.req.pk, self.admin, 'REJECTED', now=utc(2025, 1, 12))
        self.assertEqual(req.status, 'rejected')
        self.assertEqual(req.resolved_at, utc(2025, 1, 12))
        self.assertIsNone(req.new_deadline)
        self.assertFalse(DeadlineOverride.objects.exists())
        self.assertTrue(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 12)))

    def test_resolved_requests_are_terminal(self):
        extension_workflow.reject_request(self.req.pk, self.admin, now=utc(2025, 1, 12))
        with self.assertRaises(StateConflictError):
            extension_workflow.approve_request(self.req.pk, self.admin, '2025-01-20T00:00:00Z', now=utc(2025, 1, 12))
        self.req.refresh_from_db()
        self.assertEqual(self.req.status, 'rejected')
        self.assertFalse(DeadlineOverride.objects.exists())

    def test_invalid_status(self):
        with self.assertRaises(ReviewValidationError):
            extension_workflow.resolve_request(self.req.pk, self.admin, 'maybe')

    def test_unknown_request(self):
        with self.assertRaises(NotFoundError):
            extension_workflow.reject_request(999999, self.admin)

    def test_only_admin_may_resolve(self):
        with self.assertRaises(AuthorizationError):
            extension_workflow.resolve_request(self.req.pk, self.guide, 'approved', '2025-01-20T00:00:00Z', now=AFTER_DEADLINE)
        other_unit = make_admin('admin2', school='SELECT', department='ECE')
        with self.assertRaises(AuthorizationError):
            extension_workflow.reject_request(self.req.pk, other_unit)
        self.req.refresh_from_db()
        self.assertEqual(self.req.status, 'pending')

    def test_other_unit_admin_is_refused_before_deadline_is_read(self):
        other_unit = make_admin('admin2', school='SELECT', department='ECE')
        for value in ('not-a-date', None, '2025-01-20T00:00:00Z'):
            with self.assertRaises(AuthorizationError):
                extension_workflow.approve_request(self.req.pk, other_unit, value, now=AFTER_DEADLINE)
        with self.assertRaises(AuthorizationError):
            extension_workflow.resolve_request(self.req.pk, other_unit, 'approved', 'not-a-date', now=AFTER_DEADLINE)
        self.req.refresh_from_db()
        self.assertEqual(self.req.status, 'pending')
        self.assertFalse(DeadlineOverride.objects.exists())

    def test_other_unit_admin_cannot_learn_request_state(self):
        extension_workflow.reject_request(self.req.pk, self.admin, now=utc(2025, 1, 12))
        other_unit = make_admin('admin2', school='SELECT', department='ECE')
        with self.assertRaises(AuthorizationError):
            extension_workflow.approve_request(self.req.pk, other_unit, '2025-01-20T00:00:00Z', now=utc(2025, 1, 12))

    def test_override_never_moves_backwards(self):
        extension_workflow.approve_request(self.req.pk, self.admin, '2025-01-20T00:00:00Z', now=AFTER_DEADLINE)
        # a hard lock inside the extended window lets a second request in
        extension_workflow.set_hard_lock(self.student, 'draftReview', self.admin, True)
        second = extension_workflow.create_request(
            self.student, 'draftReview', self.guide, 'guide', 'Needs more time', now=utc(2025, 1, 12),
        )
        with self.assertRaises(ReviewValidationError):
            extension_workflow.approve_request(second.pk, self.admin, '2025-01-15T00:00:00Z', now=utc(2025, 1, 12))
        second.refresh_from_db()
        self.assertEqual(second.status, 'pending')
        extension_workflow.approve_request(second.pk, self.admin, '2025-01-30T00:00:00Z', now=utc(2025, 1, 12))

        self.assertEqual(DeadlineOverride.objects.count(), 1)
        self.assertEqual(DeadlineOverride.objects.get().to_at, utc(2025, 1, 30))
        self.assertFalse(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 25)))


class RequestQueryTests(ReviewFixtureMixin, TestCase):
    def test_batch_status(self):
        extension_workflow.create_request(self.student, 'draftReview', self.guide, 'guide', 'late', now=AFTER_DEADLINE)
        statuses = extension_workflow.batch_request_status([
            {'reg_no': self.student.reg_no, 'review_name': 'draftReview', 'faculty_type': 'guide'},
            {'reg_no': self.students[1].reg_no, 'review_name': 'draftReview', 'faculty_type': 'guide'},
            {'reg_no': 'NOPE', 'review_name': 'draftReview', 'faculty_type': 'guide'},
            {'reg_no': self.student.reg_no, 'review_name': 'finalReview', 'faculty_type': 'guide'},
            {'review_name': 'draftReview'},
        ])
        self.assertEqual(statuses, {
            f'{self.student.reg_no}_draftReview': 'pending',
            f'{self.students[1].reg_no}_draftReview': 'none',
            'NOPE_draftReview': 'none',
            f'{self.student.reg_no}_finalReview': 'none',
        })

    def test_requests_grouped_by_faculty(self):
        first = extension_workflow.create_request(self.student, 'draftReview', self.guide, 'guide', 'late', now=AFTER_DEADLINE)
        extension_workflow.create_request(self.students[1], 'draftReview', self.guide, 'guide', 'late', now=AFTER_DEADLINE)
        extension_workflow.reject_request(first.pk, self.admin)

        groups = extension_workflow.requests_by_faculty('guide', 'SCOPE', 'CSE')
        self.assertEqual(len(groups), 1)
        self.assertEqual(groups[0]['faculty_id'], self.guide.pk)
        approved_flags = sorted(str(r['approved']) for r in groups[0]['requests'])
        self.assertEqual(approved_flags, ['False', 'None'])

        pending = extension_workflow.pending_requests_by_faculty('guide')
        self.assertEqual([r['reg_no'] for r in pending[0]['requests']], [self.students[1].reg_no])
        self.assertEqual(extension_workflow.requests_by_faculty('panel'), [])


class HardLockTests(ReviewFixtureMixin, TestCase):
    def test_admin_sets_and_clears_hard_lock(self):
        record = extension_workflow.set_hard_lock(self.student, 'draftReview', self.admin, True)
        self.assertTrue(record.locked)
        self.assertTrue(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 2)))
        extension_workflow.set_hard_lock(self.student, 'draftReview', self.admin, False)
        self.assertFalse(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 2)))

    def test_faculty_cannot_hard_lock(self):
        with self.assertRaises(AuthorizationError):
            extension_workflow.set_hard_lock(self.student, 'draftReview', self.guide, True)

    def test_request_possible_on_hard_locked_open_review(self):
        extension_workflow.set_hard_lock(self.student, 'draftReview', self.admin, True)
        spec = ReviewSpec.objects.get(review_name='draftReview')
        req = extension_workflow.create_request(self.student, 'draftReview', self.guide, 'guide', 'locked early', now=utc(2025, 1, 2))
        self.assertEqual(req.review_spec, spec)
