from django.test import TestCase

from projects.models import DeadlineOverride
from reviews.models import ExtensionRequest
from reviews.services import lock_evaluator
from reviews.tests.factories import ReviewFixtureMixin, utc
from rubrics.models import ReviewSpec


class IsLockedTests(ReviewFixtureMixin, TestCase):
    def test_deadline_passed_without_requests_locks(self):
        self.assertTrue(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 11)))

    def test_before_deadline_is_open(self):
        self.assertFalse(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 9)))

    def test_hard_lock_wins_before_deadline(self):
        record = self.record(self.student, 'draftReview')
        record.locked = True
        record.save()
        self.assertTrue(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 2)))

    def test_hard_lock_wins_over_approved_extension(self):
        spec = ReviewSpec.objects.get(review_name='draftReview')
        ExtensionRequest.objects.create(
            student=self.student, faculty=self.guide, faculty_type='guide', review_spec=spec,
            status=ExtensionRequest.Status.APPROVED, created_at=utc(2025, 1, 11),
        )
        DeadlineOverride.objects.create(student=self.student, review_spec=spec, from_at=utc(2025, 1, 11), to_at=utc(2025, 1, 20))
        record = self.record(self.student, 'draftReview')
        record.locked = True
        record.save()
        self.assertTrue(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 12)))

    def test_guide_viewing_panel_review_is_never_locked_by_deadline(self):
        self.assertFalse(lock_evaluator.is_locked(self.student, 'panelReview1', 'guide', now=utc(2025, 2, 1)))
        self.assertTrue(lock_evaluator.is_locked(self.student, 'panelReview1', 'panel', now=utc(2025, 2, 1)))

    def test_no_deadline_is_open(self):
        ReviewSpec.objects.filter(review_name='draftReview').update(deadline_from=None, deadline_to=None)
        self.assertFalse(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2030, 1, 1)))

    def test_approved_request_uses_latest_team_override(self):
        spec = ReviewSpec.objects.get(review_name='draftReview')
        ExtensionRequest.objects.create(
            student=self.student, faculty=self.guide, faculty_type='guide', review_spec=spec,
            status=ExtensionRequest.Status.APPROVED, created_at=utc(2025, 1, 11),
        )
        # only a teammate holds an override; the team's latest one applies
        DeadlineOverride.objects.create(student=self.students[1], review_spec=spec, from_at=utc(2025, 1, 11), to_at=utc(2025, 1, 15))
        DeadlineOverride.objects.create(student=self.students[2], review_spec=spec, from_at=utc(2025, 1, 11), to_at=utc(2025, 1, 20))
        self.assertFalse(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 18)))
        self.assertTrue(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 21)))

    def test_override_ignored_unless_latest_request_approved(self):
        spec = ReviewSpec.objects.get(review_name='draftReview')
        ExtensionRequest.objects.create(
            student=self.student, faculty=self.guide, faculty_type='guide', review_spec=spec,
            status=ExtensionRequest.Status.APPROVED, created_at=utc(2025, 1, 11),
        )
        ExtensionRequest.objects.create(
            student=self.student, faculty=self.guide, faculty_type='guide', review_spec=spec,
            status=ExtensionRequest.Status.REJECTED, created_at=utc(2025, 1, 12),
        )
        DeadlineOverride.objects.create(student=self.student, review_spec=spec, from_at=utc(2025, 1, 11), to_at=utc(2025, 1, 20))
        self.assertTrue(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 15)))

    def test_approved_without_any_override_falls_back_to_rubric(self):
        spec = ReviewSpec.objects.get(review_name='draftReview')
        ExtensionRequest.objects.create(
            student=self.student, faculty=self.guide, faculty_type='guide', review_spec=spec,
            status=ExtensionRequest.Status.APPROVED, created_at=utc(2025, 1, 11),
        )
        self.assertTrue(lock_evaluator.is_locked(self.student, 'draftReview', 'guide', now=utc(2025, 1, 11)))


class PptGateTests(ReviewFixtureMixin, TestCase):
    def test_gate_status(self):
        self.assertEqual(lock_evaluator.ppt_gate_status(self.project), 'none')
        self.students[0].ppt_approved = True
        self.students[0].save()
        self.assertEqual(lock_evaluator.ppt_gate_status(self.project), 'partial')
        self.approve_all_ppt()
        self.assertEqual(lock_evaluator.ppt_gate_status(self.project), 'approved')

    def test_partial_ppt_blocks_panel_before_deadline(self):
        self.project.students.exclude(pk=self.students[2].pk).update(ppt_approved=True)
        decision = lock_evaluator.evaluate_edit(self.student, 'panelReview1', 'panel', now=utc(2025, 1, 5))
        self.assertFalse(decision.editable)
        self.assertEqual(decision.reason, lock_evaluator.PPT_PARTIAL)

    def test_no_ppt_blocks_panel(self):
        decision = lock_evaluator.evaluate_edit(self.student, 'panelReview1', 'panel', now=utc(2025, 1, 5))
        self.assertEqual(decision.reason, lock_evaluator.PPT_PENDING)

    def test_full_ppt_allows_panel(self):
        self.approve_all_ppt()
        decision = lock_evaluator.evaluate_edit(self.student, 'panelReview1', 'panel', now=utc(2025, 1, 5))
        self.assertTrue(decision.editable)
        self.assertIsNone(decision.reason)
        self.assertEqual(decision.effective_deadline, utc(2025, 1, 10))


class EvaluateEditTests(ReviewFixtureMixin, TestCase):
    def test_reasons(self):
        self.assertEqual(
            lock_evaluator.evaluate_edit(self.student, 'draftReview', 'guide', now=utc(2025, 1, 11)).reason,
            lock_evaluator.DEADLINE_PASSED,
        )
        self.assertEqual(
            lock_evaluator.evaluate_edit(self.student, 'panelReview1', 'guide', now=utc(2025, 1, 5)).reason,
            lock_evaluator.READ_ONLY,
        )
        record = self.record(self.student, 'draftReview')
        record.locked = True
        record.save()
        self.assertEqual(
            lock_evaluator.evaluate_edit(self.student, 'draftReview', 'guide', now=utc(2025, 1, 5)).reason,
            lock_evaluator.HARD_LOCKED,
        )
