from django.core.exceptions import ValidationError
from django.test import TestCase

from reviews.exceptions import NotFoundError, ReviewValidationError
from reviews.tests.factories import ReviewFixtureMixin, make_rubric, utc
from rubrics.models import ReviewSpec
from rubrics.services import resolver


class ResolveReviewsTests(ReviewFixtureMixin, TestCase):
    def test_guide_sees_all_reviews_with_panel_read_only(self):
        reviews = resolver.resolve_reviews('SCOPE', 'CSE', 'guide')
        self.assertEqual([r.review_name for r in reviews], ['draftReview', 'panelReview1'])
        self.assertTrue(reviews[0].editable)
        self.assertFalse(reviews[1].editable)

    def test_panel_sees_only_panel_reviews(self):
        reviews = resolver.resolve_reviews('SCOPE', 'CSE', 'PANEL')
        self.assertEqual([r.review_name for r in reviews], ['panelReview1'])
        self.assertTrue(reviews[0].editable)
        self.assertTrue(reviews[0].requires_ppt)
        self.assertEqual(reviews[0].deadline, {'from': utc(2025, 1, 1), 'to': utc(2025, 1, 10)})

    def test_missing_rubric_yields_empty_list(self):
        self.assertEqual(resolver.resolve_reviews('SELECT', 'ECE', 'guide'), [])
        self.assertIsNone(resolver.get_rubric('SELECT', 'ECE'))

    def test_invalid_role_is_rejected(self):
        with self.assertRaises(ReviewValidationError):
            resolver.resolve_reviews('SCOPE', 'CSE', 'hod')

    def test_display_name_falls_back_to_review_name(self):
        rubric = make_rubric('SENSE', 'ECE', reviews=[
            {'review_name': 'finalReview', 'faculty_type': 'guide', 'components': [{'name': 'Demo', 'weight': 5}]},
        ])
        reviews = resolver.resolve_rubric_reviews(rubric, 'guide')
        self.assertEqual(reviews[0].display_name, 'finalReview')
        self.assertIsNone(reviews[0].deadline)

    def test_get_review_spec_for_student(self):
        spec = resolver.get_review_spec(self.student, 'draftReview')
        self.assertEqual(resolver.component_weights(spec), {'Design': 10, 'Report': 10})
        with self.assertRaises(NotFoundError):
            resolver.get_review_spec(self.student, 'finalReview')


class ComponentValidationTests(TestCase):
    def test_valid_components(self):
        resolver.validate_components([{'name': 'A', 'weight': 5}, {'name': 'B', 'weight': 2.5}])

    def test_rejects_bad_components(self):
        bad = [
            'not-a-list',
            [{'name': '', 'weight': 5}],
            [{'name': 'A', 'weight': 0}],
            [{'name': 'A', 'weight': True}],
            [{'name': 'A', 'weight': 5}, {'name': 'A', 'weight': 3}],
        ]
        for components in bad:
            with self.assertRaises(ValidationError):
                resolver.validate_components(components)

    def test_spec_clean_checks_deadline_pair(self):
        rubric = make_rubric('SENSE', 'EEE', reviews=[])
        spec = ReviewSpec(rubric=rubric, review_name='r1', components=[{'name': 'A', 'weight': 5}],
                          deadline_from=utc(2025, 1, 5))
        with self.assertRaises(ValidationError):
            spec.clean()
        spec.deadline_to = utc(2025, 1, 1)
        with self.assertRaises(ValidationError):
            spec.clean()
        spec.deadline_to = utc(2025, 1, 9)
        spec.clean()
