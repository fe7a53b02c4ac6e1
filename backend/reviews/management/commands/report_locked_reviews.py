from django.core.management.base import BaseCommand
from django.utils import timezone

from projects.models import Project
from reviews.exceptions import ReviewWorkflowError
from reviews.services import aggregation


class Command(BaseCommand):
    help = 'List team reviews that are currently locked, with their extension request status.'

    def add_arguments(self, parser):
        parser.add_argument('--school', default='')
        parser.add_argument('--department', default='')
        parser.add_argument('--faculty-type', default='guide', choices=['guide', 'panel'])

    def handle(self, *args, **options):
        qs = Project.objects.all().select_related('panel')
        if options['school']:
            qs = qs.filter(school=options['school'])
        if options['department']:
            qs = qs.filter(department=options['department'])

        role = options['faculty_type']
        now = timezone.now()
        count = 0
        for project in qs.iterator():
            try:
                summary = aggregation.team_review_summary(project, role, now)
            except ReviewWorkflowError as exc:
                self.stderr.write(f'Error processing project {project.name}: {exc.detail}')
                continue
            for review in summary['reviews']:
                if review['editable'] and review['locked']:
                    count += 1
                    self.stdout.write(
                        f"{project.name}: {review['display_name']} locked (request: {review['request_status']})"
                    )

        self.stdout.write(f'Done. Locked team reviews: {count}')
