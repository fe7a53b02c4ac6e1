from django.core.management.base import BaseCommand

from projects.models import Student
from projects.services import provisioning


class Command(BaseCommand):
    help = 'Create missing zeroed review records for students, e.g. after adding a review to a rubric.'

    def add_arguments(self, parser):
        parser.add_argument('--school', default='')
        parser.add_argument('--department', default='')

    def handle(self, *args, **options):
        qs = Student.objects.all()
        if options['school']:
            qs = qs.filter(school=options['school'])
        if options['department']:
            qs = qs.filter(department=options['department'])

        count = 0
        for student in qs.iterator():
            created = provisioning.ensure_review_records(student)
            if created:
                count += len(created)
                self.stdout.write(f'{student.reg_no}: {len(created)} review records created')

        self.stdout.write(f'Done. Review records created: {count}')
