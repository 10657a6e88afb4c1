from django.core.management.base import BaseCommand, CommandError

from accounts.models import Tenant
from courses.services import CourseProgressService


class Command(BaseCommand):
    help = 'Recompute enrollment progress from lesson completions'

    def add_arguments(self, parser):
        parser.add_argument('--tenant', type=int, help='Tenant id (default: every tenant)')
        parser.add_argument('--user', type=int, help='Only this user')
        parser.add_argument('--course', type=int, help='Only this course')

    def handle(self, *args, **options):
        tenants = Tenant.objects.all()
        if options['tenant']:
            tenants = tenants.filter(id=options['tenant'])
            if not tenants.exists():
                raise CommandError(f"Tenant {options['tenant']} does not exist")

        total = 0
        for tenant in tenants:
            updates = CourseProgressService.recalculate(
                tenant.id, user_id=options['user'], course_id=options['course']
            )
            total += len(updates)
            for update in updates:
                self.stdout.write(
                    f"tenant={tenant.id} user={update['userId']} course={update['courseId']} progress={update['progress']}%"
                )

        self.stdout.write(self.style.SUCCESS(f'Recalculated {total} enrollments'))
