from django.core.management.base import BaseCommand
from apps.users.models import Department


class Command(BaseCommand):
    help = 'Seed the database with the default academic departments'

    def handle(self, *args, **options):
        departments_data = [
            {'code': 'CSE', 'name': 'Computer Science and Engineering'},
            {'code': 'ECE', 'name': 'Electronics and Communication Engineering'},
            {'code': 'EEE', 'name': 'Electrical and Electronics Engineering'},
            {'code': 'MECH', 'name': 'Mechanical Engineering'},
            {'code': 'CIVIL', 'name': 'Civil Engineering'},
            {'code': 'IT', 'name': 'Information Technology'},
        ]

        created_count = 0
        updated_count = 0

        for department_data in departments_data:
            department, created = Department.objects.get_or_create(
                code=department_data['code'],
                defaults={'name': department_data['name']}
            )

            if created:
                created_count += 1
                self.stdout.write(
                    self.style.SUCCESS(f'Created department: {department.name}')
                )
            elif department.name != department_data['name']:
                department.name = department_data['name']
                department.save()
                updated_count += 1
                self.stdout.write(
                    self.style.WARNING(f'Updated department: {department.name}')
                )

        self.stdout.write(
            self.style.SUCCESS(
                f'Department seeding completed. Created: {created_count}, Updated: {updated_count}'
            )
        )
