from django.core.management.base import BaseCommand, CommandError
from apps.hostels.models import Room


class Command(BaseCommand):
    help = 'Create hostel rooms floor by floor. Existing rooms are left untouched.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--floors',
            type=int,
            default=4,
            help='Number of floors, starting at the ground floor (0)',
        )
        parser.add_argument(
            '--rooms-per-floor',
            type=int,
            default=10,
            help='Rooms created on each floor',
        )
        parser.add_argument(
            '--capacity',
            type=int,
            default=2,
            help='Beds per room',
        )

    def handle(self, *args, **options):
        floors = options['floors']
        rooms_per_floor = options['rooms_per_floor']
        capacity = options['capacity']

        if floors < 1 or rooms_per_floor < 1 or capacity < 1:
            raise CommandError('floors, rooms-per-floor and capacity must all be positive')
        if rooms_per_floor > 99:
            raise CommandError('At most 99 rooms per floor are supported')

        created_count = 0
        existing_count = 0

        for floor in range(floors):
            for number in range(1, rooms_per_floor + 1):
                room_number = f'{floor}{number:02d}'
                room, created = Room.objects.get_or_create(
                    room_number=room_number,
                    defaults={
                        'floor': floor,
                        'capacity': capacity,
                    }
                )

                if created:
                    created_count += 1
                    self.stdout.write(
                        self.style.SUCCESS(f'Created room: {room.room_number}')
                    )
                else:
                    existing_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f'Room seeding completed. Created: {created_count}, Already present: {existing_count}'
            )
        )
