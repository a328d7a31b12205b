# apps/hostels/tests.py

from io import StringIO

from django.test import TestCase, Client
from django.urls import reverse
from django.core.exceptions import ValidationError
from django.core.management import call_command

from apps.core.testing import make_profile, TEST_PASSWORD
from apps.users.models import Profile
from .models import Room
from . import services


class RoomModelTestCase(TestCase):
    """Occupancy bookkeeping on Room"""

    def setUp(self):
        self.room = Room.objects.create(room_number='101', floor=1, capacity=2)

    def test_occupancy_follows_residents(self):
        student = make_profile('asha@example.com', room=self.room, student_id='S001')
        self.room.refresh_from_db()
        self.assertEqual(self.room.current_occupancy, 1)
        self.assertEqual(self.room.occupancy_level, Room.OccupancyLevel.PARTIAL)

        make_profile('bala@example.com', room=self.room, student_id='S002')
        self.room.refresh_from_db()
        self.assertTrue(self.room.is_full)
        self.assertEqual(self.room.available_beds, 0)

        student.delete()
        self.room.refresh_from_db()
        self.assertEqual(self.room.current_occupancy, 1)

    def test_moving_resident_recounts_both_rooms(self):
        other_room = Room.objects.create(room_number='102', floor=1, capacity=2)
        student = make_profile('asha@example.com', room=self.room, student_id='S001')

        student.room = other_room
        student.save()

        self.room.refresh_from_db()
        other_room.refresh_from_db()
        self.assertEqual(self.room.current_occupancy, 0)
        self.assertEqual(other_room.current_occupancy, 1)

    def test_floor_names(self):
        self.assertEqual(str(Room(room_number='001', floor=0).floor_name), 'Ground Floor')
        self.assertEqual(str(Room(room_number='501', floor=5).floor_name), 'Floor 5')

    def test_unknown_key_slot(self):
        with self.assertRaises(ValidationError):
            self.room.holder_field('C')


class KeyServiceTestCase(TestCase):
    """Issuing and returning room keys"""

    def setUp(self):
        self.room = Room.objects.create(room_number='101', floor=1, capacity=3)
        self.asha = make_profile('asha@example.com', room=self.room, student_id='S001')
        self.bala = make_profile('bala@example.com', room=self.room, student_id='S002')
        self.chitra = make_profile('chitra@example.com', room=self.room, student_id='S003')

    def test_issue_key_sets_both_sides(self):
        services.issue_key(self.room, self.asha, 'A')

        self.room.refresh_from_db()
        self.asha.refresh_from_db()
        self.assertEqual(self.room.key_a_holder, self.asha)
        self.assertEqual(self.asha.key_number, 'A')
        self.assertIsNotNone(self.asha.key_issued_at)
        self.assertEqual(self.room.keys_issued, 1)

    def test_issue_to_occupied_slot_is_refused(self):
        services.issue_key(self.room, self.asha, 'A')

        with self.assertRaises(ValidationError):
            services.issue_key(self.room, self.bala, 'A')

        self.room.refresh_from_db()
        self.bala.refresh_from_db()
        self.assertEqual(self.room.key_a_holder, self.asha)
        self.assertEqual(self.bala.key_number, '')

    def test_second_key_for_same_resident_is_refused(self):
        services.issue_key(self.room, self.asha, 'A')
        with self.assertRaises(ValidationError):
            services.issue_key(self.room, self.asha, 'B')

    def test_non_resident_cannot_receive_key(self):
        outsider = make_profile('dev@example.com', student_id='S004')
        with self.assertRaises(ValidationError):
            services.issue_key(self.room, outsider, 'A')

    def test_both_slots_can_be_held(self):
        services.issue_key(self.room, self.asha, 'A')
        services.issue_key(self.room, self.bala, 'B')

        self.room.refresh_from_db()
        self.assertEqual(self.room.keys_issued, 2)
        with self.assertRaises(ValidationError):
            services.issue_key(self.room, self.chitra, 'B')

    def test_return_key_clears_slot(self):
        services.issue_key(self.room, self.asha, 'B')
        services.return_key(self.room, self.asha)

        self.room.refresh_from_db()
        self.asha.refresh_from_db()
        self.assertIsNone(self.room.key_b_holder)
        self.assertEqual(self.asha.key_number, '')
        self.assertIsNone(self.asha.key_issued_at)

        # The freed slot can be issued again
        services.issue_key(self.room, self.bala, 'B')

    def test_return_without_key_is_refused(self):
        with self.assertRaises(ValidationError):
            services.return_key(self.room, self.asha)

    def test_remove_resident_returns_key(self):
        services.issue_key(self.room, self.asha, 'A')
        services.remove_resident(self.asha)

        self.room.refresh_from_db()
        self.asha.refresh_from_db()
        self.assertIsNone(self.room.key_a_holder)
        self.assertIsNone(self.asha.room)
        self.assertEqual(self.room.current_occupancy, 2)

    def test_moving_a_key_holder_returns_the_old_key(self):
        other_room = Room.objects.create(room_number='102', floor=1, capacity=2)
        services.issue_key(self.room, self.asha, 'B')
        services.assign_resident(other_room, self.asha)

        self.room.refresh_from_db()
        self.asha.refresh_from_db()
        self.assertIsNone(self.room.key_b_holder)
        self.assertEqual(self.asha.key_number, '')
        self.assertEqual(self.asha.room, other_room)
        self.assertEqual(self.room.current_occupancy, 2)

    def test_remove_resident_without_room_is_refused(self):
        outsider = make_profile('dev@example.com', student_id='S004')
        with self.assertRaises(ValidationError):
            services.remove_resident(outsider)

    def test_assign_resident_to_full_room_is_refused(self):
        newcomer = make_profile('dev@example.com', student_id='S004')
        with self.assertRaises(ValidationError):
            services.assign_resident(self.room, newcomer)


class RoomViewsTestCase(TestCase):
    """Room board and key views"""

    def setUp(self):
        self.client = Client()
        self.warden = make_profile('warden@example.com', role=Profile.Role.WARDEN)
        self.room = Room.objects.create(room_number='001', floor=0, capacity=2)
        Room.objects.create(room_number='101', floor=1, capacity=2)
        self.student = make_profile('asha@example.com', room=self.room, student_id='S001')

    def test_room_board_groups_by_floor(self):
        self.client.login(username='warden@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('hostels:room_board'))

        self.assertEqual(response.status_code, 200)
        floors = response.context['floors']
        self.assertEqual([str(name) for name, rooms in floors], ['Ground Floor', 'First Floor'])
        self.assertContains(response, '001')

    def test_students_cannot_open_room_board(self):
        self.client.login(username='asha@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('hostels:room_board'))
        self.assertRedirects(response, reverse('users:dashboard'), fetch_redirect_response=False)

    def test_issue_key_view(self):
        self.client.login(username='warden@example.com', password=TEST_PASSWORD)
        response = self.client.post(
            reverse('hostels:issue_key', kwargs={'pk': self.room.pk}),
            {'profile': str(self.student.pk), 'slot': 'A'}
        )

        self.assertRedirects(
            response,
            reverse('hostels:room_detail', kwargs={'pk': self.room.pk}),
            fetch_redirect_response=False
        )
        self.room.refresh_from_db()
        self.assertEqual(self.room.key_a_holder, self.student)

    def test_return_key_view_reports_error(self):
        self.client.login(username='warden@example.com', password=TEST_PASSWORD)
        response = self.client.post(
            reverse('hostels:return_key', kwargs={'pk': self.room.pk, 'profile_id': self.student.pk}),
            follow=True
        )
        self.assertContains(response, 'does not hold a key')

    def test_room_detail_json(self):
        services.issue_key(self.room, self.student, 'B')
        self.client.login(username='warden@example.com', password=TEST_PASSWORD)

        response = self.client.get(reverse('hostels:api_room_detail', kwargs={'pk': self.room.pk}))
        data = response.json()

        self.assertTrue(data['success'])
        self.assertEqual(data['room']['key_b_holder'], str(self.student.pk))
        self.assertEqual(data['residents'][0]['key_number'], 'B')


class SeedRoomsCommandTestCase(TestCase):

    def test_seed_rooms_is_idempotent(self):
        out = StringIO()
        call_command('seed_rooms', floors=2, rooms_per_floor=3, capacity=4, stdout=out)
        call_command('seed_rooms', floors=2, rooms_per_floor=3, capacity=4, stdout=out)

        self.assertEqual(Room.objects.count(), 6)
        self.assertTrue(Room.objects.filter(room_number='102', floor=1, capacity=4).exists())
        self.assertTrue(Room.objects.filter(room_number='003', floor=0).exists())
