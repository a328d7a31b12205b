# apps/complaints/tests.py

from django.test import TestCase, Client
from django.urls import reverse

from apps.core.testing import make_profile, TEST_PASSWORD
from apps.hostels.models import Room
from apps.users.models import Profile
from .models import Complaint


class ComplaintQuerySetTestCase(TestCase):
    """Staff listings never reveal anonymous submitters"""

    def setUp(self):
        room = Room.objects.create(room_number='204', floor=2, capacity=2)
        self.student = make_profile('asha@example.com', student_id='S001', room=room)

    def test_safe_rows_hide_anonymous_submitter(self):
        Complaint.objects.create(
            student=self.student,
            title='Broken fan',
            description='The ceiling fan stopped working yesterday.',
            category=Complaint.Category.MAINTENANCE,
        )
        Complaint.objects.create(
            student=self.student,
            title='Ragging in block B',
            description='Seniors have been harassing first years at night.',
            category=Complaint.Category.SECURITY,
            is_anonymous=True,
        )

        rows = {row['title']: row for row in Complaint.objects.safe()}

        self.assertEqual(rows['Broken fan']['submitter_name'], self.student.full_name)
        self.assertEqual(rows['Broken fan']['submitter_student_id'], 'S001')
        self.assertEqual(rows['Broken fan']['submitter_room'], '204')

        anonymous = rows['Ragging in block B']
        self.assertIsNone(anonymous['submitter_name'])
        self.assertIsNone(anonymous['submitter_student_id'])
        self.assertIsNone(anonymous['submitter_room'])
        self.assertNotIn('student', anonymous)
        self.assertNotIn('student_id', anonymous)

    def test_open_excludes_resolved(self):
        Complaint.objects.create(
            student=self.student,
            title='Leaking tap',
            description='The tap in the washroom leaks all night.',
            status=Complaint.Status.RESOLVED,
            admin_response='Plumber fixed it.',
        )
        Complaint.objects.create(
            student=self.student,
            title='Cold food',
            description='Dinner is served cold most days.',
        )

        self.assertEqual(list(Complaint.objects.open().values_list('title', flat=True)), ['Cold food'])


class ComplaintViewsTestCase(TestCase):

    def setUp(self):
        self.client = Client()
        self.student = make_profile('asha@example.com', student_id='S001')
        self.warden = make_profile('warden@example.com', role=Profile.Role.WARDEN)

    def test_student_raises_anonymous_complaint(self):
        self.client.login(username='asha@example.com', password=TEST_PASSWORD)
        response = self.client.post(reverse('complaints:my_complaints'), {
            'title': 'Broken window',
            'category': Complaint.Category.MAINTENANCE,
            'description': 'The window latch in my room is broken.',
            'is_anonymous': 'on',
        })

        self.assertRedirects(response, reverse('complaints:my_complaints'), fetch_redirect_response=False)
        complaint = Complaint.objects.get()
        self.assertEqual(complaint.student, self.student)
        self.assertTrue(complaint.is_anonymous)
        self.assertEqual(complaint.status, Complaint.Status.PENDING)

    def test_short_complaint_is_rejected(self):
        self.client.login(username='asha@example.com', password=TEST_PASSWORD)
        response = self.client.post(reverse('complaints:my_complaints'), {
            'title': 'Fan',
            'category': Complaint.Category.MAINTENANCE,
            'description': 'Broken',
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn('title', response.context['form'].errors)
        self.assertIn('description', response.context['form'].errors)
        self.assertFalse(Complaint.objects.exists())

    def test_staff_list_hides_anonymous_name(self):
        Complaint.objects.create(
            student=self.student,
            title='Ragging in block B',
            description='Seniors have been harassing first years at night.',
            is_anonymous=True,
        )

        self.client.login(username='warden@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('complaints:complaint_list'))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Ragging in block B')
        self.assertContains(response, 'Anonymous')
        self.assertNotContains(response, 'S001')

    def test_students_cannot_open_staff_list(self):
        self.client.login(username='asha@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('complaints:complaint_list'))
        self.assertRedirects(response, reverse('users:dashboard'), fetch_redirect_response=False)

    def test_warden_responds(self):
        complaint = Complaint.objects.create(
            student=self.student,
            title='Broken fan',
            description='The ceiling fan stopped working yesterday.',
        )

        self.client.login(username='warden@example.com', password=TEST_PASSWORD)
        response = self.client.post(reverse('complaints:respond', kwargs={'pk': complaint.pk}), {
            'status': Complaint.Status.RESOLVED,
            'admin_response': 'Electrician replaced the regulator.',
        })

        self.assertRedirects(response, reverse('complaints:complaint_list'), fetch_redirect_response=False)
        complaint.refresh_from_db()
        self.assertTrue(complaint.is_resolved)
        self.assertEqual(complaint.responded_by, self.warden.user)
        self.assertIsNotNone(complaint.responded_at)

    def test_resolving_needs_a_response(self):
        complaint = Complaint.objects.create(
            student=self.student,
            title='Broken fan',
            description='The ceiling fan stopped working yesterday.',
        )

        self.client.login(username='warden@example.com', password=TEST_PASSWORD)
        self.client.post(reverse('complaints:respond', kwargs={'pk': complaint.pk}), {
            'status': Complaint.Status.RESOLVED,
            'admin_response': '',
        })

        complaint.refresh_from_db()
        self.assertEqual(complaint.status, Complaint.Status.PENDING)

    def test_status_change_without_response_is_not_stamped(self):
        complaint = Complaint.objects.create(
            student=self.student,
            title='Broken fan',
            description='The ceiling fan stopped working yesterday.',
        )

        self.client.login(username='warden@example.com', password=TEST_PASSWORD)
        self.client.post(reverse('complaints:respond', kwargs={'pk': complaint.pk}), {
            'status': Complaint.Status.IN_PROGRESS,
            'admin_response': '',
        })

        complaint.refresh_from_db()
        self.assertEqual(complaint.status, Complaint.Status.IN_PROGRESS)
        self.assertIsNone(complaint.responded_by)
        self.assertIsNone(complaint.responded_at)
