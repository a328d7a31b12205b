# apps/users/tests.py

from io import BytesIO, StringIO

from django.contrib.auth import authenticate, get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.test import TestCase, Client, override_settings
from django.urls import reverse
from PIL import Image

from apps.core.testing import make_profile, TEST_PASSWORD
from .models import Profile, Department

User = get_user_model()


def image_upload(name='photo.png', image_format='PNG', content_type='image/png'):
    buffer = BytesIO()
    Image.new('RGB', (32, 32), color=(200, 40, 40)).save(buffer, format=image_format)
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)


class AuthenticationTestCase(TestCase):
    """Login with email or registration number"""

    def setUp(self):
        self.client = Client()
        self.department = Department.objects.create(name='Computer Science', code='CSE')
        self.student = make_profile('asha@example.com', student_id='CSE001', department=self.department)

    def test_login_with_registration_number(self):
        user = authenticate(username='cse001', password=TEST_PASSWORD)
        self.assertEqual(user, self.student.user)

    def test_login_with_email_is_case_insensitive(self):
        user = authenticate(username='ASHA@example.com', password=TEST_PASSWORD)
        self.assertEqual(user, self.student.user)

    def test_wrong_password(self):
        self.assertIsNone(authenticate(username='CSE001', password='wrong-password'))

    def test_login_view_redirects_to_role_dashboard(self):
        response = self.client.post(reverse('users:login'), {
            'username': 'CSE001',
            'password': TEST_PASSWORD,
        })
        self.assertRedirects(response, reverse('outings:student_dashboard'), fetch_redirect_response=False)

    def test_login_view_rejects_bad_credentials(self):
        response = self.client.post(reverse('users:login'), {
            'username': 'CSE001',
            'password': 'wrong-password',
        })
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Invalid email/registration number or password.')


class RegistrationTestCase(TestCase):

    def setUp(self):
        self.client = Client()
        self.department = Department.objects.create(name='Computer Science', code='CSE')

    def register(self, **overrides):
        data = {
            'email': 'new.student@example.com',
            'full_name': 'New Student',
            'role': Profile.Role.STUDENT,
            'department': str(self.department.pk),
            'student_id': 'CSE099',
            'password1': 'Hostel-Gate-2024!',
            'password2': 'Hostel-Gate-2024!',
        }
        data.update(overrides)
        return self.client.post(reverse('users:register'), data)

    def test_student_registration(self):
        response = self.register()

        self.assertRedirects(response, reverse('users:login'), fetch_redirect_response=False)
        profile = Profile.objects.get(user__email='new.student@example.com')
        self.assertEqual(profile.role, Profile.Role.STUDENT)
        self.assertEqual(profile.student_id, 'CSE099')
        self.assertEqual(profile.department, self.department)

    def test_staff_registration_starts_unapproved(self):
        self.register(
            email='new.advisor@example.com',
            role=Profile.Role.ADVISOR,
            student_id='',
        )

        profile = Profile.objects.get(user__email='new.advisor@example.com')
        self.assertEqual(profile.role, Profile.Role.ADVISOR)
        self.assertFalse(profile.is_approved)
        self.assertIsNone(profile.student_id)

    def test_student_needs_registration_number(self):
        response = self.register(student_id='')

        self.assertEqual(response.status_code, 200)
        self.assertIn('student_id', response.context['form'].errors)
        self.assertFalse(User.objects.filter(email='new.student@example.com').exists())

    def test_duplicate_registration_number(self):
        make_profile('asha@example.com', student_id='CSE099')
        response = self.register()
        self.assertIn('student_id', response.context['form'].errors)

    def test_principal_role_cannot_be_self_assigned(self):
        response = self.register(role=Profile.Role.PRINCIPAL, student_id='')
        self.assertIn('role', response.context['form'].errors)


class DashboardRedirectTestCase(TestCase):

    def setUp(self):
        self.client = Client()

    def assertDashboard(self, email, url_name):
        self.client.login(username=email, password=TEST_PASSWORD)
        response = self.client.get(reverse('users:dashboard'))
        self.assertRedirects(response, reverse(url_name), fetch_redirect_response=False)

    def test_each_role_lands_on_its_dashboard(self):
        make_profile('asha@example.com', student_id='S001')
        make_profile('advisor@example.com', role=Profile.Role.ADVISOR)
        make_profile('hod@example.com', role=Profile.Role.HOD)
        make_profile('warden@example.com', role=Profile.Role.WARDEN)
        make_profile('principal@example.com', role=Profile.Role.PRINCIPAL)

        self.assertDashboard('asha@example.com', 'outings:student_dashboard')
        self.assertDashboard('advisor@example.com', 'outings:advisor_dashboard')
        self.assertDashboard('hod@example.com', 'outings:hod_dashboard')
        self.assertDashboard('warden@example.com', 'outings:warden_dashboard')
        self.assertDashboard('principal@example.com', 'outings:principal_dashboard')

    def test_unapproved_staff_lands_on_profile(self):
        make_profile('warden@example.com', role=Profile.Role.WARDEN, is_approved=False)
        self.assertDashboard('warden@example.com', 'users:profile')

    def test_superuser_without_profile(self):
        User.objects.create_superuser(email='root@example.com', password=TEST_PASSWORD)
        self.assertDashboard('root@example.com', 'outings:principal_dashboard')


class ProfilePhotoTestCase(TestCase):

    def setUp(self):
        self.client = Client()
        self.student = make_profile('asha@example.com', student_id='S001')
        self.client.login(username='asha@example.com', password=TEST_PASSWORD)

    def test_upload_replaces_photo(self):
        self.client.post(reverse('users:upload_photo'), {'photo': image_upload()})
        self.student.refresh_from_db()
        first_name = self.student.photo.name
        self.assertTrue(first_name.startswith('profile-photos/'))

        response = self.client.post(
            reverse('users:upload_photo'),
            {'photo': image_upload()},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )

        self.assertTrue(response.json()['success'])
        self.student.refresh_from_db()
        self.assertEqual(self.student.photo.name, first_name)
        self.assertTrue(self.student.photo.storage.exists(self.student.photo.name))

    def test_wrong_type_is_rejected(self):
        response = self.client.post(
            reverse('users:upload_photo'),
            {'photo': image_upload('photo.gif', 'GIF', 'image/gif')},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])
        self.student.refresh_from_db()
        self.assertFalse(self.student.photo)

    @override_settings(PROFILE_PHOTO_MAX_SIZE=10)
    def test_oversized_photo_is_rejected(self):
        response = self.client.post(
            reverse('users:upload_photo'),
            {'photo': image_upload()},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest'
        )

        self.assertEqual(response.status_code, 400)
        self.student.refresh_from_db()
        self.assertFalse(self.student.photo)


class PrincipalActionsTestCase(TestCase):

    def setUp(self):
        self.client = Client()
        self.principal = make_profile('principal@example.com', role=Profile.Role.PRINCIPAL)
        self.warden = make_profile('warden@example.com', role=Profile.Role.WARDEN, is_approved=False)
        self.student = make_profile('asha@example.com', student_id='S001')

    def test_toggle_staff_approval(self):
        self.client.login(username='principal@example.com', password=TEST_PASSWORD)
        url = reverse('users:toggle_staff_approval', kwargs={'pk': self.warden.pk})

        response = self.client.post(url)
        self.assertRedirects(response, reverse('outings:principal_dashboard'), fetch_redirect_response=False)
        self.warden.refresh_from_db()
        self.assertTrue(self.warden.is_approved)

        self.client.post(url)
        self.warden.refresh_from_db()
        self.assertFalse(self.warden.is_approved)

    def test_toggle_student_block(self):
        self.client.login(username='principal@example.com', password=TEST_PASSWORD)
        self.client.post(reverse('users:toggle_student_block', kwargs={'pk': self.student.pk}))

        self.student.refresh_from_db()
        self.assertTrue(self.student.is_blocked)

    def test_students_cannot_block(self):
        other = make_profile('bala@example.com', student_id='S002')
        self.client.login(username='asha@example.com', password=TEST_PASSWORD)
        self.client.post(reverse('users:toggle_student_block', kwargs={'pk': other.pk}))

        other.refresh_from_db()
        self.assertFalse(other.is_blocked)

    def test_block_toggle_needs_post(self):
        self.client.login(username='principal@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('users:toggle_student_block', kwargs={'pk': self.student.pk}))
        self.assertEqual(response.status_code, 405)


class SeedDepartmentsCommandTestCase(TestCase):

    def test_seed_departments_is_idempotent(self):
        out = StringIO()
        call_command('seed_departments', stdout=out)
        call_command('seed_departments', stdout=out)

        self.assertEqual(Department.objects.count(), 6)
        self.assertTrue(Department.objects.filter(code='CSE').exists())
