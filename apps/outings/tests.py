# apps/outings/tests.py

import csv
from datetime import date, datetime, time, timedelta
from io import StringIO

from django.core import mail
from django.core.exceptions import PermissionDenied, ValidationError
from django.db.models import ProtectedError
from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone

from apps.core.testing import make_profile, TEST_PASSWORD
from apps.users.models import Profile, Department
from .models import OutingRequest, ApprovalHistory, Stage
from .workflow import apply_decision, can_review, initial_stage_for, next_stage
from .slips import validity_end, is_expired, slip_status
from .exports import CSV_HEADER, export_filename


def aware(*args):
    return timezone.make_aware(datetime(*args), timezone.get_current_timezone())


class OutingDataMixin:
    """Departments, a student and one approved reviewer per stage"""

    def setUp(self):
        self.cse = Department.objects.create(name='Computer Science', code='CSE')
        self.ece = Department.objects.create(name='Electronics', code='ECE')

        self.student = make_profile('asha@example.com', department=self.cse, student_id='CSE001')
        self.advisor = make_profile('advisor@example.com', role=Profile.Role.ADVISOR, department=self.cse)
        self.hod = make_profile('hod@example.com', role=Profile.Role.HOD, department=self.cse)
        self.warden = make_profile('warden@example.com', role=Profile.Role.WARDEN)
        self.principal = make_profile('principal@example.com', role=Profile.Role.PRINCIPAL)

    def make_request(self, outing_type=OutingRequest.OutingType.HOMETOWN, student=None, **fields):
        start = timezone.localdate() + timedelta(days=1)
        fields.setdefault('destination', 'Madurai')
        fields.setdefault('from_date', start)
        fields.setdefault('reason', 'Family function')
        if outing_type == OutingRequest.OutingType.LOCAL:
            fields.setdefault('to_date', start)
            fields.setdefault('from_time', time(10, 0))
            fields.setdefault('to_time', time(18, 0))
        else:
            fields.setdefault('to_date', start + timedelta(days=2))

        return OutingRequest.objects.create(
            student=student or self.student,
            outing_type=outing_type,
            current_stage=initial_stage_for(outing_type),
            **fields
        )


class StageSequenceTestCase(TestCase):

    def test_initial_stages(self):
        self.assertEqual(initial_stage_for(OutingRequest.OutingType.LOCAL), Stage.WARDEN)
        self.assertEqual(initial_stage_for(OutingRequest.OutingType.HOMETOWN), Stage.ADVISOR)

    def test_next_stage(self):
        hometown = OutingRequest.OutingType.HOMETOWN
        self.assertEqual(next_stage(hometown, Stage.ADVISOR), Stage.HOD)
        self.assertEqual(next_stage(hometown, Stage.HOD), Stage.WARDEN)
        self.assertIsNone(next_stage(hometown, Stage.WARDEN))
        self.assertIsNone(next_stage(OutingRequest.OutingType.LOCAL, Stage.WARDEN))

    def test_stage_outside_sequence_is_refused(self):
        with self.assertRaises(ValidationError):
            next_stage(OutingRequest.OutingType.LOCAL, Stage.ADVISOR)


class OutingRequestModelTestCase(OutingDataMixin, TestCase):

    def test_to_date_before_from_date(self):
        outing_request = OutingRequest(
            student=self.student,
            outing_type=OutingRequest.OutingType.HOMETOWN,
            destination='Madurai',
            from_date=date(2025, 3, 10),
            to_date=date(2025, 3, 9),
            reason='Family function',
        )
        with self.assertRaises(ValidationError) as ctx:
            outing_request.full_clean()
        self.assertIn('to_date', ctx.exception.message_dict)

    def test_local_outing_needs_times(self):
        outing_request = OutingRequest(
            student=self.student,
            outing_type=OutingRequest.OutingType.LOCAL,
            destination='Town market',
            from_date=date(2025, 3, 10),
            to_date=date(2025, 3, 10),
            reason='Shopping',
        )
        with self.assertRaises(ValidationError) as ctx:
            outing_request.full_clean()
        self.assertIn('from_time', ctx.exception.message_dict)
        self.assertIn('to_time', ctx.exception.message_dict)

    def test_same_day_return_must_follow_departure(self):
        outing_request = OutingRequest(
            student=self.student,
            outing_type=OutingRequest.OutingType.LOCAL,
            destination='Town market',
            from_date=date(2025, 3, 10),
            to_date=date(2025, 3, 10),
            from_time=time(17, 0),
            to_time=time(9, 0),
            reason='Shopping',
        )
        with self.assertRaises(ValidationError) as ctx:
            outing_request.full_clean()
        self.assertIn('to_time', ctx.exception.message_dict)

    def test_total_days_is_inclusive(self):
        outing_request = self.make_request()
        self.assertEqual(outing_request.total_days, 3)


class ApprovalWorkflowTestCase(OutingDataMixin, TestCase):
    """Stage transitions and the history trail"""

    def test_local_request_needs_only_the_warden(self):
        outing_request = self.make_request(OutingRequest.OutingType.LOCAL)
        self.assertEqual(outing_request.current_stage, Stage.WARDEN)

        outing_request = apply_decision(outing_request, self.warden.user, 'approve', 'Back by six')

        self.assertTrue(outing_request.is_approved)
        self.assertEqual(outing_request.current_stage, Stage.WARDEN)
        self.assertEqual(outing_request.warden_approved_by, self.warden.user)
        self.assertIsNotNone(outing_request.warden_approved_at)
        self.assertIsNone(outing_request.advisor_approved_by)

        history = list(outing_request.history.all())
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0].stage, Stage.WARDEN)
        self.assertEqual(history[0].action, ApprovalHistory.Action.APPROVED)
        self.assertEqual(history[0].comments, 'Back by six')

    def test_hometown_request_passes_every_stage(self):
        outing_request = self.make_request()

        outing_request = apply_decision(outing_request, self.advisor.user, 'approve')
        self.assertEqual(outing_request.current_stage, Stage.HOD)
        self.assertTrue(outing_request.is_pending)

        outing_request = apply_decision(outing_request, self.hod.user, 'approve')
        self.assertEqual(outing_request.current_stage, Stage.WARDEN)
        self.assertTrue(outing_request.is_pending)

        outing_request = apply_decision(outing_request, self.warden.user, 'approve')
        self.assertTrue(outing_request.is_approved)

        outing_request.refresh_from_db()
        self.assertEqual(outing_request.advisor_approved_by, self.advisor.user)
        self.assertEqual(outing_request.hod_approved_by, self.hod.user)
        self.assertEqual(outing_request.warden_approved_by, self.warden.user)
        self.assertEqual(
            sorted(outing_request.history.values_list('stage', flat=True)),
            sorted([Stage.ADVISOR, Stage.HOD, Stage.WARDEN])
        )

    def test_rejection_ends_the_request(self):
        outing_request = self.make_request()
        outing_request = apply_decision(outing_request, self.advisor.user, 'approve')
        outing_request = apply_decision(outing_request, self.hod.user, 'reject', 'Exams next week')

        self.assertTrue(outing_request.is_rejected)
        self.assertEqual(outing_request.current_stage, Stage.HOD)
        self.assertEqual(outing_request.rejected_by, self.hod.user)
        self.assertEqual(outing_request.rejection_reason, 'Exams next week')
        self.assertIsNone(outing_request.hod_approved_by)

        with self.assertRaises(ValidationError):
            apply_decision(outing_request, self.warden.user, 'approve')
        self.assertEqual(outing_request.history.count(), 2)

    def test_rejection_comments_are_optional(self):
        outing_request = self.make_request(OutingRequest.OutingType.LOCAL)
        outing_request = apply_decision(outing_request, self.warden.user, 'reject')

        self.assertTrue(outing_request.is_rejected)
        self.assertEqual(outing_request.rejection_reason, '')

    def test_decided_request_refuses_another_decision(self):
        outing_request = self.make_request(OutingRequest.OutingType.LOCAL)
        apply_decision(outing_request, self.warden.user, 'approve')

        with self.assertRaises(ValidationError):
            apply_decision(outing_request, self.warden.user, 'reject')
        self.assertEqual(outing_request.history.count(), 1)

    def test_wrong_role_is_refused(self):
        outing_request = self.make_request()

        with self.assertRaises(PermissionDenied):
            apply_decision(outing_request, self.warden.user, 'approve')

        outing_request.refresh_from_db()
        self.assertEqual(outing_request.current_stage, Stage.ADVISOR)
        self.assertFalse(outing_request.history.exists())

    def test_unapproved_staff_is_refused(self):
        self.advisor.is_approved = False
        self.advisor.save()
        outing_request = self.make_request()

        with self.assertRaises(PermissionDenied):
            apply_decision(outing_request, self.advisor.user, 'approve')
        self.assertFalse(can_review(outing_request, self.advisor.user))

    def test_advisor_from_other_department_is_refused(self):
        other_advisor = make_profile('ece.advisor@example.com', role=Profile.Role.ADVISOR, department=self.ece)
        outing_request = self.make_request()

        with self.assertRaises(PermissionDenied):
            apply_decision(outing_request, other_advisor.user, 'approve')
        self.assertTrue(can_review(outing_request, self.advisor.user))
        self.assertFalse(can_review(outing_request, other_advisor.user))

    def test_student_cannot_review(self):
        outing_request = self.make_request()
        with self.assertRaises(PermissionDenied):
            apply_decision(outing_request, self.student.user, 'approve')

    def test_unknown_decision_is_refused(self):
        outing_request = self.make_request()
        with self.assertRaises(ValidationError):
            apply_decision(outing_request, self.advisor.user, 'maybe')

    def test_history_rows_cannot_change(self):
        outing_request = self.make_request(OutingRequest.OutingType.LOCAL)
        apply_decision(outing_request, self.warden.user, 'approve')
        entry = outing_request.history.get()

        entry.comments = 'edited'
        with self.assertRaises(ValueError):
            entry.save()
        with self.assertRaises(ValueError):
            entry.delete()

        entry.refresh_from_db()
        self.assertEqual(entry.comments, '')

    def test_approver_with_history_cannot_be_deleted(self):
        outing_request = self.make_request(OutingRequest.OutingType.LOCAL)
        apply_decision(outing_request, self.warden.user, 'approve')

        with self.assertRaises(ProtectedError):
            self.warden.user.delete()
        self.assertEqual(outing_request.history.get().approver, self.warden.user)

    def test_final_decision_emails_the_student(self):
        outing_request = self.make_request(OutingRequest.OutingType.LOCAL)

        with self.captureOnCommitCallbacks(execute=True):
            apply_decision(outing_request, self.warden.user, 'approve')

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['asha@example.com'])
        self.assertIn('approved', mail.outbox[0].subject)

    def test_intermediate_approval_sends_no_email(self):
        outing_request = self.make_request()

        with self.captureOnCommitCallbacks(execute=True):
            apply_decision(outing_request, self.advisor.user, 'approve')

        self.assertEqual(len(mail.outbox), 0)


class ApprovalSlipTestCase(OutingDataMixin, TestCase):

    def test_slip_valid_until_return_minute(self):
        outing_request = OutingRequest(
            to_date=date(2025, 3, 10),
            to_time=time(18, 30, 45),
        )
        self.assertEqual(validity_end(outing_request), aware(2025, 3, 10, 18, 30))
        self.assertFalse(is_expired(outing_request, now=aware(2025, 3, 10, 18, 30)))
        self.assertTrue(is_expired(outing_request, now=aware(2025, 3, 10, 18, 31)))

    def test_slip_without_return_time_lasts_the_day(self):
        outing_request = OutingRequest(to_date=date(2025, 3, 10))

        self.assertFalse(is_expired(outing_request, now=aware(2025, 3, 10, 23, 59, 59)))
        self.assertTrue(is_expired(outing_request, now=aware(2025, 3, 11, 0, 0)))

    def test_local_slip_expires_one_second_after_return(self):
        outing_request = OutingRequest(
            outing_type=OutingRequest.OutingType.LOCAL,
            to_date=date(2025, 3, 10),
            to_time=time(18, 0),
        )
        self.assertFalse(is_expired(outing_request, now=aware(2025, 3, 10, 18, 0, 0)))
        self.assertTrue(is_expired(outing_request, now=aware(2025, 3, 10, 18, 0, 1)))

    def test_hometown_slip_ignores_return_time(self):
        outing_request = OutingRequest(
            outing_type=OutingRequest.OutingType.HOMETOWN,
            to_date=date(2025, 3, 10),
            to_time=time(9, 0),
        )
        end = validity_end(outing_request)

        self.assertEqual((end.hour, end.minute), (23, 59))
        self.assertFalse(is_expired(outing_request, now=aware(2025, 3, 10, 21, 0)))
        self.assertTrue(is_expired(outing_request, now=aware(2025, 3, 11, 0, 0)))

    def test_slip_status_payload(self):
        outing_request = self.make_request(OutingRequest.OutingType.LOCAL)
        data = slip_status(outing_request, now=validity_end(outing_request) + timedelta(minutes=1))

        self.assertTrue(data['success'])
        self.assertTrue(data['expired'])
        self.assertEqual(data['status'], 'expired')
        self.assertEqual(data['id'], str(outing_request.pk))

    def test_pending_request_has_no_slip(self):
        outing_request = self.make_request(OutingRequest.OutingType.LOCAL)
        client = Client()
        client.login(username='asha@example.com', password=TEST_PASSWORD)

        response = client.get(reverse('outings:approval_slip', kwargs={'pk': outing_request.pk}))
        self.assertEqual(response.status_code, 404)

        response = client.get(reverse('outings:slip_status', kwargs={'pk': outing_request.pk}))
        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.json()['success'])

    def test_approved_slip_renders(self):
        outing_request = self.make_request(OutingRequest.OutingType.LOCAL)
        apply_decision(outing_request, self.warden.user, 'approve')
        client = Client()
        client.login(username='asha@example.com', password=TEST_PASSWORD)

        response = client.get(reverse('outings:approval_slip', kwargs={'pk': outing_request.pk}))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'VALID')
        self.assertFalse(response.context['expired'])

        response = client.get(reverse('outings:slip_status', kwargs={'pk': outing_request.pk}))
        self.assertEqual(response.json()['status'], 'valid')


class StudentViewsTestCase(OutingDataMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.client = Client()
        self.client.login(username='asha@example.com', password=TEST_PASSWORD)
        self.tomorrow = timezone.localdate() + timedelta(days=1)

    def test_dashboard_lists_own_requests(self):
        self.make_request()
        other = make_profile('bala@example.com', department=self.cse, student_id='CSE002')
        self.make_request(student=other, destination='Chennai')

        response = self.client.get(reverse('outings:student_dashboard'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['stats']['total'], 1)
        self.assertContains(response, 'Madurai')
        self.assertNotContains(response, 'Chennai')

    def test_submit_local_request_starts_at_warden(self):
        response = self.client.post(reverse('outings:request_create'), {
            'outing_type': 'local',
            'destination': 'Town market',
            'from_date': self.tomorrow.isoformat(),
            'to_date': self.tomorrow.isoformat(),
            'from_time': '10:00',
            'to_time': '17:00',
            'reason': 'Buying stationery',
        })

        outing_request = OutingRequest.objects.get(student=self.student)
        self.assertRedirects(
            response,
            reverse('outings:request_detail', kwargs={'pk': outing_request.pk}),
            fetch_redirect_response=False
        )
        self.assertEqual(outing_request.current_stage, Stage.WARDEN)
        self.assertTrue(outing_request.is_pending)

    def test_submit_hometown_request_starts_at_advisor(self):
        self.client.post(reverse('outings:request_create'), {
            'outing_type': 'hometown',
            'destination': 'Madurai',
            'from_date': self.tomorrow.isoformat(),
            'to_date': (self.tomorrow + timedelta(days=3)).isoformat(),
            'reason': 'Family function',
        })

        outing_request = OutingRequest.objects.get(student=self.student)
        self.assertEqual(outing_request.current_stage, Stage.ADVISOR)

    def test_hometown_slip_with_return_time_lasts_the_day(self):
        self.client.post(reverse('outings:request_create'), {
            'outing_type': 'hometown',
            'destination': 'Madurai',
            'from_date': self.tomorrow.isoformat(),
            'to_date': (self.tomorrow + timedelta(days=3)).isoformat(),
            'to_time': '09:00',
            'reason': 'Family function',
        })

        outing_request = OutingRequest.objects.get(student=self.student)
        end = validity_end(outing_request)
        self.assertEqual(end.date(), self.tomorrow + timedelta(days=3))
        self.assertEqual((end.hour, end.minute), (23, 59))

    def test_invalid_dates_are_rejected(self):
        response = self.client.post(reverse('outings:request_create'), {
            'outing_type': 'hometown',
            'destination': 'Madurai',
            'from_date': self.tomorrow.isoformat(),
            'to_date': (self.tomorrow - timedelta(days=1)).isoformat(),
            'reason': 'Family function',
        })

        self.assertEqual(response.status_code, 200)
        self.assertIn('to_date', response.context['form'].errors)
        self.assertFalse(OutingRequest.objects.exists())

    def test_past_start_date_is_rejected(self):
        yesterday = timezone.localdate() - timedelta(days=1)
        response = self.client.post(reverse('outings:request_create'), {
            'outing_type': 'hometown',
            'destination': 'Madurai',
            'from_date': yesterday.isoformat(),
            'to_date': self.tomorrow.isoformat(),
            'reason': 'Family function',
        })

        self.assertIn('from_date', response.context['form'].errors)
        self.assertFalse(OutingRequest.objects.exists())

    def test_local_request_without_times_is_rejected(self):
        response = self.client.post(reverse('outings:request_create'), {
            'outing_type': 'local',
            'destination': 'Town market',
            'from_date': self.tomorrow.isoformat(),
            'to_date': self.tomorrow.isoformat(),
            'reason': 'Buying stationery',
        })

        self.assertIn('from_time', response.context['form'].errors)
        self.assertFalse(OutingRequest.objects.exists())

    def test_blocked_student_cannot_submit(self):
        self.student.is_blocked = True
        self.student.save()

        response = self.client.post(reverse('outings:request_create'), {
            'outing_type': 'hometown',
            'destination': 'Madurai',
            'from_date': self.tomorrow.isoformat(),
            'to_date': self.tomorrow.isoformat(),
            'reason': 'Family function',
        })

        self.assertRedirects(response, reverse('outings:student_dashboard'), fetch_redirect_response=False)
        self.assertFalse(OutingRequest.objects.exists())

    def test_other_students_request_is_hidden(self):
        other = make_profile('bala@example.com', department=self.cse, student_id='CSE002')
        outing_request = self.make_request(student=other)

        response = self.client.get(reverse('outings:request_detail', kwargs={'pk': outing_request.pk}))
        self.assertEqual(response.status_code, 404)

    def test_detail_shows_history(self):
        outing_request = self.make_request()
        apply_decision(outing_request, self.advisor.user, 'approve', 'Fine by me')

        response = self.client.get(reverse('outings:request_detail', kwargs={'pk': outing_request.pk}))

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.context['can_review'])
        self.assertContains(response, 'Fine by me')


class ReviewerViewsTestCase(OutingDataMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.client = Client()

    def test_advisor_queue_is_department_scoped(self):
        own = self.make_request()
        other_student = make_profile('ravi@example.com', department=self.ece, student_id='ECE001')
        other = self.make_request(student=other_student, destination='Coimbatore')
        local = self.make_request(OutingRequest.OutingType.LOCAL, destination='Town market')

        self.client.login(username='advisor@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('outings:advisor_dashboard'))

        self.assertEqual(response.status_code, 200)
        queue = list(response.context['pending_requests'])
        self.assertIn(own, queue)
        self.assertNotIn(other, queue)
        self.assertNotIn(local, queue)

    def test_warden_queue_sees_every_department(self):
        other_student = make_profile('ravi@example.com', department=self.ece, student_id='ECE001')
        local = self.make_request(OutingRequest.OutingType.LOCAL)
        other_local = self.make_request(OutingRequest.OutingType.LOCAL, student=other_student)

        self.client.login(username='warden@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('outings:warden_dashboard'))

        queue = list(response.context['pending_requests'])
        self.assertIn(local, queue)
        self.assertIn(other_local, queue)

    def test_unapproved_staff_is_sent_to_profile(self):
        self.hod.is_approved = False
        self.hod.save()

        self.client.login(username='hod@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('outings:hod_dashboard'))
        self.assertRedirects(response, reverse('users:profile'), fetch_redirect_response=False)

    def test_student_cannot_open_reviewer_dashboard(self):
        self.client.login(username='asha@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('outings:warden_dashboard'))
        self.assertRedirects(response, reverse('users:dashboard'), fetch_redirect_response=False)

    def test_review_view_forwards_request(self):
        outing_request = self.make_request()
        next_url = reverse('outings:advisor_dashboard')

        self.client.login(username='advisor@example.com', password=TEST_PASSWORD)
        response = self.client.post(
            reverse('outings:review_request', kwargs={'pk': outing_request.pk}),
            {'decision': 'approve', 'comments': '', 'next': next_url}
        )

        self.assertRedirects(response, next_url, fetch_redirect_response=False)
        outing_request.refresh_from_db()
        self.assertEqual(outing_request.current_stage, Stage.HOD)

    def test_review_view_reports_wrong_stage(self):
        outing_request = self.make_request()

        self.client.login(username='warden@example.com', password=TEST_PASSWORD)
        response = self.client.post(
            reverse('outings:review_request', kwargs={'pk': outing_request.pk}),
            {'decision': 'approve', 'next': reverse('outings:warden_dashboard')},
            follow=True
        )

        self.assertContains(response, 'waiting for the Advisor')
        outing_request.refresh_from_db()
        self.assertEqual(outing_request.current_stage, Stage.ADVISOR)

    def test_review_ignores_external_next(self):
        outing_request = self.make_request(OutingRequest.OutingType.LOCAL)

        self.client.login(username='warden@example.com', password=TEST_PASSWORD)
        response = self.client.post(
            reverse('outings:review_request', kwargs={'pk': outing_request.pk}),
            {'decision': 'reject', 'next': 'https://example.org/'}
        )

        self.assertRedirects(response, reverse('users:dashboard'), fetch_redirect_response=False)
        outing_request.refresh_from_db()
        self.assertTrue(outing_request.is_rejected)


class PrincipalViewsTestCase(OutingDataMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.client = Client()
        self.make_request(destination='Madurai')
        self.make_request(destination='Chennai')
        self.make_request(OutingRequest.OutingType.LOCAL, destination='Town market')

    def test_dashboard_filters(self):
        self.client.login(username='principal@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('outings:principal_dashboard'), {'outing_type': 'hometown'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['filtered_count'], 2)
        self.assertEqual(response.context['stats']['total'], 3)
        self.assertEqual(response.context['stats']['local'], 1)

    def test_dashboard_search(self):
        self.client.login(username='principal@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('outings:principal_dashboard'), {'search': 'chen'})
        self.assertEqual(response.context['filtered_count'], 1)

    def test_export_matches_filters(self):
        self.client.login(username='principal@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('outings:export_requests'), {'outing_type': 'hometown'})

        self.assertEqual(response['Content-Type'], 'text/csv')
        self.assertIn(export_filename(), response['Content-Disposition'])

        rows = list(csv.reader(StringIO(response.content.decode())))
        self.assertEqual(rows[0], CSV_HEADER)
        self.assertEqual(len(rows), 3)
        self.assertEqual({row[2] for row in rows[1:]}, {'hometown'})
        self.assertEqual(rows[1][1], 'CSE001')
        self.assertEqual(rows[1][6], 'pending')

    def test_export_is_principal_only(self):
        self.client.login(username='warden@example.com', password=TEST_PASSWORD)
        response = self.client.get(reverse('outings:export_requests'))
        self.assertRedirects(response, reverse('users:dashboard'), fetch_redirect_response=False)

    def test_export_filename_uses_date(self):
        self.assertEqual(export_filename(date(2025, 3, 10)), 'outing_requests_2025-03-10.csv')
