# apps/outings/notifications.py

import logging

from django.conf import settings
from django.urls import reverse

from apps.communication.services import EmailService

logger = logging.getLogger(__name__)


def notify_student_of_decision(outing_request):
    """
    Email the student once their request is approved or rejected.
    """
    user = outing_request.student.user
    context = {
        'outing_request': outing_request,
        'student': outing_request.student,
        'site_url': getattr(settings, 'SITE_URL', ''),
        'detail_path': reverse('outings:request_detail', kwargs={'pk': outing_request.pk}),
    }

    if outing_request.is_approved:
        subject = f"Outing request approved: {outing_request.destination}"
    else:
        subject = f"Outing request rejected: {outing_request.destination}"

    success, message = EmailService.send_templated_email(
        'outings/emails/decision',
        user.email,
        subject,
        context,
    )
    if not success:
        logger.warning(f"Decision email for request {outing_request.pk} not sent: {message}")
    return success
