# apps/outings/slips.py
"""
Approval slip validity.

A hometown slip is valid for the whole return date. A local slip is valid
up to its return minute, or for the whole return date when no return time
was given. Expiry is computed on read and never stored.
"""

from datetime import datetime, time

from django.utils import timezone

from .models import OutingRequest

END_OF_DAY = time(23, 59, 59, 999999)


def validity_end(outing_request):
    """Last aware instant at which the slip is still valid."""
    is_hometown = outing_request.outing_type == OutingRequest.OutingType.HOMETOWN
    if outing_request.to_time is not None and not is_hometown:
        end_time = outing_request.to_time.replace(second=0, microsecond=0)
    else:
        end_time = END_OF_DAY
    naive = datetime.combine(outing_request.to_date, end_time)
    return timezone.make_aware(naive, timezone.get_current_timezone())


def is_expired(outing_request, now=None):
    if now is None:
        now = timezone.now()
    return now > validity_end(outing_request)


def slip_status(outing_request, now=None):
    """Payload for the slip status endpoint."""
    end = validity_end(outing_request)
    expired = is_expired(outing_request, now=now)
    return {
        'success': True,
        'id': str(outing_request.pk),
        'expired': expired,
        'valid_until': end.isoformat(),
        'status': 'expired' if expired else 'valid',
    }
