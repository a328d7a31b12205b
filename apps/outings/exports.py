# apps/outings/exports.py

import csv

from django.http import HttpResponse
from django.utils import timezone

CSV_HEADER = [
    'Student Name', 'Student ID', 'Type', 'Destination',
    'From Date', 'To Date', 'Status', 'Submitted On',
]


def export_filename(today=None):
    today = today or timezone.localdate()
    return f"outing_requests_{today.isoformat()}.csv"


def export_requests_csv(queryset):
    """
    CSV download of the given outing requests, one row per request.
    """
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{export_filename()}"'

    writer = csv.writer(response)
    writer.writerow(CSV_HEADER)

    for outing_request in queryset.select_related('student'):
        writer.writerow([
            outing_request.student.full_name or 'N/A',
            outing_request.student.student_id or 'N/A',
            outing_request.outing_type,
            outing_request.destination,
            outing_request.from_date.isoformat(),
            outing_request.to_date.isoformat(),
            outing_request.final_status,
            timezone.localtime(outing_request.created_at).date().isoformat(),
        ])

    return response
