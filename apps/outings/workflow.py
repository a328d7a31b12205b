# apps/outings/workflow.py
"""
Approval workflow for outing requests.

Local outings need the warden only. Hometown visits go advisor, then HOD,
then warden. A rejection at any stage ends the request. Every decision writes
the request fields and one ApprovalHistory row in the same transaction.
"""

import logging

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.users.models import Profile
from .models import OutingRequest, ApprovalHistory, Stage

logger = logging.getLogger(__name__)


class Decision(models.TextChoices):
    APPROVE = 'approve', _('Approve')
    REJECT = 'reject', _('Reject')


STAGE_SEQUENCE = {
    OutingRequest.OutingType.LOCAL: [Stage.WARDEN],
    OutingRequest.OutingType.HOMETOWN: [Stage.ADVISOR, Stage.HOD, Stage.WARDEN],
}

# Profile role that acts at each stage
STAGE_ROLES = {
    Stage.ADVISOR: Profile.Role.ADVISOR,
    Stage.HOD: Profile.Role.HOD,
    Stage.WARDEN: Profile.Role.WARDEN,
}


def initial_stage_for(outing_type):
    """Stage a newly submitted request starts at."""
    try:
        return STAGE_SEQUENCE[outing_type][0]
    except KeyError:
        raise ValidationError(_('Unknown outing type "%(type)s".') % {'type': outing_type})


def next_stage(outing_type, stage):
    """
    Stage after ``stage`` for this outing type, or None when ``stage`` is the
    last one.
    """
    sequence = STAGE_SEQUENCE.get(outing_type)
    if not sequence or stage not in sequence:
        raise ValidationError(
            _('Stage "%(stage)s" does not apply to %(type)s requests.') % {
                'stage': stage, 'type': outing_type
            }
        )
    position = sequence.index(stage)
    if position + 1 < len(sequence):
        return sequence[position + 1]
    return None


def check_reviewer(outing_request, approver):
    """
    Raise PermissionDenied unless ``approver`` may decide at the request's
    current stage.
    """
    if approver.is_superuser:
        return

    profile = getattr(approver, 'profile', None)
    if profile is None:
        raise PermissionDenied(_('Only hostel staff can review outing requests.'))
    if profile.role != STAGE_ROLES.get(outing_request.current_stage):
        raise PermissionDenied(
            _('This request is waiting for the %(stage)s.') % {
                'stage': outing_request.get_current_stage_display()
            }
        )
    if not profile.is_approved:
        raise PermissionDenied(_('Your staff account is awaiting approval by the principal.'))
    if profile.role in (Profile.Role.ADVISOR, Profile.Role.HOD):
        if profile.department_id != outing_request.student.department_id:
            raise PermissionDenied(_('This student belongs to another department.'))


def can_review(outing_request, approver):
    if not outing_request.is_pending:
        return False
    try:
        check_reviewer(outing_request, approver)
    except PermissionDenied:
        return False
    return True


def apply_decision(outing_request, approver, decision, comments=''):
    """
    Approve or reject ``outing_request`` at its current stage.

    Returns the updated request. Raises ValidationError when the request is
    already decided or the decision is malformed, and PermissionDenied when
    ``approver`` cannot act at this stage. Nothing is written on failure.
    """
    if decision not in Decision.values:
        raise ValidationError(_('Unknown decision "%(decision)s".') % {'decision': decision})

    comments = (comments or '').strip()

    with transaction.atomic():
        locked = (
            OutingRequest.objects
            .select_for_update()
            .select_related('student')
            .get(pk=outing_request.pk)
        )

        if not locked.is_pending:
            raise ValidationError(
                _('This request has already been %(status)s.') % {
                    'status': locked.get_final_status_display().lower()
                }
            )
        check_reviewer(locked, approver)

        now = timezone.now()
        stage = locked.current_stage

        if decision == Decision.REJECT:
            locked.final_status = OutingRequest.FinalStatus.REJECTED
            locked.rejected_by = approver
            locked.rejected_at = now
            locked.rejection_reason = comments
            action = ApprovalHistory.Action.REJECTED
        else:
            setattr(locked, f'{stage}_approved_by', approver)
            setattr(locked, f'{stage}_approved_at', now)
            following = next_stage(locked.outing_type, stage)
            if following is None:
                locked.final_status = OutingRequest.FinalStatus.APPROVED
            else:
                locked.current_stage = following
            action = ApprovalHistory.Action.APPROVED

        locked.save()
        ApprovalHistory.objects.create(
            request=locked,
            approver=approver,
            stage=stage,
            action=action,
            comments=comments,
        )

        if locked.is_terminal:
            from .notifications import notify_student_of_decision
            transaction.on_commit(lambda: notify_student_of_decision(locked))

    logger.info(
        f"Outing request {locked.pk} {action} at {stage} by {approver.pk}; "
        f"now stage={locked.current_stage} status={locked.final_status}"
    )
    return locked
