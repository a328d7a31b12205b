# apps/outings/models.py

from django.db import models
from django.utils.translation import gettext_lazy as _
from django.core.exceptions import ValidationError

from apps.core.models import CoreBaseModel, AppendOnlyModel


class Stage(models.TextChoices):
    ADVISOR = 'advisor', _('Advisor')
    HOD = 'hod', _('Head of Department')
    WARDEN = 'warden', _('Warden')


class OutingRequestQuerySet(models.QuerySet):

    def pending(self):
        return self.filter(final_status=OutingRequest.FinalStatus.PENDING)

    def at_stage(self, stage):
        return self.filter(current_stage=stage)

    def for_department(self, department):
        return self.filter(student__department=department)

    def search(self, term):
        """Match student name, registration number or destination."""
        if not term:
            return self
        return self.filter(
            models.Q(student__full_name__icontains=term)
            | models.Q(student__student_id__icontains=term)
            | models.Q(destination__icontains=term)
        )


class OutingRequest(CoreBaseModel):
    """
    A student's request to leave the hostel, reviewed stage by stage.
    """
    class OutingType(models.TextChoices):
        LOCAL = 'local', _('Local Outing')
        HOMETOWN = 'hometown', _('Hometown Visit')

    class FinalStatus(models.TextChoices):
        PENDING = 'pending', _('Pending')
        APPROVED = 'approved', _('Approved')
        REJECTED = 'rejected', _('Rejected')

    Stage = Stage

    student = models.ForeignKey(
        'users.Profile',
        on_delete=models.CASCADE,
        related_name='outing_requests',
        verbose_name=_('student')
    )
    outing_type = models.CharField(
        _('outing type'),
        max_length=20,
        choices=OutingType.choices,
        default=OutingType.LOCAL
    )
    destination = models.CharField(_('destination'), max_length=255)
    from_date = models.DateField(_('from date'), db_index=True)
    to_date = models.DateField(_('to date'), db_index=True)
    from_time = models.TimeField(_('from time'), null=True, blank=True)
    to_time = models.TimeField(_('to time'), null=True, blank=True)
    reason = models.TextField(_('reason'))

    current_stage = models.CharField(
        _('current stage'),
        max_length=20,
        choices=Stage.choices,
        default=Stage.ADVISOR,
        db_index=True
    )
    final_status = models.CharField(
        _('final status'),
        max_length=20,
        choices=FinalStatus.choices,
        default=FinalStatus.PENDING,
        db_index=True
    )

    # Per-stage sign-off
    advisor_approved_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('advisor approved by')
    )
    advisor_approved_at = models.DateTimeField(_('advisor approved at'), null=True, blank=True)
    hod_approved_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('HOD approved by')
    )
    hod_approved_at = models.DateTimeField(_('HOD approved at'), null=True, blank=True)
    warden_approved_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('warden approved by')
    )
    warden_approved_at = models.DateTimeField(_('warden approved at'), null=True, blank=True)

    # Rejection
    rejected_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('rejected by')
    )
    rejected_at = models.DateTimeField(_('rejected at'), null=True, blank=True)
    rejection_reason = models.TextField(_('rejection reason'), blank=True)

    objects = OutingRequestQuerySet.as_manager()

    class Meta:
        verbose_name = _('Outing Request')
        verbose_name_plural = _('Outing Requests')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['current_stage', 'final_status']),
            models.Index(fields=['student', 'final_status']),
            models.Index(fields=['outing_type', 'final_status']),
        ]

    def __str__(self):
        return f"{self.student} - {self.destination} ({self.final_status})"

    def clean(self):
        errors = {}
        if self.from_date and self.to_date and self.to_date < self.from_date:
            errors['to_date'] = _('To date cannot be before from date.')
        if self.outing_type == self.OutingType.LOCAL:
            if not self.from_time:
                errors['from_time'] = _('Local outings need a departure time.')
            if not self.to_time:
                errors['to_time'] = _('Local outings need a return time.')
            elif self.from_time and self.from_date == self.to_date and self.to_time <= self.from_time:
                errors['to_time'] = _('Return time must be after departure time.')
        if errors:
            raise ValidationError(errors)

    @property
    def is_pending(self):
        return self.final_status == self.FinalStatus.PENDING

    @property
    def is_approved(self):
        return self.final_status == self.FinalStatus.APPROVED

    @property
    def is_rejected(self):
        return self.final_status == self.FinalStatus.REJECTED

    @property
    def is_terminal(self):
        return not self.is_pending

    @property
    def is_local(self):
        return self.outing_type == self.OutingType.LOCAL

    @property
    def total_days(self):
        """Inclusive of both dates."""
        return (self.to_date - self.from_date).days + 1


class ApprovalHistory(AppendOnlyModel):
    """
    One reviewer decision on an outing request. Never changed after insert.
    """
    class Action(models.TextChoices):
        APPROVED = 'approved', _('Approved')
        REJECTED = 'rejected', _('Rejected')

    request = models.ForeignKey(
        OutingRequest,
        on_delete=models.CASCADE,
        related_name='history',
        verbose_name=_('outing request')
    )
    approver = models.ForeignKey(
        'users.User',
        on_delete=models.PROTECT,
        null=True,
        related_name='approval_actions',
        verbose_name=_('approver')
    )
    stage = models.CharField(_('stage'), max_length=20, choices=Stage.choices)
    action = models.CharField(_('action'), max_length=20, choices=Action.choices)
    comments = models.TextField(_('comments'), blank=True)

    class Meta:
        verbose_name = _('Approval History')
        verbose_name_plural = _('Approval History')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['stage', 'created_at']),
            models.Index(fields=['request', 'created_at']),
        ]

    def __str__(self):
        return f"{self.request_id} {self.stage} {self.action}"


# Signal handlers for automatic updates
from django.db.models.signals import post_save
from django.dispatch import receiver


@receiver(post_save, sender=OutingRequest)
def broadcast_request_change(sender, instance, created, **kwargs):
    """
    Tell open dashboards to re-fetch their request lists.
    """
    from apps.communication.broadcast import notify_change
    notify_change('outing_requests', 'created' if created else 'updated', instance.pk)
