# apps/complaints/models.py

from django.db import models
from django.db.models import Case, When, Value, F
from django.utils.translation import gettext_lazy as _
from django.core.validators import MinLengthValidator

from apps.core.models import CoreBaseModel


class ComplaintQuerySet(models.QuerySet):

    SAFE_FIELDS = (
        'id', 'title', 'description', 'category', 'status',
        'admin_response', 'responded_at', 'created_at', 'is_anonymous',
    )

    def safe(self):
        """
        Rows for staff listings. Anonymous complaints carry no submitter.
        """
        def unless_anonymous(field):
            return Case(
                When(is_anonymous=True, then=Value(None)),
                default=F(field),
                output_field=models.CharField(),
            )

        return self.annotate(
            submitter_name=unless_anonymous('student__full_name'),
            submitter_student_id=unless_anonymous('student__student_id'),
            submitter_room=unless_anonymous('student__room__room_number'),
        ).values(*self.SAFE_FIELDS, 'submitter_name', 'submitter_student_id', 'submitter_room')

    def open(self):
        return self.exclude(status=Complaint.Status.RESOLVED)


class Complaint(CoreBaseModel):
    """
    A complaint raised by a hostel resident.
    """
    class Category(models.TextChoices):
        MAINTENANCE = 'maintenance', _('Maintenance')
        CLEANLINESS = 'cleanliness', _('Cleanliness')
        FOOD = 'food', _('Food & Mess')
        SECURITY = 'security', _('Security')
        ROOMMATE = 'roommate', _('Roommate Issue')
        OTHER = 'other', _('Other')

    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        IN_PROGRESS = 'in_progress', _('In Progress')
        RESOLVED = 'resolved', _('Resolved')

    student = models.ForeignKey(
        'users.Profile',
        on_delete=models.CASCADE,
        related_name='complaints',
        verbose_name=_('student')
    )
    title = models.CharField(
        _('title'),
        max_length=200,
        validators=[MinLengthValidator(5)]
    )
    description = models.TextField(
        _('description'),
        validators=[MinLengthValidator(10)]
    )
    category = models.CharField(
        _('category'),
        max_length=20,
        choices=Category.choices,
        default=Category.OTHER
    )
    status = models.CharField(
        _('status'),
        max_length=15,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )
    is_anonymous = models.BooleanField(
        _('submit anonymously'),
        default=False,
        help_text=_('Staff will not see who submitted this complaint')
    )

    # Staff response
    admin_response = models.TextField(_('response'), blank=True)
    responded_by = models.ForeignKey(
        'users.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='complaint_responses',
        verbose_name=_('responded by')
    )
    responded_at = models.DateTimeField(_('responded at'), null=True, blank=True)

    objects = ComplaintQuerySet.as_manager()

    class Meta:
        verbose_name = _('Complaint')
        verbose_name_plural = _('Complaints')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'created_at']),
        ]

    def __str__(self):
        return self.title

    @property
    def is_resolved(self):
        return self.status == self.Status.RESOLVED


# Signal handlers for automatic updates
from django.db.models.signals import post_save
from django.dispatch import receiver


@receiver(post_save, sender=Complaint)
def broadcast_complaint_change(sender, instance, created, **kwargs):
    from apps.communication.broadcast import notify_change
    notify_change('complaints', 'created' if created else 'updated', instance.pk)
