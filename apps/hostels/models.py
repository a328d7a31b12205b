# apps/hostels/models.py

from django.db import models
from django.utils.translation import gettext_lazy as _
from django.core.exceptions import ValidationError

from apps.core.models import CoreBaseModel


class Room(CoreBaseModel):
    """
    Model for individual hostel rooms and their two key slots.
    """
    class OccupancyLevel(models.TextChoices):
        EMPTY = 'empty', _('Empty')
        PARTIAL = 'partial', _('Partially Occupied')
        FULL = 'full', _('Full')

    FLOOR_NAMES = {
        0: _('Ground Floor'),
        1: _('First Floor'),
        2: _('Second Floor'),
        3: _('Third Floor'),
    }

    room_number = models.CharField(_('room number'), max_length=20, unique=True)
    floor = models.PositiveIntegerField(_('floor number'), default=0)
    capacity = models.PositiveIntegerField(_('capacity'), default=2)
    current_occupancy = models.PositiveIntegerField(_('current occupancy'), default=0)

    key_a_holder = models.ForeignKey(
        'users.Profile',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('key A holder')
    )
    key_b_holder = models.ForeignKey(
        'users.Profile',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('key B holder')
    )

    class Meta:
        verbose_name = _('Room')
        verbose_name_plural = _('Rooms')
        ordering = ['floor', 'room_number']
        indexes = [
            models.Index(fields=['floor', 'room_number']),
        ]

    def __str__(self):
        return f"Room {self.room_number}"

    def clean(self):
        if self.capacity < 1:
            raise ValidationError(_('Room capacity must be at least 1.'))
        if self.current_occupancy > self.capacity:
            raise ValidationError(_('Current occupancy cannot exceed room capacity.'))

    @property
    def available_beds(self):
        """Calculate available beds in the room."""
        return max(self.capacity - self.current_occupancy, 0)

    @property
    def is_full(self):
        return self.current_occupancy >= self.capacity

    @property
    def occupancy_level(self):
        if self.current_occupancy == 0:
            return self.OccupancyLevel.EMPTY
        if self.current_occupancy < self.capacity:
            return self.OccupancyLevel.PARTIAL
        return self.OccupancyLevel.FULL

    @property
    def floor_name(self):
        return self.FLOOR_NAMES.get(self.floor, _('Floor %(floor)s') % {'floor': self.floor})

    @property
    def keys_issued(self):
        """Number of the two keys currently out."""
        return len([holder for holder in (self.key_a_holder_id, self.key_b_holder_id) if holder])

    def holder_field(self, slot):
        """Name of the room field that tracks the given key slot."""
        fields = {'A': 'key_a_holder', 'B': 'key_b_holder'}
        try:
            return fields[slot]
        except KeyError:
            raise ValidationError(_('Unknown key slot "%(slot)s".') % {'slot': slot})

    def slot_holder_id(self, slot):
        return getattr(self, f"{self.holder_field(slot)}_id")

    def update_occupancy(self):
        """Update current occupancy from the profiles assigned to this room."""
        self.current_occupancy = self.residents.count()
        self.save(update_fields=['current_occupancy', 'updated_at'])


# Signal handlers for automatic updates
from django.db.models.signals import post_save
from django.dispatch import receiver


@receiver(post_save, sender=Room)
def broadcast_room_change(sender, instance, created, **kwargs):
    """
    Tell open room boards to re-fetch.
    """
    from apps.communication.broadcast import notify_change
    notify_change('rooms', 'created' if created else 'updated', instance.pk)
