# apps/hostels/services.py
"""
Room key issue and return, and resident moves.

Each room has two keys (A and B). Key operations lock the room row so two
wardens acting on the same slot cannot both succeed.
"""

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.users.models import Profile
from .models import Room

logger = logging.getLogger(__name__)


def issue_key(room, profile, slot):
    """
    Issue key ``slot`` of ``room`` to ``profile``.

    The slot must be empty, the profile must live in the room and must not
    already hold a key.
    """
    with transaction.atomic():
        room = Room.objects.select_for_update().get(pk=room.pk)
        profile = Profile.objects.select_for_update().get(pk=profile.pk)
        field = room.holder_field(slot)

        if room.slot_holder_id(slot):
            raise ValidationError(
                _('Key %(slot)s of room %(room)s is already issued. It must be returned first.') % {
                    'slot': slot, 'room': room.room_number
                }
            )
        if profile.room_id != room.pk:
            raise ValidationError(
                _('%(name)s is not a resident of room %(room)s.') % {
                    'name': profile.full_name, 'room': room.room_number
                }
            )
        if profile.key_number:
            raise ValidationError(
                _('%(name)s already holds key %(slot)s.') % {
                    'name': profile.full_name, 'slot': profile.key_number
                }
            )

        profile.key_number = slot
        profile.key_issued_at = timezone.now()
        profile.save(update_fields=['key_number', 'key_issued_at', 'updated_at'])

        setattr(room, field, profile)
        room.save(update_fields=[field, 'updated_at'])

    logger.info(f"Key {slot} of room {room.room_number} issued to {profile.pk}")
    return room


def return_key(room, profile):
    """
    Take back whichever key of ``room`` the profile is holding.
    """
    with transaction.atomic():
        room = Room.objects.select_for_update().get(pk=room.pk)
        profile = Profile.objects.select_for_update().get(pk=profile.pk)

        slot = profile.key_number
        if not slot:
            raise ValidationError(
                _('%(name)s does not hold a key.') % {'name': profile.full_name}
            )

        field = room.holder_field(slot)
        if room.slot_holder_id(slot) != profile.pk:
            raise ValidationError(
                _('Key %(slot)s of room %(room)s is not held by %(name)s.') % {
                    'slot': slot, 'room': room.room_number, 'name': profile.full_name
                }
            )

        profile.key_number = ''
        profile.key_issued_at = None
        profile.save(update_fields=['key_number', 'key_issued_at', 'updated_at'])

        setattr(room, field, None)
        room.save(update_fields=[field, 'updated_at'])

    logger.info(f"Key {slot} of room {room.room_number} returned by {profile.pk}")
    return room


def _lock_rooms(*room_ids):
    """Lock the given rooms in primary key order and return them by pk."""
    room_ids = {pk for pk in room_ids if pk}
    rooms = Room.objects.select_for_update().filter(pk__in=room_ids).order_by('pk')
    return {room.pk: room for room in rooms}


def assign_resident(room, profile):
    """
    Move ``profile`` into ``room``. A key held for the old room is returned first.
    """
    with transaction.atomic():
        previous_room_id = Profile.objects.values_list('room_id', flat=True).get(pk=profile.pk)
        rooms = _lock_rooms(room.pk, previous_room_id)
        room = rooms[room.pk]
        profile = Profile.objects.select_for_update().get(pk=profile.pk)

        if profile.room_id != previous_room_id:
            raise ValidationError(
                _('%(name)s was moved to another room. Please try again.') % {'name': profile.full_name}
            )
        if profile.room_id == room.pk:
            raise ValidationError(
                _('%(name)s already lives in room %(room)s.') % {
                    'name': profile.full_name, 'room': room.room_number
                }
            )
        if room.residents.count() >= room.capacity:
            raise ValidationError(
                _('Room %(room)s is full.') % {'room': room.room_number}
            )

        if profile.key_number and profile.room_id:
            return_key(rooms[profile.room_id], profile)
            profile.refresh_from_db()

        profile.room = room
        profile.save(update_fields=['room', 'updated_at'])

    logger.info(f"Profile {profile.pk} moved to room {room.room_number}")
    return profile


def remove_resident(profile):
    """Check a resident out of their room, returning any key they hold."""
    with transaction.atomic():
        room_id = Profile.objects.values_list('room_id', flat=True).get(pk=profile.pk)
        if not room_id:
            raise ValidationError(
                _('%(name)s is not assigned to a room.') % {'name': profile.full_name}
            )
        room = _lock_rooms(room_id)[room_id]
        profile = Profile.objects.select_for_update().get(pk=profile.pk)
        if profile.room_id != room.pk:
            raise ValidationError(
                _('%(name)s was moved to another room. Please try again.') % {'name': profile.full_name}
            )

        if profile.key_number:
            return_key(room, profile)
            profile.refresh_from_db()

        profile.room = None
        profile.save(update_fields=['room', 'updated_at'])

    logger.info(f"Profile {profile.pk} removed from room {room.room_number}")
    return room
