# apps/hostels/views.py

import logging
from itertools import groupby

from django.shortcuts import render, get_object_or_404, redirect
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.utils.translation import gettext_lazy as _
from django.views.decorators.http import require_POST
from django.views.generic import ListView, CreateView, UpdateView
from django.urls import reverse_lazy
from django.contrib.auth.mixins import LoginRequiredMixin

from apps.core.mixins import RoleRequiredMixin, user_has_role
from apps.users.models import Profile
from .models import Room
from .forms import RoomForm, KeyIssueForm, ResidentAssignForm
from . import services

logger = logging.getLogger(__name__)

ROOM_MANAGER_ROLES = (Profile.Role.WARDEN, Profile.Role.PRINCIPAL, Profile.Role.ADMIN)


def _can_manage_rooms(user):
    return user_has_role(user, *ROOM_MANAGER_ROLES)


class RoomManagerRequiredMixin(RoleRequiredMixin):
    allowed_roles = ROOM_MANAGER_ROLES


# Room board
class RoomBoardView(LoginRequiredMixin, RoomManagerRequiredMixin, ListView):
    """
    All rooms grouped by floor, coloured by occupancy.
    """
    model = Room
    template_name = 'hostels/room_board.html'
    context_object_name = 'rooms'

    def get_queryset(self):
        queryset = Room.objects.select_related('key_a_holder', 'key_b_holder')

        level = self.request.GET.get('occupancy')
        if level == Room.OccupancyLevel.EMPTY:
            queryset = queryset.filter(current_occupancy=0)
        elif level == Room.OccupancyLevel.PARTIAL:
            queryset = [room for room in queryset if room.occupancy_level == Room.OccupancyLevel.PARTIAL]
        elif level == Room.OccupancyLevel.FULL:
            queryset = [room for room in queryset if room.is_full]

        return queryset

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        rooms = list(context['rooms'])

        floors = []
        for floor, floor_rooms in groupby(rooms, key=lambda room: room.floor):
            floor_rooms = list(floor_rooms)
            floors.append((floor_rooms[0].floor_name, floor_rooms))
        context['floors'] = floors
        context['total_rooms'] = len(rooms)
        context['total_capacity'] = sum(room.capacity for room in rooms)
        context['total_occupancy'] = sum(room.current_occupancy for room in rooms)
        context['keys_out'] = sum(room.keys_issued for room in rooms)
        context['occupancy_levels'] = Room.OccupancyLevel.choices
        context['live_topic'] = 'rooms'
        return context


class RoomCreateView(LoginRequiredMixin, RoomManagerRequiredMixin, CreateView):
    model = Room
    form_class = RoomForm
    template_name = 'hostels/room_form.html'
    success_url = reverse_lazy('hostels:room_board')

    def form_valid(self, form):
        messages.success(self.request, _('Room created successfully.'))
        return super().form_valid(form)


class RoomUpdateView(LoginRequiredMixin, RoomManagerRequiredMixin, UpdateView):
    model = Room
    form_class = RoomForm
    template_name = 'hostels/room_form.html'

    def get_success_url(self):
        return reverse_lazy('hostels:room_detail', kwargs={'pk': self.object.pk})

    def form_valid(self, form):
        messages.success(self.request, _('Room updated successfully.'))
        return super().form_valid(form)


@login_required
def room_detail(request, pk):
    """
    Residents of a room and who holds each key.
    """
    if not _can_manage_rooms(request.user):
        messages.error(request, _("You don't have permission to access this page."))
        return redirect('users:dashboard')

    room = get_object_or_404(
        Room.objects.select_related('key_a_holder', 'key_b_holder'), pk=pk
    )

    context = {
        'room': room,
        'residents': room.residents.select_related('department', 'user'),
        'key_form': KeyIssueForm(room=room),
        'assign_form': ResidentAssignForm(room=room),
        'live_topic': 'rooms',
    }
    return render(request, 'hostels/room_detail.html', context)


@login_required
def room_detail_json(request, pk):
    """
    AJAX view returning a room with its residents and key holders.
    """
    if not _can_manage_rooms(request.user):
        return JsonResponse({'success': False, 'message': str(_('Permission denied'))}, status=403)

    room = get_object_or_404(
        Room.objects.select_related('key_a_holder', 'key_b_holder'), pk=pk
    )

    residents = []
    for profile in room.residents.select_related('department'):
        residents.append({
            'id': str(profile.pk),
            'name': profile.full_name,
            'student_id': profile.student_id or '',
            'department': profile.department.code if profile.department else '',
            'key_number': profile.key_number,
            'key_issued_at': profile.key_issued_at.isoformat() if profile.key_issued_at else None,
        })

    data = {
        'success': True,
        'room': {
            'id': str(room.pk),
            'room_number': room.room_number,
            'floor': room.floor,
            'capacity': room.capacity,
            'current_occupancy': room.current_occupancy,
            'occupancy_level': room.occupancy_level,
            'key_a_holder': str(room.key_a_holder_id) if room.key_a_holder_id else None,
            'key_b_holder': str(room.key_b_holder_id) if room.key_b_holder_id else None,
        },
        'residents': residents,
    }
    return JsonResponse(data)


@login_required
@require_POST
def issue_key(request, pk):
    """
    Issue a room key to one of its residents.
    """
    if not _can_manage_rooms(request.user):
        messages.error(request, _("You don't have permission to manage room keys."))
        return redirect('users:dashboard')

    room = get_object_or_404(Room, pk=pk)
    form = KeyIssueForm(request.POST, room=room)

    if form.is_valid():
        try:
            services.issue_key(room, form.cleaned_data['profile'], form.cleaned_data['slot'])
            messages.success(
                request,
                _('Key %(slot)s issued to %(name)s.') % {
                    'slot': form.cleaned_data['slot'],
                    'name': form.cleaned_data['profile'].full_name,
                }
            )
        except ValidationError as e:
            messages.error(request, ' '.join(e.messages))
    else:
        messages.error(request, _('Please choose a resident and a free key slot.'))

    return redirect('hostels:room_detail', pk=room.pk)


@login_required
@require_POST
def return_key(request, pk, profile_id):
    """
    Record a key coming back from a resident.
    """
    if not _can_manage_rooms(request.user):
        messages.error(request, _("You don't have permission to manage room keys."))
        return redirect('users:dashboard')

    room = get_object_or_404(Room, pk=pk)
    profile = get_object_or_404(Profile, pk=profile_id)

    try:
        services.return_key(room, profile)
        messages.success(request, _('Key returned by %(name)s.') % {'name': profile.full_name})
    except ValidationError as e:
        messages.error(request, ' '.join(e.messages))

    return redirect('hostels:room_detail', pk=room.pk)


@login_required
@require_POST
def assign_resident(request, pk):
    if not _can_manage_rooms(request.user):
        messages.error(request, _("You don't have permission to manage rooms."))
        return redirect('users:dashboard')

    room = get_object_or_404(Room, pk=pk)
    form = ResidentAssignForm(request.POST, room=room)

    if form.is_valid():
        try:
            services.assign_resident(room, form.cleaned_data['profile'])
            messages.success(request, _('Resident assigned successfully.'))
        except ValidationError as e:
            messages.error(request, ' '.join(e.messages))
    else:
        for error in form.non_field_errors():
            messages.error(request, error)

    return redirect('hostels:room_detail', pk=room.pk)


@login_required
@require_POST
def remove_resident(request, pk, profile_id):
    if not _can_manage_rooms(request.user):
        messages.error(request, _("You don't have permission to manage rooms."))
        return redirect('users:dashboard')

    room = get_object_or_404(Room, pk=pk)
    profile = get_object_or_404(Profile, pk=profile_id, room=room)

    try:
        services.remove_resident(profile)
        messages.success(request, _('%(name)s checked out of the room.') % {'name': profile.full_name})
    except ValidationError as e:
        messages.error(request, ' '.join(e.messages))

    return redirect('hostels:room_detail', pk=room.pk)
