# apps/hostels/admin.py

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import Room
from apps.users.models import Profile


class ResidentInline(admin.TabularInline):
    model = Profile
    fk_name = 'room'
    extra = 0
    fields = ['full_name', 'student_id', 'department', 'key_number', 'key_issued_at']
    readonly_fields = ['full_name', 'student_id', 'department', 'key_number', 'key_issued_at']
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = [
        'room_number', 'floor', 'capacity', 'current_occupancy',
        'available_beds', 'is_full', 'key_a_holder', 'key_b_holder'
    ]
    list_filter = ['floor']
    search_fields = ['room_number', 'key_a_holder__full_name', 'key_b_holder__full_name']
    readonly_fields = [
        'current_occupancy', 'available_beds', 'is_full',
        'key_a_holder', 'key_b_holder', 'created_at', 'updated_at'
    ]
    inlines = [ResidentInline]

    fieldsets = (
        (_('Room Information'), {
            'fields': ('room_number', 'floor')
        }),
        (_('Capacity'), {
            'fields': ('capacity', 'current_occupancy', 'available_beds', 'is_full')
        }),
        (_('Keys'), {
            'fields': ('key_a_holder', 'key_b_holder')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def available_beds(self, obj):
        return obj.available_beds
    available_beds.short_description = _('Available Beds')

    def is_full(self, obj):
        return obj.is_full
    is_full.boolean = True
    is_full.short_description = _('Full')

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('key_a_holder', 'key_b_holder')


def recount_occupancy(modeladmin, request, queryset):
    for room in queryset:
        room.update_occupancy()
    modeladmin.message_user(
        request,
        _('Recounted occupancy for %d rooms.') % queryset.count()
    )
recount_occupancy.short_description = _("Recount occupancy of selected rooms")


RoomAdmin.actions = [recount_occupancy]
