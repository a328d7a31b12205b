# apps/users/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import UserCreationForm
from django.utils.translation import gettext_lazy as _

from .models import User, Department, Profile


class EmailUserCreationForm(UserCreationForm):
    class Meta:
        model = User
        fields = ('email',)


class ProfileInline(admin.StackedInline):
    model = Profile
    fk_name = 'user'
    can_delete = False
    extra = 0
    fields = ('full_name', 'role', 'department', 'student_id', 'room', 'is_approved', 'is_blocked')


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Custom admin interface for User model.
    """
    list_display = ('email', 'full_name', 'role', 'is_active', 'is_staff', 'last_login', 'date_joined')
    list_filter = ('is_active', 'is_staff', 'is_superuser', 'profile__role')
    search_fields = ('email', 'first_name', 'last_name', 'profile__full_name', 'profile__student_id')
    ordering = ('-date_joined',)
    readonly_fields = ('last_login', 'date_joined')

    fieldsets = (
        (None, {
            'fields': ('email', 'password')
        }),
        (_('Personal Info'), {
            'fields': ('first_name', 'last_name')
        }),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',)
        }),
        (_('Important Dates'), {
            'fields': ('last_login', 'date_joined'),
            'classes': ('collapse',)
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2', 'first_name', 'last_name'),
        }),
    )

    add_form = EmailUserCreationForm
    inlines = [ProfileInline]

    def full_name(self, obj):
        return obj.full_name
    full_name.short_description = _('Full Name')

    def role(self, obj):
        profile = getattr(obj, 'profile', None)
        return profile.get_role_display() if profile else '-'
    role.short_description = _('Role')


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ('name', 'code', 'created_at')
    search_fields = ('name', 'code')


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = (
        'full_name', 'role', 'department', 'student_id', 'room',
        'key_number', 'is_approved', 'is_blocked'
    )
    list_filter = ('role', 'department', 'is_approved', 'is_blocked', 'year_of_study')
    search_fields = ('full_name', 'student_id', 'user__email', 'phone')
    readonly_fields = ('key_number', 'key_issued_at', 'created_at', 'updated_at')
    raw_id_fields = ('user',)

    fieldsets = (
        (_('Account'), {
            'fields': ('user', 'full_name', 'role', 'department')
        }),
        (_('Student Details'), {
            'fields': ('student_id', 'year_of_study', 'room', 'key_number', 'key_issued_at')
        }),
        (_('Contact'), {
            'fields': (
                'phone', 'guardian_name', 'guardian_phone',
                'local_address', 'permanent_address', 'photo'
            )
        }),
        (_('Access'), {
            'fields': ('is_approved', 'is_blocked')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['approve_staff', 'block_students', 'unblock_students']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user', 'department', 'room')

    def approve_staff(self, request, queryset):
        """Admin action to approve selected staff accounts."""
        updated = queryset.filter(role__in=Profile.STAFF_ROLES).update(is_approved=True)
        self.message_user(request, _('%d staff accounts approved.') % updated)
    approve_staff.short_description = _('Approve selected staff')

    def block_students(self, request, queryset):
        updated = queryset.filter(role=Profile.Role.STUDENT).update(is_blocked=True)
        self.message_user(request, _('%d students blocked.') % updated)
    block_students.short_description = _('Block selected students')

    def unblock_students(self, request, queryset):
        updated = queryset.filter(role=Profile.Role.STUDENT).update(is_blocked=False)
        self.message_user(request, _('%d students unblocked.') % updated)
    unblock_students.short_description = _('Unblock selected students')
