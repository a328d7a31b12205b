from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import Complaint


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ['title', 'category', 'status', 'submitter', 'is_anonymous', 'created_at']
    list_filter = ['status', 'category', 'is_anonymous']
    search_fields = ['title', 'description']
    readonly_fields = ['submitter', 'is_anonymous', 'responded_by', 'responded_at', 'created_at', 'updated_at']

    fieldsets = (
        (_('Complaint'), {
            'fields': ('title', 'category', 'description', 'submitter', 'is_anonymous')
        }),
        (_('Response'), {
            'fields': ('status', 'admin_response', 'responded_by', 'responded_at')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def submitter(self, obj):
        if obj.is_anonymous:
            return _('Anonymous')
        return obj.student
    submitter.short_description = _('Submitted by')

    def has_add_permission(self, request):
        return False
