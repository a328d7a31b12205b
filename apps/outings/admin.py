# apps/outings/admin.py

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import OutingRequest, ApprovalHistory
from .workflow import initial_stage_for


class ApprovalHistoryInline(admin.TabularInline):
    model = ApprovalHistory
    extra = 0
    fields = ['stage', 'action', 'approver', 'comments', 'created_at']
    readonly_fields = ['stage', 'action', 'approver', 'comments', 'created_at']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(OutingRequest)
class OutingRequestAdmin(admin.ModelAdmin):
    list_display = [
        'student', 'outing_type', 'destination', 'from_date', 'to_date',
        'current_stage', 'final_status', 'created_at'
    ]
    list_filter = ['outing_type', 'current_stage', 'final_status', 'student__department']
    search_fields = ['student__full_name', 'student__student_id', 'destination']
    date_hierarchy = 'from_date'
    inlines = [ApprovalHistoryInline]

    # Stage and status only change through the approval workflow
    readonly_fields = [
        'current_stage', 'final_status',
        'advisor_approved_by', 'advisor_approved_at',
        'hod_approved_by', 'hod_approved_at',
        'warden_approved_by', 'warden_approved_at',
        'rejected_by', 'rejected_at', 'rejection_reason',
        'created_at', 'updated_at'
    ]

    fieldsets = (
        (_('Request'), {
            'fields': (
                'student', 'outing_type', 'destination', 'reason',
                ('from_date', 'from_time'), ('to_date', 'to_time')
            )
        }),
        (_('Workflow'), {
            'fields': ('current_stage', 'final_status')
        }),
        (_('Approvals'), {
            'fields': (
                ('advisor_approved_by', 'advisor_approved_at'),
                ('hod_approved_by', 'hod_approved_at'),
                ('warden_approved_by', 'warden_approved_at'),
            )
        }),
        (_('Rejection'), {
            'fields': ('rejected_by', 'rejected_at', 'rejection_reason')
        }),
        (_('Timestamps'), {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('student')

    def save_model(self, request, obj, form, change):
        if not change:
            obj.current_stage = initial_stage_for(obj.outing_type)
        super().save_model(request, obj, form, change)


@admin.register(ApprovalHistory)
class ApprovalHistoryAdmin(admin.ModelAdmin):
    list_display = ['request', 'stage', 'action', 'approver', 'created_at']
    list_filter = ['stage', 'action']
    search_fields = ['request__student__full_name', 'approver__email', 'comments']
    readonly_fields = ['request', 'approver', 'stage', 'action', 'comments', 'created_at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
