# apps/outings/views.py

import logging

from django.shortcuts import render, get_object_or_404, redirect
from django.contrib.auth.decorators import login_required
from django.contrib.auth.mixins import LoginRequiredMixin
from django.contrib import messages
from django.conf import settings
from django.core.exceptions import PermissionDenied, ValidationError
from django.db.models import Count, Q
from django.http import Http404, JsonResponse
from django.utils.http import url_has_allowed_host_and_scheme
from django.utils.translation import gettext_lazy as _
from django.views.decorators.http import require_POST
from django.views.generic import TemplateView

from apps.core.mixins import RoleRequiredMixin, ApprovedStaffRequiredMixin, user_has_role
from apps.users.models import Profile
from apps.complaints.models import Complaint
from .models import OutingRequest, ApprovalHistory, Stage
from .forms import OutingRequestForm, ReviewForm, RequestFilterForm, StudentFilterForm
from .workflow import apply_decision, can_review, initial_stage_for
from .slips import validity_end, is_expired, slip_status as build_slip_status
from .exports import export_requests_csv

logger = logging.getLogger(__name__)

OVERSIGHT_ROLES = (Profile.Role.PRINCIPAL, Profile.Role.ADMIN)
VIEWER_ROLES = tuple(Profile.REVIEWER_ROLES) + OVERSIGHT_ROLES


def _student_profile(user):
    profile = getattr(user, 'profile', None)
    if profile is None or not profile.is_student:
        return None
    return profile


def _can_view_request(user, outing_request):
    if outing_request.student.user_id == user.pk:
        return True
    return user_has_role(user, *VIEWER_ROLES)


def _status_counts(queryset):
    return queryset.aggregate(
        total=Count('id'),
        pending=Count('id', filter=Q(final_status=OutingRequest.FinalStatus.PENDING)),
        approved=Count('id', filter=Q(final_status=OutingRequest.FinalStatus.APPROVED)),
        rejected=Count('id', filter=Q(final_status=OutingRequest.FinalStatus.REJECTED)),
    )


# =============================================================================
# STUDENT VIEWS
# =============================================================================

@login_required
def student_dashboard(request):
    """
    A student's own requests with counts and quick access to approved slips.
    """
    profile = _student_profile(request.user)
    if profile is None:
        messages.error(request, _('Only students can submit outing requests.'))
        return redirect('users:dashboard')

    outing_requests = profile.outing_requests.all()

    context = {
        'profile': profile,
        'outing_requests': outing_requests,
        'stats': _status_counts(outing_requests),
        'form': OutingRequestForm(),
        'live_topic': 'outing_requests',
    }
    return render(request, 'outings/student_dashboard.html', context)


@login_required
def create_request(request):
    """
    Submit a new outing request. It starts at the first stage for its type.
    """
    profile = _student_profile(request.user)
    if profile is None:
        messages.error(request, _('Only students can submit outing requests.'))
        return redirect('users:dashboard')

    if profile.is_blocked:
        messages.error(request, _('Your account has been blocked from submitting outing requests. Please contact the principal.'))
        return redirect('outings:student_dashboard')

    if request.method == 'POST':
        form = OutingRequestForm(request.POST, instance=OutingRequest(student=profile))
        if form.is_valid():
            outing_request = form.save(commit=False)
            outing_request.current_stage = initial_stage_for(outing_request.outing_type)
            outing_request.save()

            logger.info(
                f"Outing request {outing_request.pk} submitted by {profile.pk} "
                f"({outing_request.outing_type}, stage {outing_request.current_stage})"
            )
            messages.success(request, _('Your outing request has been submitted.'))
            return redirect('outings:request_detail', pk=outing_request.pk)
    else:
        form = OutingRequestForm()

    return render(request, 'outings/request_form.html', {'form': form})


@login_required
def request_detail(request, pk):
    """
    A request with its approval history. Reviewers at the current stage get
    the decision form.
    """
    outing_request = get_object_or_404(
        OutingRequest.objects.select_related('student__department', 'student__room'),
        pk=pk
    )
    if not _can_view_request(request.user, outing_request):
        raise Http404

    context = {
        'outing_request': outing_request,
        'history': outing_request.history.select_related('approver__profile'),
        'can_review': can_review(outing_request, request.user),
        'review_form': ReviewForm(),
    }
    return render(request, 'outings/request_detail.html', context)


@login_required
def approval_slip(request, pk):
    """
    Printable slip for an approved request.
    """
    outing_request = get_object_or_404(
        OutingRequest.objects.select_related('student__department', 'student__room'),
        pk=pk,
        final_status=OutingRequest.FinalStatus.APPROVED
    )
    if not _can_view_request(request.user, outing_request):
        raise Http404

    context = {
        'outing_request': outing_request,
        'valid_until': validity_end(outing_request),
        'expired': is_expired(outing_request),
        'poll_interval_ms': settings.SLIP_POLL_INTERVAL_SECONDS * 1000,
    }
    return render(request, 'outings/approval_slip.html', context)


@login_required
def slip_status(request, pk):
    """
    AJAX view the slip page polls to re-check expiry.
    """
    try:
        outing_request = OutingRequest.objects.select_related('student').get(
            pk=pk, final_status=OutingRequest.FinalStatus.APPROVED
        )
    except OutingRequest.DoesNotExist:
        return JsonResponse({'success': False, 'message': str(_('Approval slip not found'))}, status=404)

    if not _can_view_request(request.user, outing_request):
        return JsonResponse({'success': False, 'message': str(_('Approval slip not found'))}, status=404)

    return JsonResponse(build_slip_status(outing_request))


# =============================================================================
# REVIEWER VIEWS
# =============================================================================

class ReviewerDashboardView(LoginRequiredMixin, ApprovedStaffRequiredMixin, TemplateView):
    """
    Pending queue, recent decisions and counts for one approval stage.
    """
    stage = None
    template_name = 'outings/reviewer_dashboard.html'
    department_scoped = True

    def get_department(self):
        profile = getattr(self.request.user, 'profile', None)
        return profile.department if profile else None

    def scope(self, queryset, department_field='student__department'):
        if not self.department_scoped or self.request.user.is_superuser:
            return queryset
        department = self.get_department()
        if department is None:
            return queryset.none()
        return queryset.filter(**{department_field: department})

    def get_queue(self):
        queryset = OutingRequest.objects.pending().at_stage(self.stage).select_related(
            'student__department', 'student__room'
        )
        if self.stage != Stage.WARDEN:
            queryset = queryset.filter(outing_type=OutingRequest.OutingType.HOMETOWN)
        return self.scope(queryset).order_by('created_at')

    def get_history(self):
        queryset = ApprovalHistory.objects.filter(stage=self.stage).select_related(
            'request__student', 'approver'
        )
        return self.scope(queryset, 'request__student__department')

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        queue = self.get_queue()
        history = self.get_history()

        context.update({
            'stage': self.stage,
            'stage_label': Stage(self.stage).label,
            'department': self.get_department() if self.department_scoped else None,
            'pending_requests': queue,
            'recent_history': history[:settings.RECENT_HISTORY_LIMIT],
            'stats': {
                'pending': queue.count(),
                'approved': history.filter(action=ApprovalHistory.Action.APPROVED).count(),
                'rejected': history.filter(action=ApprovalHistory.Action.REJECTED).count(),
            },
            'review_form': ReviewForm(),
            'live_topic': 'outing_requests',
        })
        return context


class AdvisorDashboardView(ReviewerDashboardView):
    stage = Stage.ADVISOR
    allowed_roles = (Profile.Role.ADVISOR,)


class HODDashboardView(ReviewerDashboardView):
    stage = Stage.HOD
    allowed_roles = (Profile.Role.HOD,)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['students'] = self.scope(
            Profile.objects.filter(role=Profile.Role.STUDENT).select_related('room'),
            'department'
        )
        return context


class WardenDashboardView(ReviewerDashboardView):
    stage = Stage.WARDEN
    allowed_roles = (Profile.Role.WARDEN,)
    department_scoped = False

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['students'] = Profile.objects.filter(
            role=Profile.Role.STUDENT
        ).select_related('department', 'room')
        context['complaints'] = Complaint.objects.safe().exclude(
            status=Complaint.Status.RESOLVED
        )[:settings.RECENT_HISTORY_LIMIT]
        return context


@login_required
@require_POST
def review_request(request, pk):
    """
    Approve or reject a request at its current stage.
    """
    outing_request = get_object_or_404(OutingRequest, pk=pk)
    form = ReviewForm(request.POST)

    if form.is_valid():
        try:
            outing_request = apply_decision(
                outing_request,
                request.user,
                form.cleaned_data['decision'],
                form.cleaned_data['comments'],
            )
            if outing_request.is_rejected:
                messages.success(request, _('Request rejected successfully!'))
            elif outing_request.is_approved:
                messages.success(request, _('Request approved. The student can now open the approval slip.'))
            else:
                messages.success(
                    request,
                    _('Request approved and forwarded to the %(stage)s.') % {
                        'stage': outing_request.get_current_stage_display()
                    }
                )
        except ValidationError as e:
            messages.error(request, ' '.join(e.messages))
        except PermissionDenied as e:
            messages.error(request, str(e))
    else:
        messages.error(request, _('Please choose approve or reject.'))

    next_url = request.POST.get('next')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return redirect(next_url)
    return redirect('users:dashboard')


# =============================================================================
# PRINCIPAL VIEWS
# =============================================================================

class PrincipalDashboardView(LoginRequiredMixin, RoleRequiredMixin, TemplateView):
    """
    Oversight of every request, student, staff member and complaint.
    """
    template_name = 'outings/principal_dashboard.html'
    allowed_roles = OVERSIGHT_ROLES

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        all_requests = OutingRequest.objects.select_related('student__department')

        filter_form = RequestFilterForm(self.request.GET)
        filtered_requests = filter_form.filter_queryset(all_requests)

        stats = _status_counts(all_requests)
        stats.update(all_requests.aggregate(
            local=Count('id', filter=Q(outing_type=OutingRequest.OutingType.LOCAL)),
            hometown=Count('id', filter=Q(outing_type=OutingRequest.OutingType.HOMETOWN)),
        ))

        student_filter_form = StudentFilterForm(self.request.GET, prefix='students')
        students = student_filter_form.filter_queryset(
            Profile.objects.filter(role=Profile.Role.STUDENT).select_related('department', 'room')
        )

        context.update({
            'stats': stats,
            'filter_form': filter_form,
            'filtered_requests': filtered_requests,
            'filtered_count': filtered_requests.count(),
            'recent_requests': all_requests[:settings.RECENT_HISTORY_LIMIT],
            'student_filter_form': student_filter_form,
            'students': students,
            'staff': Profile.objects.filter(
                role__in=Profile.STAFF_ROLES
            ).select_related('department', 'user'),
            'complaints': Complaint.objects.safe()[:settings.RECENT_HISTORY_LIMIT],
            'recent_history': ApprovalHistory.objects.select_related(
                'request__student', 'approver__profile'
            )[:settings.RECENT_HISTORY_LIMIT],
            'live_topic': 'outing_requests',
        })
        return context


@login_required
def export_requests(request):
    """
    CSV download of the requests matching the dashboard filters.
    """
    if not user_has_role(request.user, *OVERSIGHT_ROLES):
        messages.error(request, _("You don't have permission to export outing requests."))
        return redirect('users:dashboard')

    filter_form = RequestFilterForm(request.GET)
    queryset = filter_form.filter_queryset(OutingRequest.objects.all())

    logger.info(f"Outing requests exported by {request.user.pk}")
    return export_requests_csv(queryset)
