# apps/complaints/views.py

import logging

from django.shortcuts import render, get_object_or_404, redirect
from django.contrib.auth.decorators import login_required
from django.contrib.auth.mixins import LoginRequiredMixin
from django.contrib import messages
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from django.views.decorators.http import require_POST
from django.views.generic import ListView

from apps.core.mixins import RoleRequiredMixin, user_has_role
from apps.users.models import Profile
from .models import Complaint
from .forms import ComplaintForm, ComplaintResponseForm

logger = logging.getLogger(__name__)

COMPLAINT_STAFF_ROLES = (Profile.Role.WARDEN, Profile.Role.PRINCIPAL, Profile.Role.ADMIN)


@login_required
def my_complaints(request):
    """
    A student's complaints and the form to raise a new one.
    """
    profile = getattr(request.user, 'profile', None)
    if profile is None or not profile.is_student:
        messages.error(request, _('Only students can raise complaints.'))
        return redirect('users:dashboard')

    if request.method == 'POST':
        form = ComplaintForm(request.POST)
        if form.is_valid():
            complaint = form.save(commit=False)
            complaint.student = profile
            complaint.save()

            logger.info(f"Complaint {complaint.pk} raised (anonymous={complaint.is_anonymous})")
            messages.success(request, _('Your complaint has been submitted.'))
            return redirect('complaints:my_complaints')
    else:
        form = ComplaintForm()

    context = {
        'form': form,
        'complaints': profile.complaints.all(),
        'live_topic': 'complaints',
    }
    return render(request, 'complaints/my_complaints.html', context)


class ComplaintListView(LoginRequiredMixin, RoleRequiredMixin, ListView):
    """
    Staff listing. Submitters of anonymous complaints are not shown.
    """
    template_name = 'complaints/complaint_list.html'
    context_object_name = 'complaints'
    allowed_roles = COMPLAINT_STAFF_ROLES
    paginate_by = 20

    def get_queryset(self):
        queryset = Complaint.objects.all()

        status = self.request.GET.get('status')
        if status in Complaint.Status.values:
            queryset = queryset.filter(status=status)

        category = self.request.GET.get('category')
        if category in Complaint.Category.values:
            queryset = queryset.filter(category=category)

        return queryset.safe()

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['statuses'] = Complaint.Status.choices
        context['categories'] = Complaint.Category.choices
        context['response_form'] = ComplaintResponseForm()
        context['live_topic'] = 'complaints'
        return context


@login_required
@require_POST
def respond_to_complaint(request, pk):
    """
    Update a complaint's status and record the staff response.
    """
    if not user_has_role(request.user, *COMPLAINT_STAFF_ROLES):
        messages.error(request, _("You don't have permission to respond to complaints."))
        return redirect('users:dashboard')

    complaint = get_object_or_404(Complaint, pk=pk)
    form = ComplaintResponseForm(request.POST, instance=complaint)

    if form.is_valid():
        complaint = form.save(commit=False)
        if 'admin_response' in form.changed_data:
            complaint.responded_by = request.user
            complaint.responded_at = timezone.now()
        complaint.save()

        logger.info(f"Complaint {complaint.pk} set to {complaint.status} by {request.user.pk}")
        messages.success(request, _('Complaint updated successfully.'))
    else:
        for error in form.non_field_errors():
            messages.error(request, error)
        for field, errors in form.errors.items():
            if field != '__all__':
                messages.error(request, f"{form.fields[field].label}: {' '.join(errors)}")

    return redirect('complaints:complaint_list')
