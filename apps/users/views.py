# apps/users/views.py

import logging

from django.shortcuts import render, get_object_or_404, redirect
from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.db import transaction
from django.http import JsonResponse
from django.urls import reverse
from django.utils.translation import gettext_lazy as _
from django.views.decorators.http import require_POST

from apps.core.mixins import user_has_role
from .forms import LoginForm, RegistrationForm, ProfileForm, ProfilePhotoForm
from .models import Profile

logger = logging.getLogger(__name__)

OVERSIGHT_ROLES = (Profile.Role.PRINCIPAL, Profile.Role.ADMIN)

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_role_redirect_url(role):
    """
    Map hostel roles to their dashboards.
    """
    role_redirects = {
        Profile.Role.STUDENT: 'outings:student_dashboard',
        Profile.Role.ADVISOR: 'outings:advisor_dashboard',
        Profile.Role.HOD: 'outings:hod_dashboard',
        Profile.Role.WARDEN: 'outings:warden_dashboard',
        Profile.Role.PRINCIPAL: 'outings:principal_dashboard',
        Profile.Role.ADMIN: 'outings:principal_dashboard',
    }
    url_name = role_redirects.get(role)
    return reverse(url_name) if url_name else None


def get_user_redirect_url(user):
    """
    Determine redirect URL based on the user's hostel role.
    """
    profile = getattr(user, 'profile', None)
    if profile is None:
        if user.is_superuser:
            return reverse('outings:principal_dashboard')
        return reverse('users:profile')

    if profile.is_staff_member and not profile.is_approved and profile.role not in OVERSIGHT_ROLES:
        return reverse('users:profile')

    return get_role_redirect_url(profile.role) or reverse('users:profile')


def is_ajax(request):
    return request.headers.get('x-requested-with') == 'XMLHttpRequest'


# =============================================================================
# AUTHENTICATION VIEWS
# =============================================================================

def custom_login(request):
    """
    Login with email or registration number.
    """
    if request.user.is_authenticated:
        return redirect(get_user_redirect_url(request.user))

    form = LoginForm(request.POST or None)

    if request.method == 'POST' and form.is_valid():
        user = authenticate(
            request,
            username=form.cleaned_data['username'],
            password=form.cleaned_data['password']
        )

        if user is not None:
            login(request, user)

            # Set session expiry based on remember me
            if not form.cleaned_data.get('remember_me'):
                request.session.set_expiry(0)  # Browser session
            else:
                request.session.set_expiry(1209600)  # 2 weeks

            logger.info(f"User {user.pk} logged in")
            messages.success(request, _('Login successful!'))
            return redirect(get_user_redirect_url(user))

        logger.warning(f"Failed login for {form.cleaned_data['username']}")
        messages.error(request, _('Invalid email/registration number or password.'))

    context = {
        'title': _('Login'),
        'form': form,
    }
    return render(request, 'users/login.html', context)


def custom_logout(request):
    """
    Log out and return to the login page.
    """
    if request.user.is_authenticated:
        logger.info(f"User {request.user.pk} logged out")
    logout(request)
    messages.info(request, _('You have been logged out successfully.'))
    return redirect('users:login')


def register(request):
    """
    Account sign-up. Staff accounts must be approved by the principal before
    they can review requests.
    """
    if request.user.is_authenticated:
        return redirect(get_user_redirect_url(request.user))

    if request.method == 'POST':
        form = RegistrationForm(request.POST)
        if form.is_valid():
            with transaction.atomic():
                user = form.save()

            logger.info(f"New {form.cleaned_data['role']} account {user.pk} registered")
            if form.cleaned_data['role'] == Profile.Role.STUDENT:
                messages.success(request, _('Account created. You can now log in.'))
            else:
                messages.success(request, _('Account created. The principal must approve your staff account before you can review requests.'))
            return redirect('users:login')
    else:
        form = RegistrationForm()

    return render(request, 'users/register.html', {'form': form, 'title': _('Register')})


# =============================================================================
# DASHBOARD & PROFILE VIEWS
# =============================================================================

@login_required
def user_dashboard(request):
    """
    Send each user to the dashboard for their role.
    """
    return redirect(get_user_redirect_url(request.user))


@login_required
def profile_view(request):
    """
    The signed-in user's profile with editable contact details.
    """
    profile = getattr(request.user, 'profile', None)
    if profile is None:
        messages.warning(request, _('Your account has no hostel profile yet. Please contact the hostel office.'))
        return render(request, 'users/profile.html', {'profile': None})

    if request.method == 'POST':
        form = ProfileForm(request.POST, instance=profile)
        if form.is_valid():
            form.save()
            messages.success(request, _('Profile updated successfully.'))
            return redirect('users:profile')
    else:
        form = ProfileForm(instance=profile)

    context = {
        'profile': profile,
        'form': form,
        'photo_form': ProfilePhotoForm(),
    }
    return render(request, 'users/profile.html', context)


@login_required
@require_POST
def upload_profile_photo(request):
    """
    Replace the user's profile photo. Answers JSON for AJAX uploads.
    """
    profile = getattr(request.user, 'profile', None)
    if profile is None:
        if is_ajax(request):
            return JsonResponse({'success': False, 'message': str(_('No profile found'))}, status=404)
        messages.error(request, _('No profile found.'))
        return redirect('users:profile')

    form = ProfilePhotoForm(request.POST, request.FILES)
    if not form.is_valid():
        error = ' '.join(form.errors.get('photo', [_('Upload failed.')]))
        if is_ajax(request):
            return JsonResponse({'success': False, 'message': error}, status=400)
        messages.error(request, error)
        return redirect('users:profile')

    photo = form.cleaned_data['photo']
    # One stored photo per user
    if profile.photo:
        profile.photo.delete(save=False)
    profile.photo.save(photo.name, photo, save=False)
    profile.save(update_fields=['photo', 'updated_at'])

    logger.info(f"Profile photo updated for {profile.pk}")
    if is_ajax(request):
        return JsonResponse({'success': True, 'url': profile.photo.url})
    messages.success(request, _('Profile photo updated successfully.'))
    return redirect('users:profile')


# =============================================================================
# PRINCIPAL ACTIONS
# =============================================================================

@login_required
@require_POST
def toggle_staff_approval(request, pk):
    """
    Approve a staff account or withdraw its approval.
    """
    if not user_has_role(request.user, *OVERSIGHT_ROLES):
        messages.error(request, _("You don't have permission to approve staff."))
        return redirect('users:dashboard')

    profile = get_object_or_404(Profile, pk=pk, role__in=Profile.STAFF_ROLES)
    if profile.user_id == request.user.pk:
        messages.error(request, _('You cannot change your own approval.'))
        return redirect('outings:principal_dashboard')

    profile.is_approved = not profile.is_approved
    profile.save(update_fields=['is_approved', 'updated_at'])

    logger.info(f"Staff profile {profile.pk} approval set to {profile.is_approved} by {request.user.pk}")
    if profile.is_approved:
        messages.success(request, _('%(name)s can now review requests.') % {'name': profile.full_name})
    else:
        messages.success(request, _('Approval withdrawn for %(name)s.') % {'name': profile.full_name})
    return redirect('outings:principal_dashboard')


@login_required
@require_POST
def toggle_student_block(request, pk):
    """
    Block a student from submitting outing requests, or lift the block.
    """
    if not user_has_role(request.user, *OVERSIGHT_ROLES):
        messages.error(request, _("You don't have permission to block students."))
        return redirect('users:dashboard')

    profile = get_object_or_404(Profile, pk=pk, role=Profile.Role.STUDENT)
    profile.is_blocked = not profile.is_blocked
    profile.save(update_fields=['is_blocked', 'updated_at'])

    logger.info(f"Student profile {profile.pk} blocked={profile.is_blocked} by {request.user.pk}")
    if profile.is_blocked:
        messages.success(request, _('%(name)s has been blocked.') % {'name': profile.full_name})
    else:
        messages.success(request, _('%(name)s has been unblocked.') % {'name': profile.full_name})
    return redirect('outings:principal_dashboard')
