from django.contrib.auth.mixins import AccessMixin
from django.shortcuts import redirect
from django.contrib import messages
from django.utils.translation import gettext_lazy as _


def get_profile_role(user):
    """Return the hostel role of a user, or None when the user has no profile."""
    if not user.is_authenticated:
        return None
    profile = getattr(user, 'profile', None)
    return profile.role if profile else None


def user_has_role(user, *roles):
    """Superusers pass every role check."""
    if not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    return get_profile_role(user) in roles


class RoleRequiredMixin(AccessMixin):
    """
    Mixin to restrict a view to users whose profile role is in ``allowed_roles``.
    Authenticated users without the role are sent back to their own dashboard.
    """
    allowed_roles = ()

    def dispatch(self, request, *args, **kwargs):
        if not request.user.is_authenticated:
            return self.handle_no_permission()

        if not user_has_role(request.user, *self.allowed_roles):
            messages.error(request, _("You don't have permission to access this page."))
            return redirect('users:dashboard')

        return super().dispatch(request, *args, **kwargs)


class ApprovedStaffRequiredMixin(RoleRequiredMixin):
    """
    Reviewer pages additionally need a profile approved by the principal.
    """

    def dispatch(self, request, *args, **kwargs):
        user = request.user
        if user.is_authenticated and not user.is_superuser:
            profile = getattr(user, 'profile', None)
            if profile and profile.role in self.allowed_roles and not profile.is_approved:
                messages.warning(request, _("Your staff account is awaiting approval by the principal."))
                return redirect('users:profile')
        return super().dispatch(request, *args, **kwargs)
