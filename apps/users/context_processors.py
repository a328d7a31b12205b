from .models import Profile


def user_roles(request):
    """
    Context processor to add hostel role information to all templates.
    """
    if not request.user.is_authenticated:
        return {
            'user_role': None,
            'user_profile': None,
        }

    profile = getattr(request.user, 'profile', None)
    role = profile.role if profile else None
    is_superuser = request.user.is_superuser

    return {
        'user_role': role,
        'user_profile': profile,
        'is_student': role == Profile.Role.STUDENT,
        'is_advisor': role == Profile.Role.ADVISOR,
        'is_hod': role == Profile.Role.HOD,
        'is_warden': role == Profile.Role.WARDEN,
        'is_principal': is_superuser or role in (Profile.Role.PRINCIPAL, Profile.Role.ADMIN),
        'is_staff_member': is_superuser or role in Profile.STAFF_ROLES,
        'is_pending_staff': bool(profile and profile.is_staff_member and not profile.is_approved),
        'can_manage_rooms': is_superuser or role in (Profile.Role.WARDEN, Profile.Role.PRINCIPAL, Profile.Role.ADMIN),
    }
