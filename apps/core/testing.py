# apps/core/testing.py
"""
Shared fixtures for the app test modules.
"""

from django.contrib.auth import get_user_model

from apps.users.models import Profile

User = get_user_model()

TEST_PASSWORD = 'testpass123'


def make_profile(email, role=Profile.Role.STUDENT, **profile_fields):
    """
    Create a user with a hostel profile. Staff profiles are approved
    unless ``is_approved`` is given.
    """
    user = User.objects.create_user(email=email, password=TEST_PASSWORD)
    if role != Profile.Role.STUDENT:
        profile_fields.setdefault('is_approved', True)
    profile_fields.setdefault('full_name', email.split('@')[0].replace('.', ' ').title())
    return Profile.objects.create(user=user, role=role, **profile_fields)
