"""
Authentication backend for email or registration-number login.
"""

import logging

from django.contrib.auth.backends import ModelBackend
from django.contrib.auth import get_user_model

logger = logging.getLogger(__name__)
User = get_user_model()


class EmailOrStudentIdBackend(ModelBackend):
    """
    Authenticate with either the account email or a student's registration
    number, along with the password.
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        login_credential = username or kwargs.get('email')
        if not login_credential or password is None:
            return None

        try:
            # Email first, registration number second
            user = User.objects.filter(email__iexact=login_credential).first()
            if user is None:
                user = User.objects.filter(profile__student_id__iexact=login_credential).first()
        except Exception as e:
            logger.error(f"Authentication error: {e}")
            user = None

        if user is None:
            # Run the default password hasher once to reduce timing
            # differences between an existing and non-existing user
            User().set_password(password)
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None
