"""
Email services for the communication app.
Renders email bodies from templates and sends them through Django's mail backend.
"""

import logging
from typing import Dict, Optional, Tuple
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils.html import strip_tags
from django.conf import settings

logger = logging.getLogger(__name__)


class EmailService:
    """
    Service class for handling email operations.
    """

    @staticmethod
    def send_email(
        recipient_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        from_email: Optional[str] = None,
    ) -> Tuple[bool, str]:
        """
        Send a single email with an HTML alternative.

        Args:
            recipient_email: Email address of the recipient
            subject: Email subject
            html_content: HTML content of the email
            text_content: Plain text content (derived from the HTML when omitted)
            from_email: Sender email address (defaults to DEFAULT_FROM_EMAIL)

        Returns:
            Tuple of (success: bool, message: str)
        """
        if not recipient_email:
            return False, "No recipient address"

        try:
            email = EmailMultiAlternatives(
                subject=subject,
                body=text_content or strip_tags(html_content),
                from_email=from_email or settings.DEFAULT_FROM_EMAIL,
                to=[recipient_email]
            )
            email.attach_alternative(html_content, "text/html")
            result = email.send()

            if result > 0:
                logger.info(f"Email sent successfully to {recipient_email}")
                return True, "Email sent successfully"

            logger.error(f"Failed to send email to {recipient_email}")
            return False, "Failed to send email"

        except Exception as e:
            error_msg = f"Error sending email to {recipient_email}: {str(e)}"
            logger.error(error_msg)
            return False, error_msg

    @staticmethod
    def send_templated_email(
        template_name: str,
        recipient_email: str,
        subject: str,
        context: Dict,
        from_email: Optional[str] = None,
    ) -> Tuple[bool, str]:
        """
        Render ``<template_name>.html`` and ``<template_name>.txt`` and send them.
        """
        try:
            html_content = render_to_string(f"{template_name}.html", context)
            text_content = render_to_string(f"{template_name}.txt", context)
        except Exception as e:
            error_msg = f"Error rendering template {template_name}: {str(e)}"
            logger.error(error_msg)
            return False, error_msg

        return EmailService.send_email(
            recipient_email=recipient_email,
            subject=subject,
            html_content=html_content,
            text_content=text_content,
            from_email=from_email,
        )
