# apps/core/auth_service.py

"""
Authentication service - keeps all account/session logic in one place
Views only translate its (success, message) results into responses
"""

import logging
from smtplib import SMTPException
from typing import Dict, Optional, Tuple

from django.conf import settings
from django.contrib.auth import authenticate, login, logout
from django.core.mail import send_mail
from django.db import IntegrityError, transaction

from .models import Account
from .utils import display_name

logger = logging.getLogger(__name__)


class AuthenticationService:
    """
    Sign-up, login and logout

    Passwords are hashed by Django (PBKDF2) and the session cookie is Django's.
    """

    def __init__(self):
        self._min_password_length = 8

    def signup(self, data: Dict) -> Tuple[bool, str, Optional[Account]]:
        """
        Creates an account and sends the welcome email

        Args:
            data: cleaned SignupForm data

        Returns:
            Tuple[success, message, account]
        """
        if len(data['password']) < self._min_password_length:
            return False, f"Password must have at least {self._min_password_length} characters", None

        if self._account_exists(data['email']):
            return False, "An account with this email already exists", None

        try:
            with transaction.atomic():
                account = Account.objects.create_user(
                    email=data['email'],
                    password=data['password'],
                    first_name=data.get('first_name', ''),
                    last_name=data.get('last_name', ''),
                )
        except IntegrityError:
            # Lost a race against a concurrent signup with the same email
            return False, "An account with this email already exists", None

        transaction.on_commit(lambda: self._send_welcome_email(account))
        logger.info(f"👤 Account created: {account.email}")
        return True, "Account created", account

    def login(self, request, email: str, password: str) -> Tuple[bool, str]:
        account = authenticate(request, username=email.lower(), password=password)
        if account is None:
            logger.info(f"🔒 Failed login for {email}")
            return False, "Invalid email or password"

        login(request, account)
        return True, f"Welcome, {display_name(account)}!"

    def logout(self, request) -> bool:
        logout(request)
        return True

    # =================== PRIVATE ===================

    def _account_exists(self, email: str) -> bool:
        return Account.objects.filter(email__iexact=email).exists()

    def _send_welcome_email(self, account: Account):
        """Welcome email; a delivery failure never breaks the sign-up"""
        subject = 'Welcome to Groove Board'
        message = f"""
Hi {account.first_name or account.email},

Your Groove Board account is ready.

Create your first board and invite your team:
{settings.GROOVE_APP_URL}/

The Groove Board team
"""
        try:
            send_mail(
                subject=subject,
                message=message,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[account.email],
                fail_silently=False,
            )
        except (SMTPException, OSError) as e:
            logger.warning(f"⚠️ Could not send welcome email to {account.email}: {e}")


# Global service instance (singleton)
auth_service = AuthenticationService()
