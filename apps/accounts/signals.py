"""Signals for account events."""

import logging
from allauth.account.signals import user_signed_up
from django.dispatch import receiver

logger = logging.getLogger(__name__)


@receiver(user_signed_up)
def account_signed_up(sender, request, user, **kwargs):
    """
    Finish setting up a freshly registered user.

    Fills an empty display name from the local part of the email.

    Args:
        sender: Signal sender
        request: HTTP request (may be None)
        user: Newly created user
        **kwargs: Additional signal arguments
    """
    logger.info(f'Signup for user {user.email}')

    if not user.display_name:
        user.display_name = user.email.split('@')[0]
        user.save(update_fields=['display_name'])
