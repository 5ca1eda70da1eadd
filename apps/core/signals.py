# apps/core/signals.py

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Assignee, BoardMember

logger = logging.getLogger(__name__)


@receiver(post_save, sender=BoardMember)
def ensure_member_assignee(sender, instance, created, **kwargs):
    """Every new member can be picked as assignee on the board"""
    if created:
        assignee = Assignee.ensure_for_account(instance.board_id, instance.account)
        logger.debug(f"👥 Assignee {assignee.pk} ready for {instance.account.email} on {instance.board_id}")
