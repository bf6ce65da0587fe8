# notifications/signals.py
#
# Purpose:
# - Tell admins and managers whenever a visitor's status changes
#   (waiting -> meeting -> completed), whoever made the change: the
#   assignment service, the Django admin, or a shell.
#
# Notes:
# - pre_save remembers the stored status; post_save compares against it.
# - The fan-out runs after the surrounding transaction commits, so a rolled
#   back status change is never announced.
#
import logging

from django.db import transaction
from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from notifications.services.relay import NotificationRelay
from visitors.models import Visitor

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Visitor)
def remember_visitor_status(sender, instance: Visitor, **kwargs):
    if instance.pk is None:
        instance._stored_status = None
        return
    instance._stored_status = (
        sender.objects.filter(pk=instance.pk).values_list("status", flat=True).first()
    )


@receiver(post_save, sender=Visitor)
def visitor_status_update(sender, instance: Visitor, created: bool, update_fields=None, **kwargs):
    """
    Publish a visitor_status_update event when the status actually changed.
    New visits are announced by the assignment notification instead.
    """
    if created:
        return
    if update_fields is not None and "status" not in update_fields:
        return
    previous = getattr(instance, "_stored_status", None)
    if previous == instance.status:
        return

    logger.info("Visitor %s status %s -> %s", instance.pk, previous, instance.status)
    transaction.on_commit(
        lambda: NotificationRelay().notify_status_update(instance),
        robust=True,
    )
