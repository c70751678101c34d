import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import AgentApplication

logger = logging.getLogger(__name__)

REVIEW_GROUP = 'agent_application_reviews'


def broadcast(message):
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    try:
        async_to_sync(channel_layer.group_send)(
            REVIEW_GROUP,
            {
                'type': 'review_update',
                'data': message
            }
        )
    except Exception:
        # Channel layer failures are logged, never raised
        logger.warning("Could not broadcast %s to %s", message.get('type'), REVIEW_GROUP, exc_info=True)


def queue_review_notification(application_id):
    from .tasks import send_review_notification
    try:
        send_review_notification.delay(application_id)
    except Exception:
        logger.exception("Could not queue review notification for application %s", application_id)


@receiver(post_save, sender=AgentApplication)
def announce_application_change(sender, instance, created, update_fields=None, **kwargs):
    if created:
        message = {
            'type': 'application_submitted',
            'application_id': instance.pk,
            'full_name': instance.full_name,
            'university_name': instance.university_name,
            'timestamp': str(instance.created_at),
        }
        transaction.on_commit(lambda: broadcast(message))
        return

    if update_fields is None or 'status' not in update_fields or instance.is_pending:
        return

    message = {
        'type': 'application_reviewed',
        'application_id': instance.pk,
        'status': instance.status,
        'reviewed_by': instance.reviewed_by.email if instance.reviewed_by else None,
        'timestamp': str(instance.reviewed_at),
    }
    application_id = instance.pk
    transaction.on_commit(lambda: broadcast(message))
    transaction.on_commit(lambda: queue_review_notification(application_id))
