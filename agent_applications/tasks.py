from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.template.loader import render_to_string
from django.utils.html import strip_tags
from agent_applications.models import AgentApplication
import logging

logger = logging.getLogger(__name__)

NOTIFICATION_TEMPLATES = {
    AgentApplication.STATUS_APPROVED: (
        'UniMarket Agent Application Approved',
        'agent_applications/email/application_approved.html',
    ),
    AgentApplication.STATUS_REJECTED: (
        'UniMarket Agent Application Update',
        'agent_applications/email/application_rejected.html',
    ),
}


@shared_task(name='agent_applications.tasks.send_review_notification')
def send_review_notification(application_id):
    """
    E-mail the applicant the outcome of their review.
    Queued after the approve/reject transaction commits.
    """
    application = (
        AgentApplication.objects
        .select_related('user', 'agent')
        .filter(pk=application_id)
        .first()
    )
    if application is None:
        logger.warning(f"Review notification skipped: application {application_id} not found.")
        return False

    if application.status not in NOTIFICATION_TEMPLATES:
        logger.info(f"Application {application_id} is still {application.status}, nothing to notify.")
        return False

    subject, template_name = NOTIFICATION_TEMPLATES[application.status]
    html_message = render_to_string(template_name, {
        'application': application,
        'user': application.user,
        'agent': getattr(application, 'agent', None),
    })
    sent = send_mail(
        subject=subject,
        message=strip_tags(html_message),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[application.user.email],
        html_message=html_message,
        fail_silently=True
    )
    logger.info(f"Review notification for application {application_id} sent to {sent} recipient(s).")
    return bool(sent)
