"""
Agent application workflow: submission by applicants and review by admins.

Views and the Django admin both go through these functions, which raise the
errors from agent_applications.exceptions and leave HTTP concerns to callers.
"""
from collections import namedtuple
import logging

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, Q
from django.urls import reverse
from django.utils import timezone

from commission.models import Agent
from unimarket.pagination import paginate

from .documents import (
    ID_DOCUMENT, STUDENT_ID_DOCUMENT, delete_document, open_document, resolve_kind, store_document,
)
from .exceptions import ConflictError, NotFoundError, PersistenceError, StateError, ValidationError
from .forms import AgentApplicationForm, ApproveApplicationForm, RejectApplicationForm, form_errors
from .models import AgentApplication

logger = logging.getLogger(__name__)

ApplicationSubmission = namedtuple('ApplicationSubmission', ['id', 'status'])

DOCUMENT_FIELDS = {
    ID_DOCUMENT: 'id_document_path',
    STUDENT_ID_DOCUMENT: 'student_id_document_path',
}


def get_application(application_id):
    try:
        return AgentApplication.objects.select_related('user', 'reviewed_by').get(pk=application_id)
    except (AgentApplication.DoesNotExist, ValueError):
        raise NotFoundError('Application not found.')


def find_active_application(applicant):
    return (
        AgentApplication.objects
        .filter(user=applicant, status__in=AgentApplication.ACTIVE_STATUSES)
        .order_by('-created_at', '-id')
        .first()
    )


# ==================== APPLICANT ====================

def submit(applicant, data, files):
    existing = find_active_application(applicant)
    if existing:
        raise ConflictError(f'You already have a {existing.status} application.')

    form = AgentApplicationForm(data, files)
    if not form.is_valid():
        errors = form_errors(form)
        logger.warning("Agent application validation failed for user %s: %s", applicant.pk, sorted(errors))
        raise ValidationError(errors, 'Validation failed')

    for kind in (ID_DOCUMENT, STUDENT_ID_DOCUMENT):
        upload = form.cleaned_data[kind]
        logger.info(
            "Received %s: name=%s size=%s content_type=%s",
            kind, upload.name, upload.size, getattr(upload, 'content_type', None),
        )

    stored_paths = []
    try:
        for kind in (ID_DOCUMENT, STUDENT_ID_DOCUMENT):
            stored_paths.append(
                store_document(form.cleaned_data[kind], kind, form.document_types.get(kind))
            )

        with transaction.atomic():
            application = form.save(commit=False)
            application.user = applicant
            application.id_document_path, application.student_id_document_path = stored_paths
            application.status = AgentApplication.STATUS_PENDING
            application.terms_accepted = True
            application.save()
    except Exception as e:
        logger.exception("Agent application submission failed for user %s", applicant.pk)
        for path in stored_paths:
            logger.info("Cleaning up document %s", path)
            delete_document(path)
        if isinstance(e, IntegrityError):
            raise ConflictError('You already have an active application.') from e
        raise PersistenceError('Failed to submit application. Please try again.', detail=str(e)) from e

    # Never log id_number
    logger.info(
        "Agent application %s created for user %s (%s, %s)",
        application.pk, applicant.pk, application.university_name, application.university_email,
    )
    return ApplicationSubmission(application.pk, application.status)


def get_status(applicant):
    application = (
        AgentApplication.objects
        .filter(user=applicant)
        .order_by('-created_at', '-id')
        .first()
    )
    if application is None:
        return None
    return {
        'id': application.id,
        'status': application.status,
        'created_at': application.created_at.isoformat(),
        'reviewed_at': application.reviewed_at.isoformat() if application.reviewed_at else None,
        'rejection_reason': application.rejection_reason,
    }


# ==================== SERIALIZATION ====================

def serialize_user(user):
    if user is None:
        return None
    return {
        'id': user.pk,
        'name': user.name,
        'email': user.email,
        'role': user.role,
    }


def serialize_agent(agent):
    if agent is None:
        return None
    return {
        'id': agent.pk,
        'agent_code': agent.agent_code,
        'commission_rate': float(agent.commission_rate),
        'is_active': agent.is_active,
        'created_at': agent.created_at.isoformat(),
    }


def serialize_application_summary(application):
    return {
        'id': application.id,
        'full_name': application.full_name,
        'university_name': application.university_name,
        'campus': application.campus,
        'student_id': application.student_id,
        'university_email': application.university_email,
        'status': application.status,
        'created_at': application.created_at.isoformat(),
        'reviewed_at': application.reviewed_at.isoformat() if application.reviewed_at else None,
        'user': serialize_user(application.user),
    }


def serialize_application(application):
    try:
        agent = application.agent
    except Agent.DoesNotExist:
        agent = None

    data = serialize_application_summary(application)
    data.update({
        'date_of_birth': application.date_of_birth.isoformat(),
        'phone_number': application.phone_number,
        'physical_address': application.physical_address,
        'id_type': application.id_type,
        'id_number': application.id_number,
        'course': application.course,
        'year_of_study': application.year_of_study,
        'terms_accepted': application.terms_accepted,
        'rejection_reason': application.rejection_reason,
        'updated_at': application.updated_at.isoformat(),
        'documents': {
            kind: {
                'path': getattr(application, field),
                'download_url': reverse(
                    'agent_applications_review:document', args=[application.pk, kind]
                ),
            }
            for kind, field in DOCUMENT_FIELDS.items()
        },
        'reviewer': serialize_user(application.reviewed_by),
        'agent': serialize_agent(agent),
    })
    return data


# ==================== REVIEW ====================

def list_applications(filters, page=1, per_page=None):
    per_page = per_page or settings.AGENT_APPLICATIONS_PER_PAGE
    queryset = AgentApplication.objects.select_related('user').order_by('-created_at', '-id')

    search = (filters.get('search') or '').strip()
    if search:
        queryset = queryset.filter(
            Q(full_name__icontains=search)
            | Q(student_id__icontains=search)
            | Q(university_email__icontains=search)
            | Q(user__email__icontains=search)
        )

    status = filters.get('status')
    if status and status != 'all':
        queryset = queryset.filter(status=status)

    university = filters.get('university')
    if university and university != 'all':
        queryset = queryset.filter(university_name=university)

    counts = AgentApplication.objects.aggregate(
        total=Count('id'),
        pending=Count('id', filter=Q(status=AgentApplication.STATUS_PENDING)),
        approved=Count('id', filter=Q(status=AgentApplication.STATUS_APPROVED)),
        rejected=Count('id', filter=Q(status=AgentApplication.STATUS_REJECTED)),
    )
    universities = sorted(set(
        AgentApplication.objects.order_by().values_list('university_name', flat=True).distinct()
    ))

    return {
        'applications': paginate(queryset, page, per_page, serialize_application_summary),
        'stats': counts,
        'universities': universities,
    }


def show(application):
    return serialize_application(application)


def _lock_pending(application, action):
    locked = (
        AgentApplication.objects
        .select_for_update()
        .select_related('user')
        .get(pk=application.pk)
    )
    if not locked.is_pending:
        raise StateError(f'Only pending applications can be {action}.')
    return locked


def approve(application, reviewer, commission_rate=None):
    form = ApproveApplicationForm({'commission_rate': '' if commission_rate is None else commission_rate})
    if not form.is_valid():
        raise ValidationError(form_errors(form))
    rate = form.cleaned_data['commission_rate']
    if rate is None:
        rate = settings.AGENT_DEFAULT_COMMISSION_RATE

    try:
        with transaction.atomic():
            locked = _lock_pending(application, 'approved')
            locked.status = AgentApplication.STATUS_APPROVED
            locked.reviewed_at = timezone.now()
            locked.reviewed_by = reviewer
            locked.rejection_reason = None
            locked.save(update_fields=['status', 'reviewed_at', 'reviewed_by', 'rejection_reason', 'updated_at'])

            agent = Agent.objects.create(
                user=locked.user,
                application=locked,
                commission_rate=rate,
                is_active=True,
            )
            locked.user.promote_to_agent()
    except IntegrityError as e:
        logger.warning("Approval of application %s conflicted: %s", application.pk, e)
        raise ConflictError('An agent already exists for this applicant.') from e
    except DatabaseError as e:
        logger.exception("Approval of application %s failed", application.pk)
        raise PersistenceError('Failed to approve application.', detail=str(e)) from e

    logger.info(
        "Application %s approved by %s; agent %s created at %s%%",
        locked.pk, reviewer.pk, agent.agent_code, rate,
    )
    return locked


def reject(application, reviewer, reason):
    form = RejectApplicationForm({'rejection_reason': reason or ''})
    if not form.is_valid():
        raise ValidationError(form_errors(form))

    try:
        with transaction.atomic():
            locked = _lock_pending(application, 'rejected')
            locked.status = AgentApplication.STATUS_REJECTED
            locked.reviewed_at = timezone.now()
            locked.reviewed_by = reviewer
            locked.rejection_reason = form.cleaned_data['rejection_reason']
            locked.save(update_fields=['status', 'reviewed_at', 'reviewed_by', 'rejection_reason', 'updated_at'])
    except DatabaseError as e:
        logger.exception("Rejection of application %s failed", application.pk)
        raise PersistenceError('Failed to reject application.', detail=str(e)) from e

    logger.info("Application %s rejected by %s", locked.pk, reviewer.pk)
    return locked


def download_document(application, kind):
    """Return (file, filename) for one of the application's documents."""
    kind = resolve_kind(kind)
    path = getattr(application, DOCUMENT_FIELDS[kind])
    handle = open_document(path)
    filename = f'application-{application.pk}-{kind}{_extension(path)}'
    return handle, filename


def _extension(path):
    dot = path.rfind('.')
    return path[dot:] if dot != -1 else ''
