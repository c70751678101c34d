import json
import logging

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import FileResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from unimarket.decorators import error_response, is_admin, json_errors, role_required
from unimarket.pagination import parse_per_page

from . import services
from .exceptions import ApplicationError, ConflictError, ValidationError

logger = logging.getLogger(__name__)

ADMINS_ONLY = 'Only administrators can review agent applications.'


def parse_body(request):
    """Read a JSON body, falling back to regular form data."""
    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except json.JSONDecodeError:
            raise ValidationError({'body': ['The request body is not valid JSON.']}, 'Invalid JSON')
        if not isinstance(data, dict):
            raise ValidationError({'body': ['The request body must be a JSON object.']}, 'Invalid JSON')
        return data
    return request.POST


# ==================== APPLICANT ====================

@login_required
@require_GET
def application_status(request):
    application = services.get_status(request.user)
    return JsonResponse({
        'success': True,
        'data': {
            'has_application': application is not None,
            'application': application,
        },
    })


@login_required
@require_POST
def submit_application(request):
    try:
        submission = services.submit(request.user, request.POST, request.FILES)
    except ConflictError as e:
        # Duplicate applications are reported like validation failures
        return error_response(e, status=422)
    except ApplicationError as e:
        return error_response(e)

    return JsonResponse({
        'success': True,
        'message': 'Application submitted successfully! We will review your application within 2-3 business days.',
        'data': {
            'application_id': submission.id,
            'status': submission.status,
        },
    }, status=201)


# ==================== ADMIN REVIEW ====================

@login_required
@role_required(is_admin, ADMINS_ONLY)
@require_GET
def application_list(request):
    filters = {
        'search': request.GET.get('search', ''),
        'status': request.GET.get('status', ''),
        'university': request.GET.get('university', ''),
    }
    per_page = parse_per_page(request.GET.get('per_page'), settings.AGENT_APPLICATIONS_PER_PAGE)
    data = services.list_applications(filters, request.GET.get('page', 1), per_page)
    return JsonResponse(data)


@login_required
@role_required(is_admin, ADMINS_ONLY)
@require_GET
@json_errors
def application_detail(request, application_id):
    application = services.get_application(application_id)
    return JsonResponse({'application': services.show(application)})


@login_required
@role_required(is_admin, ADMINS_ONLY)
@require_POST
@json_errors
def approve_application(request, application_id):
    application = services.get_application(application_id)
    data = parse_body(request)
    application = services.approve(application, request.user, data.get('commission_rate'))
    return JsonResponse({
        'message': 'Application approved successfully.',
        'application': services.show(application),
    })


@login_required
@role_required(is_admin, ADMINS_ONLY)
@require_POST
@json_errors
def reject_application(request, application_id):
    application = services.get_application(application_id)
    data = parse_body(request)
    application = services.reject(application, request.user, data.get('rejection_reason'))
    return JsonResponse({
        'message': 'Application rejected successfully.',
        'application': services.show(application),
    })


@login_required
@role_required(is_admin, ADMINS_ONLY)
@require_GET
@json_errors
def download_document(request, application_id, kind):
    application = services.get_application(application_id)
    handle, filename = services.download_document(application, kind)
    logger.info("User %s downloaded %s of application %s", request.user.pk, kind, application.pk)
    return FileResponse(handle, as_attachment=True, filename=filename)
