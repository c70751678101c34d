from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from unimarket.decorators import is_agent, json_errors, role_required
from unimarket.pagination import parse_per_page

from .services import AgentDashboardService, AgentSalesService, get_agent_for_user

AGENTS_ONLY = 'Only agents can access this resource.'


@login_required
@role_required(is_agent, AGENTS_ONLY)
@require_GET
@json_errors
def dashboard(request):
    agent = get_agent_for_user(request.user)
    return JsonResponse(AgentDashboardService.build(agent))


@login_required
@role_required(is_agent, AGENTS_ONLY)
@require_GET
@json_errors
def sales_list(request):
    agent = get_agent_for_user(request.user)
    filters = {
        'status': request.GET.get('status', ''),
        'search': request.GET.get('search', ''),
    }
    per_page = parse_per_page(request.GET.get('per_page'), settings.AGENT_APPLICATIONS_PER_PAGE)
    data = AgentSalesService.list_sales(agent, filters, request.GET.get('page', 1), per_page)
    return JsonResponse(data)


@login_required
@role_required(is_agent, AGENTS_ONLY)
@require_GET
@json_errors
def sales_detail(request, order_id):
    agent = get_agent_for_user(request.user)
    return JsonResponse({'order': AgentSalesService.order_detail(agent, order_id)})
