from collections import namedtuple
from datetime import date, datetime
from decimal import Decimal
import logging

from django.db import DatabaseError, transaction
from django.db.models import Q, Sum
from django.utils import timezone

from agent_applications.exceptions import NotFoundError
from orders.models import Order
from unimarket.pagination import paginate

from .models import Agent, AgentTier, Commission

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')

TierBand = namedtuple('TierBand', ['name', 'min_sales', 'max_sales', 'commission_rate'])

# Stands in for any tier row missing from agent_tiers. Same values as the seed migration.
DEFAULT_TIER_BANDS = (
    TierBand('bronze', Decimal('0'), Decimal('25000'), Decimal('10')),
    TierBand('silver', Decimal('25000'), Decimal('50000'), Decimal('20')),
    TierBand('gold', Decimal('50000'), None, Decimal('30')),
)

TIER_COLORS = {
    'bronze': 'bronze',
    'silver': 'silver',
    'gold': 'gold',
}


def get_tier_bands():
    """
    Tier bands ordered by min_sales. Rows in agent_tiers take precedence by
    name; a default tier with no row keeps its hardcoded band and rate.
    """
    bands = {band.name: band for band in DEFAULT_TIER_BANDS}
    for tier in AgentTier.objects.all():
        bands[tier.name] = TierBand(tier.name, tier.min_sales, tier.max_sales, tier.commission_rate)
    return tuple(sorted(bands.values(), key=lambda band: band.min_sales))


def select_band(total_sales, bands):
    """Return (index, band) of the band holding total_sales, min inclusive and max exclusive."""
    for index, band in enumerate(bands):
        if total_sales >= band.min_sales and (band.max_sales is None or total_sales < band.max_sales):
            return index, band
    # Negative totals (refunds entered as negative orders) land in the lowest band
    return 0, bands[0]


def tier_for_sales(total_sales, bands=None):
    bands = bands or get_tier_bands()
    total_sales = Decimal(total_sales or 0)
    index, band = select_band(total_sales, bands)

    sales_to_next_tier = Decimal('0')
    if index + 1 < len(bands):
        sales_to_next_tier = max(Decimal('0'), bands[index + 1].min_sales - total_sales)

    return {
        'name': band.name,
        'min_sales': band.min_sales,
        'max_sales': band.max_sales,
        'commission_rate': band.commission_rate,
        'current_sales': total_sales,
        'sales_to_next_tier': sales_to_next_tier,
    }


def sales_queryset(agent):
    return Order.objects.filter(agent=agent).exclude(status__in=Order.EXCLUDED_FROM_SALES)


def sum_sales(queryset):
    return (queryset.aggregate(total=Sum('total_amount'))['total'] or Decimal(0)).quantize(CENTS)


def lifetime_sales(agent):
    return sum_sales(sales_queryset(agent))


def current_tier(agent):
    return tier_for_sales(lifetime_sales(agent))


def tier_info_payload(tier):
    return {
        'name': tier['name'],
        'min_sales': float(tier['min_sales']),
        'max_sales': float(tier['max_sales']) if tier['max_sales'] is not None else None,
        'commission_rate': float(tier['commission_rate']),
        'current_sales': float(tier['current_sales']),
        'sales_to_next_tier': float(tier['sales_to_next_tier']),
    }


def get_agent_for_user(user):
    try:
        return Agent.objects.select_related('user').get(user=user)
    except Agent.DoesNotExist:
        raise NotFoundError('Agent profile not found.')


def year_bounds(year):
    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime(year, 1, 1), tz)
    end = timezone.make_aware(datetime(year + 1, 1, 1), tz)
    return start, end


def month_start(now):
    local = timezone.localtime(now)
    return local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def next_month_start(start):
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


class AgentDashboardService:
    @staticmethod
    def quarterly_data(agent, year):
        tz = timezone.get_current_timezone()
        quarters = []
        for quarter in range(1, 5):
            start = timezone.make_aware(datetime(year, (quarter - 1) * 3 + 1, 1), tz)
            if quarter == 4:
                end = timezone.make_aware(datetime(year + 1, 1, 1), tz)
            else:
                end = timezone.make_aware(datetime(year, quarter * 3 + 1, 1), tz)

            orders = sales_queryset(agent).filter(created_at__gte=start, created_at__lt=end)
            quarters.append({
                'quarter': f'Q{quarter}',
                'sales': float(sum_sales(orders)),
                'orders': orders.count(),
            })
        return quarters

    @staticmethod
    def recent_sales(agent, now):
        orders = Order.objects.filter(agent=agent, created_at__gte=month_start(now)).order_by('-created_at')[:10]
        return [
            {
                'id': order.id,
                'order_reference': order.order_reference,
                'full_name': order.full_name,
                'total_amount': float(order.total_amount),
                'status': order.status,
                'created_at': timezone.localtime(order.created_at).date().isoformat(),
            }
            for order in orders
        ]

    @staticmethod
    def current_year_commission(agent, year):
        return (
            Commission.objects
            .filter(agent=agent, period_start__gte=date(year, 1, 1), period_start__lte=date(year, 12, 31))
            .order_by('-created_at')
            .first()
        )

    @classmethod
    def build(cls, agent, now=None):
        now = now or timezone.now()
        year = timezone.localtime(now).year

        tier = current_tier(agent)
        commission = cls.current_year_commission(agent, year)
        customers_count = sales_queryset(agent).order_by().values('email').distinct().count()

        user = agent.user
        return {
            'stats': {
                'total_sales': float(tier['current_sales']),
                'total_earnings': float(commission.total_commission) if commission else 0.0,
                'customers_count': customers_count,
                'current_tier': tier['name'],
                'current_tier_color': TIER_COLORS.get(tier['name'], 'bronze'),
            },
            'tier_info': tier_info_payload(tier),
            'quarterly_data': cls.quarterly_data(agent, year),
            'recent_sales': cls.recent_sales(agent, now),
            'agent_name': user.name,
        }


def serialize_order(order):
    return {
        'id': order.id,
        'order_reference': order.order_reference,
        'full_name': order.full_name,
        'email': order.email,
        'phone': order.phone,
        'company': order.company,
        'total_amount': float(order.total_amount),
        'currency': order.currency,
        'status': order.status,
        'created_at': order.created_at.isoformat(),
    }


def serialize_order_detail(order):
    data = serialize_order(order)
    data.update({
        'notes': order.notes,
        'payment_reference': order.payment_reference,
        'paid_at': order.paid_at.isoformat() if order.paid_at else None,
        'updated_at': order.updated_at.isoformat(),
        'items': [
            {
                'id': item.id,
                'product_name': item.product_name,
                'quantity': item.quantity,
                'unit_price': float(item.unit_price),
                'total_price': float(item.total_price),
            }
            for item in order.items.all()
        ],
    })
    return data


class AgentSalesService:
    @staticmethod
    def stats(agent, now=None):
        now = now or timezone.now()
        orders = sales_queryset(agent)
        total_sales = sum_sales(orders)
        total_orders = orders.count()
        average = (total_sales / total_orders).quantize(CENTS) if total_orders else Decimal(0)

        start = month_start(now)
        this_month = sum_sales(orders.filter(created_at__gte=start, created_at__lt=next_month_start(start)))
        return {
            'total_sales': float(total_sales),
            'total_orders': total_orders,
            'average_order_value': float(average),
            'this_month_sales': float(this_month),
        }

    @classmethod
    def list_sales(cls, agent, filters, page, per_page):
        queryset = Order.objects.filter(agent=agent)

        status = filters.get('status')
        if status and status != 'all':
            queryset = queryset.filter(status=status)

        search = (filters.get('search') or '').strip()
        if search:
            queryset = queryset.filter(
                Q(order_reference__icontains=search)
                | Q(full_name__icontains=search)
                | Q(email__icontains=search)
                | Q(company__icontains=search)
            )

        queryset = queryset.order_by('-created_at', '-id')
        return {
            'orders': paginate(queryset, page, per_page, serialize_order),
            'stats': cls.stats(agent),
        }

    @staticmethod
    def order_detail(agent, order_id):
        try:
            order = Order.objects.prefetch_related('items').get(pk=order_id, agent=agent)
        except Order.DoesNotExist:
            raise NotFoundError('Order not found.')
        return serialize_order_detail(order)


class CommissionSnapshotService:
    """
    Materializes yearly Commission rows and refreshes the cached totals on
    Agent. Dashboard and tier reads never use these cached values.
    """

    @staticmethod
    def snapshot_agent(agent, year, bands=None):
        start, end = year_bounds(year)
        year_sales = sum_sales(sales_queryset(agent).filter(created_at__gte=start, created_at__lt=end))
        tier = tier_for_sales(year_sales, bands)
        commission_amount = (year_sales * tier['commission_rate'] / 100).quantize(CENTS)

        with transaction.atomic():
            snapshot, created = Commission.objects.update_or_create(
                agent=agent,
                period_start=date(year, 1, 1),
                period_end=date(year, 12, 31),
                defaults={
                    'tier': AgentTier.objects.filter(name=tier['name']).first(),
                    'total_sales': year_sales,
                    'total_commission': commission_amount,
                }
            )

            agent.total_sales = lifetime_sales(agent)
            agent.total_commission = (
                agent.commissions.aggregate(total=Sum('total_commission'))['total'] or Decimal(0)
            ).quantize(CENTS)
            agent.save(update_fields=['total_sales', 'total_commission', 'updated_at'])

        return snapshot

    @classmethod
    def snapshot_year(cls, year=None):
        year = year or timezone.localdate().year
        bands = get_tier_bands()
        processed = 0
        failed = 0

        for agent in Agent.objects.filter(is_active=True).select_related('user'):
            try:
                cls.snapshot_agent(agent, year, bands)
                processed += 1
            except DatabaseError:
                failed += 1
                logger.exception("Commission snapshot failed for agent %s (%s)", agent.agent_code, year)

        logger.info("Commission snapshot for %s: %s agents processed, %s failed", year, processed, failed)
        return {'year': year, 'processed': processed, 'failed': failed}
