from datetime import date, datetime
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone
from django_celery_beat.models import PeriodicTask

from commission.models import Agent, AgentTier, Commission
from commission.services import CommissionSnapshotService, current_tier
from commission.tasks import snapshot_commissions

from .helpers import create_agent, create_order


def in_year(year, month=6):
    return timezone.make_aware(datetime(year, month, 15, 10, 0))


class CommissionSnapshotTests(TestCase):
    def setUp(self):
        self.agent = create_agent()
        self.year = 2025

    def test_snapshot_year(self):
        create_order(self.agent, '20000', created_at=in_year(self.year, 3))
        create_order(self.agent, '15000', created_at=in_year(self.year, 9))
        create_order(self.agent, '7000', created_at=in_year(self.year, 10), status='cancelled')
        create_order(self.agent, '40000', created_at=in_year(self.year - 1))

        result = CommissionSnapshotService.snapshot_year(self.year)

        self.assertEqual(result, {'year': self.year, 'processed': 1, 'failed': 0})
        snapshot = Commission.objects.get(agent=self.agent)
        self.assertEqual(snapshot.period_start, date(self.year, 1, 1))
        self.assertEqual(snapshot.period_end, date(self.year, 12, 31))
        self.assertEqual(snapshot.total_sales, Decimal('35000.00'))
        self.assertEqual(snapshot.tier, AgentTier.objects.get(name='silver'))
        self.assertEqual(snapshot.total_commission, Decimal('7000.00'))

        self.agent.refresh_from_db()
        self.assertEqual(self.agent.total_sales, Decimal('75000.00'))
        self.assertEqual(self.agent.total_commission, Decimal('7000.00'))

    def test_snapshot_is_idempotent(self):
        create_order(self.agent, '1000', created_at=in_year(self.year))
        CommissionSnapshotService.snapshot_year(self.year)
        create_order(self.agent, '500', created_at=in_year(self.year))
        CommissionSnapshotService.snapshot_year(self.year)

        snapshot = Commission.objects.get(agent=self.agent)
        self.assertEqual(snapshot.total_sales, Decimal('1500.00'))
        self.assertEqual(snapshot.total_commission, Decimal('150.00'))

    def test_commission_is_rounded_to_cents(self):
        create_order(self.agent, '333.33', created_at=in_year(self.year))
        CommissionSnapshotService.snapshot_year(self.year)
        self.assertEqual(Commission.objects.get(agent=self.agent).total_commission, Decimal('33.33'))

    def test_inactive_agents_are_skipped(self):
        Agent.objects.filter(pk=self.agent.pk).update(is_active=False)
        result = CommissionSnapshotService.snapshot_year(self.year)
        self.assertEqual(result['processed'], 0)
        self.assertFalse(Commission.objects.exists())

    def test_failure_for_one_agent_does_not_stop_the_run(self):
        other = create_agent(email='other@test.com')
        real_snapshot = CommissionSnapshotService.snapshot_agent

        def flaky(agent, year, bands=None):
            if agent.pk == self.agent.pk:
                raise DatabaseError('deadlock detected')
            return real_snapshot(agent, year, bands)

        with mock.patch.object(CommissionSnapshotService, 'snapshot_agent', side_effect=flaky):
            result = CommissionSnapshotService.snapshot_year(self.year)

        self.assertEqual(result, {'year': self.year, 'processed': 1, 'failed': 1})
        self.assertTrue(Commission.objects.filter(agent=other).exists())

    def test_live_tier_ignores_cached_totals(self):
        Agent.objects.filter(pk=self.agent.pk).update(total_sales=Decimal('99999'))
        self.agent.refresh_from_db()
        self.assertEqual(current_tier(self.agent)['name'], 'bronze')

    def test_task_runs_snapshot(self):
        create_order(self.agent, '1000', created_at=in_year(self.year))
        result = snapshot_commissions(self.year)
        self.assertEqual(result['processed'], 1)


class CommissionCommandTests(TestCase):
    def test_snapshot_command(self):
        agent = create_agent()
        create_order(agent, '26000', created_at=in_year(2024))
        out = StringIO()

        call_command('snapshot_commissions', year=2024, stdout=out)

        self.assertIn('Processed 1 agents.', out.getvalue())
        self.assertEqual(Commission.objects.get(agent=agent).total_commission, Decimal('5200.00'))

    def test_setup_commission_tasks(self):
        out = StringIO()
        call_command('setup_commission_tasks', stdout=out)
        call_command('setup_commission_tasks', stdout=out)

        tasks = PeriodicTask.objects.filter(task__startswith='commission.tasks.')
        self.assertEqual(
            sorted(tasks.values_list('task', flat=True)),
            ['commission.tasks.close_previous_year', 'commission.tasks.snapshot_commissions'],
        )
