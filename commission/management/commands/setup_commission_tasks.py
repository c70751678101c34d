from django.conf import settings
from django.core.management.base import BaseCommand
from django_celery_beat.models import PeriodicTask, CrontabSchedule
import json


class Command(BaseCommand):
    help = 'Setup Celery Beat periodic tasks for commission snapshots'

    def handle(self, *args, **kwargs):
        self.stdout.write("Configuring Periodic Tasks...")

        # 1. Daily snapshot of the running year (12:30 AM Daily)
        schedule_daily, _ = CrontabSchedule.objects.get_or_create(
            minute='30',
            hour='0',
            day_of_week='*',
            day_of_month='*',
            month_of_year='*',
            timezone=settings.TIME_ZONE
        )

        PeriodicTask.objects.update_or_create(
            name='Daily Commission Snapshot',
            defaults={
                'crontab': schedule_daily,
                'task': 'commission.tasks.snapshot_commissions',
                'args': json.dumps([]),
                'enabled': True
            }
        )
        self.stdout.write(self.style.SUCCESS('Confirmed task: Daily Commission Snapshot'))

        # 2. Closing snapshot of the previous year (Jan 1st, 2:00 AM)
        schedule_yearly, _ = CrontabSchedule.objects.get_or_create(
            minute='0',
            hour='2',
            day_of_week='*',
            day_of_month='1',
            month_of_year='1',
            timezone=settings.TIME_ZONE
        )

        PeriodicTask.objects.update_or_create(
            name='Yearly Commission Close',
            defaults={
                'crontab': schedule_yearly,
                'task': 'commission.tasks.close_previous_year',
                'args': json.dumps([]),
                'enabled': True
            }
        )
        self.stdout.write(self.style.SUCCESS('Confirmed task: Yearly Commission Close'))

        self.stdout.write(self.style.SUCCESS('All periodic tasks configured successfully!'))
