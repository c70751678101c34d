from celery import shared_task
from django.utils import timezone
from commission.services import CommissionSnapshotService
import logging

logger = logging.getLogger(__name__)


@shared_task(name='commission.tasks.snapshot_commissions')
def snapshot_commissions(year=None):
    """
    Write the yearly Commission snapshot for every active agent.
    Scheduled by setup_commission_tasks; defaults to the current year.
    """
    logger.info("Starting commission snapshot task...")
    result = CommissionSnapshotService.snapshot_year(year)
    logger.info("Commission snapshot task completed.")
    return result


@shared_task(name='commission.tasks.close_previous_year')
def close_previous_year():
    """Final snapshot of the year that just ended, run early on January 1st."""
    year = timezone.localdate().year - 1
    logger.info(f"Closing commission year {year}...")
    return CommissionSnapshotService.snapshot_year(year)
