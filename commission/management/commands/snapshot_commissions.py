from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from commission.services import CommissionSnapshotService


class Command(BaseCommand):
    help = 'Write the yearly commission snapshot for every active agent'

    def add_arguments(self, parser):
        parser.add_argument(
            '--year',
            type=int,
            help='Calendar year to snapshot (defaults to the current year)',
        )

    def handle(self, *args, **options):
        year = options.get('year') or timezone.localdate().year
        if year < 2000:
            raise CommandError(f"Invalid year: {year}")

        self.stdout.write(f"Snapshotting commissions for {year}...")
        result = CommissionSnapshotService.snapshot_year(year)

        self.stdout.write(f"Processed {result['processed']} agents.")
        if result['failed']:
            self.stdout.write(self.style.WARNING(f"{result['failed']} agents failed, see the log for details."))
        self.stdout.write(self.style.SUCCESS("Commission snapshot completed."))
