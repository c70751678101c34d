from decimal import Decimal

from django.db import migrations

BASE_TIERS = [
    ('bronze', Decimal('0.00'), Decimal('25000.00'), Decimal('10.00')),
    ('silver', Decimal('25000.00'), Decimal('50000.00'), Decimal('20.00')),
    ('gold', Decimal('50000.00'), None, Decimal('30.00')),
]


def seed_tiers(apps, schema_editor):
    AgentTier = apps.get_model('commission', 'AgentTier')
    for name, min_sales, max_sales, rate in BASE_TIERS:
        AgentTier.objects.update_or_create(
            name=name,
            defaults={'min_sales': min_sales, 'max_sales': max_sales, 'commission_rate': rate},
        )


def remove_tiers(apps, schema_editor):
    AgentTier = apps.get_model('commission', 'AgentTier')
    AgentTier.objects.filter(name__in=[tier[0] for tier in BASE_TIERS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('commission', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_tiers, remove_tiers),
    ]
