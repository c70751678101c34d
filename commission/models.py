import secrets
import string
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

User = settings.AUTH_USER_MODEL

AGENT_CODE_ALPHABET = string.ascii_uppercase + string.digits


def validate_tier_bands(bands):
    """
    Check that (min_sales, max_sales) bands, sorted by min_sales, partition
    the non-negative sales axis: the first starts at 0, each band ends where
    the next begins and only the last one is open-ended.
    """
    if not bands:
        raise ValidationError("At least one tier is required.")

    ordered = sorted(bands, key=lambda band: band[0])
    if Decimal(ordered[0][0]) != 0:
        raise ValidationError("The lowest tier must start at 0.")

    for current, following in zip(ordered, ordered[1:]):
        if current[1] is None:
            raise ValidationError("Only the highest tier may be unbounded.")
        if Decimal(current[1]) != Decimal(following[0]):
            raise ValidationError(
                f"Tier bands must be contiguous: {current[1]} does not meet {following[0]}."
            )

    last_min, last_max = ordered[-1]
    if last_max is not None and Decimal(last_max) <= Decimal(last_min):
        raise ValidationError("A tier's upper bound must be greater than its lower bound.")


class AgentTier(models.Model):
    name = models.CharField(max_length=50, unique=True)
    min_sales = models.DecimalField(
        max_digits=12, decimal_places=2, default=0,
        help_text="Inclusive lower bound of lifetime sales for this tier."
    )
    max_sales = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True,
        help_text="Exclusive upper bound. Leave blank for 'and above'."
    )
    commission_rate = models.DecimalField(
        max_digits=5, decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'agent_tiers'
        ordering = ['min_sales']

    def __str__(self):
        range_str = f"{self.min_sales}"
        if self.max_sales is not None:
            range_str += f"-{self.max_sales}"
        else:
            range_str += "+"
        return f"{self.name.title()}: {range_str} -> {self.commission_rate}%"

    def clean(self):
        if self.max_sales is not None and self.min_sales is not None and self.max_sales <= self.min_sales:
            raise ValidationError({'max_sales': "Upper bound must be greater than the lower bound."})

        others = AgentTier.objects.exclude(pk=self.pk).values_list('min_sales', 'max_sales')
        validate_tier_bands(list(others) + [(self.min_sales, self.max_sales)])


def generate_agent_code():
    return 'AGT-' + ''.join(secrets.choice(AGENT_CODE_ALPHABET) for _ in range(8))


class Agent(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='agent_profile')
    application = models.OneToOneField(
        'agent_applications.AgentApplication', on_delete=models.CASCADE, related_name='agent'
    )
    agent_code = models.CharField(max_length=20, unique=True, blank=True)
    commission_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('10.00'),
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    # Cached by the snapshot job; live figures are always recomputed from orders
    total_sales = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_commission = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    is_active = models.BooleanField(default=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'agents'

    def __str__(self):
        return f"{self.agent_code} ({self.user})"

    def save(self, *args, **kwargs):
        if not self.agent_code:
            code = generate_agent_code()
            while Agent.objects.filter(agent_code=code).exists():
                code = generate_agent_code()
            self.agent_code = code
        super().save(*args, **kwargs)


class Commission(models.Model):
    agent = models.ForeignKey(Agent, on_delete=models.CASCADE, related_name='commissions')
    tier = models.ForeignKey(AgentTier, on_delete=models.SET_NULL, null=True, blank=True, related_name='commissions')
    total_sales = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_commission = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    period_start = models.DateField(null=True, blank=True)
    period_end = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'commissions'
        ordering = ['-period_start', '-created_at']
        unique_together = ('agent', 'period_start', 'period_end')

    def __str__(self):
        return f"{self.agent.agent_code} {self.period_start} - {self.period_end}: {self.total_commission}"
