from django.contrib import admin
from django.utils import timezone
from .models import AgentTier, Agent, Commission
from .services import CommissionSnapshotService


class AgentTierAdmin(admin.ModelAdmin):
    list_display = ('name', 'min_sales', 'max_sales', 'commission_rate')
    list_editable = ('commission_rate',)
    ordering = ('min_sales',)


class CommissionInline(admin.TabularInline):
    model = Commission
    extra = 0
    fields = ('period_start', 'period_end', 'tier', 'total_sales', 'total_commission')
    readonly_fields = fields
    can_delete = False


class AgentAdmin(admin.ModelAdmin):
    list_display = ('agent_code', 'user', 'commission_rate', 'total_sales', 'total_commission', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('agent_code', 'user__email', 'user__first_name', 'user__last_name')
    raw_id_fields = ('user', 'application')
    readonly_fields = ('agent_code', 'total_sales', 'total_commission', 'created_at', 'updated_at')
    inlines = [CommissionInline]
    actions = ['snapshot_current_year']

    def snapshot_current_year(self, request, queryset):
        year = timezone.localdate().year
        count = 0
        for agent in queryset.filter(is_active=True):
            CommissionSnapshotService.snapshot_agent(agent, year)
            count += 1
        self.message_user(request, f"{count} agents snapshotted for {year}.")
    snapshot_current_year.short_description = "Snapshot this year's commission for selected agents"


class CommissionAdmin(admin.ModelAdmin):
    list_display = ('agent', 'period_start', 'period_end', 'tier', 'total_sales', 'total_commission', 'updated_at')
    list_filter = ('tier', 'period_start')
    search_fields = ('agent__agent_code', 'agent__user__email')
    raw_id_fields = ('agent',)


admin.site.register(AgentTier, AgentTierAdmin)
admin.site.register(Agent, AgentAdmin)
admin.site.register(Commission, CommissionAdmin)
