from django.contrib import admin

from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('order_reference', 'full_name', 'email', 'total_amount', 'currency', 'status', 'agent', 'created_at')
    list_filter = ('status', 'currency', 'created_at')
    search_fields = ('order_reference', 'full_name', 'email', 'company', 'agent__agent_code')
    raw_id_fields = ('user', 'agent')
    inlines = [OrderItemInline]
