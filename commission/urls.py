from django.urls import path
from . import views

app_name = 'commission'

urlpatterns = [
    path('dashboard-ui', views.dashboard, name='agent_dashboard'),
    path('sales', views.sales_list, name='agent_sales'),
    path('sales/<int:order_id>', views.sales_detail, name='agent_sale_detail'),
]
