from django.urls import path
from . import views

# Mounted at /api/agent-application/
applicant_urlpatterns = [
    path('status', views.application_status, name='status'),
    path('submit', views.submit_application, name='submit'),
]

# Mounted at /api/admin/agent-applications/
admin_api_urlpatterns = [
    path('list', views.application_list, name='list'),
    path('<int:application_id>', views.application_detail, name='detail'),
]

# Mounted at /admin/agent-applications/, ahead of the Django admin site
review_urlpatterns = [
    path('<int:application_id>/approve', views.approve_application, name='approve'),
    path('<int:application_id>/reject', views.reject_application, name='reject'),
    path('<int:application_id>/documents/<str:kind>', views.download_document, name='document'),
]
