from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from agent_applications import urls as application_urls

urlpatterns = [
    # Review endpoints share the /admin/ prefix with the admin site, so they
    # must be matched first.
    path('admin/agent-applications/', include((application_urls.review_urlpatterns, 'agent_applications_review'))),
    path('admin/', admin.site.urls),

    path('api/agent-application/', include((application_urls.applicant_urlpatterns, 'agent_applications'))),
    path('api/admin/agent-applications/', include((application_urls.admin_api_urlpatterns, 'agent_applications_admin'))),
    path('api/agent/', include('commission.urls')),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
