from django.conf import settings
from django.contrib import admin, messages
from django.core.exceptions import PermissionDenied
from django.shortcuts import get_object_or_404, redirect, render
from django.urls import path, reverse
from django.utils.html import format_html

from . import services
from .exceptions import ApplicationError, ValidationError
from .forms import ApproveApplicationForm, RejectApplicationForm
from .models import AgentApplication

CHANGELIST = 'admin:agent_applications_agentapplication_changelist'


@admin.register(AgentApplication)
class AgentApplicationAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'user', 'university_name', 'campus', 'status', 'created_at', 'actions_buttons')
    list_filter = ('status', 'university_name', 'year_of_study', 'created_at')
    search_fields = ('full_name', 'student_id', 'university_email', 'user__email')
    raw_id_fields = ('user', 'reviewed_by')
    readonly_fields = (
        'status', 'reviewed_at', 'reviewed_by', 'rejection_reason', 'documents',
        'created_at', 'updated_at',
    )
    fieldsets = (
        ('Applicant', {'fields': ('user', 'full_name', 'date_of_birth', 'phone_number', 'physical_address')}),
        ('Identification', {'fields': ('id_type', 'id_number', 'documents')}),
        ('University', {
            'fields': ('university_name', 'campus', 'student_id', 'course', 'year_of_study', 'university_email')
        }),
        ('Review', {'fields': ('status', 'reviewed_at', 'reviewed_by', 'rejection_reason', 'terms_accepted')}),
        ('Timestamps', {'fields': ('created_at', 'updated_at')}),
    )

    def has_delete_permission(self, request, obj=None):
        return False

    def has_review_permission(self, request):
        return request.user.is_active and request.user.is_admin

    def actions_buttons(self, obj):
        if obj.is_pending:
            return format_html(
                '<a class="button" href="{}">Approve</a>&nbsp;'
                '<a class="button" href="{}" style="background-color:red;">Reject</a>',
                reverse('admin:agent_application_approve', args=[obj.pk]),
                reverse('admin:agent_application_reject', args=[obj.pk]),
            )
        return obj.get_status_display()
    actions_buttons.short_description = 'Actions'

    def documents(self, obj):
        return format_html(
            '<a href="{}">ID document</a> &middot; <a href="{}">Student ID</a>',
            reverse('agent_applications_review:document', args=[obj.pk, 'id_document']),
            reverse('agent_applications_review:document', args=[obj.pk, 'student_id_document']),
        )
    documents.short_description = 'Documents'

    def get_urls(self):
        urls = super().get_urls()
        custom_urls = [
            path('approve/<int:pk>/', self.admin_site.admin_view(self.approve_application),
                 name='agent_application_approve'),
            path('reject/<int:pk>/', self.admin_site.admin_view(self.reject_application),
                 name='agent_application_reject'),
        ]
        return custom_urls + urls

    def _review_context(self, request, application, form, **extra):
        return dict(
            self.admin_site.each_context(request),
            opts=self.model._meta,
            application=application,
            form=form,
            **extra
        )

    def approve_application(self, request, pk):
        if not self.has_review_permission(request):
            raise PermissionDenied
        application = get_object_or_404(AgentApplication, pk=pk)
        if not application.is_pending:
            messages.warning(request, "This application is not pending.")
            return redirect(CHANGELIST)

        form = ApproveApplicationForm(request.POST or None)
        if request.method == 'POST' and form.is_valid():
            try:
                services.approve(application, request.user, form.cleaned_data['commission_rate'])
            except ValidationError as e:
                for field, errors in e.errors.items():
                    for error in errors:
                        form.add_error(field if field in form.fields else None, error)
            except ApplicationError as e:
                messages.error(request, f"Error approving application: {e.message}")
                return redirect(CHANGELIST)
            else:
                messages.success(request, f"{application.full_name} approved and agent account created.")
                return redirect(CHANGELIST)

        return render(request, 'agent_applications/admin/approve_confirm.html', self._review_context(
            request, application, form, default_rate=settings.AGENT_DEFAULT_COMMISSION_RATE,
        ))

    def reject_application(self, request, pk):
        if not self.has_review_permission(request):
            raise PermissionDenied
        application = get_object_or_404(AgentApplication, pk=pk)
        if not application.is_pending:
            messages.warning(request, "This application is not pending.")
            return redirect(CHANGELIST)

        form = RejectApplicationForm(request.POST or None)
        if request.method == 'POST' and form.is_valid():
            try:
                services.reject(application, request.user, form.cleaned_data['rejection_reason'])
            except ApplicationError as e:
                messages.error(request, f"Error rejecting application: {e.message}")
            else:
                messages.info(request, "Agent application rejected.")
            return redirect(CHANGELIST)

        return render(request, 'agent_applications/admin/reject_reason.html',
                      self._review_context(request, application, form))
