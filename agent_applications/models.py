from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class AgentApplication(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    )
    # An applicant may hold at most one application in these states.
    ACTIVE_STATUSES = (STATUS_PENDING, STATUS_APPROVED)

    ID_TYPE_CHOICES = (
        ('National ID', 'National ID'),
        ('Passport', 'Passport'),
    )
    YEAR_OF_STUDY_CHOICES = tuple((f'Year {n}', f'Year {n}') for n in range(1, 7))

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='agent_applications')

    # Personal details
    full_name = models.CharField(max_length=255)
    date_of_birth = models.DateField()
    phone_number = models.CharField(max_length=20)
    physical_address = models.TextField(max_length=500)
    id_type = models.CharField(max_length=20, choices=ID_TYPE_CHOICES)
    id_number = models.CharField(max_length=50)
    id_document_path = models.CharField(max_length=255)

    # University details
    university_name = models.CharField(max_length=255)
    campus = models.CharField(max_length=255)
    student_id = models.CharField(max_length=100)
    course = models.CharField(max_length=255)
    year_of_study = models.CharField(max_length=10, choices=YEAR_OF_STUDY_CHOICES)
    university_email = models.EmailField()
    student_id_document_path = models.CharField(max_length=255)

    # Review
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    rejection_reason = models.TextField(blank=True, null=True)
    reviewed_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name='reviewed_agent_applications'
    )
    terms_accepted = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'agent_applications'
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['user'],
                condition=models.Q(status__in=['pending', 'approved']),
                name='one_active_agent_application',
            ),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.university_name}) - {self.status}"

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING

    @property
    def is_approved(self):
        return self.status == self.STATUS_APPROVED

    @property
    def is_rejected(self):
        return self.status == self.STATUS_REJECTED

    def document_paths(self):
        return [p for p in (self.id_document_path, self.student_id_document_path) if p]
