from django import forms
from django.core.validators import RegexValidator
from django.utils import timezone

from .documents import ID_DOCUMENT, STUDENT_ID_DOCUMENT, validate_document
from .models import AgentApplication

# Safaricom/Airtel style numbers: +2547XXXXXXXX, +2541XXXXXXXX, 07XXXXXXXX, 01XXXXXXXX
PHONE_NUMBER_PATTERN = r'^(\+254|0)[17]\d{8}$'

phone_number_validator = RegexValidator(
    regex=PHONE_NUMBER_PATTERN,
    message='The phone number format is invalid.',
)


def form_errors(form):
    """Flatten a bound form's errors into {field: [messages]}."""
    return {field: [str(message) for message in messages] for field, messages in form.errors.items()}


class AgentApplicationForm(forms.ModelForm):
    id_document = forms.FileField()
    student_id_document = forms.FileField()
    terms_accepted = forms.BooleanField(
        required=True,
        error_messages={'required': 'The terms must be accepted.'},
    )

    class Meta:
        model = AgentApplication
        fields = [
            'full_name', 'date_of_birth', 'phone_number', 'physical_address',
            'id_type', 'id_number',
            'university_name', 'campus', 'student_id', 'course', 'year_of_study',
            'university_email',
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['phone_number'].validators.append(phone_number_validator)
        # Detected extension per document, filled in during cleaning
        self.document_types = {}

    def clean_date_of_birth(self):
        date_of_birth = self.cleaned_data.get('date_of_birth')
        if date_of_birth and date_of_birth >= timezone.localdate():
            raise forms.ValidationError('The date of birth must be a date before today.')
        return date_of_birth

    def clean_id_document(self):
        upload = self.cleaned_data.get('id_document')
        if upload:
            self.document_types[ID_DOCUMENT] = validate_document(upload)
        return upload

    def clean_student_id_document(self):
        upload = self.cleaned_data.get('student_id_document')
        if upload:
            self.document_types[STUDENT_ID_DOCUMENT] = validate_document(upload)
        return upload


class ApproveApplicationForm(forms.Form):
    commission_rate = forms.DecimalField(
        required=False, min_value=0, max_value=100, max_digits=5, decimal_places=2,
    )


class RejectApplicationForm(forms.Form):
    rejection_reason = forms.CharField(
        min_length=10, max_length=1000,
        widget=forms.Textarea(attrs={'class': 'vLargeTextField', 'rows': 4}),
    )
