from datetime import date
from io import BytesIO
import shutil
import tempfile

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import override_settings
from PIL import Image

from agent_applications.models import AgentApplication


def png_bytes(size=(8, 8)):
    buffer = BytesIO()
    Image.new('RGB', size, color=(200, 30, 30)).save(buffer, 'PNG')
    return buffer.getvalue()


def png_upload(name='id.png'):
    return SimpleUploadedFile(name, png_bytes(), content_type='image/png')


def pdf_upload(name='student-id.pdf'):
    return SimpleUploadedFile(name, b'%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n', content_type='application/pdf')


def application_data(**overrides):
    data = {
        'full_name': 'Wanjiru Kamau',
        'date_of_birth': '2001-04-12',
        'phone_number': '+254712345678',
        'physical_address': 'Hall 6, Ngong Road, Nairobi',
        'id_type': 'National ID',
        'id_number': '12345678',
        'university_name': 'University of Nairobi',
        'campus': 'Main Campus',
        'student_id': 'C01/1234/2021',
        'course': 'BSc Computer Science',
        'year_of_study': 'Year 3',
        'university_email': 'wanjiru@students.uonbi.ac.ke',
        'terms_accepted': 'true',
    }
    data.update(overrides)
    return data


def application_files():
    return {
        'id_document': png_upload(),
        'student_id_document': pdf_upload(),
    }


def create_application(user, **overrides):
    """Insert an application row directly, without going through submission."""
    fields = {
        'user': user,
        'full_name': 'Otieno Odhiambo',
        'date_of_birth': date(2000, 9, 1),
        'phone_number': '0712345678',
        'physical_address': 'Box 30197, Nairobi',
        'id_type': 'National ID',
        'id_number': '87654321',
        'id_document_path': 'agent-applications/id-documents/missing.png',
        'university_name': 'Kenyatta University',
        'campus': 'Main Campus',
        'student_id': 'KU/2021/0001',
        'course': 'BCom',
        'year_of_study': 'Year 2',
        'university_email': 'otieno@students.ku.ac.ke',
        'student_id_document_path': 'agent-applications/student-ids/missing.pdf',
        'terms_accepted': True,
    }
    fields.update(overrides)
    return AgentApplication.objects.create(**fields)


class MediaRootMixin:
    def use_temporary_media_root(self):
        media_root = tempfile.mkdtemp()
        override = override_settings(MEDIA_ROOT=media_root)
        override.enable()
        self.addCleanup(override.disable)
        self.addCleanup(shutil.rmtree, media_root, ignore_errors=True)
        return media_root
