"""
Storage for the identity documents attached to an agent application.

Documents go through Django's default storage under a directory per document
kind, with a random file name so that two uploads never collide.
"""
import logging
import os
import uuid
import warnings

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.files.storage import default_storage
from PIL import Image, UnidentifiedImageError

from .exceptions import NotFoundError

logger = logging.getLogger(__name__)

ID_DOCUMENT = 'id_document'
STUDENT_ID_DOCUMENT = 'student_id_document'

DOCUMENT_DIRECTORIES = {
    ID_DOCUMENT: 'agent-applications/id-documents',
    STUDENT_ID_DOCUMENT: 'agent-applications/student-ids',
}

# Short names accepted by the download endpoint
DOCUMENT_KIND_ALIASES = {
    'id': ID_DOCUMENT,
    'student_id': STUDENT_ID_DOCUMENT,
    'studentId': STUDENT_ID_DOCUMENT,
}

ALLOWED_EXTENSIONS = ('jpg', 'jpeg', 'png', 'pdf')

# Extension -> detected type
EXTENSION_TYPES = {'jpg': 'jpg', 'jpeg': 'jpg', 'png': 'png', 'pdf': 'pdf'}

# Pillow format name -> stored extension
IMAGE_FORMATS = {
    'JPEG': 'jpg',
    'PNG': 'png',
}


def resolve_kind(kind):
    kind = DOCUMENT_KIND_ALIASES.get(kind, kind)
    if kind not in DOCUMENT_DIRECTORIES:
        raise NotFoundError('Unknown document type.')
    return kind


def detect_document_type(upload):
    """
    Sniff the upload's content and return 'pdf', 'jpg' or 'png', or None when
    the content is none of those.
    """
    upload.seek(0)
    head = upload.read(5)
    upload.seek(0)
    if head.startswith(b'%PDF'):
        return 'pdf'

    try:
        with warnings.catch_warnings():
            warnings.simplefilter('error', Image.DecompressionBombWarning)
            with Image.open(upload) as img:
                image_format = img.format
                img.verify()
    except (
        UnidentifiedImageError, Image.DecompressionBombError, Image.DecompressionBombWarning,
        OSError, SyntaxError, ValueError,
    ):
        return None
    finally:
        upload.seek(0)
    return IMAGE_FORMATS.get(image_format)


def validate_document(upload):
    """
    Check size, extension and content of an uploaded document.

    Returns the detected extension; raises django's ValidationError otherwise.
    Nothing is written to storage here.
    """
    max_size = settings.AGENT_DOCUMENT_MAX_SIZE
    if upload.size > max_size:
        raise ValidationError(
            f'The file may not be greater than {max_size // 1024} kilobytes.', code='max_size'
        )

    extension = os.path.splitext(upload.name)[1].lstrip('.').lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            f"The file must be a file of type: {', '.join(ALLOWED_EXTENSIONS)}.", code='invalid_extension'
        )

    detected = detect_document_type(upload)
    if detected is None:
        raise ValidationError(
            f"The file must be a file of type: {', '.join(ALLOWED_EXTENSIONS)}.", code='invalid_content'
        )
    if detected != EXTENSION_TYPES[extension]:
        raise ValidationError(
            f'The file content does not match its .{extension} extension.', code='type_mismatch'
        )
    return detected


def store_document(upload, kind, extension=None):
    """Persist an already validated upload and return its storage path."""
    directory = DOCUMENT_DIRECTORIES[kind]
    extension = extension or detect_document_type(upload) or 'bin'
    path = f'{directory}/{uuid.uuid4().hex}.{extension}'

    upload.seek(0)
    stored_path = default_storage.save(path, upload)
    logger.info("Stored %s document at %s (%s bytes)", kind, stored_path, upload.size)
    return stored_path


def delete_document(path):
    """Remove a stored document. Missing files are ignored."""
    if not path:
        return False
    if not default_storage.exists(path):
        return False
    default_storage.delete(path)
    logger.info("Deleted document %s", path)
    return True


def open_document(path):
    if not path or not default_storage.exists(path):
        raise NotFoundError('Document not found.')
    return default_storage.open(path, 'rb')
