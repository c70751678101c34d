from io import BytesIO
from unittest import mock

from django.core.exceptions import ValidationError
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings
from PIL import Image

from agent_applications import documents
from agent_applications.exceptions import NotFoundError

from .helpers import MediaRootMixin, pdf_upload, png_bytes, png_upload


class DocumentValidationTests(SimpleTestCase):
    def test_detects_allowed_types(self):
        self.assertEqual(documents.validate_document(png_upload()), 'png')
        self.assertEqual(documents.validate_document(pdf_upload()), 'pdf')

    def test_jpeg_extension_is_accepted(self):
        buffer = BytesIO()
        Image.new('RGB', (8, 8)).save(buffer, 'JPEG')
        upload = SimpleUploadedFile('scan.JPEG', buffer.getvalue(), content_type='image/jpeg')
        self.assertEqual(documents.validate_document(upload), 'jpg')

    def test_rejects_disguised_content(self):
        upload = SimpleUploadedFile('id.png', b'#!/bin/sh\necho hello\n', content_type='image/png')
        with self.assertRaises(ValidationError) as ctx:
            documents.validate_document(upload)
        self.assertEqual(ctx.exception.code, 'invalid_content')

    def test_rejects_content_that_does_not_match_extension(self):
        for name, content in (('id.pdf', png_bytes()), ('id.jpg', png_bytes()), ('id.png', pdf_upload().read())):
            with self.subTest(name=name):
                with self.assertRaises(ValidationError) as ctx:
                    documents.validate_document(SimpleUploadedFile(name, content))
                self.assertEqual(ctx.exception.code, 'type_mismatch')

    def test_rejects_images_over_the_pixel_limit(self):
        # 8x8 = 64 pixels: over twice a limit of 16 raises, over a limit of 40 only warns
        for limit in (16, 40):
            with self.subTest(limit=limit), mock.patch.object(Image, 'MAX_IMAGE_PIXELS', limit):
                with self.assertRaises(ValidationError) as ctx:
                    documents.validate_document(png_upload())
                self.assertEqual(ctx.exception.code, 'invalid_content')

    def test_rejects_unknown_extension(self):
        upload = SimpleUploadedFile('id.webp', png_bytes(), content_type='image/webp')
        with self.assertRaises(ValidationError) as ctx:
            documents.validate_document(upload)
        self.assertEqual(ctx.exception.code, 'invalid_extension')

    @override_settings(AGENT_DOCUMENT_MAX_SIZE=10)
    def test_rejects_oversized_file(self):
        with self.assertRaises(ValidationError) as ctx:
            documents.validate_document(pdf_upload())
        self.assertEqual(ctx.exception.code, 'max_size')

    def test_resolve_kind_aliases(self):
        self.assertEqual(documents.resolve_kind('id'), documents.ID_DOCUMENT)
        self.assertEqual(documents.resolve_kind('student_id'), documents.STUDENT_ID_DOCUMENT)
        self.assertEqual(documents.resolve_kind('student_id_document'), documents.STUDENT_ID_DOCUMENT)
        with self.assertRaises(NotFoundError):
            documents.resolve_kind('selfie')


class DocumentStorageTests(MediaRootMixin, SimpleTestCase):
    def setUp(self):
        self.use_temporary_media_root()

    def test_store_uses_kind_directory_and_random_name(self):
        first = documents.store_document(png_upload(), documents.ID_DOCUMENT, 'png')
        second = documents.store_document(png_upload(), documents.ID_DOCUMENT, 'png')

        self.assertNotEqual(first, second)
        for path in (first, second):
            self.assertRegex(path, r'^agent-applications/id-documents/[0-9a-f]{32}\.png$')
            self.assertTrue(default_storage.exists(path))

        student = documents.store_document(pdf_upload(), documents.STUDENT_ID_DOCUMENT)
        self.assertRegex(student, r'^agent-applications/student-ids/[0-9a-f]{32}\.pdf$')

    def test_delete_is_idempotent(self):
        path = documents.store_document(pdf_upload(), documents.STUDENT_ID_DOCUMENT, 'pdf')

        self.assertTrue(documents.delete_document(path))
        self.assertFalse(default_storage.exists(path))
        self.assertFalse(documents.delete_document(path))
        self.assertFalse(documents.delete_document(''))
        self.assertFalse(documents.delete_document(None))

    def test_open_document(self):
        path = documents.store_document(pdf_upload(), documents.STUDENT_ID_DOCUMENT, 'pdf')

        with documents.open_document(path) as handle:
            self.assertTrue(handle.read().startswith(b'%PDF'))

        documents.delete_document(path)
        with self.assertRaises(NotFoundError):
            documents.open_document(path)
