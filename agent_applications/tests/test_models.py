from django.db import IntegrityError, transaction
from django.test import TestCase

from accounts.models import User
from agent_applications.models import AgentApplication

from .helpers import create_application


class OneActiveApplicationTests(TestCase):
    def setUp(self):
        self.applicant = User.objects.create_user(email='student@test.com', password='password123')

    def test_second_active_application_is_refused(self):
        for first, second in (('pending', 'pending'), ('pending', 'approved'), ('approved', 'pending')):
            with self.subTest(first=first, second=second):
                AgentApplication.objects.filter(user=self.applicant).delete()
                create_application(self.applicant, status=first)
                with self.assertRaises(IntegrityError), transaction.atomic():
                    create_application(self.applicant, status=second)

    def test_rejected_applications_do_not_count(self):
        create_application(self.applicant, status='rejected', rejection_reason='Blurry student ID scan')
        create_application(self.applicant, status='rejected', rejection_reason='Student ID has expired')
        create_application(self.applicant)

        self.assertEqual(AgentApplication.objects.filter(user=self.applicant).count(), 3)

    def test_other_users_are_independent(self):
        other = User.objects.create_user(email='other@test.com', password='password123')
        create_application(self.applicant)
        create_application(other)

        self.assertEqual(AgentApplication.objects.filter(status='pending').count(), 2)
