from django.test import TestCase

from accounts.models import Role, User


class UserManagerTests(TestCase):
    def test_create_user(self):
        user = User.objects.create_user(email='Student@Example.COM', password='password123')

        self.assertEqual(user.email, 'Student@example.com')
        self.assertTrue(user.check_password('password123'))
        self.assertEqual(user.role, Role.USER)
        self.assertFalse(user.is_staff)
        self.assertFalse(user.is_admin)
        self.assertFalse(user.is_agent)

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='password123')

    def test_create_superuser_is_admin(self):
        admin = User.objects.create_superuser(email='admin@test.com', password='password123')

        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_superuser)
        self.assertEqual(admin.role, Role.ADMIN)
        self.assertTrue(admin.is_admin)

    def test_admin_role_without_superuser(self):
        reviewer = User.objects.create_user(email='reviewer@test.com', role=Role.ADMIN)
        self.assertTrue(reviewer.is_admin)


class UserTests(TestCase):
    def test_name_prefers_display_name(self):
        user = User(email='jane@test.com', first_name='Jane', last_name='Wairimu')
        self.assertEqual(user.name, 'Jane Wairimu')

        user.display_name = 'JW'
        self.assertEqual(user.name, 'JW')

    def test_name_falls_back_to_email(self):
        self.assertEqual(User(email='anon@test.com').name, 'anon@test.com')

    def test_promote_to_agent(self):
        user = User.objects.create_user(email='student@test.com', password='password123')
        user.promote_to_agent()

        user.refresh_from_db()
        self.assertEqual(user.role, Role.AGENT)
        self.assertTrue(user.is_agent)
