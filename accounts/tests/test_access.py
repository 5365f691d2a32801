from django.contrib.auth.models import AnonymousUser
from django.test import TestCase
from django.urls import reverse

from accounts.models import User
from accounts.permissions import ensure_role, has_role, role_of
from core.exceptions import PermissionDenied
from students import services


class RoleTests(TestCase):
    def test_superuser_is_admin(self):
        root = User.objects.create_superuser(username="root", password="pass123", email="")
        self.assertEqual(role_of(root), User.ADMIN)

    def test_anonymous_has_no_role(self):
        self.assertEqual(role_of(AnonymousUser()), "")
        self.assertFalse(has_role(AnonymousUser(), User.STUDENT))

    def test_ensure_role(self):
        teacher = User.objects.create_user(username="t", password="pass123", role=User.TEACHER)
        ensure_role(teacher, User.TEACHER, User.ADMIN)
        with self.assertRaises(PermissionDenied):
            ensure_role(teacher, User.ACCOUNTS_ADMIN)


class LoginAndRoutingTests(TestCase):
    def setUp(self):
        self.student = User.objects.create_user(username="student1", password="pass123", role=User.STUDENT)
        services.create_student("Ann Brown", user=self.student)
        self.accounts = User.objects.create_user(
            username="accounts1", password="pass123", role=User.ACCOUNTS_ADMIN
        )
        self.admin = User.objects.create_user(username="admin1", password="pass123", role=User.ADMIN)

    def test_login_redirects_to_role_dashboard(self):
        resp = self.client.post(reverse("login"), {"username": "student1", "password": "pass123"})
        self.assertRedirects(resp, reverse("student_dashboard"))

    def test_home_redirects_by_role(self):
        self.client.login(username="accounts1", password="pass123")
        self.assertRedirects(self.client.get("/"), reverse("payment_management"))

    def test_anonymous_home_goes_to_login(self):
        self.assertRedirects(self.client.get("/"), reverse("login"))

    def test_anonymous_is_sent_to_login(self):
        resp = self.client.get(reverse("student_dashboard"))
        self.assertEqual(resp.status_code, 302)
        self.assertIn(reverse("login"), resp["Location"])

    def test_accounts_admin_cannot_open_academics(self):
        self.client.login(username="accounts1", password="pass123")
        resp = self.client.get(reverse("course_catalog"))
        self.assertRedirects(resp, reverse("payment_management"))

    def test_student_reaches_catalog(self):
        self.client.login(username="student1", password="pass123")
        self.assertEqual(self.client.get(reverse("course_catalog")).status_code, 200)

    def test_profile_updates_student_details(self):
        self.client.login(username="student1", password="pass123")
        self.client.post(reverse("profile"), {
            "first_name": "Ann",
            "last_name": "Brown",
            "email": "ann@example.com",
            "profile_picture": "",
            "id_number": "ID-42",
            "phone_number": "876-555-0100",
            "home_address": "Kingston",
        })
        profile = services.get_student_for_user(self.student)
        self.assertEqual(profile.id_number, "ID-42")
        self.student.refresh_from_db()
        self.assertEqual(self.student.first_name, "Ann")


class StaffUserTests(TestCase):
    def setUp(self):
        self.admin = User.objects.create_user(username="admin1", password="pass123", role=User.ADMIN)
        self.teacher = User.objects.create_user(username="teacher1", password="pass123", role=User.TEACHER)

    def test_admin_creates_teacher(self):
        self.client.login(username="admin1", password="pass123")
        self.client.post(reverse("create_staff_user"), {
            "username": "teacher2",
            "first_name": "Tina",
            "last_name": "Reid",
            "email": "tina@example.com",
            "role": User.TEACHER,
            "password": "secret123",
            "confirm_password": "secret123",
        })
        user = User.objects.get(username="teacher2")
        self.assertEqual(user.role, User.TEACHER)
        self.assertTrue(user.check_password("secret123"))

    def test_password_mismatch(self):
        self.client.login(username="admin1", password="pass123")
        resp = self.client.post(reverse("create_staff_user"), {
            "username": "teacher2",
            "role": User.TEACHER,
            "password": "secret123",
            "confirm_password": "other",
        })
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(User.objects.filter(username="teacher2").exists())

    def test_teacher_cannot_create_users(self):
        self.client.login(username="teacher1", password="pass123")
        resp = self.client.get(reverse("create_staff_user"))
        self.assertEqual(resp.status_code, 403)


class UserRecordTests(TestCase):
    def test_to_record(self):
        user = User.objects.create_user(
            username="tina", password="pass123", role=User.TEACHER, first_name="Tina", last_name="Reid"
        )
        record = user.to_record()
        self.assertEqual(record.name, "Tina Reid")
        self.assertEqual(record.role, User.TEACHER)
        self.assertEqual(record.profile_picture, "")
