from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase, override_settings
from django.urls import reverse

from accounts.models import User
from finance.models import Transaction
from students import services
from students.models import StudentProfile


class PaymentManagementViewTests(TestCase):
    def setUp(self):
        self.accounts = User.objects.create_user(
            username="accounts1", password="pass123", role=User.ACCOUNTS_ADMIN
        )
        self.teacher = User.objects.create_user(username="teacher1", password="pass123", role=User.TEACHER)
        self.profile = StudentProfile.objects.create(name="Ann Brown", total_owed=Decimal("1000.00"))

    def test_page_renders(self):
        self.client.login(username="accounts1", password="pass123")
        resp = self.client.get(reverse("payment_management"))
        self.assertContains(resp, "Ann Brown")

    def test_record_payment(self):
        self.client.login(username="accounts1", password="pass123")
        url = reverse("record_payment", args=[self.profile.pk])
        self.client.post(url, {"amount": "500", "payment_method": "cash"})
        self.client.post(url, {"amount": "500", "payment_method": "transfer"})
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.payment_status, "Paid")
        self.assertTrue(self.profile.clearance)
        self.assertEqual(Transaction.objects.filter(recorded_by=self.accounts).count(), 2)

    def test_record_payment_over_ceiling(self):
        self.client.login(username="accounts1", password="pass123")
        resp = self.client.post(
            reverse("record_payment", args=[self.profile.pk]),
            {"amount": "2000000", "payment_method": "cash"},
            follow=True,
        )
        self.assertContains(resp, "Amount exceeds maximum limit")
        self.assertFalse(Transaction.objects.exists())

    def test_payment_plan_and_installment_clearance(self):
        self.client.login(username="accounts1", password="pass123")
        self.client.post(
            reverse("set_payment_plan", args=[self.profile.pk]),
            {"installments": "300, 2026-09-01\n700, 2026-12-01"},
        )
        self.client.post(
            reverse("record_payment", args=[self.profile.pk]),
            {"amount": "300", "payment_method": "cash"},
        )
        self.profile.refresh_from_db()
        self.assertEqual([i["paid"] for i in self.profile.payment_plan["installments"]], [True, False])
        self.assertTrue(self.profile.clearance)
        self.assertEqual(self.profile.payment_status, "Partial")

    def test_record_charge_with_description(self):
        self.client.login(username="accounts1", password="pass123")
        self.client.post(
            reverse("record_charge", args=[self.profile.pk]),
            {"amount": "250", "description": "Lab fee"},
        )
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.total_owed, Decimal("1250.00"))
        self.assertEqual(Transaction.objects.get().notes, "Lab fee")

    def test_grant_and_remove_clearance(self):
        self.client.login(username="accounts1", password="pass123")
        self.client.post(reverse("grant_clearance", args=[self.profile.pk]))
        self.profile.refresh_from_db()
        self.assertTrue(self.profile.clearance)
        self.client.post(reverse("remove_clearance", args=[self.profile.pk]))
        self.profile.refresh_from_db()
        self.assertFalse(self.profile.clearance)

    def test_teacher_is_redirected_away_from_finance(self):
        self.client.login(username="teacher1", password="pass123")
        resp = self.client.post(reverse("grant_clearance", args=[self.profile.pk]))
        self.assertRedirects(resp, reverse("student_management"))
        self.profile.refresh_from_db()
        self.assertFalse(self.profile.clearance)

    def test_pdf_report(self):
        self.client.login(username="accounts1", password="pass123")
        resp = self.client.get(reverse("student_report_pdf", args=["balances"]))
        self.assertEqual(resp["Content-Type"], "application/pdf")
        self.assertTrue(resp.content.startswith(b"%PDF"))


@override_settings(SMIS_CURRENCY="JMD")
class CheckoutViewTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="student1", password="pass123", role=User.STUDENT)
        self.profile = services.create_student("Ann Brown", user=self.user)
        self.profile.total_owed = Decimal("5000.00")
        self.profile.save()
        self.client.login(username="student1", password="pass123")

    @patch("finance.gateway.get_exchange_rate", return_value=Decimal("157.19"))
    def test_quote(self, rate_mock):
        resp = self.client.post(reverse("checkout"), {"amount": "1571.90"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["cents"], 1000)

    @patch("finance.gateway.get_exchange_rate", return_value=Decimal("157.19"))
    def test_amount_over_balance(self, rate_mock):
        resp = self.client.post(reverse("checkout"), {"amount": "6000"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("balance", resp.json()["error"])

    def test_student_cannot_open_payment_management(self):
        resp = self.client.get(reverse("payment_management"))
        self.assertRedirects(resp, reverse("student_dashboard"))
