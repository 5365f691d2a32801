from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase

from academics.models import Course
from accounts.models import User
from core.exceptions import AlreadyEnrolled, InvalidAmount, PersistenceError, RecordNotFound
from finance import reconciliation
from finance.models import Transaction
from students import notifications, services
from students.models import Notification, StudentProfile


class StudentServiceTests(TestCase):
    def setUp(self):
        self.accounts = User.objects.create_user(
            username="accounts1", password="pass123", role=User.ACCOUNTS_ADMIN
        )
        self.profile = services.create_student("Ann Brown", "ann@example.com")
        self.course = Course.objects.create(
            name="Mathematics",
            fee=Decimal("1000.00"),
            subjects=[{"name": "Algebra", "grades": {}, "comments": ""}],
        )

    def test_enroll_persists_course_copy_and_fee(self):
        services.enroll_student(self.profile.pk, self.course)
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.total_owed, Decimal("1000.00"))
        self.assertEqual(self.profile.payment_status, "Partial")
        self.assertEqual(self.profile.courses[0]["id"], str(self.course.pk))
        self.assertEqual(self.profile.courses[0]["subjects"][0]["name"], "Algebra")

    def test_enroll_twice_charges_once(self):
        services.enroll_student(self.profile.pk, self.course)
        with self.assertRaises(AlreadyEnrolled):
            services.enroll_student(self.profile.pk, self.course)
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.total_owed, Decimal("1000.00"))
        self.assertEqual(len(self.profile.courses), 1)

    def test_catalog_changes_do_not_touch_enrolled_copy(self):
        services.enroll_student(self.profile.pk, self.course)
        self.course.subjects = self.course.subjects + [{"name": "Geometry"}]
        self.course.save()
        self.profile.refresh_from_db()
        self.assertEqual([s["name"] for s in self.profile.courses[0]["subjects"]], ["Algebra"])

    def test_payments_write_transaction_rows(self):
        services.enroll_student(self.profile.pk, self.course)
        services.record_payment(self.profile.pk, Decimal("500"), recorded_by=self.accounts, payment_method="cash")
        data = services.record_payment(self.profile.pk, "500", recorded_by=self.accounts)

        self.profile.refresh_from_db()
        self.assertEqual(self.profile.total_paid, Decimal("1000.00"))
        self.assertEqual(self.profile.balance, Decimal("0"))
        self.assertEqual(self.profile.payment_status, "Paid")
        self.assertTrue(self.profile.clearance)
        self.assertEqual(len(data.transactions), 2)

        rows = Transaction.objects.filter(student=self.profile)
        self.assertEqual(rows.count(), 2)
        self.assertEqual(rows.filter(payment_method="cash").count(), 1)
        self.assertTrue(all(row.recorded_by == self.accounts for row in rows))

    def test_rejected_payment_writes_nothing(self):
        with self.assertRaises(InvalidAmount):
            services.record_payment(self.profile.pk, "0")
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.total_paid, Decimal("0"))
        self.assertFalse(Transaction.objects.exists())

    def test_sub_cent_payment_writes_nothing(self):
        services.enroll_student(self.profile.pk, self.course)
        with self.assertRaises(InvalidAmount):
            services.record_payment(self.profile.pk, Decimal("999.999"), recorded_by=self.accounts)
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.total_paid, Decimal("0"))
        self.assertEqual(self.profile.balance, Decimal("1000.00"))
        self.assertEqual(self.profile.payment_status, "Partial")
        self.assertFalse(Transaction.objects.exists())

    def test_update_grade_persists_final(self):
        services.enroll_student(self.profile.pk, self.course)
        key = str(self.course.pk)
        services.update_grade(self.profile.pk, key, "Algebra", "C1", "80")
        services.update_grade(self.profile.pk, key, "Algebra", "C2", "90")
        services.update_grade(self.profile.pk, key, "Algebra", "exam", "70")
        self.profile.refresh_from_db()
        self.assertEqual(self.profile.courses[0]["subjects"][0]["grades"]["final"], "76.00")

    def test_notifications_round_trip(self):
        data = services.notify(self.profile.pk, "Fees due", category="payment")
        row = Notification.objects.get(student=self.profile)
        self.assertEqual(row.type, "payment")
        self.assertFalse(row.read)

        services.mutate_student(self.profile.pk, notifications.mark_notification_read, data.notifications[0].id)
        row.refresh_from_db()
        self.assertTrue(row.read)
        self.assertEqual(Notification.objects.count(), 1)

    def test_payment_plan_is_stored_as_document(self):
        services.mutate_student(
            self.profile.pk, reconciliation.set_payment_plan, [("300", "2026-09-01"), ("700", "")]
        )
        self.profile.refresh_from_db()
        self.assertEqual(
            self.profile.payment_plan,
            {"installments": [
                {"amount": "300", "paid": False, "dueDate": "2026-09-01"},
                {"amount": "700", "paid": False, "dueDate": ""},
            ]},
        )

    def test_unknown_student(self):
        with self.assertRaises(RecordNotFound):
            services.record_payment(999999, "100")

    def test_database_failure_is_reported_as_persistence_error(self):
        with patch.object(StudentProfile, "save", side_effect=DatabaseError("disk full")):
            with self.assertRaises(PersistenceError):
                services.notify(self.profile.pk, "hello")
        self.assertFalse(Notification.objects.exists())

    def test_get_student_for_user(self):
        user = User.objects.create_user(username="ann", password="pass123")
        self.assertIsNone(services.get_student_for_user(user))
        self.profile.user = user
        self.profile.save()
        self.assertEqual(services.get_student_for_user(user), self.profile)
