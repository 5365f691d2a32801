from datetime import datetime, timezone

from django.test import SimpleTestCase

from core.exceptions import RecordNotFound, ValidationError
from students.notifications import mark_notification_read, send_notification, unread_count
from students.records import StudentData


class NotificationTests(SimpleTestCase):
    def test_send_appends_unread(self):
        now = datetime(2026, 1, 5, 12, 0, tzinfo=timezone.utc)
        student = send_notification(StudentData(), "Fees due", now=now, category="payment",
                                    notification_id="n1")
        self.assertEqual(len(student.notifications), 1)
        notification = student.notifications[0]
        self.assertEqual(notification.message, "Fees due")
        self.assertEqual(notification.category, "payment")
        self.assertEqual(notification.date, now.isoformat())
        self.assertFalse(notification.read)
        self.assertEqual(unread_count(student), 1)

    def test_empty_message_is_rejected(self):
        with self.assertRaises(ValidationError):
            send_notification(StudentData(), "   ")

    def test_mark_read(self):
        student = send_notification(StudentData(), "one", notification_id="n1")
        student = send_notification(student, "two", notification_id="n2")
        student = mark_notification_read(student, "n1")
        self.assertTrue(student.notifications[0].read)
        self.assertFalse(student.notifications[1].read)
        self.assertEqual(unread_count(student), 1)

    def test_mark_unknown_notification(self):
        with self.assertRaises(RecordNotFound):
            mark_notification_read(StudentData(), "missing")
