"""Append-only notification log on a student record."""

import uuid
from dataclasses import replace

from django.utils import timezone

from core.exceptions import RecordNotFound, ValidationError
from students.records import Notification


def send_notification(student, message, *, now=None, category="", notification_id=None):
    message = (message or "").strip()
    if not message:
        raise ValidationError("Notification message cannot be empty.")
    notification = Notification(
        id=notification_id or str(uuid.uuid4()),
        message=message,
        date=(now or timezone.now()).isoformat(),
        read=False,
        category=category,
    )
    return replace(student, notifications=student.notifications + (notification,))


def mark_notification_read(student, notification_id):
    # read is the only field that ever changes after creation
    notifications = []
    found = False
    for notification in student.notifications:
        if notification.id == notification_id:
            notification = replace(notification, read=True)
            found = True
        notifications.append(notification)
    if not found:
        raise RecordNotFound(f"No notification {notification_id}.")
    return replace(student, notifications=tuple(notifications))


def unread_count(student):
    return sum(1 for n in student.notifications if not n.read)
