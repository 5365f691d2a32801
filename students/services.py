"""
Persistence around the pure grade and payment rules.

Every change to a student goes through ``mutate_student``: lock the row,
turn it into a ``StudentData`` record via the sanitizer, run one
transition, write the result back. A failure while writing is reported as
``PersistenceError`` so callers can tell "rejected" apart from "computed
but not saved".
"""

import logging

from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from academics import grading
from core.exceptions import PersistenceError, RecordNotFound
from finance import reconciliation
from finance.models import Transaction

from . import notifications
from .models import Notification, StudentProfile
from .records import sanitize_student_data

logger = logging.getLogger(__name__)


def _isoformat(value):
    return value.isoformat() if value else ""


def _parse_date(value):
    try:
        parsed = parse_datetime(value) if value else None
    except ValueError:
        parsed = None
    return parsed or timezone.now()


def profile_to_document(profile):
    """Raw document for ``profile``, in the shape the sanitizer expects."""
    return {
        "id": str(profile.pk),
        "name": profile.name,
        "email": profile.email,
        "teacherId": str(profile.teacher_id) if profile.teacher_id else "",
        "courses": profile.courses,
        "totalOwed": profile.total_owed,
        "totalPaid": profile.total_paid,
        "paymentStatus": profile.payment_status,
        "clearance": profile.clearance,
        "paymentPlan": profile.payment_plan,
        "transactions": [
            {
                "id": str(t.pk),
                "amount": t.amount,
                "date": _isoformat(t.date),
                "status": t.status,
            }
            for t in profile.transactions.order_by('date')
        ],
        "notifications": [
            {
                "id": str(n.pk),
                "message": n.message,
                "date": _isoformat(n.date),
                "read": n.read,
                "type": n.type,
            }
            for n in profile.notifications.order_by('date')
        ],
        "idNumber": profile.id_number,
        "phoneNumber": profile.phone_number,
        "homeAddress": profile.home_address,
        "profilePicture": profile.profile_picture,
    }


def load_student_data(profile):
    return sanitize_student_data(profile_to_document(profile))


def save_student_data(profile, data, *, recorded_by=None, payment_method="", notes=""):
    """Write ``data`` back onto ``profile`` and append new ledger rows."""
    profile.name = data.name
    profile.email = data.email
    profile.courses = [c.to_dict() for c in data.courses]
    profile.total_owed = data.total_owed
    profile.total_paid = data.total_paid
    profile.payment_status = data.payment_status
    profile.clearance = data.clearance
    profile.payment_plan = data.payment_plan.to_dict() if data.payment_plan else None
    profile.id_number = data.id_number
    profile.phone_number = data.phone_number
    profile.home_address = data.home_address
    profile.profile_picture = data.profile_picture
    profile.save()

    # Transactions are append-only: only unseen ids are written.
    known = {str(pk) for pk in profile.transactions.values_list('pk', flat=True)}
    for entry in data.transactions:
        if entry.id in known:
            continue
        Transaction.objects.create(
            id=entry.id,
            student=profile,
            amount=entry.amount,
            date=_parse_date(entry.date),
            status=entry.status,
            payment_method=payment_method,
            recorded_by=recorded_by,
            notes=notes,
        )

    stored = {str(n.pk): n for n in profile.notifications.all()}
    for entry in data.notifications:
        existing = stored.get(entry.id)
        if existing is None:
            Notification.objects.create(
                id=entry.id,
                student=profile,
                message=entry.message,
                type=entry.category,
                date=_parse_date(entry.date),
                read=entry.read,
            )
        elif existing.read != entry.read:
            existing.read = entry.read
            existing.save(update_fields=['read'])


def mutate_student(student_id, transition, *args, recorded_by=None, payment_method="",
                   notes="", **kwargs):
    """
    Apply ``transition(student_data, *args, **kwargs)`` to one student.

    Rule violations raised by ``transition`` propagate unchanged and
    nothing is written.
    """
    try:
        with transaction.atomic():
            try:
                profile = StudentProfile.objects.select_for_update().get(pk=student_id)
            except StudentProfile.DoesNotExist:
                raise RecordNotFound(f"No student {student_id}.")
            updated = transition(load_student_data(profile), *args, **kwargs)
            save_student_data(
                profile,
                updated,
                recorded_by=recorded_by,
                payment_method=payment_method,
                notes=notes,
            )
    except DatabaseError as e:
        logger.error("Could not save %s for student %s: %s", transition.__name__, student_id, e)
        raise PersistenceError(
            "Your change was computed but could not be saved. Please try again."
        ) from e

    logger.info("Applied %s to student %s", transition.__name__, student_id)
    return updated


# =============================================================================
# CONVENIENCE WRAPPERS
# =============================================================================

def get_student_for_user(user):
    return StudentProfile.objects.filter(user=user).first()


def create_student(name, email="", user=None):
    return StudentProfile.objects.create(name=name, email=email, user=user)


def enroll_student(student_id, course):
    """Enroll in a catalog ``academics.models.Course``."""
    return mutate_student(student_id, reconciliation.enroll, course.to_record())


def record_payment(student_id, amount, *, recorded_by=None, payment_method=""):
    return mutate_student(
        student_id,
        reconciliation.apply_payment,
        amount,
        recorded_by=recorded_by,
        payment_method=payment_method,
    )


def update_grade(student_id, course_key, subject_name, component_key, value):
    return mutate_student(
        student_id,
        grading.update_student_grade,
        course_key,
        subject_name,
        component_key,
        value,
    )


def notify(student_id, message, category=""):
    return mutate_student(
        student_id, notifications.send_notification, message, category=category
    )
