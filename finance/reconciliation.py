"""
Payment reconciliation.

Pure transitions over ``StudentData``: enrolling charges a course fee,
paying reduces the balance and settles installments, and clearance follows
from both. Amounts are plain JMD ``Decimal`` values; conversion to any
other currency happens in ``finance.gateway`` and never here.
"""

import logging
import uuid
from dataclasses import replace
from decimal import Decimal

from django.conf import settings
from django.utils import timezone

from core.exceptions import AlreadyEnrolled, InvalidAmount
from students.records import (
    STATUS_PAID,
    STATUS_PARTIAL,
    STATUS_UNPAID,
    Course,
    Installment,
    PaymentPlan,
    Subject,
    Transaction,
    safe_decimal,
)

logger = logging.getLogger(__name__)

TRANSACTION_SUCCEEDED = "succeeded"
TRANSACTION_CHARGE = "charge"

MAX_PAYMENT_AMOUNT = Decimal("1000000")
CENT = Decimal("0.01")


def max_payment_amount():
    return getattr(settings, "SMIS_MAX_PAYMENT_AMOUNT", MAX_PAYMENT_AMOUNT)


def _timestamp(now):
    return (now or timezone.now()).isoformat()


def derive_payment_status(total_owed, total_paid):
    if total_owed - total_paid <= 0:
        return STATUS_PAID
    if total_paid > 0:
        return STATUS_PARTIAL
    return STATUS_UNPAID


def validate_payment_amount(amount, maximum=None):
    """Return ``amount`` as a Decimal, or raise ``InvalidAmount``."""
    maximum = max_payment_amount() if maximum is None else maximum
    value = safe_decimal(amount, default=None)
    if value is None or value <= 0:
        raise InvalidAmount("Please enter an amount greater than 0.")
    if value > maximum:
        raise InvalidAmount(f"Amount exceeds maximum limit of {maximum:,.0f}.")
    if value != value.quantize(CENT):
        raise InvalidAmount("Amounts cannot have more than 2 decimal places.")
    return value


def validate_checkout_amount(amount, balance, maximum=None):
    """Checkout guard: positive, within the outstanding balance, within the ceiling."""
    value = validate_payment_amount(amount, maximum)
    if value > balance:
        raise InvalidAmount(f"Amount exceeds balance of {balance:,.2f}.")
    return value


def allocate_installments(installments, amount):
    """
    Settle installments in plan order with ``amount``.

    An installment is either covered in full or not at all; allocation stops
    at the first unpaid installment the remaining pool cannot cover.
    """
    remaining = amount
    allocated = []
    stopped = False
    for installment in installments:
        if stopped or installment.paid:
            allocated.append(installment)
            continue
        if remaining >= installment.amount:
            remaining -= installment.amount
            allocated.append(replace(installment, paid=True))
        else:
            stopped = True
            allocated.append(installment)
    return tuple(allocated)


def apply_payment(student, amount, *, now=None, maximum=None, transaction_id=None):
    """Record a successful payment of ``amount`` JMD and return the new state."""
    amount = validate_payment_amount(amount, maximum)

    total_paid = student.total_paid + amount
    balance = student.total_owed - total_paid
    clearance = student.clearance

    payment_plan = student.payment_plan
    if payment_plan and payment_plan.installments:
        before = payment_plan.installments
        after = allocate_installments(before, amount)
        if after[0].paid and not before[0].paid and not clearance:
            logger.info("First installment settled for student %s; granting clearance", student.id)
            clearance = True
        payment_plan = replace(payment_plan, installments=after)

    if balance <= 0:
        clearance = True

    transaction = Transaction(
        id=transaction_id or str(uuid.uuid4()),
        amount=amount,
        date=_timestamp(now),
        status=TRANSACTION_SUCCEEDED,
    )
    return replace(
        student,
        total_paid=total_paid,
        payment_status=derive_payment_status(student.total_owed, total_paid),
        clearance=clearance,
        payment_plan=payment_plan,
        transactions=student.transactions + (transaction,),
    )


def enrollment_copy(course):
    """The student's own copy of a catalog course: subjects kept, grades cleared."""
    return Course(
        id=course.id,
        name=course.name,
        fee=course.fee,
        subjects=tuple(Subject(name=s.name) for s in course.subjects),
    )


def enroll(student, course):
    """Enroll ``student`` in ``course`` and charge its fee."""
    if student.is_enrolled(course):
        raise AlreadyEnrolled(f"Already enrolled in {course.name}.")

    total_owed = student.total_owed + course.fee
    return replace(
        student,
        courses=student.courses + (enrollment_copy(course),),
        total_owed=total_owed,
        payment_status=STATUS_PAID if total_owed - student.total_paid <= 0 else STATUS_PARTIAL,
    )


def record_charge(student, amount, *, now=None, transaction_id=None):
    """Administrative correction raising the amount owed. Clearance is left as is."""
    amount = validate_payment_amount(amount)
    total_owed = student.total_owed + amount
    charge = Transaction(
        id=transaction_id or str(uuid.uuid4()),
        amount=amount,
        date=_timestamp(now),
        status=TRANSACTION_CHARGE,
    )
    return replace(
        student,
        total_owed=total_owed,
        payment_status=derive_payment_status(total_owed, student.total_paid),
        transactions=student.transactions + (charge,),
    )


def set_payment_plan(student, installments):
    """
    Replace the student's installment plan.

    ``installments`` is a sequence of ``Installment`` records or of
    ``(amount, due_date)`` pairs. An empty sequence removes the plan.
    """
    plan = []
    for item in installments:
        if not isinstance(item, Installment):
            amount, due_date = item
            item = Installment(amount=safe_decimal(amount), due_date=due_date or "")
        if item.amount <= 0:
            raise InvalidAmount("Installment amounts must be greater than 0.")
        if item.amount != item.amount.quantize(CENT):
            raise InvalidAmount("Installment amounts cannot have more than 2 decimal places.")
        plan.append(item)
    return replace(student, payment_plan=PaymentPlan(tuple(plan)) if plan else None)


def grant_clearance(student):
    return replace(student, clearance=True)


def remove_clearance(student):
    return replace(student, clearance=False)
