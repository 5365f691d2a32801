"""
Typed value records and the sanitizing boundary.

Everything that reaches the grade and payment rules passes through one of
the ``sanitize_*`` functions first. They accept whatever shape a stored
document or a form happens to have (missing keys, wrong types, ``None``)
and always return a fully populated, immutable record:

    - numeric totals default to ``0``
    - names, ids and free text default to ``""``
    - booleans default to ``False``
    - lists default to empty tuples
    - an unknown payment status defaults to ``"Unpaid"``

Every record has ``to_dict()`` producing a JSON-safe document, and
sanitizing that document again gives back an equal record.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional


ZERO = Decimal("0")

# Payment status values
STATUS_UNPAID = "Unpaid"
STATUS_PARTIAL = "Partial"
STATUS_PAID = "Paid"

PAYMENT_STATUSES = (STATUS_UNPAID, STATUS_PARTIAL, STATUS_PAID)

# "Partially Paid" is what older documents carry.
_STATUS_ALIASES = {
    "unpaid": STATUS_UNPAID,
    "partial": STATUS_PARTIAL,
    "partially paid": STATUS_PARTIAL,
    "paid": STATUS_PAID,
}


# =============================================================================
# LENIENT PARSERS
# =============================================================================

def safe_string(value, default=""):
    if isinstance(value, str):
        return value
    return default


def safe_decimal(value, default=ZERO):
    """Parse a currency amount; booleans, NaN and infinities are rejected."""
    if isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = Decimal(str(value))
    elif isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation:
            return default
    else:
        return default
    return parsed if parsed.is_finite() else default


def safe_bool(value, default=False):
    if isinstance(value, bool):
        return value
    return default


def safe_list(value):
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def safe_mapping(value):
    if isinstance(value, dict):
        return value
    return {}


def normalize_payment_status(value):
    if isinstance(value, str):
        return _STATUS_ALIASES.get(value.strip().lower(), STATUS_UNPAID)
    return STATUS_UNPAID


def _money(amount):
    return str(amount)


# =============================================================================
# RECORDS
# =============================================================================

@dataclass(frozen=True)
class Subject:
    """
    One graded subject inside a course.

    ``grades`` maps component keys to numeric strings: ``C1``, ``C2``, ...
    for classwork, ``exam`` for the exam and ``final`` for the derived
    grade. The mapping is replaced, never mutated.
    """
    name: str = ""
    grades: dict = field(default_factory=dict)
    comments: str = ""

    def to_dict(self):
        return {
            "name": self.name,
            "grades": dict(self.grades),
            "comments": self.comments,
        }


@dataclass(frozen=True)
class Resource:
    id: str = ""
    course_id: str = ""
    name: str = ""
    kind: str = ""
    url: str = ""
    upload_date: str = ""

    def to_dict(self):
        return {
            "id": self.id,
            "courseId": self.course_id,
            "name": self.name,
            "type": self.kind,
            "url": self.url,
            "uploadDate": self.upload_date,
        }


@dataclass(frozen=True)
class Question:
    question: str = ""
    options: tuple = ()
    correct_answer: str = ""

    def to_dict(self):
        return {
            "question": self.question,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
        }


@dataclass(frozen=True)
class Test:
    id: str = ""
    course_id: str = ""
    title: str = ""
    questions: tuple = ()
    created_at: str = ""

    def to_dict(self):
        return {
            "id": self.id,
            "courseId": self.course_id,
            "title": self.title,
            "questions": [q.to_dict() for q in self.questions],
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class Course:
    """
    A catalog course, or a student's enrolled copy of one.

    Enrolled copies only carry identity, fee and subjects; resources and
    tests stay on the catalog course.
    """
    id: str = ""
    name: str = ""
    fee: Decimal = ZERO
    subjects: tuple = ()
    resources: tuple = ()
    tests: tuple = ()
    teacher_id: str = ""
    description: str = ""

    @property
    def key(self):
        """Canonical identity: the id, or the name for legacy documents without one."""
        return self.id or self.name

    def find_subject(self, name):
        for subject in self.subjects:
            if subject.name == name:
                return subject
        return None

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "fee": _money(self.fee),
            "subjects": [s.to_dict() for s in self.subjects],
            "resources": [r.to_dict() for r in self.resources],
            "tests": [t.to_dict() for t in self.tests],
            "teacherId": self.teacher_id,
            "description": self.description,
        }


@dataclass(frozen=True)
class Installment:
    amount: Decimal = ZERO
    paid: bool = False
    due_date: str = ""

    def to_dict(self):
        return {
            "amount": _money(self.amount),
            "paid": self.paid,
            "dueDate": self.due_date,
        }


@dataclass(frozen=True)
class PaymentPlan:
    installments: tuple = ()

    def to_dict(self):
        return {"installments": [i.to_dict() for i in self.installments]}


@dataclass(frozen=True)
class Transaction:
    id: str = ""
    amount: Decimal = ZERO
    date: str = ""
    status: str = ""

    def to_dict(self):
        return {
            "id": self.id,
            "amount": _money(self.amount),
            "date": self.date,
            "status": self.status,
        }


@dataclass(frozen=True)
class Notification:
    id: str = ""
    message: str = ""
    date: str = ""
    read: bool = False
    category: str = ""

    def to_dict(self):
        return {
            "id": self.id,
            "message": self.message,
            "date": self.date,
            "read": self.read,
            "type": self.category,
        }


@dataclass(frozen=True)
class StudentData:
    """
    Everything the grade and payment rules know about one student.

    ``balance`` is always derived from the two totals; a stored balance
    is never trusted.
    """
    id: str = ""
    name: str = ""
    email: str = ""
    teacher_id: str = ""
    courses: tuple = ()
    total_owed: Decimal = ZERO
    total_paid: Decimal = ZERO
    payment_status: str = STATUS_UNPAID
    clearance: bool = False
    payment_plan: Optional[PaymentPlan] = None
    transactions: tuple = ()
    notifications: tuple = ()
    id_number: str = ""
    phone_number: str = ""
    home_address: str = ""
    profile_picture: str = ""

    @property
    def balance(self):
        return self.total_owed - self.total_paid

    def find_course(self, key):
        for course in self.courses:
            if course.key == key:
                return course
        return None

    def is_enrolled(self, course):
        return self.find_course(course.key) is not None

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "teacherId": self.teacher_id,
            "courses": [c.to_dict() for c in self.courses],
            "totalOwed": _money(self.total_owed),
            "totalPaid": _money(self.total_paid),
            "balance": _money(self.balance),
            "paymentStatus": self.payment_status,
            "clearance": self.clearance,
            "paymentPlan": self.payment_plan.to_dict() if self.payment_plan else None,
            "transactions": [t.to_dict() for t in self.transactions],
            "notifications": [n.to_dict() for n in self.notifications],
            "idNumber": self.id_number,
            "phoneNumber": self.phone_number,
            "homeAddress": self.home_address,
            "profilePicture": self.profile_picture,
        }


@dataclass(frozen=True)
class UserData:
    id: str = ""
    name: str = ""
    email: str = ""
    role: str = ""
    profile_picture: str = ""

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "profilePicture": self.profile_picture,
        }


# =============================================================================
# SANITIZERS
# =============================================================================

def sanitize_grades(data):
    """Keep string keys; numbers become numeric strings, anything else is dropped."""
    grades = {}
    for key, value in safe_mapping(data).items():
        if not isinstance(key, str):
            continue
        if isinstance(value, str):
            grades[key] = value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            grades[key] = str(value)
    return grades


def sanitize_subject(data):
    data = safe_mapping(data)
    return Subject(
        name=safe_string(data.get("name")),
        grades=sanitize_grades(data.get("grades")),
        comments=safe_string(data.get("comments")),
    )


def sanitize_resource(data):
    data = safe_mapping(data)
    return Resource(
        id=safe_string(data.get("id")),
        course_id=safe_string(data.get("courseId")),
        name=safe_string(data.get("name")),
        kind=safe_string(data.get("type")),
        url=safe_string(data.get("url")),
        upload_date=safe_string(data.get("uploadDate")),
    )


def sanitize_question(data):
    data = safe_mapping(data)
    return Question(
        question=safe_string(data.get("question")),
        options=tuple(o for o in safe_list(data.get("options")) if isinstance(o, str)),
        correct_answer=safe_string(data.get("correctAnswer")),
    )


def sanitize_test(data):
    data = safe_mapping(data)
    return Test(
        id=safe_string(data.get("id")),
        course_id=safe_string(data.get("courseId")),
        title=safe_string(data.get("title")),
        questions=tuple(sanitize_question(q) for q in safe_list(data.get("questions"))),
        created_at=safe_string(data.get("createdAt")),
    )


def sanitize_course(data):
    data = safe_mapping(data)
    fee = safe_decimal(data.get("fee"))
    return Course(
        id=safe_string(data.get("id")),
        name=safe_string(data.get("name")),
        fee=fee if fee >= 0 else ZERO,
        subjects=tuple(sanitize_subject(s) for s in safe_list(data.get("subjects"))),
        resources=tuple(sanitize_resource(r) for r in safe_list(data.get("resources"))),
        tests=tuple(sanitize_test(t) for t in safe_list(data.get("tests"))),
        teacher_id=safe_string(data.get("teacherId")),
        description=safe_string(data.get("description")),
    )


def sanitize_installment(data):
    data = safe_mapping(data)
    return Installment(
        amount=safe_decimal(data.get("amount")),
        paid=safe_bool(data.get("paid")),
        due_date=safe_string(data.get("dueDate")),
    )


def sanitize_payment_plan(data):
    """A plan is optional: anything that is not a mapping means "no plan"."""
    if not isinstance(data, dict):
        return None
    return PaymentPlan(
        installments=tuple(
            sanitize_installment(i) for i in safe_list(data.get("installments"))
        ),
    )


def sanitize_transaction(data):
    data = safe_mapping(data)
    return Transaction(
        id=safe_string(data.get("id")),
        amount=safe_decimal(data.get("amount")),
        date=safe_string(data.get("date")),
        status=safe_string(data.get("status")),
    )


def sanitize_notification(data):
    data = safe_mapping(data)
    return Notification(
        id=safe_string(data.get("id")),
        message=safe_string(data.get("message")),
        date=safe_string(data.get("date")),
        read=safe_bool(data.get("read")),
        category=safe_string(data.get("type")),
    )


def sanitize_student_data(data):
    data = safe_mapping(data)
    return StudentData(
        id=safe_string(data.get("id")),
        name=safe_string(data.get("name")),
        email=safe_string(data.get("email")),
        teacher_id=safe_string(data.get("teacherId")),
        courses=tuple(sanitize_course(c) for c in safe_list(data.get("courses"))),
        total_owed=safe_decimal(data.get("totalOwed")),
        total_paid=safe_decimal(data.get("totalPaid")),
        payment_status=normalize_payment_status(data.get("paymentStatus")),
        clearance=safe_bool(data.get("clearance")),
        payment_plan=sanitize_payment_plan(data.get("paymentPlan")),
        transactions=tuple(
            sanitize_transaction(t) for t in safe_list(data.get("transactions"))
        ),
        notifications=tuple(
            sanitize_notification(n) for n in safe_list(data.get("notifications"))
        ),
        id_number=safe_string(data.get("idNumber")),
        phone_number=safe_string(data.get("phoneNumber")),
        home_address=safe_string(data.get("homeAddress")),
        profile_picture=safe_string(data.get("profilePicture")),
    )


def sanitize_user(data):
    data = safe_mapping(data)
    return UserData(
        id=safe_string(data.get("id")),
        name=safe_string(data.get("name")),
        email=safe_string(data.get("email")),
        role=safe_string(data.get("role")),
        profile_picture=safe_string(data.get("profilePicture")),
    )
