import uuid

from django.conf import settings
from django.db import models

from .records import PAYMENT_STATUSES, STATUS_UNPAID

# Create your models here.

class StudentProfile(models.Model):
    """
    A student's stored state. ``courses`` holds the student's own enrolled
    copies of catalog courses (subjects, grades, comments) and
    ``payment_plan`` the optional installment plan, both as documents.
    Transactions and notifications are rows of their own.
    """
    PAYMENT_STATUS_CHOICES = [(status, status) for status in PAYMENT_STATUSES]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='student_profile',
    )
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_students',
    )
    courses = models.JSONField(default=list, blank=True)
    total_owed = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_paid = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    payment_status = models.CharField(
        max_length=20, choices=PAYMENT_STATUS_CHOICES, default=STATUS_UNPAID
    )
    clearance = models.BooleanField(default=False)
    payment_plan = models.JSONField(null=True, blank=True)

    id_number = models.CharField(max_length=50, blank=True)
    phone_number = models.CharField(max_length=30, blank=True)
    home_address = models.TextField(blank=True)
    profile_picture = models.URLField(blank=True)

    enrollment_date = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    @property
    def balance(self):
        return self.total_owed - self.total_paid

    def __str__(self):
        return self.name


class Notification(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        StudentProfile, on_delete=models.CASCADE, related_name='notifications'
    )
    message = models.TextField()
    type = models.CharField(max_length=30, blank=True)
    date = models.DateTimeField()
    read = models.BooleanField(default=False)

    class Meta:
        ordering = ['date']

    def __str__(self):
        return f"{self.student} - {self.message[:40]}"
