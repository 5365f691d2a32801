import uuid

from django.conf import settings
from django.db import models
from students.models import StudentProfile


class Transaction(models.Model):
    """
    Append-only ledger entry. ``succeeded`` rows are payments, ``charge``
    rows are administrative corrections to the amount owed.
    """
    METHOD = [
        ('cash', 'Cash'),
        ('transfer', 'Bank Transfer'),
        ('card', 'Card'),
        ('cheque', 'Cheque'),
    ]

    STATUS = [
        ('succeeded', 'Succeeded'),
        ('charge', 'Charge'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        StudentProfile, on_delete=models.CASCADE, related_name='transactions'
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    date = models.DateTimeField()
    status = models.CharField(max_length=20, choices=STATUS, default='succeeded')
    payment_method = models.CharField(max_length=20, choices=METHOD, blank=True)
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recorded_transactions',
    )
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['-date']

    def __str__(self):
        return f"Transaction {self.id} - {self.student}"

    @property
    def status_color(self):
        """Return color for status"""
        colors = {
            'succeeded': 'success',
            'charge': 'warning',
        }
        return colors.get(self.status, 'info')
