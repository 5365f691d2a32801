# finance/forms.py
from django import forms
from django.conf import settings

from .models import Transaction


class RecordPaymentForm(forms.Form):
    amount = forms.DecimalField(
        max_digits=12,
        decimal_places=2,
        widget=forms.NumberInput(attrs={
            'class': 'form-control',
            'placeholder': 'Enter payment amount',
            'min': '0.01',
            'step': '0.01',
        })
    )

    payment_method = forms.ChoiceField(
        choices=Transaction.METHOD,
        widget=forms.Select(attrs={'class': 'form-select'})
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['amount'].widget.attrs['max'] = str(settings.SMIS_MAX_PAYMENT_AMOUNT)


class ChargeForm(forms.Form):
    amount = forms.DecimalField(
        max_digits=12,
        decimal_places=2,
        widget=forms.NumberInput(attrs={'class': 'form-control', 'min': '0.01', 'step': '0.01'})
    )
    description = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Reason for the charge'})
    )


class PaymentPlanForm(forms.Form):
    """
    One installment per line, ``amount, due date``::

        30000, 2026-09-01
        30000, 2026-12-01

    Leave empty to remove the plan.
    """
    installments = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={
            'class': 'form-control',
            'rows': 4,
            'placeholder': '30000, 2026-09-01',
        })
    )

    def clean_installments(self):
        rows = []
        for number, line in enumerate(self.cleaned_data['installments'].splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            amount, _, due_date = line.partition(',')
            amount = amount.strip().replace(' ', '')
            if not amount:
                raise forms.ValidationError(f"Line {number}: missing amount.")
            rows.append((amount, due_date.strip()))
        return rows


class CheckoutForm(forms.Form):
    amount = forms.DecimalField(max_digits=12, decimal_places=2)
