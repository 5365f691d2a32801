# finance/templatetags/finance_filters.py
from django import template
from django.conf import settings
from django.contrib.humanize.templatetags.humanize import intcomma

register = template.Library()


@register.filter
def jmd(amount):
    """Format an amount with thousands separators and the school currency."""
    if amount in (None, ""):
        return ""
    return f"{settings.SMIS_CURRENCY} {intcomma(f'{amount:.2f}')}"


@register.filter
def status_badge(payment_status):
    """Bootstrap colour for a payment status"""
    colors = {
        'Paid': 'success',
        'Partial': 'warning',
        'Unpaid': 'danger',
    }
    return colors.get(payment_status, 'secondary')
