# finance/views.py
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.contrib.humanize.templatetags.humanize import intcomma
from django.db.models import Q
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.utils import timezone
from django.views.decorators.http import require_POST

from accounts.models import User
from accounts.permissions import CLEARANCE_MANAGERS, PAYMENT_MANAGERS, require_roles
from core.exceptions import SMISError
from students import services
from students.models import StudentProfile
from students.records import PAYMENT_STATUSES
from students.views import report_error

from . import gateway, reconciliation
from .forms import ChargeForm, CheckoutForm, PaymentPlanForm, RecordPaymentForm
from .models import Transaction
from .reports import REPORTS, build_student_report

logger = logging.getLogger(__name__)


@login_required
@require_roles(*PAYMENT_MANAGERS)
def payment_management(request):
    """Balances, clearance and recent transactions for every student."""
    students = StudentProfile.objects.all()

    search = request.GET.get('search', '').strip()
    if search:
        students = students.filter(Q(name__icontains=search) | Q(email__icontains=search))

    status_filter = request.GET.get('status', '')
    if status_filter in PAYMENT_STATUSES:
        students = students.filter(payment_status=status_filter)

    records = [services.load_student_data(s) for s in students]

    context = {
        'students': records,
        'search': search,
        'status_filter': status_filter,
        'statuses': PAYMENT_STATUSES,
        'total_owed': sum((s.total_owed for s in records), 0),
        'total_paid': sum((s.total_paid for s in records), 0),
        'recent_transactions': Transaction.objects.select_related('student', 'recorded_by')[:10],
        'payment_form': RecordPaymentForm(),
        'charge_form': ChargeForm(),
        'plan_form': PaymentPlanForm(),
    }
    return render(request, 'finance/payment_management.html', context)


@login_required
@require_POST
@require_roles(*PAYMENT_MANAGERS)
def record_payment(request, student_id):
    """Record a payment for a student"""
    student = get_object_or_404(StudentProfile, id=student_id)
    form = RecordPaymentForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please enter a valid amount.")
        return redirect('payment_management')

    amount = form.cleaned_data['amount']
    try:
        updated = services.record_payment(
            student.pk,
            amount,
            recorded_by=request.user,
            payment_method=form.cleaned_data['payment_method'],
        )
    except SMISError as e:
        report_error(request, e)
    else:
        messages.success(
            request,
            f"Payment of {intcomma(f'{amount:.2f}')} recorded for {student.name}. "
            f"Status: {updated.payment_status}."
        )
    return redirect('payment_management')


@login_required
@require_POST
@require_roles(*PAYMENT_MANAGERS)
def record_charge(request, student_id):
    student = get_object_or_404(StudentProfile, id=student_id)
    form = ChargeForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please enter a valid amount.")
        return redirect('payment_management')

    try:
        services.mutate_student(
            student.pk,
            reconciliation.record_charge,
            form.cleaned_data['amount'],
            recorded_by=request.user,
            notes=form.cleaned_data['description'],
        )
    except SMISError as e:
        report_error(request, e)
    else:
        messages.success(request, f"Charge added to {student.name}'s balance.")
    return redirect('payment_management')


@login_required
@require_POST
@require_roles(*PAYMENT_MANAGERS)
def set_payment_plan(request, student_id):
    student = get_object_or_404(StudentProfile, id=student_id)
    form = PaymentPlanForm(request.POST)
    if not form.is_valid():
        for error in form.errors.get('installments', []):
            messages.error(request, error)
        return redirect('payment_management')

    try:
        services.mutate_student(
            student.pk, reconciliation.set_payment_plan, form.cleaned_data['installments']
        )
    except SMISError as e:
        report_error(request, e)
    else:
        messages.success(request, f"Payment plan updated for {student.name}.")
    return redirect('payment_management')


@login_required
@require_POST
@require_roles(*CLEARANCE_MANAGERS)
def grant_clearance(request, student_id):
    student = get_object_or_404(StudentProfile, id=student_id)
    try:
        services.mutate_student(student.pk, reconciliation.grant_clearance)
    except SMISError as e:
        report_error(request, e)
    else:
        messages.success(request, f"Clearance granted to {student.name}.")
    return redirect('payment_management')


@login_required
@require_POST
@require_roles(*CLEARANCE_MANAGERS)
def remove_clearance(request, student_id):
    student = get_object_or_404(StudentProfile, id=student_id)
    try:
        services.mutate_student(student.pk, reconciliation.remove_clearance)
    except SMISError as e:
        report_error(request, e)
    else:
        messages.success(request, f"Clearance removed for {student.name}.")
    return redirect('payment_management')


@login_required
@require_POST
@require_roles(User.STUDENT)
def checkout(request):
    """
    Quote a card payment for the signed-in student: the JMD amount is
    validated against their balance and converted to USD cents.
    """
    profile = services.get_student_for_user(request.user)
    if profile is None:
        return JsonResponse({'error': 'No student record is linked to your account.'}, status=404)

    form = CheckoutForm(request.POST)
    if not form.is_valid():
        return JsonResponse({'error': 'Please enter an amount greater than 0.'}, status=400)

    student = services.load_student_data(profile)
    try:
        quote = gateway.checkout_quote(form.cleaned_data['amount'], student.balance)
    except SMISError as e:
        return JsonResponse({'error': str(e)}, status=400)

    return JsonResponse({
        'amount': str(quote['amount']),
        'currency': quote['currency'],
        'rate': str(quote['rate']),
        'usd': str(quote['usd']),
        'cents': quote['cents'],
    })


@login_required
@require_roles(*PAYMENT_MANAGERS)
def student_report_pdf(request, kind='balances'):
    if kind not in REPORTS:
        messages.error(request, "Unknown report.")
        return redirect('payment_management')

    students = [services.load_student_data(s) for s in StudentProfile.objects.all()]
    pdf = build_student_report(students, kind=kind)

    response = HttpResponse(pdf, content_type='application/pdf')
    filename = f"student_{kind}_{timezone.now():%Y%m%d}.pdf"
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
