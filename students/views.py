# students/views.py
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db import transaction
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from academics import grading
from academics.models import Course
from accounts.models import User
from accounts.permissions import GRADE_EDITORS, require_roles, role_of
from core.exceptions import PersistenceError, SMISError

from . import notifications, services
from .forms import AddStudentForm, GradeForm, NotificationForm, SubjectForm
from .models import StudentProfile

logger = logging.getLogger(__name__)


def report_error(request, error):
    """Map a failed operation onto a flash message."""
    if isinstance(error, PersistenceError):
        messages.warning(request, str(error))
    else:
        messages.error(request, str(error))


def managed_students(user):
    """Students a teacher or admin may edit. Teachers only see their own."""
    students = StudentProfile.objects.select_related('teacher', 'user')
    if role_of(user) == User.TEACHER:
        students = students.filter(teacher=user)
    return students


@login_required
@require_roles(User.STUDENT)
def student_dashboard(request):
    profile = services.get_student_for_user(request.user)
    if profile is None:
        messages.error(request, "No student record is linked to your account.")
        return render(request, 'student/dashboard.html', {'student': None})

    student = services.load_student_data(profile)
    enrolled = {c.key for c in student.courses}
    available_courses = [c for c in Course.objects.all() if str(c.pk) not in enrolled]

    context = {
        'profile': profile,
        'student': student,
        'available_courses': available_courses,
        'unread_count': notifications.unread_count(student),
        'installments': student.payment_plan.installments if student.payment_plan else (),
    }
    return render(request, 'student/dashboard.html', context)


@login_required
@require_POST
@require_roles(User.STUDENT)
def enroll_course(request, course_id):
    profile = services.get_student_for_user(request.user)
    course = get_object_or_404(Course, id=course_id)
    if profile is None:
        messages.error(request, "No student record is linked to your account.")
        return redirect('student_dashboard')

    try:
        services.enroll_student(profile.pk, course)
    except SMISError as e:
        report_error(request, e)
    else:
        messages.success(request, f"Enrolled in {course.name}. {course.fee:,.2f} added to your balance.")
    return redirect('student_dashboard')


@login_required
@require_POST
@require_roles(User.STUDENT)
def mark_notification_read(request, notification_id):
    profile = services.get_student_for_user(request.user)
    if profile is None:
        return redirect('student_dashboard')

    try:
        services.mutate_student(profile.pk, notifications.mark_notification_read, notification_id)
    except SMISError as e:
        report_error(request, e)
    return redirect('student_dashboard')


@login_required
@require_roles(*GRADE_EDITORS)
def student_management(request):
    """Teachers and admins: students, their enrolled courses and grades."""
    query = request.GET.get('q', '').strip()
    students = managed_students(request.user)
    if query:
        students = students.filter(name__icontains=query)

    rows = [
        {'profile': profile, 'student': services.load_student_data(profile)}
        for profile in students
    ]

    context = {
        'rows': rows,
        'query': query,
        'grade_form': GradeForm(),
        'subject_form': SubjectForm(),
        'notification_form': NotificationForm(),
        'add_student_form': AddStudentForm() if role_of(request.user) == User.ADMIN else None,
    }
    return render(request, 'students/management.html', context)


@login_required
@require_POST
@require_roles(*GRADE_EDITORS)
def update_grade(request, student_id):
    profile = get_object_or_404(managed_students(request.user), pk=student_id)
    form = GradeForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Invalid grade submission.")
        return redirect('student_management')

    data = form.cleaned_data
    try:
        services.update_grade(
            profile.pk, data['course'], data['subject'], data['component'], data['value']
        )
    except SMISError as e:
        report_error(request, e)
    else:
        messages.success(request, f"{data['subject']} updated for {profile.name}.")
    return redirect('student_management')


@login_required
@require_POST
@require_roles(*GRADE_EDITORS)
def add_subject(request, student_id):
    profile = get_object_or_404(managed_students(request.user), pk=student_id)
    form = SubjectForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please enter a subject name.")
        return redirect('student_management')

    course_key = form.cleaned_data['course']
    name = form.cleaned_data['name']
    try:
        services.mutate_student(profile.pk, grading.add_student_subject, course_key, name)
    except SMISError as e:
        report_error(request, e)
    else:
        messages.success(request, f"Subject '{name}' added for {profile.name}.")
    return redirect('student_management')


@login_required
@require_POST
@require_roles(User.ADMIN)
def add_student(request):
    form = AddStudentForm(request.POST)
    if form.is_valid():
        with transaction.atomic():
            user = User.objects.create_user(
                username=form.cleaned_data['username'],
                password=form.cleaned_data['password'],
                email=form.cleaned_data['email'],
                role=User.STUDENT,
            )
            profile = form.save(commit=False)
            profile.user = user
            profile.save()
        logger.info("Student %s created by %s", profile.pk, request.user.pk)
        messages.success(request, f"Student '{profile.name}' added!")
    else:
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
    return redirect('student_management')


@login_required
@require_POST
@require_roles(User.ADMIN)
def send_notification(request, student_id):
    profile = get_object_or_404(StudentProfile, pk=student_id)
    form = NotificationForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Notification message cannot be empty.")
        return redirect('student_management')

    try:
        services.notify(profile.pk, form.cleaned_data['message'], form.cleaned_data['type'])
    except SMISError as e:
        report_error(request, e)
    else:
        messages.success(request, f"Notification sent to {profile.name}.")
    return redirect('student_management')
