# academics/views.py
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db.models import Q
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from accounts.models import User
from accounts.permissions import GRADE_EDITORS, has_role, require_roles, role_of
from core.exceptions import DuplicateSubject
from students.services import get_student_for_user, load_student_data

from . import grading
from .forms import CourseForm, CourseTestForm, ResourceForm, SubjectNameForm
from .models import Course, CourseTest, Resource

logger = logging.getLogger(__name__)


@login_required
def course_catalog(request):
    """Catalog of courses; admins create courses, students enroll from here."""
    if request.method == "POST":
        if not has_role(request.user, User.ADMIN):
            messages.error(request, "Only administrators can add courses.")
            return redirect("course_catalog")
        form = CourseForm(request.POST)
        if form.is_valid():
            course = form.save()
            logger.info("Course %s created by %s", course.pk, request.user.pk)
            messages.success(request, f"Course '{course.name}' added!")
            return redirect("course_catalog")
    else:
        form = CourseForm()

    courses = Course.objects.select_related("teacher").all()
    if role_of(request.user) == User.TEACHER and request.GET.get("mine"):
        courses = courses.filter(teacher=request.user)

    enrolled_keys = set()
    student = get_student_for_user(request.user)
    if student:
        enrolled_keys = {c.key for c in load_student_data(student).courses}

    context = {
        "courses": courses,
        "form": form,
        "subject_form": SubjectNameForm(),
        "enrolled_keys": enrolled_keys,
    }
    return render(request, "academics/course_catalog.html", context)


@login_required
@require_POST
@require_roles(User.ADMIN)
def add_catalog_subject(request, course_id):
    """Add a subject to a catalog course's template. Existing enrollments keep their copy."""
    course = get_object_or_404(Course, id=course_id)
    form = SubjectNameForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Please enter a subject name.")
        return redirect("course_catalog")

    record = course.to_record()
    name = form.cleaned_data["name"]
    try:
        grading.ensure_unique_subject(record, name)
    except DuplicateSubject as e:
        messages.error(request, str(e))
        return redirect("course_catalog")

    course.apply_record(grading.add_subject(record, name))
    course.save(update_fields=["subjects", "updated_at"])
    messages.success(request, f"Subject '{name}' added to {course.name}.")
    return redirect("course_catalog")


@login_required
def materials(request):
    """Learning resources. Teachers and admins upload; students see their courses' resources."""
    if request.method == "POST":
        if not has_role(request.user, *GRADE_EDITORS):
            messages.error(request, "Only teachers and administrators can upload resources.")
            return redirect("materials")
        form = ResourceForm(request.POST)
        if form.is_valid():
            resource = form.save(commit=False)
            resource.uploaded_by = request.user
            resource.save()
            messages.success(request, f"Resource '{resource.name}' uploaded.")
            return redirect("materials")
        messages.error(request, "Failed to upload resource.")
    else:
        form = ResourceForm()

    resources = Resource.objects.select_related("course", "uploaded_by")
    course_filter = request.GET.get("course", "all")

    if role_of(request.user) == User.STUDENT:
        student = get_student_for_user(request.user)
        keys = [c.key for c in load_student_data(student).courses] if student else []
        resources = resources.filter(course_id__in=[k for k in keys if k.isdigit()]).filter(
            Q(recipient__isnull=True) | Q(recipient=request.user)
        )

    if course_filter != "all":
        resources = resources.filter(course_id=course_filter)

    context = {
        "resources": resources,
        "form": form,
        "courses": Course.objects.all(),
        "course_filter": course_filter,
    }
    return render(request, "academics/materials.html", context)


@login_required
def course_tests(request):
    if request.method == "POST":
        if not has_role(request.user, *GRADE_EDITORS):
            messages.error(request, "Only teachers and administrators can create tests.")
            return redirect("course_tests")
        form = CourseTestForm(request.POST)
        if form.is_valid():
            test = form.save()
            messages.success(request, f"Test '{test.title}' created.")
            return redirect("course_tests")
    else:
        form = CourseTestForm()

    context = {
        "tests": CourseTest.objects.select_related("course"),
        "form": form,
    }
    return render(request, "academics/tests.html", context)
