# accounts/views.py
from django.contrib import messages
from django.contrib.auth import logout
from django.contrib.auth.decorators import login_required
from django.contrib.auth.views import LoginView
from django.shortcuts import redirect, render
from django.urls import reverse_lazy

from students.services import get_student_for_user
from .forms import ProfileForm, StaffUserForm, StudentDetailsForm
from .middleware import DASHBOARDS
from .models import User
from .permissions import require_roles, role_of


def dashboard_url(user):
    dashboard = DASHBOARDS.get(role_of(user))
    # fallback (just in case)
    return reverse_lazy(dashboard) if dashboard else reverse_lazy("login")


class RoleBasedLoginView(LoginView):
    template_name = "login.html"

    def get_success_url(self):
        return dashboard_url(self.request.user)


def home(request):
    if not request.user.is_authenticated:
        return redirect("login")
    return redirect(dashboard_url(request.user))


def logout_view(request):
    """
    Logs out the user and redirects to login page.
    """
    logout(request)
    messages.success(request, "You have been successfully logged out.")
    return redirect("login")


@login_required
def profile(request):
    """Profile page; students also edit their ID number, phone and address."""
    student = get_student_for_user(request.user)

    if request.method == "POST":
        form = ProfileForm(request.POST, instance=request.user)
        details_form = StudentDetailsForm(request.POST, instance=student) if student else None
        if form.is_valid() and (details_form is None or details_form.is_valid()):
            form.save()
            if details_form is not None:
                details_form.save()
            messages.success(request, "Profile updated successfully!")
            return redirect("profile")
        messages.error(request, "Failed to update profile. Please check the form.")
    else:
        form = ProfileForm(instance=request.user)
        details_form = StudentDetailsForm(instance=student) if student else None

    context = {
        "form": form,
        "details_form": details_form,
        "student": student,
    }
    return render(request, "profile.html", context)


@login_required
@require_roles(User.ADMIN)
def create_staff_user(request):
    """Admins create teacher and accounts-admin logins."""
    if request.method == "POST":
        form = StaffUserForm(request.POST)
        if form.is_valid():
            user = form.save()
            messages.success(request, f"{user.get_role_display()} account '{user.username}' created.")
            return redirect("create_staff_user")
    else:
        form = StaffUserForm(initial={"role": User.TEACHER})

    return render(request, "accounts/create_user.html", {"form": form})
