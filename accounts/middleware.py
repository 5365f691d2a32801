from django.shortcuts import redirect
from django.urls import reverse

from .models import User
from .permissions import role_of

# Dashboard each role lands on
DASHBOARDS = {
    User.ADMIN: "student_management",
    User.TEACHER: "student_management",
    User.STUDENT: "student_dashboard",
    User.ACCOUNTS_ADMIN: "payment_management",
}


class RoleBasedAccessMiddleware:
    """
    Middleware to restrict access to URLs based on user role,
    with special handling for Django superusers.
    """

    def __init__(self, get_response):
        self.get_response = get_response

        # Allowed paths per role
        self.allowed_paths = {
            User.ADMIN: [
                "/admin/",
                "/students/",
                "/academics/",
                "/finance/",
            ],
            User.TEACHER: [
                "/students/",
                "/academics/",
            ],
            User.STUDENT: [
                "/students/",
                "/academics/",
                "/finance/checkout/",
            ],
            User.ACCOUNTS_ADMIN: [
                "/finance/",
            ],
        }

        # Paths everyone can access
        self.public_paths = [
            "/static/",
            "/accounts/",
        ]

    def __call__(self, request):
        path = request.path

        # Allow public paths
        for public_path in self.public_paths:
            if path.startswith(public_path):
                return self.get_response(request)

        # If user is not logged in, let Django handle it
        if not request.user.is_authenticated:
            return self.get_response(request)

        role = role_of(request.user)
        if path == "/":
            return self.get_response(request)

        for allowed_path in self.allowed_paths.get(role, []):
            if path.startswith(allowed_path):
                return self.get_response(request)

        # Not allowed → redirect to user's dashboard
        dashboard = DASHBOARDS.get(role)
        if dashboard is None:
            return redirect(reverse("logout"))
        return redirect(reverse(dashboard))
