from django.urls import path

from .views import RoleBasedLoginView, create_staff_user, logout_view, profile

urlpatterns = [
    path(
        "login/",
        RoleBasedLoginView.as_view(redirect_authenticated_user=True),
        name="login",
    ),
    path("logout/", logout_view, name="logout"),
    path("profile/", profile, name="profile"),
    path("users/new/", create_staff_user, name="create_staff_user"),
]
