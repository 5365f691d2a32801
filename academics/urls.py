from django.urls import path
from . import views

urlpatterns = [
    path('courses/', views.course_catalog, name='course_catalog'),
    path('courses/<int:course_id>/subjects/', views.add_catalog_subject, name='add_catalog_subject'),
    path('materials/', views.materials, name='materials'),
    path('tests/', views.course_tests, name='course_tests'),
]
