from django.urls import path
from . import views

urlpatterns = [
    path('dashboard/', views.student_dashboard, name='student_dashboard'),
    path('enroll/<int:course_id>/', views.enroll_course, name='enroll_course'),
    path('notifications/<str:notification_id>/read/', views.mark_notification_read, name='mark_notification_read'),

    # Teacher / admin
    path('manage/', views.student_management, name='student_management'),
    path('manage/add/', views.add_student, name='add_student'),
    path('manage/<int:student_id>/grade/', views.update_grade, name='update_grade'),
    path('manage/<int:student_id>/subject/', views.add_subject, name='add_subject'),
    path('manage/<int:student_id>/notify/', views.send_notification, name='send_notification'),
]
