from django.urls import path
from . import views


urlpatterns = [
    # Payments
    path('payments/', views.payment_management, name='payment_management'),
    path('payments/<int:student_id>/record/', views.record_payment, name='record_payment'),
    path('payments/<int:student_id>/charge/', views.record_charge, name='record_charge'),
    path('payments/<int:student_id>/plan/', views.set_payment_plan, name='set_payment_plan'),

    # Clearance
    path('clearance/<int:student_id>/grant/', views.grant_clearance, name='grant_clearance'),
    path('clearance/<int:student_id>/remove/', views.remove_clearance, name='remove_clearance'),

    # Card checkout (students)
    path('checkout/', views.checkout, name='checkout'),

    # Reports
    path('reports/<str:kind>/', views.student_report_pdf, name='student_report_pdf'),
]
