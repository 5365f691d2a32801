from django.contrib import admin
from .models import Notification, StudentProfile


class NotificationInline(admin.TabularInline):
    model = Notification
    extra = 0


@admin.register(StudentProfile)
class StudentProfileAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'teacher', 'total_owed', 'total_paid', 'payment_status', 'clearance')
    list_filter = ('payment_status', 'clearance')
    search_fields = ('name', 'email', 'id_number')
    inlines = [NotificationInline]
