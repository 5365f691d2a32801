from django.contrib import admin
from .models import Course, CourseTest, Resource
# Register your models here.


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ('name', 'fee', 'teacher', 'updated_at')
    search_fields = ('name',)


@admin.register(Resource)
class ResourceAdmin(admin.ModelAdmin):
    list_display = ('name', 'course', 'type', 'uploaded_by', 'upload_date')
    list_filter = ('type', 'course')


admin.site.register(CourseTest)
