# academics/models.py
from django.conf import settings
from django.db import models

from students.records import (
    Course as CourseRecord,
    safe_decimal,
    sanitize_resource,
    sanitize_subject,
    sanitize_test,
)


class Course(models.Model):
    """
    Catalog course. ``subjects`` is the template copied into a student's
    record on enrollment: a list of ``{"name", "grades", "comments"}``.
    """
    name = models.CharField(max_length=200, unique=True)
    fee = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    description = models.TextField(blank=True)
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='courses_taught',
        limit_choices_to={'role': 'teacher'},
    )
    subjects = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    def to_record(self):
        return CourseRecord(
            id=str(self.pk),
            name=self.name,
            fee=safe_decimal(self.fee),
            subjects=tuple(sanitize_subject(s) for s in self.subjects or []),
            resources=tuple(r.to_record() for r in self.resources.all()),
            tests=tuple(t.to_record() for t in self.tests.all()),
            teacher_id=str(self.teacher_id) if self.teacher_id else "",
            description=self.description,
        )

    def apply_record(self, record):
        """Write back the parts of a course record that live on this row."""
        self.name = record.name
        self.fee = record.fee
        self.description = record.description
        self.subjects = [s.to_dict() for s in record.subjects]


class Resource(models.Model):
    TYPE_CHOICES = [
        ('pdf', 'PDF'),
        ('video', 'Video'),
        ('link', 'Link'),
    ]

    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='resources')
    name = models.CharField(max_length=200)
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='pdf')
    url = models.URLField()
    description = models.TextField(blank=True)
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='uploaded_resources',
    )
    # Optional single student the resource is addressed to
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='received_resources',
    )
    upload_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-upload_date']

    def __str__(self):
        return f"{self.name} ({self.course})"

    def to_record(self):
        return sanitize_resource({
            "id": str(self.pk),
            "courseId": str(self.course_id),
            "name": self.name,
            "type": self.type,
            "url": self.url,
            "uploadDate": self.upload_date.isoformat() if self.upload_date else "",
        })


class CourseTest(models.Model):
    """
    Multiple-choice test attached to a course. ``questions`` is a list of
    ``{"question", "options", "correctAnswer"}``.
    """
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='tests')
    title = models.CharField(max_length=200)
    questions = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'test'

    def __str__(self):
        return self.title

    def to_record(self):
        return sanitize_test({
            "id": str(self.pk),
            "courseId": str(self.course_id),
            "title": self.title,
            "questions": self.questions,
            "createdAt": self.created_at.isoformat() if self.created_at else "",
        })
