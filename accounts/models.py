from django.db import models
from django.contrib.auth.models import AbstractUser

from students.records import sanitize_user

# Create your models here.
class User(AbstractUser):
    STUDENT = 'student'
    TEACHER = 'teacher'
    ADMIN = 'admin'
    ACCOUNTS_ADMIN = 'accountsadmin'

    ROLE_CHOICES = (
        (STUDENT, 'Student'),
        (TEACHER, 'Teacher'),
        (ADMIN, 'Admin'),
        (ACCOUNTS_ADMIN, 'Accounts Admin'),
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=STUDENT)
    profile_picture = models.URLField(blank=True)

    @property
    def display_name(self):
        return self.get_full_name() or self.username

    def to_record(self):
        return sanitize_user({
            "id": str(self.pk),
            "name": self.display_name,
            "email": self.email,
            "role": self.role,
            "profilePicture": self.profile_picture,
        })

    def __str__(self):
        return self.username
