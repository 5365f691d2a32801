# students/forms.py
from django import forms

from accounts.models import User
from .models import StudentProfile


class AddStudentForm(forms.ModelForm):
    """Admin form creating a student login together with its profile."""
    username = forms.CharField(
        max_length=150,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Username'})
    )
    password = forms.CharField(
        widget=forms.PasswordInput(attrs={'class': 'form-control', 'placeholder': 'Password'})
    )

    class Meta:
        model = StudentProfile
        fields = ['name', 'email', 'teacher', 'id_number', 'phone_number']
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Full name'}),
            'email': forms.EmailInput(attrs={'class': 'form-control', 'placeholder': 'Email'}),
            'teacher': forms.Select(attrs={'class': 'form-select'}),
            'id_number': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'ID Number'}),
            'phone_number': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Phone Number'}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['teacher'].queryset = User.objects.filter(role=User.TEACHER)
        self.fields['teacher'].required = False

    def clean_username(self):
        username = self.cleaned_data['username']
        if User.objects.filter(username=username).exists():
            raise forms.ValidationError("That username is already taken.")
        return username


class NotificationForm(forms.Form):
    message = forms.CharField(
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3, 'placeholder': 'Message'})
    )
    type = forms.CharField(
        required=False,
        max_length=30,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. payment, grades'})
    )


class GradeForm(forms.Form):
    """One grade component: ``C1``.. for classwork, ``exam``, or ``comments``."""
    course = forms.CharField(widget=forms.HiddenInput)
    subject = forms.CharField(widget=forms.HiddenInput)
    component = forms.CharField(
        max_length=20,
        widget=forms.TextInput(attrs={'class': 'form-control form-control-sm', 'placeholder': 'C1 / exam'})
    )
    value = forms.CharField(
        required=False,
        widget=forms.TextInput(attrs={'class': 'form-control form-control-sm'})
    )

    def clean_component(self):
        return self.cleaned_data['component'].strip()


class SubjectForm(forms.Form):
    course = forms.CharField(widget=forms.HiddenInput)
    name = forms.CharField(
        max_length=100,
        widget=forms.TextInput(attrs={'class': 'form-control form-control-sm', 'placeholder': 'Subject name'})
    )

    def clean_name(self):
        return self.cleaned_data['name'].strip()
