import json

from django import forms

from .models import Course, CourseTest, Resource


class CourseForm(forms.ModelForm):
    class Meta:
        model = Course
        fields = ["name", "fee", "description", "teacher"]

        widgets = {
            "name": forms.TextInput(attrs={
                "class": "form-control",
                "placeholder": "e.g Computer Science"
            }),
            "fee": forms.NumberInput(
                attrs={
                    "class": "form-control",
                    "min": "0",
                    "step": "0.01",
                }
            ),
            "description": forms.Textarea(attrs={
                "class": "form-control",
                "rows": 3,
                "placeholder": "Optional description"
            }),
            "teacher": forms.Select(attrs={"class": "form-select"}),
        }

    def clean_fee(self):
        fee = self.cleaned_data["fee"]
        if fee < 0:
            raise forms.ValidationError("Fee cannot be negative.")
        return fee


class SubjectNameForm(forms.Form):
    name = forms.CharField(
        max_length=100,
        widget=forms.TextInput(attrs={
            "class": "form-control",
            "placeholder": "Subject name"
        })
    )

    def clean_name(self):
        return self.cleaned_data["name"].strip()


class ResourceForm(forms.ModelForm):
    class Meta:
        model = Resource
        fields = ["course", "name", "type", "url", "description", "recipient"]

        widgets = {
            "course": forms.Select(attrs={"class": "form-select"}),
            "name": forms.TextInput(attrs={"class": "form-control", "placeholder": "Title"}),
            "type": forms.Select(attrs={"class": "form-select"}),
            "url": forms.URLInput(attrs={"class": "form-control", "placeholder": "https://"}),
            "description": forms.Textarea(attrs={"class": "form-control", "rows": 2}),
            "recipient": forms.Select(attrs={"class": "form-select"}),
        }


class CourseTestForm(forms.ModelForm):
    """
    Questions are entered as JSON:
    ``[{"question": "...", "options": ["a", "b"], "correctAnswer": "a"}]``
    """
    questions = forms.CharField(
        widget=forms.Textarea(attrs={"class": "form-control", "rows": 6}),
        initial="[]",
    )

    class Meta:
        model = CourseTest
        fields = ["course", "title", "questions"]

        widgets = {
            "course": forms.Select(attrs={"class": "form-select"}),
            "title": forms.TextInput(attrs={"class": "form-control", "placeholder": "Test title"}),
        }

    def clean_questions(self):
        raw = self.cleaned_data["questions"]
        try:
            questions = json.loads(raw)
        except ValueError:
            raise forms.ValidationError("Questions must be valid JSON.")
        if not isinstance(questions, list):
            raise forms.ValidationError("Questions must be a list.")
        for question in questions:
            if not isinstance(question, dict) or not question.get("question"):
                raise forms.ValidationError("Every question needs a 'question' text.")
            options = question.get("options") or []
            if options and question.get("correctAnswer") not in options:
                raise forms.ValidationError(
                    f"Correct answer for '{question['question']}' must be one of its options."
                )
        return questions
