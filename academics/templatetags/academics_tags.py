from django import template

from academics import grading

register = template.Library()


@register.filter
def course_average(course):
    """Average of a course record's subject finals, or N/A."""
    return grading.course_average(course.subjects)


@register.filter
def classwork(subject):
    return [(key, subject.grades[key]) for key in grading.classwork_components(subject)]


@register.filter
def grade(subject, key):
    return subject.grades.get(key, "")
