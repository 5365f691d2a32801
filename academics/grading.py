"""
Grade engine.

Pure functions over ``students.records`` values. A subject's final grade is
a 40/60 blend of the classwork average and the exam score:

    final = mean(C1, C2, ...) * 0.4 + exam * 0.6

A component is read by its leading number, so "90%" counts as 90 and
"1_000" as 1. A component with no leading number is left out of the
average instead of counting as zero or raising, and a subject that lacks
either classwork or an exam keeps whatever final it already had.
"""

import logging
import math
import re
from dataclasses import replace

from core.exceptions import DuplicateSubject, InvalidGradeComponent, RecordNotFound
from students.records import Subject

logger = logging.getLogger(__name__)

CLASSWORK_PREFIX = "C"
EXAM_KEY = "exam"
FINAL_KEY = "final"
COMMENTS_KEY = "comments"

CLASSWORK_WEIGHT = 0.4
EXAM_WEIGHT = 0.6

# Shown when a course has no subject with a usable final grade.
NOT_AVAILABLE = "N/A"

LEADING_NUMBER = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_grade(value):
    """Leading number of ``value`` as a finite float, or ``None`` if there is none."""
    if isinstance(value, bool) or value is None:
        return None
    match = LEADING_NUMBER.match(str(value))
    if match is None:
        return None
    number = float(match.group(1))
    if not math.isfinite(number):
        return None
    return number


def format_grade(value):
    return f"{value:.2f}"


def classwork_components(subject):
    """Classwork keys of ``subject`` in their stored order."""
    return [key for key in subject.grades if key.startswith(CLASSWORK_PREFIX)]


def compute_final(grades):
    """
    Final grade for a grades mapping, or ``None`` when it cannot be derived.

    Needs at least one parsable classwork component and a parsable exam.
    """
    classwork = []
    for key, raw in grades.items():
        if not key.startswith(CLASSWORK_PREFIX):
            continue
        value = parse_grade(raw)
        if value is None:
            logger.debug("Ignoring unparsable grade component %s=%r", key, raw)
            continue
        classwork.append(value)

    exam = parse_grade(grades.get(EXAM_KEY))
    if not classwork or exam is None:
        return None

    classwork_average = sum(classwork) / len(classwork)
    return format_grade(classwork_average * CLASSWORK_WEIGHT + exam * EXAM_WEIGHT)


def update_component_grade(subject, component_key, value):
    """Set one grade component (or the comments) and re-derive the final."""
    if component_key == COMMENTS_KEY:
        return replace(subject, comments=value)
    if component_key == FINAL_KEY:
        raise InvalidGradeComponent("The final grade is derived and cannot be set directly.")

    grades = dict(subject.grades)
    grades[component_key] = value
    final = compute_final(grades)
    if final is not None:
        grades[FINAL_KEY] = final
    return replace(subject, grades=grades)


def course_average(subjects):
    """Unweighted mean of the subjects' finals, or ``NOT_AVAILABLE``."""
    finals = []
    for subject in subjects:
        value = parse_grade(subject.grades.get(FINAL_KEY))
        if value is not None:
            finals.append(value)
    if not finals:
        return NOT_AVAILABLE
    return format_grade(sum(finals) / len(finals))


def ensure_unique_subject(course, subject_name):
    if course.find_subject(subject_name) is not None:
        raise DuplicateSubject(f"{course.name} already has a subject named {subject_name}.")


def add_subject(course, subject_name):
    """Append an empty subject. Name uniqueness is left to the caller."""
    return replace(course, subjects=course.subjects + (Subject(name=subject_name),))


# =============================================================================
# ENROLLED COURSES
# =============================================================================

def _replace_course(student, course_key, transform):
    courses = []
    found = False
    for course in student.courses:
        if not found and course.key == course_key:
            course = transform(course)
            found = True
        courses.append(course)
    if not found:
        raise RecordNotFound(f"Student is not enrolled in course {course_key}.")
    return replace(student, courses=tuple(courses))


def update_student_grade(student, course_key, subject_name, component_key, value):
    """Apply ``update_component_grade`` to one subject of an enrolled course."""

    def transform(course):
        subjects = []
        found = False
        for subject in course.subjects:
            if not found and subject.name == subject_name:
                subject = update_component_grade(subject, component_key, value)
                found = True
            subjects.append(subject)
        if not found:
            raise RecordNotFound(f"{course.name} has no subject named {subject_name}.")
        return replace(course, subjects=tuple(subjects))

    return _replace_course(student, course_key, transform)


def add_student_subject(student, course_key, subject_name):
    """Add a subject to an enrolled copy, refusing duplicate names."""

    def transform(course):
        ensure_unique_subject(course, subject_name)
        return add_subject(course, subject_name)

    return _replace_course(student, course_key, transform)
