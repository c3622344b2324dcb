from datetime import date

from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

from core.models import AcademicYear, Semester, Course, Classroom
from .models import Student, Enrollment, Hold
from .repositories import EnrollmentRepository, HoldRepository


class EnrollmentRepositoryTests(TestCase):

    def setUp(self):
        year = AcademicYear.objects.create(name="2025/2026")
        self.fall = Semester.objects.create(year=year, name="Fall 2025", start_date=date(2025, 9, 1))
        self.student = Student.objects.create(student_number="S001", first_name="Lea", last_name="Kim")
        self.repo = EnrollmentRepository()

    def enroll(self, code, **kwargs):
        course = Course.objects.create(code=code, name=code, credits=3)
        classroom = Classroom.objects.create(course=course, semester=self.fall, name="A")
        return Enrollment.objects.create(student=self.student, classroom=classroom, semester=self.fall, **kwargs)

    def test_list_by_student_filters(self):
        graded = self.enroll("B200", status=Enrollment.Status.COMPLETED, final_grade="A", grade_points=4)
        self.enroll("A100", status=Enrollment.Status.COMPLETED)
        self.enroll("C300", status=Enrollment.Status.WITHDRAWN, final_grade="W", grade_points=0)

        rows = self.repo.list_by_student(self.student.id, statuses=[Enrollment.Status.COMPLETED])
        self.assertEqual([e.id for e in rows], [graded.id])
        rows = self.repo.list_by_student(self.student.id, statuses=[Enrollment.Status.COMPLETED],
                                         graded_only=False, transcript_order=True)
        self.assertEqual([e.classroom.course.code for e in rows], ["A100", "B200"])

    def test_clear_finalization_keeps_grades(self):
        e = self.enroll("A100", final_grade="B", is_finalized=True, finalized_at=timezone.now())
        self.assertEqual(self.repo.clear_finalization(e.classroom_id), 1)
        e.refresh_from_db()
        self.assertFalse(e.is_finalized)
        self.assertIsNone(e.finalized_at)
        self.assertEqual(e.final_grade, "B")

    def test_missing_rows(self):
        self.assertIsNone(self.repo.get(999999))
        self.assertIsNone(self.repo.get_student(999999))
        self.assertFalse(self.repo.class_exists(999999))


class HoldTests(TestCase):

    def setUp(self):
        self.student = Student.objects.create(student_number="S001", first_name="Lea", last_name="Kim")

    def test_one_active_hold_per_type(self):
        Hold.objects.create(student=self.student, type=Hold.HoldType.FINANCIAL)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Hold.objects.create(student=self.student, type=Hold.HoldType.FINANCIAL)

    def test_released_hold_frees_the_type(self):
        old = Hold.objects.create(student=self.student, type=Hold.HoldType.FINANCIAL,
                                  blocks_transcript=True, released_at=timezone.now())
        self.assertFalse(old.is_active)
        Hold.objects.create(student=self.student, type=Hold.HoldType.FINANCIAL, blocks_transcript=True)
        self.assertEqual(len(HoldRepository().list_active_blocking_transcript(self.student.id)), 1)
