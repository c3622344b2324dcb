from datetime import date
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from core.exceptions import BadRequest, NotFound
from core.models import AcademicYear, Semester, Course, Classroom
from enrollments.models import Student, Enrollment, Hold
from .models import TranscriptToken
from .services import TranscriptAssembler, snapshot


class TranscriptFixtureMixin:

    def make_world(self):
        year = AcademicYear.objects.create(name="2025/2026")
        self.fall = Semester.objects.create(year=year, name="Fall 2025", start_date=date(2025, 9, 1))
        self.spring = Semester.objects.create(year=year, name="Spring 2026", start_date=date(2026, 1, 15))
        self.student = Student.objects.create(student_number="S100", first_name="Noor", last_name="Haddad",
                                              program="BMus Performance", admission_date=date(2025, 9, 1))
        self.registrar = User.objects.create_user(username="reg", password="x", role=User.Role.REGISTRAR)

    def completed(self, code, credits, semester, grade, points, status=Enrollment.Status.COMPLETED):
        course = Course.objects.create(code=code, name=f"Course {code}", credits=credits)
        classroom = Classroom.objects.create(course=course, semester=semester, name="A")
        return Enrollment.objects.create(
            student=self.student, classroom=classroom, semester=semester, status=status,
            final_grade=grade, grade_points=Decimal(points), final_percentage=Decimal("80.00"),
            is_finalized=True,
        )


class TranscriptAssemblerTests(TranscriptFixtureMixin, TestCase):

    def setUp(self):
        self.make_world()

    def test_grouping_and_totals(self):
        # created out of order on purpose
        self.completed("MUS210", 4, self.spring, "B", "3.0")
        self.completed("MUS110", 3, self.fall, "A", "4.0")
        self.completed("MUS101", 3, self.fall, "B+", "3.3")
        self.completed("MUS220", 3, self.spring, "A", "4.0", status=Enrollment.Status.REGISTERED)

        t = TranscriptAssembler().generate(self.student.id)
        self.assertEqual([s["name"] for s in t["semesters"]], ["Fall 2025", "Spring 2026"])
        self.assertEqual([c["code"] for c in t["semesters"][0]["courses"]], ["MUS101", "MUS110"])
        self.assertEqual([c["code"] for c in t["semesters"][1]["courses"]], ["MUS210"])

        fall = t["semesters"][0]
        self.assertEqual(fall["semester_credits"], 6)
        self.assertEqual(fall["semester_points"], 21.9)
        self.assertEqual(fall["semester_gpa"], 3.65)
        self.assertEqual(fall["courses"][0]["points"], 9.9)

        self.assertEqual(t["cumulative_credits"], 10)
        self.assertEqual(t["cumulative_points"], 33.9)
        self.assertEqual(t["cumulative_gpa"], 3.39)
        self.assertFalse(t["is_official"])
        self.assertEqual(t["student"]["name"], self.student.full_name)

    def test_graded_course_without_points_still_counts_credits(self):
        self.completed("MUS101", 3, self.fall, "A", "4.0")
        e = self.completed("MUS102", 3, self.fall, "I", "0")
        Enrollment.objects.filter(id=e.id).update(grade_points=None)

        t = TranscriptAssembler().generate(self.student.id)
        fall = t["semesters"][0]
        self.assertEqual(fall["courses"][1]["points"], 0.0)
        self.assertEqual(fall["semester_credits"], 6)
        self.assertEqual(fall["semester_gpa"], 2.0)
        self.assertEqual(t["cumulative_gpa"], 2.0)

    def test_empty_transcript(self):
        t = TranscriptAssembler().generate(self.student.id)
        self.assertEqual(t["semesters"], [])
        self.assertEqual(t["cumulative_gpa"], 0.0)

    def test_unknown_student(self):
        with self.assertRaises(NotFound):
            TranscriptAssembler().generate(999999)

    def test_transcript_hold_blocks_official_only(self):
        self.completed("MUS101", 3, self.fall, "A", "4.0")
        Hold.objects.create(student=self.student, type=Hold.HoldType.FINANCIAL,
                            reason="Unpaid fees", blocks_transcript=True)
        with self.assertRaises(BadRequest):
            TranscriptAssembler().generate(self.student.id, official=True)
        t = TranscriptAssembler().generate(self.student.id, official=False)
        self.assertEqual(t["cumulative_credits"], 3)

    def test_released_or_non_transcript_holds_do_not_block(self):
        Hold.objects.create(student=self.student, type=Hold.HoldType.LIBRARY, blocks_transcript=False)
        Hold.objects.create(student=self.student, type=Hold.HoldType.FINANCIAL, blocks_transcript=True,
                            released_at=timezone.now())
        t = TranscriptAssembler().generate(self.student.id, official=True)
        self.assertTrue(t["is_official"])

    def test_snapshot_is_json_safe(self):
        data = snapshot(TranscriptAssembler().generate(self.student.id))
        self.assertEqual(data["student"]["admission_date"], "2025-09-01")
        self.assertIsInstance(data["generated_at"], str)


class TranscriptApiTests(TranscriptFixtureMixin, TestCase):

    def setUp(self):
        self.make_world()
        self.completed("MUS101", 3, self.fall, "A", "4.0")
        self.client = APIClient()

    def test_registrar_official_json(self):
        self.client.force_authenticate(self.registrar)
        resp = self.client.get(f"/api/transcripts/{self.student.id}/", {"official": "1"})
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["is_official"])
        self.assertEqual(resp.json()["cumulative_gpa"], 4.0)

    def test_official_blocked_by_hold(self):
        Hold.objects.create(student=self.student, type=Hold.HoldType.FINANCIAL, blocks_transcript=True)
        self.client.force_authenticate(self.registrar)
        resp = self.client.get(f"/api/transcripts/{self.student.id}/", {"official": "1"})
        self.assertEqual(resp.status_code, 400)
        resp = self.client.get(f"/api/transcripts/{self.student.id}/")
        self.assertEqual(resp.status_code, 200)

    def test_student_sees_only_own_unofficial(self):
        user = User.objects.create_user(username="noor", password="x", role=User.Role.STUDENT)
        self.student.user = user
        self.student.save()
        other = Student.objects.create(student_number="S200", first_name="Ola", last_name="Berg")

        self.client.force_authenticate(user)
        self.assertEqual(self.client.get(f"/api/transcripts/{self.student.id}/").status_code, 200)
        self.assertEqual(self.client.get(f"/api/transcripts/{self.student.id}/",
                                         {"official": "1"}).status_code, 403)
        self.assertEqual(self.client.get(f"/api/transcripts/{other.id}/").status_code, 403)

    @mock.patch("reports.views.render_pdf_from_html", return_value=b"%PDF-1.4 fake")
    def test_pdf_creates_verifiable_token(self, render):
        self.client.force_authenticate(self.registrar)
        resp = self.client.get(f"/api/transcripts/{self.student.id}/pdf/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Type"], "application/pdf")
        self.assertIn("S100_TRANSCRIPT_OFFICIAL.pdf", resp["Content-Disposition"])

        token = TranscriptToken.objects.get(student=self.student)
        self.assertTrue(token.is_official)
        self.assertEqual(len(token.pdf_sha1), 40)
        self.assertEqual(token.payload["cumulative_credits"], 3)
        html = render.call_args.args[0]
        self.assertIn(str(token.uid), html)

        page = self.client.get(f"/transcripts/verify/{token.uid}/")
        self.assertEqual(page.status_code, 200)
        self.assertContains(page, "VALID")
        self.assertContains(page, "S100")

    def test_verify_unknown_uid(self):
        resp = self.client.get("/transcripts/verify/00000000-0000-0000-0000-000000000000/")
        self.assertEqual(resp.status_code, 404)
