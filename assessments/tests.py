from datetime import date

from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from core.models import AcademicYear, Semester, Course, Classroom
from enrollments.models import Student, Enrollment
from .models import GradeComponent, GradeEntry
from .utils import lecturer_can_edit


class GradeEntryApiTests(TestCase):

    def setUp(self):
        year = AcademicYear.objects.create(name="2025/2026")
        semester = Semester.objects.create(year=year, name="Fall 2025", start_date=date(2025, 9, 1))
        self.lecturer = User.objects.create_user(username="lect", password="x", role=User.Role.LECTURER)
        self.other = User.objects.create_user(username="other", password="x", role=User.Role.LECTURER)
        course = Course.objects.create(code="MUS201", name="Harmony", credits=3)
        self.classroom = Classroom.objects.create(course=course, semester=semester, name="A", lecturer=self.lecturer)
        self.component = GradeComponent.objects.create(classroom=self.classroom, name="Quiz 1",
                                                       max_score=20, weight=10)

        def enroll(number, **kwargs):
            student = Student.objects.create(student_number=number, first_name="Sam", last_name=number)
            return Enrollment.objects.create(student=student, classroom=self.classroom, semester=semester, **kwargs)

        self.open = enroll("S001")
        self.locked = enroll("S002", is_finalized=True)
        self.dropped = enroll("S003", status=Enrollment.Status.DROPPED)

        self.client = APIClient()
        self.client.force_authenticate(self.lecturer)

    def test_lecturer_can_edit(self):
        self.assertTrue(lecturer_can_edit(self.lecturer, self.classroom.id))
        self.assertFalse(lecturer_can_edit(self.other, self.classroom.id))

    def test_create_entry(self):
        resp = self.client.post("/api/grade-entries/", {
            "component": self.component.id, "enrollment": self.open.id, "score": "17.5",
        }, format="json")
        self.assertEqual(resp.status_code, 201)
        entry = GradeEntry.objects.get(id=resp.json()["id"])
        self.assertEqual(entry.entered_by, self.lecturer)

    def test_score_out_of_range(self):
        for score in ["-1", "20.01"]:
            with self.subTest(score=score):
                resp = self.client.post("/api/grade-entries/", {
                    "component": self.component.id, "enrollment": self.open.id, "score": score,
                }, format="json")
                self.assertEqual(resp.status_code, 400)
        self.assertFalse(GradeEntry.objects.exists())

    def test_finalized_enrollment_is_locked(self):
        resp = self.client.post("/api/grade-entries/", {
            "component": self.component.id, "enrollment": self.locked.id, "score": "10",
        }, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("finalized", resp.json()["detail"])

        entry = GradeEntry.objects.create(component=self.component, enrollment=self.locked, score=5)
        resp = self.client.patch(f"/api/grade-entries/{entry.id}/", {"score": "6"}, format="json")
        self.assertEqual(resp.status_code, 400)
        resp = self.client.delete(f"/api/grade-entries/{entry.id}/")
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(GradeEntry.objects.filter(id=entry.id).exists())

    def test_other_lecturer_forbidden(self):
        self.client.force_authenticate(self.other)
        resp = self.client.post("/api/grade-entries/", {
            "component": self.component.id, "enrollment": self.open.id, "score": "10",
        }, format="json")
        self.assertEqual(resp.status_code, 403)

    def test_bulk_upsert(self):
        GradeEntry.objects.create(component=self.component, enrollment=self.open, score=5)
        resp = self.client.post("/api/grade-entries/bulk/", {
            "component": self.component.id,
            "entries": [
                {"enrollment": self.open.id, "score": 18},
                {"enrollment": self.dropped.id, "score": 12},
            ],
        }, format="json")
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(len(body["updated"]), 1)
        self.assertEqual(body["created"], [])
        self.assertEqual(body["skipped"][0]["enrollment"], self.dropped.id)
        self.assertEqual(GradeEntry.objects.get(enrollment=self.open).score, 18)

    def test_bulk_rejects_finalized_targets(self):
        resp = self.client.post("/api/grade-entries/bulk/", {
            "component": self.component.id,
            "entries": [
                {"enrollment": self.open.id, "score": 18},
                {"enrollment": self.locked.id, "score": 12},
            ],
        }, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(GradeEntry.objects.exists())

    def test_bulk_rejects_bad_score(self):
        resp = self.client.post("/api/grade-entries/bulk/", {
            "component": self.component.id,
            "entries": [{"enrollment": self.open.id, "score": 25}],
        }, format="json")
        self.assertEqual(resp.status_code, 400)

    def test_filter_by_component(self):
        GradeEntry.objects.create(component=self.component, enrollment=self.open, score=5)
        other = GradeComponent.objects.create(classroom=self.classroom, name="Quiz 2", max_score=20, weight=10)
        GradeEntry.objects.create(component=other, enrollment=self.open, score=7)
        resp = self.client.get("/api/grade-entries/", {"component": self.component.id})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([r["score"] for r in resp.json()], [5.0])

    def test_bulk_rejects_non_finite_score(self):
        for score in ["NaN", "Infinity"]:
            with self.subTest(score=score):
                resp = self.client.post("/api/grade-entries/bulk/", {
                    "component": self.component.id,
                    "entries": [{"enrollment": self.open.id, "score": score}],
                }, format="json")
                self.assertEqual(resp.status_code, 400)
        self.assertFalse(GradeEntry.objects.exists())


class GradeComponentApiTests(TestCase):

    def setUp(self):
        year = AcademicYear.objects.create(name="2025/2026")
        semester = Semester.objects.create(year=year, name="Fall 2025", start_date=date(2025, 9, 1))
        self.lecturer = User.objects.create_user(username="lect", password="x", role=User.Role.LECTURER)
        course = Course.objects.create(code="MUS301", name="Counterpoint", credits=3)
        self.classroom = Classroom.objects.create(course=course, semester=semester, name="A", lecturer=self.lecturer)
        self.midterm = GradeComponent.objects.create(classroom=self.classroom, name="Midterm",
                                                     max_score=100, weight=60)
        student = Student.objects.create(student_number="S001", first_name="Ines", last_name="Roy")
        self.enrollment = Enrollment.objects.create(student=student, classroom=self.classroom, semester=semester)

        self.client = APIClient()
        self.client.force_authenticate(self.lecturer)

    def post_component(self, name, weight):
        return self.client.post("/api/grade-components/", {
            "classroom": self.classroom.id, "name": name, "max_score": "100", "weight": weight,
        }, format="json")

    def test_weights_cannot_exceed_100(self):
        resp = self.post_component("Final", "90")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("exceed 100", resp.json()["detail"])
        self.assertEqual(self.post_component("Final", "40").status_code, 201)

        resp = self.client.patch(f"/api/grade-components/{self.midterm.id}/", {"weight": "70"}, format="json")
        self.assertEqual(resp.status_code, 400)
        resp = self.client.patch(f"/api/grade-components/{self.midterm.id}/", {"weight": "55"}, format="json")
        self.assertEqual(resp.status_code, 200)

    def test_validate_weights(self):
        url = "/api/grade-components/validate-weights/"
        resp = self.client.get(url, {"classroom": self.classroom.id})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["total"], 60.0)
        self.assertFalse(resp.json()["valid"])

        self.post_component("Final", "40")
        body = self.client.get(url, {"classroom": self.classroom.id}).json()
        self.assertTrue(body["valid"])
        self.assertEqual([c["name"] for c in body["components"]], ["Midterm", "Final"])
        self.assertEqual(self.client.get(url).status_code, 400)

    def test_component_with_entries_cannot_be_deleted(self):
        GradeEntry.objects.create(component=self.midterm, enrollment=self.enrollment, score=80)
        Enrollment.objects.filter(id=self.enrollment.id).update(is_finalized=True)
        resp = self.client.delete(f"/api/grade-components/{self.midterm.id}/")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(GradeEntry.objects.filter(component=self.midterm).count(), 1)

    def test_empty_component_can_be_deleted(self):
        resp = self.client.delete(f"/api/grade-components/{self.midterm.id}/")
        self.assertEqual(resp.status_code, 204)
        self.assertFalse(GradeComponent.objects.filter(id=self.midterm.id).exists())

    def test_max_score_locked_once_graded(self):
        url = f"/api/grade-components/{self.midterm.id}/"
        self.assertEqual(self.client.patch(url, {"max_score": "50"}, format="json").status_code, 200)

        GradeEntry.objects.create(component=self.midterm, enrollment=self.enrollment, score=40)
        resp = self.client.patch(url, {"max_score": "80"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.midterm.refresh_from_db()
        self.assertEqual(self.midterm.max_score, 50)
        # other fields stay editable
        self.assertEqual(self.client.patch(url, {"name": "Mid-semester"}, format="json").status_code, 200)
