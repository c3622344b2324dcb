from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest import mock

from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from accounts.models import User
from assessments.models import GradeComponent, GradeEntry
from core.exceptions import BadRequest, NotFound
from core.models import AcademicYear, Semester, Course, Classroom
from enrollments.models import Student, Enrollment
from enrollments.repositories import EnrollmentRepository
from .defaults import DEFAULT_SCALE_NAME, default_definitions
from .models import GradeScale
from .services import (
    FALLBACK_GRADE, GPAAggregator, GradeScaleRegistry, FinalGradeResolver,
    gpa, match_grade, score_components, validate_definitions,
)

STANDARD = [SimpleNamespace(**d) for d in default_definitions()]


class MatchGradeTests(SimpleTestCase):

    def test_covered_percentages(self):
        self.assertEqual(match_grade(STANDARD, 74)["letter"], "C+")
        self.assertEqual(match_grade(STANDARD, 74)["grade_points"], 2.3)
        self.assertEqual(match_grade(STANDARD, 95)["letter"], "A+")
        self.assertEqual(match_grade(STANDARD, 100)["letter"], "A+")
        self.assertEqual(match_grade(STANDARD, 0)["letter"], "F")
        self.assertEqual(match_grade(STANDARD, Decimal("59.00"))["letter"], "F")

    def test_bounds_are_inclusive(self):
        self.assertEqual(match_grade(STANDARD, 73)["letter"], "C+")
        self.assertEqual(match_grade(STANDARD, 76)["letter"], "C+")

    def test_never_raises(self):
        for value in [None, "abc", float("nan"), float("inf"), -5, 150, 76.5]:
            with self.subTest(value=value):
                self.assertEqual(match_grade(STANDARD, value), FALLBACK_GRADE)

    def test_uncovered_value_on_sparse_scale(self):
        sparse = [SimpleNamespace(letter="P", min_percentage=50, max_percentage=100,
                                  grade_points=1, description="Pass")]
        self.assertEqual(match_grade(sparse, 49.99)["letter"], "F")
        self.assertEqual(match_grade(sparse, 50)["letter"], "P")
        self.assertEqual(match_grade([], 80), FALLBACK_GRADE)


class ValidateDefinitionsTests(SimpleTestCase):

    def band(self, letter, lo, hi, gp=1):
        return {"letter": letter, "min_percentage": lo, "max_percentage": hi, "grade_points": gp}

    def test_standard_scale_is_valid_and_sorted(self):
        rows = validate_definitions(list(reversed(default_definitions())))
        self.assertEqual([r["letter"] for r in rows][:3], ["A+", "A", "A-"])
        self.assertEqual(rows[-1]["letter"], "F")
        self.assertIsInstance(rows[0]["min_percentage"], Decimal)

    def test_gaps_are_allowed(self):
        rows = validate_definitions([self.band("P", 50, 100), self.band("F", 0, 40, 0)])
        self.assertEqual(len(rows), 2)

    def test_rejected(self):
        cases = {
            "empty": [],
            "overlap": [self.band("A", 80, 100), self.band("B", 70, 85)],
            "duplicate letter": [self.band("A", 80, 100), self.band("A", 0, 79)],
            "above 100": [self.band("A", 80, 101)],
            "min above max": [self.band("A", 90, 80)],
            "negative points": [self.band("A", 0, 100, -1)],
            "missing letter": [self.band("", 0, 100)],
            "not a number": [self.band("A", "x", 100)],
            "nan bound": [self.band("A", "NaN", 100)],
            "infinite bound": [self.band("A", 0, "Infinity")],
            "nan points": [self.band("A", 0, 100, "NaN")],
        }
        for name, definitions in cases.items():
            with self.subTest(name):
                with self.assertRaises(BadRequest):
                    validate_definitions(definitions)


class ScoreComponentsTests(SimpleTestCase):

    def test_weighted_scores(self):
        components = [SimpleNamespace(id=1, name="Midterm", max_score=100, weight=40),
                      SimpleNamespace(id=2, name="Final", max_score=100, weight=60)]
        entries = [SimpleNamespace(component_id=2, score=70), SimpleNamespace(component_id=1, score=80)]
        rows = score_components(components, entries)
        self.assertEqual([r["component_name"] for r in rows], ["Midterm", "Final"])
        self.assertEqual(rows[0]["weighted_score"], Decimal("32"))
        self.assertEqual(rows[1]["weighted_score"], Decimal("42"))
        self.assertEqual(rows[0]["percentage"], Decimal("80.00"))

    def test_missing_entry_scores_zero(self):
        components = [SimpleNamespace(id=1, name="Quiz", max_score=20, weight=10)]
        rows = score_components(components, [])
        self.assertEqual(rows[0]["score"], Decimal("0"))
        self.assertEqual(rows[0]["weighted_score"], Decimal("0"))

    def test_zero_max_score(self):
        components = [SimpleNamespace(id=1, name="Bonus", max_score=0, weight=10)]
        rows = score_components(components, [SimpleNamespace(component_id=1, score=5)])
        self.assertEqual(rows[0]["percentage"], Decimal("0.00"))
        self.assertEqual(rows[0]["weighted_score"], Decimal("0"))

    def test_first_matching_entry_wins(self):
        components = [SimpleNamespace(id=1, name="Lab", max_score=10, weight=100)]
        entries = [SimpleNamespace(component_id=1, score=5), SimpleNamespace(component_id=1, score=9)]
        self.assertEqual(score_components(components, entries)[0]["percentage"], Decimal("50.00"))


# -------------------------
#  GPA with an in-memory repository
# -------------------------

class FakeEnrollments:

    def __init__(self, rows, students=(1,)):
        self.rows = rows
        self.students = set(students)

    def list_by_student(self, student_id, statuses, semester_id=None, graded_only=True, transcript_order=False):
        out = [e for e in self.rows if e.student_id == student_id and e.status in statuses]
        if semester_id is not None:
            out = [e for e in out if e.semester_id == semester_id]
        if graded_only:
            out = [e for e in out if e.final_grade is not None]
        return out

    def get_student(self, student_id):
        return SimpleNamespace(id=student_id) if student_id in self.students else None


def row(status, credits, points, semester_id=1, grade="X", student_id=1):
    return SimpleNamespace(
        student_id=student_id, status=status, semester_id=semester_id,
        final_grade=grade, grade_points=points,
        classroom=SimpleNamespace(course=SimpleNamespace(credits=credits)),
    )


class GPATests(SimpleTestCase):
    S = Enrollment.Status

    def test_weighted_by_credits(self):
        repo = FakeEnrollments([row(self.S.COMPLETED, 3, Decimal("4.0")),
                                row(self.S.COMPLETED, 4, Decimal("3.0"))])
        self.assertEqual(GPAAggregator(enrollments=repo).cumulative_gpa(1), 3.43)

    def test_zero_credits(self):
        agg = GPAAggregator(enrollments=FakeEnrollments([]))
        self.assertEqual(agg.cumulative_gpa(1), 0.0)
        self.assertEqual(agg.semester_gpa(1, 1), 0.0)
        self.assertEqual(gpa(Decimal("0"), 0), 0.0)

    def test_status_populations(self):
        repo = FakeEnrollments([
            row(self.S.COMPLETED, 3, Decimal("4.0")),
            row(self.S.REGISTERED, 3, Decimal("2.0")),
            row(self.S.DROPPED, 3, Decimal("0.0")),
            row(self.S.COMPLETED, 3, Decimal("3.0"), semester_id=2),
        ])
        agg = GPAAggregator(enrollments=repo)
        # COMPLETED + REGISTERED of semester 1
        self.assertEqual(agg.semester_gpa(1, 1), 3.0)
        # COMPLETED across semesters
        self.assertEqual(agg.cumulative_gpa(1), 3.5)

        details = agg.gpa_details(1, semester_id=1)
        self.assertEqual(details["semester_gpa"], 4.0)
        self.assertEqual(details["semester_credits"], 3)
        self.assertEqual(details["cumulative_gpa"], 3.5)
        self.assertEqual(details["total_credits"], 6)
        self.assertEqual(details["total_points"], 21.0)

    def test_graded_row_without_points_dilutes(self):
        repo = FakeEnrollments([row(self.S.COMPLETED, 3, Decimal("4.0")),
                                row(self.S.COMPLETED, 3, None, grade="I")])
        agg = GPAAggregator(enrollments=repo)
        self.assertEqual(agg.cumulative_gpa(1), 2.0)
        details = agg.gpa_details(1, semester_id=1)
        self.assertEqual(details["total_credits"], 6)
        self.assertEqual(details["semester_gpa"], 2.0)

    def test_ungraded_rows_are_ignored(self):
        repo = FakeEnrollments([row(self.S.COMPLETED, 3, Decimal("4.0")),
                                row(self.S.COMPLETED, 4, None, grade=None)])
        self.assertEqual(GPAAggregator(enrollments=repo).cumulative_gpa(1), 4.0)

    def test_details_without_semester(self):
        repo = FakeEnrollments([row(self.S.COMPLETED, 3, Decimal("3.3"))])
        details = GPAAggregator(enrollments=repo).gpa_details(1)
        self.assertEqual(details["semester_gpa"], 0.0)
        self.assertEqual(details["semester_credits"], 0)
        self.assertEqual(details["cumulative_gpa"], 3.3)

    def test_details_unknown_student(self):
        with self.assertRaises(NotFound):
            GPAAggregator(enrollments=FakeEnrollments([])).gpa_details(99)


# -------------------------
#  Database-backed tests
# -------------------------

class GradingFixtureMixin:

    def make_world(self):
        GradeScaleRegistry().ensure_default_scale()
        self.year = AcademicYear.objects.create(name="2025/2026")
        self.semester = Semester.objects.create(year=self.year, name="Fall 2025", start_date=date(2025, 9, 1))
        self.lecturer = User.objects.create_user(username="lect", password="x", role=User.Role.LECTURER)
        self.registrar = User.objects.create_user(username="reg", password="x", role=User.Role.REGISTRAR)
        self.course = Course.objects.create(code="MUS101", name="Music Theory", credits=3)
        self.classroom = Classroom.objects.create(course=self.course, semester=self.semester,
                                                  name="A", lecturer=self.lecturer)
        self.midterm = GradeComponent.objects.create(classroom=self.classroom, name="Midterm",
                                                     max_score=100, weight=40)
        self.final = GradeComponent.objects.create(classroom=self.classroom, name="Final",
                                                   max_score=100, weight=60)

    def enroll(self, number, midterm=None, final=None, status=Enrollment.Status.REGISTERED):
        student = Student.objects.create(student_number=number, first_name="Ada", last_name=number)
        enrollment = Enrollment.objects.create(student=student, classroom=self.classroom,
                                               semester=self.semester, status=status)
        if midterm is not None:
            GradeEntry.objects.create(component=self.midterm, enrollment=enrollment, score=midterm)
        if final is not None:
            GradeEntry.objects.create(component=self.final, enrollment=enrollment, score=final)
        return enrollment


class GradeScaleRegistryTests(TestCase):

    def setUp(self):
        self.audit = mock.Mock()
        self.registry = GradeScaleRegistry(audit=self.audit)
        self.default = self.registry.ensure_default_scale()

    def test_single_default_after_bootstrap(self):
        again = self.registry.ensure_default_scale()
        self.assertEqual(again.id, self.default.id)
        self.assertEqual(GradeScale.objects.filter(is_default=True).count(), 1)
        self.assertEqual(self.default.name, DEFAULT_SCALE_NAME)
        self.assertEqual(len(self.default.grades.all()), 12)

    def test_get_default_without_one(self):
        GradeScale.objects.update(is_default=False)
        with self.assertRaises(NotFound):
            self.registry.get_default_scale()
        # bootstrap promotes the existing standard scale instead of duplicating it
        scale = self.registry.ensure_default_scale()
        self.assertEqual(scale.id, self.default.id)
        self.assertTrue(scale.is_default)

    def test_resolve_letter(self):
        self.assertEqual(self.registry.resolve_letter(74)["letter"], "C+")
        self.assertEqual(self.registry.resolve_letter("garbage")["letter"], "F")

    def test_create_and_set_default(self):
        bands = [{"letter": "P", "min_percentage": 50, "max_percentage": 100, "grade_points": 1},
                 {"letter": "NP", "min_percentage": 0, "max_percentage": 49.99, "grade_points": 0}]
        scale = self.registry.create_scale("Pass/Fail", bands)
        self.assertFalse(scale.is_default)
        self.assertEqual([g.letter for g in scale.grades.all()], ["P", "NP"])
        self.assertEqual(self.registry.resolve_letter(60, scale_id=scale.id)["letter"], "P")

        self.registry.set_default(scale.id)
        self.assertEqual(GradeScale.objects.filter(is_default=True).get().id, scale.id)
        self.assertEqual(self.registry.resolve_letter(40)["letter"], "NP")
        self.assertEqual(self.audit.log.call_count, 2)

    def test_create_default_replaces_previous(self):
        bands = [{"letter": "S", "min_percentage": 0, "max_percentage": 100, "grade_points": 4}]
        scale = self.registry.create_scale("Flat", bands, is_default=True)
        self.assertEqual(list(GradeScale.objects.filter(is_default=True).values_list("id", flat=True)), [scale.id])

    def test_update_replaces_all_bands(self):
        bands = [{"letter": "S", "min_percentage": 0, "max_percentage": 100, "grade_points": 4}]
        scale = self.registry.update_scale(self.default.id, definitions=bands)
        self.assertEqual([g.letter for g in scale.grades.all()], ["S"])
        self.assertEqual(scale.name, DEFAULT_SCALE_NAME)

    def test_invalid_bands_leave_scale_untouched(self):
        with self.assertRaises(BadRequest):
            self.registry.update_scale(self.default.id, definitions=[
                {"letter": "A", "min_percentage": 50, "max_percentage": 100, "grade_points": 4},
                {"letter": "B", "min_percentage": 0, "max_percentage": 60, "grade_points": 3},
            ])
        self.assertEqual(len(self.registry.get_scale(self.default.id).grades.all()), 12)

    def test_delete(self):
        with self.assertRaises(BadRequest):
            self.registry.delete_scale(self.default.id)
        scale = self.registry.create_scale(
            "Temp", [{"letter": "S", "min_percentage": 0, "max_percentage": 100, "grade_points": 4}])
        self.registry.delete_scale(scale.id)
        with self.assertRaises(NotFound):
            self.registry.get_scale(scale.id)

    def test_duplicate_names_rejected(self):
        bands = [{"letter": "S", "min_percentage": 0, "max_percentage": 100, "grade_points": 4}]
        with self.assertRaises(BadRequest):
            self.registry.create_scale(DEFAULT_SCALE_NAME, bands)
        other = self.registry.create_scale("Flat", bands)
        with self.assertRaises(BadRequest):
            self.registry.update_scale(other.id, name=DEFAULT_SCALE_NAME)
        # keeping its own name is not a clash
        self.assertEqual(self.registry.update_scale(other.id, name="Flat").name, "Flat")
        self.assertEqual(GradeScale.objects.filter(name=DEFAULT_SCALE_NAME).count(), 1)

    def test_audit_failure_does_not_fail_write(self):
        self.audit.log.side_effect = RuntimeError("sink down")
        scale = self.registry.create_scale(
            "Still created", [{"letter": "S", "min_percentage": 0, "max_percentage": 100, "grade_points": 4}])
        self.assertTrue(GradeScale.objects.filter(id=scale.id).exists())


class FinalGradeResolverTests(GradingFixtureMixin, TestCase):

    def setUp(self):
        self.make_world()
        self.audit = mock.Mock()
        self.resolver = FinalGradeResolver(audit=self.audit)

    def test_midterm_and_final(self):
        e = self.enroll("S001", midterm=80, final=70)
        g = self.resolver.compute_final_grade(e.id)
        self.assertEqual(g["total_percentage"], 74.0)
        self.assertEqual(g["letter_grade"], "C+")
        self.assertEqual(g["grade_points"], 2.3)
        self.assertEqual([c["weighted_score"] for c in g["component_scores"]], [32.0, 42.0])
        self.assertEqual(g["student_name"], "Ada S001")

    def test_compute_is_idempotent(self):
        e = self.enroll("S001", midterm=65.5, final=91)
        self.assertEqual(self.resolver.compute_final_grade(e.id), self.resolver.compute_final_grade(e.id))

    def test_total_matches_weighted_sum(self):
        self.midterm.weight = Decimal("33.33")
        self.midterm.save()
        self.final.weight = Decimal("33.33")
        self.final.save()
        project = GradeComponent.objects.create(classroom=self.classroom, name="Project",
                                                max_score=30, weight=Decimal("33.34"))
        e = self.enroll("S001", midterm=77, final=81)
        GradeEntry.objects.create(component=project, enrollment=e, score=27)
        g = self.resolver.compute_final_grade(e.id)
        weighted = sum(c["weighted_score"] for c in g["component_scores"])
        self.assertLessEqual(abs(weighted - g["total_percentage"]), 0.01)

    def test_no_entries(self):
        e = self.enroll("S001")
        g = self.resolver.compute_final_grade(e.id)
        self.assertEqual(g["total_percentage"], 0.0)
        self.assertEqual(g["letter_grade"], "F")

    def test_unknown_enrollment(self):
        with self.assertRaises(NotFound):
            self.resolver.compute_final_grade(999999)

    def test_class_grades_sorted_and_registered_only(self):
        low = self.enroll("S001", midterm=50, final=50)
        high = self.enroll("S002", midterm=95, final=98)
        self.enroll("S003", midterm=100, final=100, status=Enrollment.Status.DROPPED)
        grades = self.resolver.compute_class_grades(self.classroom.id)
        self.assertEqual([g["enrollment_id"] for g in grades], [high.id, low.id])

    def test_class_grades_ties_keep_order(self):
        first = self.enroll("S001", midterm=80, final=80)
        second = self.enroll("S002", midterm=80, final=80)
        grades = self.resolver.compute_class_grades(self.classroom.id)
        self.assertEqual([g["enrollment_id"] for g in grades], [first.id, second.id])

    def test_class_grades_skip_failures(self):
        ok = self.enroll("S001", midterm=80, final=70)
        bad = self.enroll("S002", midterm=80, final=70)
        original = self.resolver.compute_final_grade

        def flaky(enrollment_id):
            if enrollment_id == bad.id:
                raise RuntimeError("boom")
            return original(enrollment_id)

        with mock.patch.object(self.resolver, "compute_final_grade", side_effect=flaky):
            grades = self.resolver.compute_class_grades(self.classroom.id)
        self.assertEqual([g["enrollment_id"] for g in grades], [ok.id])

    def test_class_grades_unknown_class(self):
        with self.assertRaises(NotFound):
            self.resolver.compute_class_grades(999999)

    def test_finalize_persists_values(self):
        e = self.enroll("S001", midterm=80, final=70)
        result = self.resolver.finalize_class(self.classroom.id, self.registrar)
        self.assertEqual(len(result), 1)
        e.refresh_from_db()
        self.assertTrue(e.is_finalized)
        self.assertEqual(e.final_percentage, Decimal("74.00"))
        self.assertEqual(e.final_grade, "C+")
        self.assertEqual(e.grade_points, Decimal("2.30"))
        self.assertEqual(e.finalized_by_id, self.registrar.id)
        self.assertIsNotNone(e.finalized_at)
        self.assertEqual(e.status, Enrollment.Status.REGISTERED)
        new_values = self.audit.log.call_args.kwargs["new_values"]
        self.assertEqual(new_values, {"action": "finalize_grades", "students_count": 1})

    def test_finalize_rerun_reproduces_values(self):
        e = self.enroll("S001", midterm=88, final=79)
        first = self.resolver.finalize_class(self.classroom.id, self.registrar)
        e.refresh_from_db()
        stored = (e.final_percentage, e.final_grade, e.grade_points)
        second = self.resolver.finalize_class(self.classroom.id, self.registrar)
        e.refresh_from_db()
        self.assertEqual(first, second)
        self.assertEqual((e.final_percentage, e.final_grade, e.grade_points), stored)

    def test_finalize_partial_failure(self):
        e1 = self.enroll("S001", midterm=90, final=90)
        e2 = self.enroll("S002", midterm=80, final=80)
        e3 = self.enroll("S003", midterm=70, final=70)
        repo = EnrollmentRepository()
        resolver = FinalGradeResolver(enrollments=repo, audit=self.audit)
        original = repo.update

        def flaky(enrollment_id, **fields):
            if enrollment_id == e2.id:
                raise RuntimeError("write failed")
            return original(enrollment_id, **fields)

        with mock.patch.object(repo, "update", side_effect=flaky):
            result = resolver.finalize_class(self.classroom.id, self.registrar)

        self.assertEqual([g["enrollment_id"] for g in result], [e1.id, e3.id])
        finalized = dict(Enrollment.objects.values_list("id", "is_finalized"))
        self.assertEqual(finalized, {e1.id: True, e2.id: False, e3.id: True})

    def test_finalize_skips_enrollment_that_fails_scoring(self):
        e1 = self.enroll("S001", midterm=90, final=90)
        e2 = self.enroll("S002", midterm=80, final=80)
        e3 = self.enroll("S003", midterm=70, final=70)
        original = self.resolver.compute_final_grade

        def flaky(enrollment_id):
            if enrollment_id == e2.id:
                raise RuntimeError("scoring failed")
            return original(enrollment_id)

        with mock.patch.object(self.resolver, "compute_final_grade", side_effect=flaky):
            result = self.resolver.finalize_class(self.classroom.id, self.registrar)

        self.assertEqual([g["enrollment_id"] for g in result], [e1.id, e3.id])
        finalized = dict(Enrollment.objects.values_list("id", "is_finalized"))
        self.assertEqual(finalized, {e1.id: True, e2.id: False, e3.id: True})
        self.assertIsNone(Enrollment.objects.get(id=e2.id).final_grade)

    def test_finalize_survives_audit_failure(self):
        self.enroll("S001", midterm=80, final=70)
        self.audit.log.side_effect = RuntimeError("sink down")
        self.assertEqual(len(self.resolver.finalize_class(self.classroom.id, self.registrar)), 1)

    def test_unfinalize(self):
        e = self.enroll("S001", midterm=80, final=70)
        self.resolver.finalize_class(self.classroom.id, self.registrar)
        with self.assertRaises(BadRequest):
            self.resolver.unfinalize_class(self.classroom.id, "   ", self.registrar)
        with self.assertRaises(NotFound):
            self.resolver.unfinalize_class(999999, "typo", self.registrar)

        self.assertEqual(self.resolver.unfinalize_class(self.classroom.id, "score typo", self.registrar), 1)
        e.refresh_from_db()
        self.assertFalse(e.is_finalized)
        self.assertIsNone(e.finalized_by_id)
        self.assertEqual(e.final_grade, "C+")

    def test_enrollment_grades(self):
        e = self.enroll("S001", midterm=80, final=70)
        data = self.resolver.enrollment_grades(e.id)
        self.assertEqual(data["class"]["course"]["code"], "MUS101")
        self.assertEqual(data["current_grade"], {"percentage": 74.0, "letter": "C+", "points": 2.3})
        self.assertFalse(data["enrollment"]["is_finalized"])
        self.assertIsNone(data["enrollment"]["final_percentage"])


class GPADatabaseTests(GradingFixtureMixin, TestCase):

    def setUp(self):
        self.make_world()

    def test_cumulative_from_stored_grades(self):
        e = self.enroll("S001", status=Enrollment.Status.COMPLETED)
        Enrollment.objects.filter(id=e.id).update(final_grade="A", grade_points=Decimal("4.00"))
        other_course = Course.objects.create(code="MUS102", name="Ear Training", credits=4)
        other_class = Classroom.objects.create(course=other_course, semester=self.semester, name="A")
        Enrollment.objects.create(student=e.student, classroom=other_class, semester=self.semester,
                                  status=Enrollment.Status.COMPLETED, final_grade="B",
                                  grade_points=Decimal("3.00"))
        agg = GPAAggregator()
        self.assertEqual(agg.cumulative_gpa(e.student_id), 3.43)
        details = agg.gpa_details(e.student_id, self.semester.id)
        self.assertEqual(details["total_credits"], 7)
        self.assertEqual(details["semester_gpa"], 3.43)


class GradingApiTests(GradingFixtureMixin, TestCase):

    def setUp(self):
        self.make_world()
        self.client = APIClient()

    def test_requires_login(self):
        resp = self.client.get(f"/api/grades/classes/{self.classroom.id}/")
        self.assertIn(resp.status_code, (401, 403))

    def test_class_grades_and_finalize(self):
        self.enroll("S001", midterm=80, final=70)
        self.client.force_authenticate(self.lecturer)
        resp = self.client.get(f"/api/grades/classes/{self.classroom.id}/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["results"][0]["letter_grade"], "C+")

        resp = self.client.post(f"/api/grades/classes/{self.classroom.id}/finalize/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["finalized"], 1)

    def test_unfinalize_requires_registrar_and_reason(self):
        self.enroll("S001", midterm=80, final=70)
        url = f"/api/grades/classes/{self.classroom.id}/unfinalize/"
        self.client.force_authenticate(self.lecturer)
        self.assertEqual(self.client.post(url, {"reason": "typo"}, format="json").status_code, 403)

        self.client.force_authenticate(self.registrar)
        self.assertEqual(self.client.post(url, {}, format="json").status_code, 400)
        resp = self.client.post(url, {"reason": "typo"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["unfinalized"], 1)

    def test_unknown_class_is_404(self):
        self.client.force_authenticate(self.lecturer)
        self.assertEqual(self.client.get("/api/grades/classes/999999/").status_code, 404)

    def test_scale_endpoints(self):
        self.client.force_authenticate(self.registrar)
        resp = self.client.get("/api/grade-scales/default/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["name"], DEFAULT_SCALE_NAME)

        resp = self.client.get("/api/grade-scales/resolve/", {"percentage": "74"})
        self.assertEqual(resp.json()["letter"], "C+")

        resp = self.client.post("/api/grade-scales/", {
            "name": "Overlapping",
            "grades": [
                {"letter": "A", "min_percentage": "50", "max_percentage": "100", "grade_points": "4"},
                {"letter": "B", "min_percentage": "0", "max_percentage": "60", "grade_points": "3"},
            ],
        }, format="json")
        self.assertEqual(resp.status_code, 400)

        resp = self.client.post("/api/grade-scales/", {
            "name": "Pass/Fail",
            "grades": [
                {"letter": "P", "min_percentage": "50", "max_percentage": "100", "grade_points": "1"},
                {"letter": "NP", "min_percentage": "0", "max_percentage": "49.99", "grade_points": "0"},
            ],
        }, format="json")
        self.assertEqual(resp.status_code, 201)
        scale_id = resp.json()["id"]

        resp = self.client.post(f"/api/grade-scales/{scale_id}/set-default/")
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["is_default"])

        resp = self.client.post("/api/grade-scales/", {
            "name": DEFAULT_SCALE_NAME,
            "grades": [{"letter": "S", "min_percentage": "0", "max_percentage": "100", "grade_points": "4"}],
        }, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("already exists", resp.json()["detail"])

    def test_lecturer_cannot_edit_scales(self):
        self.client.force_authenticate(self.lecturer)
        self.assertEqual(self.client.get("/api/grade-scales/").status_code, 200)
        resp = self.client.post("/api/grade-scales/", {"name": "Nope"}, format="json")
        self.assertEqual(resp.status_code, 403)

    def test_student_gpa_endpoint(self):
        e = self.enroll("S001", status=Enrollment.Status.COMPLETED)
        Enrollment.objects.filter(id=e.id).update(final_grade="B", grade_points=Decimal("3.00"))
        self.client.force_authenticate(self.registrar)
        resp = self.client.get(f"/api/grades/students/{e.student_id}/gpa/", {"semester": self.semester.id})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["cumulative_gpa"], 3.0)
        self.assertEqual(self.client.get(f"/api/grades/students/{e.student_id}/gpa/",
                                         {"semester": "x"}).status_code, 400)
