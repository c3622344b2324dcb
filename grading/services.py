import logging
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

from django.utils import timezone

from core.audit import LoggingAuditSink, safe_audit
from core.exceptions import NotFound, BadRequest
from enrollments.models import Enrollment
from enrollments.repositories import EnrollmentRepository
from .defaults import DEFAULT_SCALE_NAME, default_definitions
from .repositories import GradeScaleRepository

logger = logging.getLogger(__name__)

D0 = Decimal("0")
D100 = Decimal("100")

FALLBACK_GRADE = {"letter": "F", "grade_points": 0.0, "description": "Fail"}

def _q(x):
    return Decimal(str(x)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

def _dec(x):
    if x is None:
        return D0
    return x if isinstance(x, Decimal) else Decimal(str(x))

def _actor_id(actor):
    return getattr(actor, "id", actor)


# -------------------------
#  Grade scales
# -------------------------

def match_grade(definitions, percentage):
    """
    First definition (in the given order) with min <= percentage <= max.
    Never raises: unparsable, NaN, out-of-range or uncovered values get FALLBACK_GRADE.
    """
    try:
        p = Decimal(str(percentage))
    except (InvalidOperation, TypeError, ValueError):
        return dict(FALLBACK_GRADE)
    if p.is_nan():
        return dict(FALLBACK_GRADE)

    for g in definitions:
        if _dec(g.min_percentage) <= p <= _dec(g.max_percentage):
            return {
                "letter": g.letter,
                "grade_points": float(g.grade_points),
                "description": g.description,
            }
    return dict(FALLBACK_GRADE)

def validate_definitions(definitions):
    """
    Checks a full replacement grade list before it is written.
    Rules: at least one band, 0 <= min <= max <= 100, grade_points >= 0,
    unique letters, no overlapping bands. Gaps between bands are allowed.
    Returns the bands normalized to Decimal, sorted by descending min_percentage.
    """
    if not definitions:
        raise BadRequest("A grade scale needs at least one grade definition.")

    rows = []
    seen = set()
    for d in definitions:
        letter = (d.get("letter") or "").strip()
        if not letter:
            raise BadRequest("Every grade definition needs a letter.")
        if letter in seen:
            raise BadRequest(f"Duplicate letter '{letter}' in grade scale.")
        seen.add(letter)
        try:
            lo = Decimal(str(d["min_percentage"]))
            hi = Decimal(str(d["max_percentage"]))
            gp = Decimal(str(d["grade_points"]))
        except (KeyError, InvalidOperation, TypeError, ValueError):
            raise BadRequest(f"Grade '{letter}': min_percentage, max_percentage and grade_points must be numbers.")
        if not (lo.is_finite() and hi.is_finite() and gp.is_finite()):
            raise BadRequest(f"Grade '{letter}': min_percentage, max_percentage and grade_points must be numbers.")
        if not (D0 <= lo <= hi <= D100):
            raise BadRequest(f"Grade '{letter}': bounds must satisfy 0 <= min <= max <= 100.")
        if gp < D0:
            raise BadRequest(f"Grade '{letter}': grade_points cannot be negative.")
        rows.append({
            "letter": letter,
            "min_percentage": lo,
            "max_percentage": hi,
            "grade_points": gp,
            "description": d.get("description") or "",
        })

    ordered = sorted(rows, key=lambda r: r["min_percentage"])
    for prev, nxt in zip(ordered, ordered[1:]):
        if nxt["min_percentage"] <= prev["max_percentage"]:
            raise BadRequest(f"Grades '{prev['letter']}' and '{nxt['letter']}' overlap.")
    return list(reversed(ordered))


class GradeScaleRegistry:
    """Owns the grade scales and resolves percentages to letter grades."""

    def __init__(self, scales=None, audit=None):
        self.scales = scales or GradeScaleRepository()
        self.audit = audit or LoggingAuditSink()

    def list_scales(self):
        return self.scales.list_all()

    def get_scale(self, scale_id):
        scale = self.scales.get(scale_id)
        if scale is None:
            raise NotFound("Grade scale not found")
        return scale

    def get_default_scale(self):
        scale = self.scales.get_default()
        if scale is None:
            raise NotFound("No default grade scale configured")
        return scale

    def ensure_default_scale(self):
        """Idempotent bootstrap of the standard 12-band scale when no default exists."""
        scale = self.scales.get_default()
        if scale is not None:
            return scale

        existing = self.scales.get_by_name(DEFAULT_SCALE_NAME)
        if existing is not None:
            logger.info("Promoting existing '%s' (id=%s) to default grade scale", existing.name, existing.id)
            return self.scales.set_default(existing.id)

        scale = self.scales.create(DEFAULT_SCALE_NAME, validate_definitions(default_definitions()), is_default=True)
        logger.info("Created default grade scale '%s' (id=%s)", scale.name, scale.id)
        return scale

    def _check_name_free(self, name):
        if self.scales.get_by_name(name) is not None:
            raise BadRequest(f"A grade scale named '{name}' already exists")

    def create_scale(self, name, definitions, is_default=False, actor=None):
        self._check_name_free(name)
        rows = validate_definitions(definitions)
        scale = self.scales.create(name, rows, is_default=is_default)
        safe_audit(self.audit, action="CREATE", resource="GradeScale", resource_id=scale.id,
                   user_id=_actor_id(actor),
                   new_values={"name": name, "is_default": is_default, "grades_count": len(rows)})
        return scale

    def update_scale(self, scale_id, name=None, definitions=None, actor=None):
        existing = self.get_scale(scale_id)
        if name and name != existing.name:
            self._check_name_free(name)
        rows = validate_definitions(definitions) if definitions is not None else None
        old_values = {"name": existing.name, "grades_count": len(existing.grades.all())}
        scale = self.scales.replace(scale_id, definitions=rows, name=name)
        safe_audit(self.audit, action="UPDATE", resource="GradeScale", resource_id=scale_id,
                   user_id=_actor_id(actor), old_values=old_values,
                   new_values={"name": scale.name, "grades_count": len(scale.grades.all())})
        return scale

    def delete_scale(self, scale_id, actor=None):
        existing = self.get_scale(scale_id)
        if existing.is_default:
            raise BadRequest("Cannot delete the default grade scale")
        self.scales.delete(scale_id)
        safe_audit(self.audit, action="DELETE", resource="GradeScale", resource_id=scale_id,
                   user_id=_actor_id(actor), old_values={"name": existing.name})

    def set_default(self, scale_id, actor=None):
        self.get_scale(scale_id)
        scale = self.scales.set_default(scale_id)
        safe_audit(self.audit, action="UPDATE", resource="GradeScale", resource_id=scale_id,
                   user_id=_actor_id(actor), new_values={"is_default": True})
        return scale

    def resolve_letter(self, percentage, scale_id=None):
        scale = self.get_scale(scale_id) if scale_id is not None else self.get_default_scale()
        return match_grade(scale.grades.all(), percentage)


# -------------------------
#  Component scoring
# -------------------------

def score_components(components, entries):
    """
    Weighted score per grade component for one enrollment.
      - the first entry with a matching component_id is used, missing entry = 0
      - percentage = score / max_score * 100 (0 when max_score <= 0)
      - weighted_score = percentage * weight / 100 (not rounded)
    """
    entries = list(entries)
    rows = []
    for c in components:
        entry = next((e for e in entries if e.component_id == c.id), None)
        score = _dec(entry.score) if entry is not None else D0
        max_score = _dec(c.max_score)
        weight = _dec(c.weight)
        percentage = (score / max_score) * D100 if max_score > D0 else D0
        rows.append({
            "component_id": c.id,
            "component_name": c.name,
            "score": score,
            "max_score": max_score,
            "weight": weight,
            "weighted_score": percentage * weight / D100,
            "percentage": _q(percentage),
        })
    return rows

def _component_payload(row):
    return {
        "component_id": row["component_id"],
        "component_name": row["component_name"],
        "score": float(row["score"]),
        "max_score": float(row["max_score"]),
        "weight": float(row["weight"]),
        "weighted_score": float(row["weighted_score"]),
        "percentage": float(row["percentage"]),
    }


# -------------------------
#  Final grades
# -------------------------

class FinalGradeResolver:
    """
    Final percentage / letter / points per enrollment, class batches,
    and the finalize / unfinalize transitions.
    """

    def __init__(self, enrollments=None, registry=None, audit=None):
        self.enrollments = enrollments or EnrollmentRepository()
        self.audit = audit or LoggingAuditSink()
        self.registry = registry or GradeScaleRegistry(audit=self.audit)

    def compute_final_grade(self, enrollment_id):
        enrollment = self.enrollments.get(enrollment_id)
        if enrollment is None:
            raise NotFound("Enrollment not found")

        scores = score_components(enrollment.classroom.grade_components.all(),
                                  enrollment.grade_entries.all())
        total = _q(sum((s["weighted_score"] for s in scores), D0))
        grade = self.registry.resolve_letter(total)
        student = enrollment.student

        return {
            "enrollment_id": enrollment.id,
            "student_id": student.id,
            "student_name": f"{student.first_name} {student.last_name}",
            "component_scores": [_component_payload(s) for s in scores],
            "total_percentage": float(total),
            "letter_grade": grade["letter"],
            "grade_points": grade["grade_points"],
        }

    def compute_class_grades(self, class_id):
        """
        One CalculatedGrade per REGISTERED enrollment, best first (stable on ties).
        A student whose computation fails is logged and left out.
        """
        if not self.enrollments.class_exists(class_id):
            raise NotFound("Class not found")

        grades = []
        for e in self.enrollments.list_by_class(class_id, statuses=[Enrollment.Status.REGISTERED]):
            try:
                grades.append(self.compute_final_grade(e.id))
            except Exception:
                logger.exception("Failed to calculate grade for enrollment %s", e.id)

        return sorted(grades, key=lambda g: g["total_percentage"], reverse=True)

    def finalize_class(self, class_id, actor):
        """
        Computes the class and writes the finalized values onto each enrollment.
        Safe to re-run: unchanged entries reproduce the same values.
        Each write has its own savepoint; a failed write is logged and skipped.
        Returns the grades that were persisted.
        """
        grades = self.compute_class_grades(class_id)
        actor_id = _actor_id(actor)
        now = timezone.now()
        persisted = []

        with self.enrollments.atomic():
            for g in grades:
                try:
                    with self.enrollments.atomic():
                        self.enrollments.update(
                            g["enrollment_id"],
                            final_percentage=_q(g["total_percentage"]),
                            final_grade=g["letter_grade"],
                            grade_points=_q(g["grade_points"]),
                            is_finalized=True,
                            finalized_at=now,
                            finalized_by_id=actor_id,
                        )
                except Exception:
                    logger.exception("Failed to finalize enrollment %s", g["enrollment_id"])
                    continue
                persisted.append(g)

        if len(persisted) != len(grades):
            logger.warning("Class %s finalized partially: %s of %s enrollments written",
                           class_id, len(persisted), len(grades))
        safe_audit(self.audit, action="UPDATE", resource="Class", resource_id=class_id, user_id=actor_id,
                   new_values={"action": "finalize_grades", "students_count": len(persisted)})
        return persisted

    def unfinalize_class(self, class_id, reason, actor):
        """Administrative unlock; percentages and letters stay as last computed."""
        if not (reason or "").strip():
            raise BadRequest("A reason is required to unfinalize grades")
        if not self.enrollments.class_exists(class_id):
            raise NotFound("Class not found")

        count = self.enrollments.clear_finalization(class_id)
        safe_audit(self.audit, action="UPDATE", resource="Class", resource_id=class_id,
                   user_id=_actor_id(actor),
                   new_values={"action": "unfinalize_grades", "reason": reason, "enrollments": count})
        return count

    def enrollment_grades(self, enrollment_id):
        """Stored state of one enrollment next to its live component breakdown."""
        enrollment = self.enrollments.get(enrollment_id)
        if enrollment is None:
            raise NotFound("Enrollment not found")
        calculated = self.compute_final_grade(enrollment_id)
        course = enrollment.classroom.course

        return {
            "enrollment": {
                "id": enrollment.id,
                "status": enrollment.status,
                "is_finalized": enrollment.is_finalized,
                "final_grade": enrollment.final_grade,
                "final_percentage": float(enrollment.final_percentage) if enrollment.final_percentage is not None else None,
            },
            "student": {
                "id": enrollment.student.id,
                "student_number": enrollment.student.student_number,
                "name": calculated["student_name"],
            },
            "class": {
                "id": enrollment.classroom.id,
                "name": enrollment.classroom.name,
                "course": {"id": course.id, "code": course.code, "name": course.name, "credits": course.credits},
            },
            "components": calculated["component_scores"],
            "current_grade": {
                "percentage": calculated["total_percentage"],
                "letter": calculated["letter_grade"],
                "points": calculated["grade_points"],
            },
        }


# -------------------------
#  GPA
# -------------------------

def credit_points(enrollments):
    """
    (Σ credits, Σ credits * grade_points) over the given enrollments.
    Missing grade points count as 0 and the credits still count.
    """
    credits = 0
    points = D0
    for e in enrollments:
        c = int(e.classroom.course.credits)
        credits += c
        points += c * _dec(e.grade_points)
    return credits, points

def gpa(points, credits):
    return float(_q(points / credits)) if credits > 0 else 0.0


class GPAAggregator:
    """
    Three eligibility rules, kept distinct on purpose:
      - semester_gpa: COMPLETED or REGISTERED
      - cumulative_gpa: COMPLETED
      - gpa_details: COMPLETED, semester figures taken from that same set
    """

    def __init__(self, enrollments=None):
        self.enrollments = enrollments or EnrollmentRepository()

    def semester_gpa(self, student_id, semester_id):
        rows = self.enrollments.list_by_student(
            student_id,
            statuses=[Enrollment.Status.COMPLETED, Enrollment.Status.REGISTERED],
            semester_id=semester_id,
        )
        credits, points = credit_points(rows)
        return gpa(points, credits)

    def cumulative_gpa(self, student_id):
        rows = self.enrollments.list_by_student(student_id, statuses=[Enrollment.Status.COMPLETED])
        credits, points = credit_points(rows)
        return gpa(points, credits)

    def gpa_details(self, student_id, semester_id=None):
        if self.enrollments.get_student(student_id) is None:
            raise NotFound("Student not found")

        rows = self.enrollments.list_by_student(student_id, statuses=[Enrollment.Status.COMPLETED])
        total_credits, total_points = credit_points(rows)

        semester_credits, semester_points = 0, D0
        if semester_id is not None:
            semester_credits, semester_points = credit_points(
                [e for e in rows if e.semester_id == semester_id]
            )

        return {
            "cumulative_gpa": gpa(total_points, total_credits),
            "semester_gpa": gpa(semester_points, semester_credits),
            "total_credits": total_credits,
            "total_points": float(_q(total_points)),
            "semester_credits": semester_credits,
            "semester_points": float(_q(semester_points)),
        }
