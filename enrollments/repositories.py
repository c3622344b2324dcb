# enrollments/repositories.py
from django.db import transaction
from django.db.models import Prefetch

from assessments.models import GradeComponent, GradeEntry
from core.models import Classroom
from .models import Student, Enrollment, Hold


class EnrollmentRepository:
    """
    ORM access used by the grading engine.
    Enrollments are returned with classroom -> course, semester and student joined;
    get() also carries the class's grade components and the enrollment's entries.
    """

    def _qs(self):
        return Enrollment.objects.select_related("student", "classroom__course", "semester")

    def get(self, enrollment_id):
        return (self._qs()
                .prefetch_related(
                    Prefetch("classroom__grade_components",
                             queryset=GradeComponent.objects.order_by("created_at", "id")),
                    Prefetch("grade_entries",
                             queryset=GradeEntry.objects.order_by("created_at", "id")),
                )
                .filter(id=enrollment_id)
                .first())

    def list_by_class(self, class_id, statuses=None):
        qs = self._qs().filter(classroom_id=class_id)
        if statuses:
            qs = qs.filter(status__in=statuses)
        return list(qs.order_by("id"))

    def list_by_student(self, student_id, statuses, semester_id=None, graded_only=True, transcript_order=False):
        qs = self._qs().filter(student_id=student_id, status__in=statuses)
        if semester_id is not None:
            qs = qs.filter(semester_id=semester_id)
        if graded_only:
            qs = qs.filter(final_grade__isnull=False)
        if transcript_order:
            qs = qs.order_by("semester__start_date", "classroom__course__code", "id")
        else:
            qs = qs.order_by("id")
        return list(qs)

    def update(self, enrollment_id, **fields):
        return Enrollment.objects.filter(id=enrollment_id).update(**fields)

    def clear_finalization(self, class_id):
        """Unlocks every enrollment of the class; stored percentage/letter/points stay."""
        return Enrollment.objects.filter(classroom_id=class_id).update(
            is_finalized=False, finalized_at=None, finalized_by=None,
        )

    def class_exists(self, class_id):
        return Classroom.objects.filter(id=class_id).exists()

    def get_student(self, student_id):
        return Student.objects.filter(id=student_id).first()

    def atomic(self):
        return transaction.atomic()


class HoldRepository:

    def list_active_blocking_transcript(self, student_id):
        return list(Hold.objects.filter(student_id=student_id,
                                        released_at__isnull=True,
                                        blocks_transcript=True))
