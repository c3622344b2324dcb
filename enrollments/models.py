from django.conf import settings
from django.db import models
from django.db.models import Q
from core.models import Classroom, Semester
# Create your models here.

class Student(models.Model):
    student_number = models.CharField(max_length=32, unique=True)
    last_name = models.CharField(max_length=64)
    first_name = models.CharField(max_length=64)
    middle_name = models.CharField(max_length=64, blank=True)
    program = models.CharField(max_length=128, blank=True)
    admission_date = models.DateField(null=True, blank=True)
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                null=True, blank=True, related_name="student")

    class Meta:
        ordering = ["last_name","first_name"]

    @property
    def full_name(self):
        return " ".join(p for p in (self.first_name, self.middle_name, self.last_name) if p)

    def __str__(self):
        return f"{self.student_number} - {self.last_name} {self.first_name}"

class Enrollment(models.Model):
    class Status(models.TextChoices):
        REGISTERED = "REGISTERED"
        COMPLETED = "COMPLETED"
        DROPPED = "DROPPED"
        WITHDRAWN = "WITHDRAWN"
        CANCELLED = "CANCELLED"

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="enrollments")
    classroom = models.ForeignKey(Classroom, on_delete=models.PROTECT, related_name="enrollments")
    semester = models.ForeignKey(Semester, on_delete=models.PROTECT, related_name="enrollments")
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.REGISTERED)
    date_enrolled = models.DateField(auto_now_add=True)

    # written only by grade finalization
    final_percentage = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    final_grade = models.CharField(max_length=4, null=True, blank=True)
    grade_points = models.DecimalField(max_digits=3, decimal_places=2, null=True, blank=True)
    is_finalized = models.BooleanField(default=False)
    finalized_at = models.DateTimeField(null=True, blank=True)
    finalized_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                     null=True, blank=True, related_name="finalized_enrollments")

    class Meta:
        unique_together = (("student","classroom"),)
        ordering = ["classroom","student__last_name","student__first_name"]

    def __str__(self):
        return f"{self.student} @ {self.classroom}"

class Hold(models.Model):
    class HoldType(models.TextChoices):
        ACADEMIC = "ACADEMIC"
        FINANCIAL = "FINANCIAL"
        DISCIPLINARY = "DISCIPLINARY"
        ADMINISTRATIVE = "ADMINISTRATIVE"
        LIBRARY = "LIBRARY"

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="holds")
    type = models.CharField(max_length=16, choices=HoldType.choices)
    reason = models.TextField(blank=True)
    blocks_registration = models.BooleanField(default=True)
    blocks_grades = models.BooleanField(default=False)
    blocks_transcript = models.BooleanField(default=False)
    placed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                  null=True, blank=True, related_name="placed_holds")
    placed_at = models.DateTimeField(auto_now_add=True)
    released_at = models.DateTimeField(null=True, blank=True)
    released_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                    null=True, blank=True, related_name="released_holds")

    class Meta:
        ordering = ["-placed_at"]
        constraints = [
            models.UniqueConstraint(fields=["student", "type"], condition=Q(released_at__isnull=True),
                                    name="one_active_hold_per_type"),
        ]

    @property
    def is_active(self):
        return self.released_at is None

    def __str__(self):
        state = "active" if self.is_active else "released"
        return f"{self.student.student_number} {self.type} ({state})"
