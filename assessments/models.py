from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from core.models import Classroom
from enrollments.models import Enrollment

# Create your models here.

class GradeComponent(models.Model):
    class ComponentType(models.TextChoices):
        ASSIGNMENT = "ASSIGNMENT"
        QUIZ = "QUIZ"
        MIDTERM = "MIDTERM"
        FINAL = "FINAL"
        PROJECT = "PROJECT"
        LAB = "LAB"
        PARTICIPATION = "PARTICIPATION"
        OTHER = "OTHER"

    classroom = models.ForeignKey(Classroom, on_delete=models.CASCADE, related_name="grade_components")
    name = models.CharField(max_length=64)  # ex: Midterm
    type = models.CharField(max_length=16, choices=ComponentType.choices, default=ComponentType.OTHER)
    max_score = models.DecimalField(max_digits=6, decimal_places=2, default=100,
                                    validators=[MinValueValidator(0.01)])
    # percentage points; the class's components are expected to sum to 100
    weight = models.DecimalField(max_digits=5, decimal_places=2,
                                 validators=[MinValueValidator(0), MaxValueValidator(100)])
    due_date = models.DateField(null=True, blank=True)
    is_published = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = (("classroom", "name"),)
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.classroom} | {self.name} ({self.weight}%)"

class GradeEntry(models.Model):
    component = models.ForeignKey(GradeComponent, on_delete=models.CASCADE, related_name="entries")
    enrollment = models.ForeignKey(Enrollment, on_delete=models.CASCADE, related_name="grade_entries")
    score = models.DecimalField(max_digits=6, decimal_places=2, validators=[MinValueValidator(0)])
    remarks = models.CharField(max_length=255, blank=True)
    entered_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                   null=True, blank=True, related_name="entered_grades")
    modified_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                    null=True, blank=True, related_name="modified_grades")
    created_at = models.DateTimeField(auto_now_add=True)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = (("component", "enrollment"),)
        ordering = ["component", "enrollment"]

    def __str__(self):
        return f"{self.enrollment} → {self.component.name}: {self.score}"
