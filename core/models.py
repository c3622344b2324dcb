from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator

# Create your models here.
class AcademicYear(models.Model):
    """
    Example name: '2025/2026'
    """
    name = models.CharField(max_length=9, unique=True)
    start_date = models.DateField(null=True, blank=True)
    end_date   = models.DateField(null=True, blank=True)

    class Meta:
        ordering = ["-name"]

    def __str__(self):
        return self.name

class Semester(models.Model):
    year       = models.ForeignKey(AcademicYear, on_delete=models.CASCADE, related_name="semesters")
    name       = models.CharField(max_length=64)  # 'Fall 2025', 'Spring 2026'
    start_date = models.DateField()
    end_date   = models.DateField(null=True, blank=True)

    class Meta:
        unique_together = (("year", "name"),)
        ordering = ["start_date", "name"]

    def __str__(self):
        return self.name

class Course(models.Model):
    code    = models.CharField(max_length=16, unique=True)
    name    = models.CharField(max_length=128)
    credits = models.PositiveSmallIntegerField(default=3, validators=[MinValueValidator(1)])

    class Meta:
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} {self.name} ({self.credits} cr)"

class Classroom(models.Model):
    """
    One offering of a Course in a Semester (a 'class' / section).
    """
    course   = models.ForeignKey(Course,   on_delete=models.PROTECT, related_name="classes")
    semester = models.ForeignKey(Semester, on_delete=models.PROTECT, related_name="classes")
    name     = models.CharField(max_length=32)  # section label: 'A', 'Evening'
    lecturer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
                                 null=True, blank=True, related_name="classes")

    class Meta:
        unique_together = (("course", "semester", "name"),)
        ordering = ["semester__start_date", "course__code", "name"]

    def __str__(self):
        return f"{self.course.code}-{self.name} ({self.semester})"
