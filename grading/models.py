from django.db import models
from django.db.models import Q
# Create your models here.

class GradeScale(models.Model):
    name = models.CharField(max_length=64, unique=True)
    is_default = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            # at most one default row; set-default clears the old one in the same transaction
            models.UniqueConstraint(fields=["is_default"], condition=Q(is_default=True),
                                    name="single_default_grade_scale"),
        ]

    def __str__(self):
        return f"{self.name}{' (default)' if self.is_default else ''}"

class GradeDefinition(models.Model):
    scale = models.ForeignKey(GradeScale, on_delete=models.CASCADE, related_name="grades")
    letter = models.CharField(max_length=4)  # A+, A, A-, ...
    min_percentage = models.DecimalField(max_digits=5, decimal_places=2)  # inclusive
    max_percentage = models.DecimalField(max_digits=5, decimal_places=2)  # inclusive
    grade_points = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    description = models.CharField(max_length=64, blank=True)

    class Meta:
        unique_together = (("scale", "letter"),)
        ordering = ["-min_percentage"]

    def __str__(self):
        return f"{self.letter}: {self.min_percentage}-{self.max_percentage}"
