import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        ("enrollments", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="GradeComponent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=64)),
                ("type", models.CharField(choices=[("ASSIGNMENT", "Assignment"), ("QUIZ", "Quiz"), ("MIDTERM", "Midterm"), ("FINAL", "Final"), ("PROJECT", "Project"), ("LAB", "Lab"), ("PARTICIPATION", "Participation"), ("OTHER", "Other")], default="OTHER", max_length=16)),
                ("max_score", models.DecimalField(decimal_places=2, default=100, max_digits=6, validators=[django.core.validators.MinValueValidator(0.01)])),
                ("weight", models.DecimalField(decimal_places=2, max_digits=5, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ("due_date", models.DateField(blank=True, null=True)),
                ("is_published", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("classroom", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="grade_components", to="core.classroom")),
            ],
            options={
                "ordering": ["created_at", "id"],
                "unique_together": {("classroom", "name")},
            },
        ),
        migrations.CreateModel(
            name="GradeEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("score", models.DecimalField(decimal_places=2, max_digits=6, validators=[django.core.validators.MinValueValidator(0)])),
                ("remarks", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("modified_at", models.DateTimeField(auto_now=True)),
                ("component", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="entries", to="assessments.gradecomponent")),
                ("enrollment", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="grade_entries", to="enrollments.enrollment")),
                ("entered_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="entered_grades", to=settings.AUTH_USER_MODEL)),
                ("modified_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="modified_grades", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["component", "enrollment"],
                "unique_together": {("component", "enrollment")},
            },
        ),
    ]
