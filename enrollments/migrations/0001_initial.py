import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Student",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("student_number", models.CharField(max_length=32, unique=True)),
                ("last_name", models.CharField(max_length=64)),
                ("first_name", models.CharField(max_length=64)),
                ("middle_name", models.CharField(blank=True, max_length=64)),
                ("program", models.CharField(blank=True, max_length=128)),
                ("admission_date", models.DateField(blank=True, null=True)),
                ("user", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="student", to=settings.AUTH_USER_MODEL)),
            ],
            options={"ordering": ["last_name", "first_name"]},
        ),
        migrations.CreateModel(
            name="Enrollment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("REGISTERED", "Registered"), ("COMPLETED", "Completed"), ("DROPPED", "Dropped"), ("WITHDRAWN", "Withdrawn"), ("CANCELLED", "Cancelled")], default="REGISTERED", max_length=16)),
                ("date_enrolled", models.DateField(auto_now_add=True)),
                ("final_percentage", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("final_grade", models.CharField(blank=True, max_length=4, null=True)),
                ("grade_points", models.DecimalField(blank=True, decimal_places=2, max_digits=3, null=True)),
                ("is_finalized", models.BooleanField(default=False)),
                ("finalized_at", models.DateTimeField(blank=True, null=True)),
                ("classroom", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="enrollments", to="core.classroom")),
                ("finalized_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="finalized_enrollments", to=settings.AUTH_USER_MODEL)),
                ("semester", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="enrollments", to="core.semester")),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="enrollments", to="enrollments.student")),
            ],
            options={
                "ordering": ["classroom", "student__last_name", "student__first_name"],
                "unique_together": {("student", "classroom")},
            },
        ),
        migrations.CreateModel(
            name="Hold",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("ACADEMIC", "Academic"), ("FINANCIAL", "Financial"), ("DISCIPLINARY", "Disciplinary"), ("ADMINISTRATIVE", "Administrative"), ("LIBRARY", "Library")], max_length=16)),
                ("reason", models.TextField(blank=True)),
                ("blocks_registration", models.BooleanField(default=True)),
                ("blocks_grades", models.BooleanField(default=False)),
                ("blocks_transcript", models.BooleanField(default=False)),
                ("placed_at", models.DateTimeField(auto_now_add=True)),
                ("released_at", models.DateTimeField(blank=True, null=True)),
                ("placed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="placed_holds", to=settings.AUTH_USER_MODEL)),
                ("released_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="released_holds", to=settings.AUTH_USER_MODEL)),
                ("student", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="holds", to="enrollments.student")),
            ],
            options={"ordering": ["-placed_at"]},
        ),
        migrations.AddConstraint(
            model_name="hold",
            constraint=models.UniqueConstraint(condition=models.Q(("released_at__isnull", True)), fields=("student", "type"), name="one_active_hold_per_type"),
        ),
    ]
