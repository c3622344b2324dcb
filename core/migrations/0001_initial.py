import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AcademicYear",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=9, unique=True)),
                ("start_date", models.DateField(blank=True, null=True)),
                ("end_date", models.DateField(blank=True, null=True)),
            ],
            options={"ordering": ["-name"]},
        ),
        migrations.CreateModel(
            name="Course",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=16, unique=True)),
                ("name", models.CharField(max_length=128)),
                ("credits", models.PositiveSmallIntegerField(default=3, validators=[django.core.validators.MinValueValidator(1)])),
            ],
            options={"ordering": ["code"]},
        ),
        migrations.CreateModel(
            name="Semester",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=64)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField(blank=True, null=True)),
                ("year", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="semesters", to="core.academicyear")),
            ],
            options={
                "ordering": ["start_date", "name"],
                "unique_together": {("year", "name")},
            },
        ),
        migrations.CreateModel(
            name="Classroom",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=32)),
                ("course", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="classes", to="core.course")),
                ("lecturer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="classes", to=settings.AUTH_USER_MODEL)),
                ("semester", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="classes", to="core.semester")),
            ],
            options={
                "ordering": ["semester__start_date", "course__code", "name"],
                "unique_together": {("course", "semester", "name")},
            },
        ),
    ]
