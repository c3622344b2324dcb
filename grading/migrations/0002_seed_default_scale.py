from django.db import migrations

from grading.defaults import DEFAULT_SCALE_NAME, DEFAULT_GRADE_DEFINITIONS

def seed(apps, schema_editor):
    GradeScale = apps.get_model("grading", "GradeScale")
    GradeDefinition = apps.get_model("grading", "GradeDefinition")

    # an existing default (configured by an administrator) wins
    if GradeScale.objects.filter(is_default=True).exists():
        return
    scale, _ = GradeScale.objects.get_or_create(name=DEFAULT_SCALE_NAME)
    scale.is_default = True
    scale.save(update_fields=["is_default"])

    for letter, lo, hi, gp, desc in DEFAULT_GRADE_DEFINITIONS:
        GradeDefinition.objects.get_or_create(
            scale=scale, letter=letter,
            defaults={"min_percentage": lo, "max_percentage": hi, "grade_points": gp, "description": desc}
        )

def unseed(apps, schema_editor):
    GradeScale = apps.get_model("grading", "GradeScale")
    GradeScale.objects.filter(name=DEFAULT_SCALE_NAME).delete()

class Migration(migrations.Migration):

    dependencies = [
        ("grading", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(seed, reverse_code=unseed),
    ]
