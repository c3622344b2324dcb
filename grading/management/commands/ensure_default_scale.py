from django.core.management.base import BaseCommand

from grading.services import GradeScaleRegistry


class Command(BaseCommand):
    help = "Create the standard grade scale and mark it default if no default scale exists."

    def handle(self, *args, **options):
        scale = GradeScaleRegistry().ensure_default_scale()
        self.stdout.write(self.style.SUCCESS(
            f"Default grade scale: {scale.name} (id={scale.id}, {len(scale.grades.all())} grades)"
        ))
