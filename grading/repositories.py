# grading/repositories.py
from django.db import transaction
from django.db.models import Prefetch

from .models import GradeScale, GradeDefinition


def _definition_rows(scale, definitions):
    return [
        GradeDefinition(
            scale=scale,
            letter=d["letter"],
            min_percentage=d["min_percentage"],
            max_percentage=d["max_percentage"],
            grade_points=d["grade_points"],
            description=d.get("description") or "",
        )
        for d in definitions
    ]


class GradeScaleRepository:
    """ORM access to grade scales; every scale comes with its grades ordered by -min_percentage."""

    def _qs(self):
        return GradeScale.objects.prefetch_related(
            Prefetch("grades", queryset=GradeDefinition.objects.order_by("-min_percentage", "id"))
        )

    def get(self, scale_id):
        return self._qs().filter(id=scale_id).first()

    def get_by_name(self, name):
        return self._qs().filter(name=name).first()

    def get_default(self):
        return self._qs().filter(is_default=True).first()

    def list_all(self):
        return list(self._qs().order_by("name"))

    @transaction.atomic
    def create(self, name, definitions, is_default=False):
        if is_default:
            GradeScale.objects.select_for_update().filter(is_default=True).update(is_default=False)
        scale = GradeScale.objects.create(name=name, is_default=is_default)
        GradeDefinition.objects.bulk_create(_definition_rows(scale, definitions))
        return self.get(scale.id)

    @transaction.atomic
    def replace(self, scale_id, definitions=None, name=None):
        """Rename and/or swap the whole grade list; bands are never patched one by one."""
        scale = GradeScale.objects.select_for_update().get(id=scale_id)
        if name:
            scale.name = name
            scale.save(update_fields=["name"])
        if definitions is not None:
            GradeDefinition.objects.filter(scale=scale).delete()
            GradeDefinition.objects.bulk_create(_definition_rows(scale, definitions))
        return self.get(scale_id)

    @transaction.atomic
    def set_default(self, scale_id):
        GradeScale.objects.select_for_update().filter(is_default=True).exclude(id=scale_id).update(is_default=False)
        GradeScale.objects.filter(id=scale_id).update(is_default=True)
        return self.get(scale_id)

    def delete(self, scale_id):
        GradeScale.objects.filter(id=scale_id).delete()
