# assessments/utils.py
from decimal import Decimal

from core.models import Classroom
from core.permissions import ADMIN_ROLES, has_role
from .models import GradeComponent


def lecturer_can_edit(user, classroom_id: int) -> bool:
    """
    True if:
      - user is REGISTRAR/ADMIN (or superuser), or
      - user is a LECTURER assigned to the class.
    """
    if has_role(user, ADMIN_ROLES):
        return True
    if getattr(user, "role", None) != "LECTURER":
        return False
    return Classroom.objects.filter(id=classroom_id, lecturer=user).exists()


def class_weights(classroom_id: int) -> dict:
    """
    Weight summary of a class's components.
    valid = the weights add up to 100 (0.01 tolerance).
    """
    components = list(GradeComponent.objects.filter(classroom_id=classroom_id).order_by("created_at", "id"))
    total = sum((c.weight for c in components), Decimal("0"))
    return {
        "valid": abs(total - Decimal("100")) < Decimal("0.01"),
        "total": float(total),
        "components": [{"id": c.id, "name": c.name, "weight": float(c.weight)} for c in components],
    }
