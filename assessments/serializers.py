from rest_framework import serializers
from django.db import transaction
from decimal import Decimal, InvalidOperation

from .models import GradeComponent, GradeEntry
from enrollments.models import Enrollment
from core.exceptions import BadRequest


FINALIZED_MESSAGE = "Cannot modify grades for finalized enrollments"


# -------------------------
#  Model Serializers
# -------------------------

class GradeComponentSerializer(serializers.ModelSerializer):
    class Meta:
        model = GradeComponent
        fields = ["id", "classroom", "name", "type", "max_score", "weight", "due_date", "is_published", "created_at"]
        read_only_fields = ["created_at"]

    def validate_max_score(self, value):
        if value <= 0:
            raise serializers.ValidationError("max_score must be positive.")
        return value

    def validate(self, data):
        # the class's weights may not add up to more than 100
        classroom = data.get("classroom") or getattr(self.instance, "classroom", None)
        weight = data.get("weight", getattr(self.instance, "weight", None))
        if classroom is not None and weight is not None:
            others = GradeComponent.objects.filter(classroom=classroom)
            if self.instance is not None:
                others = others.exclude(id=self.instance.id)
            total = sum((c.weight for c in others), Decimal("0"))
            if total + weight > Decimal("100"):
                raise BadRequest(
                    f"Total weight would exceed 100%. Other components: {total}%, requested: {weight}%"
                )
        return data


class GradeEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = GradeEntry
        fields = ["id", "component", "enrollment", "score", "remarks", "created_at", "modified_at"]
        read_only_fields = ["created_at", "modified_at"]

    def validate(self, data):
        component = data.get("component") or getattr(self.instance, "component", None)
        enrollment = data.get("enrollment") or getattr(self.instance, "enrollment", None)
        # the enrollment must belong to the component's class
        if enrollment.classroom_id != component.classroom_id:
            raise serializers.ValidationError("Enrollment does not belong to the component's class.")
        if enrollment.is_finalized:
            raise BadRequest(FINALIZED_MESSAGE)
        score = data.get("score", getattr(self.instance, "score", None))
        if score is None or not (Decimal("0") <= score <= component.max_score):
            raise serializers.ValidationError(f"Score must be between 0 and {component.max_score}.")
        return data


# -------------------------
#  BULK SERIALIZERS
# -------------------------

class BulkGradeEntryUpsertSerializer(serializers.Serializer):
    """
    Upsert scores for ONE grade component.

    Body:
    {
      "component": 10,
      "entries": [
        { "enrollment": 101, "score": 17.5, "remarks": "" },
        { "enrollment": 102, "score": 12 }
      ]
    }
    Enrollments that are not REGISTERED in the component's class are skipped.
    Any finalized target enrollment rejects the whole request.
    """
    component = serializers.PrimaryKeyRelatedField(queryset=GradeComponent.objects.select_related("classroom"))
    entries = serializers.ListField(child=serializers.DictField(), allow_empty=True)

    def validate(self, attrs):
        component = attrs["component"]
        for e in attrs.get("entries", []):
            if "enrollment" not in e:
                raise serializers.ValidationError("Each entry must have 'enrollment'.")
            try:
                e["enrollment"] = int(e["enrollment"])
            except (TypeError, ValueError):
                raise serializers.ValidationError("'enrollment' must be an id.")
            try:
                score = Decimal(str(e.get("score")))
            except (InvalidOperation, TypeError):
                raise serializers.ValidationError(f"Invalid score for enrollment {e['enrollment']}.")
            if not score.is_finite():
                raise serializers.ValidationError(f"Invalid score for enrollment {e['enrollment']}.")
            if not (Decimal("0") <= score <= component.max_score):
                raise serializers.ValidationError(
                    f"Invalid score for enrollment {e['enrollment']}. "
                    f"Score must be between 0 and {component.max_score}"
                )
            e["score"] = score

        target_ids = [e["enrollment"] for e in attrs.get("entries", [])]
        if Enrollment.objects.filter(classroom_id=component.classroom_id, id__in=target_ids, is_finalized=True).exists():
            raise BadRequest(FINALIZED_MESSAGE)
        return attrs

    @transaction.atomic
    def create(self, validated):
        component = validated["component"]
        user = self.context.get("user")
        registered = set(Enrollment.objects.filter(
            classroom_id=component.classroom_id, status=Enrollment.Status.REGISTERED
        ).values_list("id", flat=True))
        existing = {g.enrollment_id: g for g in GradeEntry.objects.filter(component=component)}

        results = {"created": [], "updated": [], "skipped": []}

        for e in validated.get("entries", []):
            enrollment_id = e["enrollment"]
            if enrollment_id not in registered:
                results["skipped"].append({"enrollment": enrollment_id, "reason": "Not registered in this class"})
                continue

            if enrollment_id in existing:
                g = existing[enrollment_id]
                g.score = e["score"]
                g.remarks = e.get("remarks", g.remarks) or ""
                g.modified_by = user
                g.save(update_fields=["score", "remarks", "modified_by", "modified_at"])
                results["updated"].append(g.id)
            else:
                g = GradeEntry.objects.create(component=component, enrollment_id=enrollment_id,
                                              score=e["score"], remarks=e.get("remarks") or "",
                                              entered_by=user)
                results["created"].append(g.id)

        return results
