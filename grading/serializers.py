from rest_framework import serializers

from .models import GradeScale, GradeDefinition


class GradeDefinitionSerializer(serializers.ModelSerializer):
    class Meta:
        model = GradeDefinition
        fields = ["letter", "min_percentage", "max_percentage", "grade_points", "description"]


class GradeScaleSerializer(serializers.ModelSerializer):
    grades = GradeDefinitionSerializer(many=True, read_only=True)

    class Meta:
        model = GradeScale
        fields = ["id", "name", "is_default", "grades"]


class GradeDefinitionInputSerializer(serializers.Serializer):
    letter = serializers.CharField(max_length=4)
    min_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    max_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    grade_points = serializers.DecimalField(max_digits=3, decimal_places=2)
    description = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")


class GradeScaleWriteSerializer(serializers.Serializer):
    """
    Body for create / update. 'grades' replaces the whole list of bands when given.
    Band consistency (bounds, overlaps, letters) is checked by the registry.
    """
    name = serializers.CharField(max_length=64)
    is_default = serializers.BooleanField(required=False, default=False)
    grades = GradeDefinitionInputSerializer(many=True, required=False)


class UnfinalizeSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500)
