# assessments/views.py
from rest_framework import viewsets, status
from rest_framework.response import Response
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from django_filters.rest_framework import DjangoFilterBackend

from core.exceptions import BadRequest
from core.permissions import IsStaffRole
from .models import GradeComponent, GradeEntry
from .serializers import (
    GradeComponentSerializer, GradeEntrySerializer, BulkGradeEntryUpsertSerializer, FINALIZED_MESSAGE,
)
from .utils import lecturer_can_edit, class_weights


class GradeComponentViewSet(viewsets.ModelViewSet):
    queryset = GradeComponent.objects.select_related("classroom__course", "classroom__semester")
    serializer_class = GradeComponentSerializer
    permission_classes = [IsStaffRole]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["classroom", "type", "is_published"]

    def perform_create(self, serializer):
        if not lecturer_can_edit(self.request.user, serializer.validated_data["classroom"].id):
            raise PermissionDenied("Not allowed to configure components for this class.")
        serializer.save()

    def perform_update(self, serializer):
        instance = serializer.instance
        if not lecturer_can_edit(self.request.user, instance.classroom_id):
            raise PermissionDenied("Not allowed to configure components for this class.")
        max_score = serializer.validated_data.get("max_score")
        if max_score is not None and max_score != instance.max_score and instance.entries.exists():
            raise BadRequest("Cannot change max score when grades have been entered.")
        serializer.save()

    def perform_destroy(self, instance):
        if not lecturer_can_edit(self.request.user, instance.classroom_id):
            raise PermissionDenied("Not allowed to configure components for this class.")
        if instance.entries.exists():
            raise BadRequest("Cannot delete component with existing grade entries. Delete entries first.")
        instance.delete()

    @action(detail=False, methods=["get"], url_path="validate-weights")
    def validate_weights(self, request, *args, **kwargs):
        """GET /api/grade-components/validate-weights/?classroom=<id>"""
        classroom_id = request.query_params.get("classroom")
        try:
            classroom_id = int(classroom_id)
        except (TypeError, ValueError):
            raise BadRequest("'classroom' must be an integer")
        return Response(class_weights(classroom_id))


class GradeEntryViewSet(viewsets.ModelViewSet):
    queryset = GradeEntry.objects.select_related("component", "enrollment__student")
    serializer_class = GradeEntrySerializer
    permission_classes = [IsStaffRole]
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["component", "enrollment"]  # GET /api/grade-entries/?component=<id>

    def perform_create(self, serializer):
        component = serializer.validated_data["component"]
        if not lecturer_can_edit(self.request.user, component.classroom_id):
            raise PermissionDenied("Not allowed to edit grades for this class.")
        serializer.save(entered_by=self.request.user)

    def perform_update(self, serializer):
        if not lecturer_can_edit(self.request.user, serializer.instance.component.classroom_id):
            raise PermissionDenied("Not allowed to edit grades for this class.")
        serializer.save(modified_by=self.request.user)

    def perform_destroy(self, instance):
        if instance.enrollment.is_finalized:
            raise BadRequest(FINALIZED_MESSAGE)
        if not lecturer_can_edit(self.request.user, instance.component.classroom_id):
            raise PermissionDenied("Not allowed to edit grades for this class.")
        instance.delete()

    @action(detail=False, methods=["post"], url_path="bulk")
    def bulk(self, request, *args, **kwargs):
        """Upsert of scores for one grade component."""
        ser = BulkGradeEntryUpsertSerializer(data=request.data, context={"user": request.user})
        ser.is_valid(raise_exception=True)
        component = ser.validated_data["component"]
        if not lecturer_can_edit(request.user, component.classroom_id):
            raise PermissionDenied("Not allowed to edit grades for this class.")
        result = ser.save()
        return Response(result, status=status.HTTP_200_OK)
