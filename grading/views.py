from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import BadRequest
from core.permissions import IsRegistrarOrAdmin, IsStaffRole
from .serializers import GradeScaleSerializer, GradeScaleWriteSerializer, UnfinalizeSerializer
from .services import GradeScaleRegistry, FinalGradeResolver, GPAAggregator


def _int_param(value, name):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"'{name}' must be an integer")


class GradeScaleViewSet(viewsets.ViewSet):
    permission_classes = [IsRegistrarOrAdmin]

    def get_registry(self):
        return GradeScaleRegistry()

    def list(self, request):
        scales = self.get_registry().list_scales()
        return Response(GradeScaleSerializer(scales, many=True).data)

    def retrieve(self, request, pk=None):
        scale = self.get_registry().get_scale(_int_param(pk, "id"))
        return Response(GradeScaleSerializer(scale).data)

    def create(self, request):
        ser = GradeScaleWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        scale = self.get_registry().create_scale(
            data["name"], data.get("grades") or [], is_default=data["is_default"], actor=request.user,
        )
        return Response(GradeScaleSerializer(scale).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial=False):
        ser = GradeScaleWriteSerializer(data=request.data, partial=partial)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        scale = self.get_registry().update_scale(
            _int_param(pk, "id"), name=data.get("name"), definitions=data.get("grades"), actor=request.user,
        )
        return Response(GradeScaleSerializer(scale).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        self.get_registry().delete_scale(_int_param(pk, "id"), actor=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["get"])
    def default(self, request):
        return Response(GradeScaleSerializer(self.get_registry().get_default_scale()).data)

    @action(detail=True, methods=["post"], url_path="set-default")
    def set_default(self, request, pk=None):
        scale = self.get_registry().set_default(_int_param(pk, "id"), actor=request.user)
        return Response(GradeScaleSerializer(scale).data)

    @action(detail=False, methods=["get"])
    def resolve(self, request):
        """GET /api/grade-scales/resolve/?percentage=74&scale=<id>"""
        percentage = request.query_params.get("percentage")
        if percentage is None:
            raise BadRequest("percentage is required")
        scale_id = _int_param(request.query_params.get("scale"), "scale")
        return Response(self.get_registry().resolve_letter(percentage, scale_id=scale_id))


class EnrollmentGradesView(APIView):
    permission_classes = [IsStaffRole]
    def get(self, request, enrollment_id: int):
        return Response(FinalGradeResolver().enrollment_grades(enrollment_id))

class ClassGradesView(APIView):
    permission_classes = [IsStaffRole]
    def get(self, request, class_id: int):
        grades = FinalGradeResolver().compute_class_grades(class_id)
        return Response({"class_id": class_id, "count": len(grades), "results": grades})

class FinalizeClassView(APIView):
    permission_classes = [IsStaffRole]
    def post(self, request, class_id: int):
        grades = FinalGradeResolver().finalize_class(class_id, request.user)
        return Response({"class_id": class_id, "finalized": len(grades), "results": grades})

class UnfinalizeClassView(APIView):
    permission_classes = [IsRegistrarOrAdmin]
    def post(self, request, class_id: int):
        ser = UnfinalizeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        count = FinalGradeResolver().unfinalize_class(class_id, ser.validated_data["reason"], request.user)
        return Response({"class_id": class_id, "unfinalized": count})

class StudentGPAView(APIView):
    permission_classes = [IsAuthenticated]
    def get(self, request, student_id: int):
        semester_id = _int_param(request.query_params.get("semester"), "semester")
        return Response(GPAAggregator().gpa_details(student_id, semester_id))
