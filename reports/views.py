from django.http import HttpResponse, Http404
from django.urls import reverse
from django.views.generic import TemplateView

from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.exceptions import PermissionDenied

from core.permissions import ADMIN_ROLES, STAFF_ROLES, has_role
from .models import TranscriptToken
from .services import TranscriptAssembler, snapshot, build_transcript_html, render_pdf_from_html, sha1_bytes


def _official_flag(request, default="0"):
    return request.query_params.get("official", default).lower() in ("1", "true", "yes")

def check_transcript_access(user, student_id: int, official: bool):
    """
    Registrar/admin: everything. Lecturers: unofficial copies.
    Students: their own unofficial copy.
    """
    if has_role(user, ADMIN_ROLES):
        return
    if official:
        raise PermissionDenied("Official transcripts are issued by the registrar.")
    if has_role(user, STAFF_ROLES):
        return
    student = getattr(user, "student", None)
    if student is None or student.id != student_id:
        raise PermissionDenied("Not allowed to view this transcript.")


class TranscriptView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, student_id: int):
        official = _official_flag(request)
        check_transcript_access(request.user, student_id, official)
        return Response(TranscriptAssembler().generate(student_id, official=official))


class TranscriptPDFView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, student_id: int):
        official = _official_flag(request, default="1")
        check_transcript_access(request.user, student_id, official)

        payload = TranscriptAssembler().generate(student_id, official=official)
        # token
        token = TranscriptToken.objects.create(
            student_id=student_id,
            is_official=official,
            payload=snapshot(payload),
        )
        verify_url = request.build_absolute_uri(reverse("transcript-verify", args=[str(token.uid)]))
        html = build_transcript_html(payload, verify_url)
        pdf = render_pdf_from_html(html)
        token.pdf_sha1 = sha1_bytes(pdf)
        token.save(update_fields=["pdf_sha1"])

        kind = "OFFICIAL" if official else "UNOFFICIAL"
        filename = f"{payload['student']['student_number']}_TRANSCRIPT_{kind}.pdf"
        resp = HttpResponse(pdf, content_type="application/pdf")
        resp["Content-Disposition"] = f'inline; filename="{filename}"'
        return resp


class TranscriptVerifyPage(TemplateView):
    template_name = "reports/verify.html"  # public page, reached from the QR code

    def get(self, request, uid):
        try:
            token = TranscriptToken.objects.select_related("student").get(uid=uid)
        except TranscriptToken.DoesNotExist:
            raise Http404("Unknown transcript UID")
        payload = token.payload or {}
        ctx = {
            "valid": token.valid,
            "is_official": token.is_official,
            "student": {
                "student_number": token.student.student_number,
                "name": token.student.full_name,
            },
            "cumulative_gpa": payload.get("cumulative_gpa"),
            "cumulative_credits": payload.get("cumulative_credits"),
            "created_at": token.created_at,
            "pdf_sha1": token.pdf_sha1,
        }
        return self.render_to_response(ctx)
