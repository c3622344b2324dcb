import io, base64, hashlib, json
import logging
from decimal import Decimal, ROUND_HALF_UP
from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.template.loader import render_to_string
from django.utils import timezone
from xhtml2pdf import pisa
import qrcode

from core.exceptions import NotFound, BadRequest
from enrollments.models import Enrollment
from enrollments.repositories import EnrollmentRepository, HoldRepository
from grading.services import gpa

logger = logging.getLogger(__name__)

TIMES_STACK = '"Times New Roman", Times, serif'
D0 = Decimal("0")


def _q2(x) -> Decimal:
    """Round to 2 decimals, half up."""
    return Decimal(str(x)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class TranscriptAssembler:
    """
    Builds a student's transcript from finalized, COMPLETED enrollments.
    Always generated fresh; official requests honour transcript holds.
    """

    def __init__(self, enrollments=None, holds=None):
        self.enrollments = enrollments or EnrollmentRepository()
        self.holds = holds or HoldRepository()

    def generate(self, student_id, official=False):
        student = self.enrollments.get_student(student_id)
        if student is None:
            raise NotFound("Student not found")

        # unofficial copies are informational and skip the hold check
        if official:
            holds = self.holds.list_active_blocking_transcript(student_id)
            if holds:
                logger.info("Official transcript refused for student %s: %s active hold(s)",
                            student_id, len(holds))
                raise BadRequest("Student has holds blocking transcript generation")

        rows = self.enrollments.list_by_student(
            student_id, statuses=[Enrollment.Status.COMPLETED], transcript_order=True,
        )

        # rows arrive ordered by semester start date, then course code
        semesters = {}
        for e in rows:
            sem = semesters.get(e.semester_id)
            if sem is None:
                sem = semesters[e.semester_id] = {
                    "id": e.semester_id,
                    "name": e.semester.name,
                    "courses": [],
                    "semester_credits": 0,
                    "semester_points": D0,
                }
            course = e.classroom.course
            credits = int(course.credits)
            points = credits * (Decimal(str(e.grade_points)) if e.grade_points is not None else D0)
            sem["courses"].append({
                "code": course.code,
                "name": course.name,
                "credits": credits,
                "grade": e.final_grade,
                "points": float(_q2(points)),
            })
            sem["semester_credits"] += credits
            sem["semester_points"] += points

        cumulative_credits = 0
        cumulative_points = D0
        out = []
        for sem in semesters.values():
            cumulative_credits += sem["semester_credits"]
            cumulative_points += sem["semester_points"]
            sem["semester_gpa"] = gpa(sem["semester_points"], sem["semester_credits"])
            sem["semester_points"] = float(_q2(sem["semester_points"]))
            out.append(sem)

        return {
            "student": {
                "id": student.id,
                "student_number": student.student_number,
                "name": student.full_name,
                "program": student.program,
                "admission_date": student.admission_date,
            },
            "semesters": out,
            "cumulative_credits": cumulative_credits,
            "cumulative_points": float(_q2(cumulative_points)),
            "cumulative_gpa": gpa(cumulative_points, cumulative_credits),
            "generated_at": timezone.now(),
            "is_official": official,
        }


def snapshot(payload: dict) -> dict:
    """JSON-safe copy of a transcript (dates as ISO strings) for TranscriptToken.payload."""
    return json.loads(json.dumps(payload, cls=DjangoJSONEncoder))

def make_qr_png_b64(text: str) -> str:
    img = qrcode.make(text)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")

def render_pdf_from_html(html: str) -> bytes:
    out = io.BytesIO()
    result = pisa.CreatePDF(io.StringIO(html), dest=out)
    if result.err:
        logger.error("xhtml2pdf reported %s error(s) while rendering a transcript", result.err)
    return out.getvalue()

def build_transcript_html(payload: dict, verify_url: str) -> str:
    return render_to_string("reports/transcript.html", {
        "p": payload,
        "verify_url": verify_url,
        "qr_b64": make_qr_png_b64(verify_url),
        "TIMES_STACK": TIMES_STACK,
        "institution": {
            "name": getattr(settings, "INSTITUTION_NAME", "Your University"),
            "address": getattr(settings, "INSTITUTION_ADDRESS", ""),
            "registrar": getattr(settings, "INSTITUTION_REGISTRAR", ""),
        },
    })

def sha1_bytes(b: bytes) -> str:
    return hashlib.sha1(b).hexdigest()
