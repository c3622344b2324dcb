import uuid
from django.db import models
from enrollments.models import Student

# Create your models here.
class TranscriptToken(models.Model):
    uid = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name="transcript_tokens")
    is_official = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    valid = models.BooleanField(default=True)
    # snapshot of the issued transcript, for archiving and verification
    payload = models.JSONField(default=dict, blank=True)
    pdf_sha1 = models.CharField(max_length=64, blank=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        kind = "official" if self.is_official else "unofficial"
        return f"{self.uid} - {self.student.student_number} - {kind}"
