from django.urls import path
from .views import TranscriptView, TranscriptPDFView, TranscriptVerifyPage

urlpatterns = [
    path("api/transcripts/<int:student_id>/", TranscriptView.as_view(), name="transcript"),
    path("api/transcripts/<int:student_id>/pdf/", TranscriptPDFView.as_view(), name="transcript-pdf"),
    path("transcripts/verify/<uuid:uid>/", TranscriptVerifyPage.as_view(), name="transcript-verify"),
]
