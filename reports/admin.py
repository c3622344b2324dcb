from django.contrib import admin
from .models import TranscriptToken
# Register your models here.

@admin.register(TranscriptToken)
class TranscriptTokenAdmin(admin.ModelAdmin):
    list_display = ("uid", "student", "is_official", "created_at", "valid")
    list_filter = ("is_official", "valid")
    search_fields = ("student__student_number", "student__last_name")
    readonly_fields = ("uid", "student", "is_official", "created_at", "payload", "pdf_sha1")
