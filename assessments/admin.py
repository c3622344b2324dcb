from django.contrib import admin
from .models import GradeComponent, GradeEntry
# Register your models here.

@admin.register(GradeComponent)
class GradeComponentAdmin(admin.ModelAdmin):
    list_display = ("name", "classroom", "type", "max_score", "weight", "due_date", "is_published")
    list_filter = ("type", "is_published", "classroom__semester")
    search_fields = ("name", "classroom__course__code")

@admin.register(GradeEntry)
class GradeEntryAdmin(admin.ModelAdmin):
    list_display = ("enrollment", "component", "score", "modified_at")
    list_filter = ("component__classroom__semester",)
    search_fields = ("enrollment__student__student_number", "component__name")
