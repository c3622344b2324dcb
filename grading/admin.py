from django.contrib import admin
from .models import GradeScale, GradeDefinition
# Register your models here.

class GradeDefinitionInline(admin.TabularInline):
    model = GradeDefinition
    extra = 0

@admin.register(GradeScale)
class GradeScaleAdmin(admin.ModelAdmin):
    list_display = ("name", "is_default", "created_at")
    list_filter = ("is_default",)
    search_fields = ("name",)
    inlines = [GradeDefinitionInline]
