from django.contrib import admin
from .models import AcademicYear, Semester, Course, Classroom
from assessments.models import GradeComponent
# Register your models here.
class GradeComponentInline(admin.TabularInline):
    model = GradeComponent
    extra = 1

@admin.register(AcademicYear)
class AcademicYearAdmin(admin.ModelAdmin):
    list_display = ("name", "start_date", "end_date")
    search_fields = ("name",)

@admin.register(Semester)
class SemesterAdmin(admin.ModelAdmin):
    list_display = ("name", "year", "start_date", "end_date")
    list_filter  = ("year",)
    search_fields = ("name", "year__name")

@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "credits")
    search_fields = ("code", "name")

@admin.register(Classroom)
class ClassroomAdmin(admin.ModelAdmin):
    list_display = ("course", "name", "semester", "lecturer")
    list_filter  = ("semester", "course")
    search_fields = ("course__code", "course__name", "name")
    inlines = [GradeComponentInline]
