from django.contrib import admin
from .models import Student, Enrollment, Hold
# Register your models here.

class HoldInline(admin.TabularInline):
    model = Hold
    fk_name = "student"
    extra = 0
    fields = ("type","reason","blocks_registration","blocks_grades","blocks_transcript","released_at")

@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ("student_number","last_name","first_name","program","admission_date")
    search_fields = ("student_number","last_name","first_name")
    inlines = [HoldInline]

@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ("student","classroom","semester","status","final_percentage","final_grade","grade_points","is_finalized")
    list_filter = ("semester","status","is_finalized")
    search_fields = ("student__student_number","student__last_name","student__first_name","classroom__course__code")
    # finalize fields belong to the grading engine
    readonly_fields = ("final_percentage","final_grade","grade_points","is_finalized","finalized_at","finalized_by")

@admin.register(Hold)
class HoldAdmin(admin.ModelAdmin):
    list_display = ("student","type","blocks_registration","blocks_grades","blocks_transcript","placed_at","released_at")
    list_filter = ("type","blocks_transcript")
    search_fields = ("student__student_number","student__last_name")
