from django.urls import path
from rest_framework.routers import DefaultRouter
from .views import (
    GradeScaleViewSet, EnrollmentGradesView, ClassGradesView,
    FinalizeClassView, UnfinalizeClassView, StudentGPAView,
)

router = DefaultRouter()
router.register(r"api/grade-scales", GradeScaleViewSet, basename="grade-scales")

urlpatterns = router.urls + [
    path("api/grades/enrollments/<int:enrollment_id>/", EnrollmentGradesView.as_view(), name="grades-enrollment"),
    path("api/grades/classes/<int:class_id>/", ClassGradesView.as_view(), name="grades-class"),
    path("api/grades/classes/<int:class_id>/finalize/", FinalizeClassView.as_view(), name="grades-class-finalize"),
    path("api/grades/classes/<int:class_id>/unfinalize/", UnfinalizeClassView.as_view(), name="grades-class-unfinalize"),
    path("api/grades/students/<int:student_id>/gpa/", StudentGPAView.as_view(), name="grades-student-gpa"),
]
