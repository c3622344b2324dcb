from rest_framework.routers import DefaultRouter
from .views import GradeComponentViewSet, GradeEntryViewSet

router = DefaultRouter()  # trailing slash by default
router.register(r"api/grade-components", GradeComponentViewSet, basename="grade-components")
router.register(r"api/grade-entries", GradeEntryViewSet, basename="grade-entries")
urlpatterns = router.urls
