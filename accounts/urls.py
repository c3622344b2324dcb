from django.urls import path
from .views import MeView, HealthView

urlpatterns = [
    path("api/me/", MeView.as_view(), name="me"),
    path("api/health/", HealthView.as_view(), name="health"),
]
