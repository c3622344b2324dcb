from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.views import APIView

# Create your views here.
class MeView(APIView):
    permission_classes = [IsAuthenticated]
    def get(self, request):
        u = request.user
        return Response({
            "id": u.id,
            "username": u.username,
            "name": u.get_full_name(),
            "role": u.role,
        })

class HealthView(APIView):
    permission_classes = [AllowAny]
    def get(self, request):
        return Response({"status":"ok"})
