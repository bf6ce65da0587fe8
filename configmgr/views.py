from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from staff.permissions import IsAdminRole
from .serializers import KioskConfigSerializer
from .services import get_kiosk_config, update_kiosk_config


class KioskConfigView(APIView):
    """
    GET /api/config/kiosk/   kiosk location + check-in radius (any signed-in user)
    PUT /api/config/kiosk/   partial update (admin only)
    """

    def get_permissions(self):
        if self.request.method == "PUT":
            return [IsAdminRole()]
        return [IsAuthenticated()]

    def get(self, request):
        return Response(get_kiosk_config().as_dict())

    def put(self, request):
        serializer = KioskConfigSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        config = update_kiosk_config(**serializer.validated_data)
        return Response(config.as_dict())
