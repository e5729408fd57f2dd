from rest_framework.response import Response
from rest_framework.views import APIView

from .plans import PLANS
from .serializers import PlanSerializer


class PlanListView(APIView):
    """Static plan catalog shown on the pricing section."""

    def get(self, request, *args, **kwargs):
        serializer = PlanSerializer(PLANS, many=True)
        return Response(serializer.data)
