from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.services.forms import ValidationErrors, submit_booking


class BookingValidateView(APIView):
    """Run the booking form checks server-side; nothing is stored."""

    def post(self, request, *args, **kwargs):
        result = submit_booking(request.data)
        if isinstance(result, ValidationErrors):
            return Response({"errors": result}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"booking": result.to_dict()})
