import logging

import stripe
from django.conf import settings
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import PaymentIntentRequestSerializer
from .services.intents import create_payment_intent, find_plan_amount_mismatch, stripe_error_details

logger = logging.getLogger(__name__)

AMOUNT_AND_CURRENCY_REQUIRED = "Amount and currency are required"
INVALID_REQUEST = "Invalid payment intent request"
AMOUNT_PLAN_MISMATCH = "Amount does not match the selected plan"


def provider_error_payload(exc: stripe.StripeError) -> dict:
    details = stripe_error_details(exc)
    return {
        "error": details["message"],
        "type": details["type"],
        "code": details["code"],
    }


class CreatePaymentIntentView(APIView):
    """
    Relay a payment intent request to Stripe and hand the client secret back.

    Unauthenticated; the browser never sees the secret key.
    """

    def post(self, request, *args, **kwargs):
        data = request.data if isinstance(request.data, dict) else {}
        logger.info("Received payment intent request: %s", data)

        if not data.get("amount") or not data.get("currency"):
            return Response(
                {"error": AMOUNT_AND_CURRENCY_REQUIRED},
                status=status.HTTP_400_BAD_REQUEST,
            )

        serializer = PaymentIntentRequestSerializer(data=data)
        if not serializer.is_valid():
            return Response(
                {"error": INVALID_REQUEST, "details": serializer.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        amount = serializer.validated_data["amount"]
        currency = serializer.validated_data["currency"]
        metadata = serializer.validated_data.get("metadata") or {}

        if settings.PAYMENT_VERIFY_PLAN_AMOUNT:
            plan = find_plan_amount_mismatch(amount, metadata)
            if plan is not None:
                logger.warning(
                    "Rejected payment intent for %s: amount %s, expected %s",
                    plan.name,
                    amount,
                    plan.amount_minor_units,
                )
                return Response(
                    {"error": AMOUNT_PLAN_MISMATCH},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        logger.info(
            "Creating payment intent with amount=%s currency=%s metadata=%s",
            amount,
            currency,
            metadata,
        )
        try:
            intent = create_payment_intent(amount=amount, currency=currency, metadata=metadata)
        except stripe.StripeError as exc:
            logger.exception("Error creating payment intent: %s", exc)
            return Response(
                provider_error_payload(exc),
                status=exc.http_status or status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        logger.info(
            "Payment intent created: id=%s amount=%s status=%s",
            intent.id,
            intent.amount,
            intent.status,
        )
        return Response(
            {
                "clientSecret": intent.client_secret,
                "paymentIntentId": intent.id,
            }
        )


class PaymentConfigView(APIView):
    """Publishable key and currency for the embedded payment form."""

    def get(self, request, *args, **kwargs):
        return Response(
            {
                "publishableKey": settings.STRIPE_PUBLISHABLE_KEY,
                "currency": settings.PAYMENT_CURRENCY,
            }
        )


class ServerStatusView(APIView):
    def get(self, request, *args, **kwargs):
        return Response({"message": "Server is running"})
