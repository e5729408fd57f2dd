from django.urls import path

from bookings.api import BookingValidateView
from camps.api import PlanListView
from payments.api import CreatePaymentIntentView, PaymentConfigView, ServerStatusView

urlpatterns = [
    path("api/plans", PlanListView.as_view(), name="plan-list"),
    path("api/bookings/validate", BookingValidateView.as_view(), name="booking-validate"),
    path(
        "api/create-payment-intent",
        CreatePaymentIntentView.as_view(),
        name="create-payment-intent",
    ),
    path("api/config", PaymentConfigView.as_view(), name="payment-config"),
    path("api/test", ServerStatusView.as_view(), name="server-status"),
]
