from rest_framework import serializers


class PaymentIntentRequestSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=1)
    currency = serializers.CharField(max_length=3, min_length=3)
    metadata = serializers.DictField(
        child=serializers.CharField(allow_blank=True),
        required=False,
        allow_null=True,
    )

    def validate_currency(self, value):
        return value.lower()

    def validate_metadata(self, value):
        return value or {}
