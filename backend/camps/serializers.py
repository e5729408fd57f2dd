from rest_framework import serializers


class PlanSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField(read_only=True)
    price = serializers.IntegerField(read_only=True)
    amount_minor_units = serializers.IntegerField(read_only=True)
    duration = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    features = serializers.ListField(child=serializers.CharField(), read_only=True)
    popular = serializers.BooleanField(read_only=True)
