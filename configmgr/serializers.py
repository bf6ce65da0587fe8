from rest_framework import serializers


class KioskConfigSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90, required=False)
    longitude = serializers.FloatField(min_value=-180, max_value=180, required=False)
    name = serializers.CharField(max_length=200, required=False)
    address = serializers.CharField(max_length=200, required=False)
    proximity_distance = serializers.FloatField(min_value=0, required=False)
