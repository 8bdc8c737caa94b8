"""Serializers for the upload API (response shapes, used for the schema)."""

from rest_framework import serializers


class UploadResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    filename = serializers.CharField()
    originalName = serializers.CharField()  # noqa: N815
    size = serializers.IntegerField()
    url = serializers.CharField()


class UploadErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
    detail = serializers.CharField(required=False)
