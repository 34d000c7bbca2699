from rest_framework import serializers


class TranscriptUploadSerializer(serializers.Serializer):
    """Serializer for a transcript upload.

    Field names follow the client's JSON keys.
    """
    transcriptText = serializers.CharField()
    personaName = serializers.CharField(max_length=255)
