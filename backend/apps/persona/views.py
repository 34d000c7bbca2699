import logging

from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .priming import start_priming
from .serializers import TranscriptUploadSerializer
from .sessions import session_registry

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def upload_transcript(request):
    """
    Create a chat session from an exported transcript.

    POST /api/upload/
    {
        "transcriptText": "[10/02/24, 9:14 PM] Anju: on my way\\n...",
        "personaName": "Anju"
    }

    Priming (load + index) runs in the background; progress and readiness
    are pushed over the session's WebSocket group.
    """
    serializer = TranscriptUploadSerializer(data=request.data)

    if not serializer.is_valid():
        return Response({
            "success": False,
            "errors": serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    logger.info(f"Received upload for persona {data['personaName']} "
                f"({len(data['transcriptText'])} chars)")

    session = session_registry.create(
        transcript_text=data['transcriptText'],
        persona_name=data['personaName']
    )

    # Runs on the server's event loop and returns as soon as the task exists
    async_to_sync(start_priming)(session)

    return Response({"sessionId": session.id}, status=status.HTTP_200_OK)
