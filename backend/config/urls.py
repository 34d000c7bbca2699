"""URL configuration for the persona chat backend."""
from django.urls import path, include
from django.http import JsonResponse

from apps.persona.sessions import session_registry


def health_check(request):
    """Health check endpoint for container orchestration."""
    return JsonResponse({'status': 'healthy', 'sessions': len(session_registry)})


urlpatterns = [
    path('api/health/', health_check, name='health_check'),
    path('api/', include('apps.persona.urls')),
]
