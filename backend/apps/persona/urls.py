from django.urls import path

from . import views

urlpatterns = [
    path('upload/', views.upload_transcript, name='upload_transcript'),
]
