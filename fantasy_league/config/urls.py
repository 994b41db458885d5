"""
URL configuration for config project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path
from league.views import validate_squad, participant_chips, round_preview

urlpatterns = [
    path('api/squad/validate/', validate_squad, name='validate_squad'),
    path('api/participants/<int:participant_id>/chips/', participant_chips, name='participant_chips'),
    path(
        'api/participants/<int:participant_id>/rounds/<int:round_number>/preview/',
        round_preview,
        name='round_preview'
    ),
    path('admin/', admin.site.urls),
]
