"""
URL configuration for the PharmaTrack dashboard.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path('', RedirectView.as_view(pattern_name='inventory-log-page', permanent=False)),
    path('', include('dashboard.inventory.urls')),
]
