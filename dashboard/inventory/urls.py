from django.urls import path
from .views import inventory_log_page, inventory_log_export, inventory_log_list_api

urlpatterns = [
    # Viewer pages
    path('inventory-logs/', inventory_log_page, name='inventory-log-page'),
    path('inventory-logs/export/', inventory_log_export, name='inventory-log-export'),

    # JSON endpoint
    path('api/v1/inventory-logs/', inventory_log_list_api, name='inventory-log-list-api'),
]
