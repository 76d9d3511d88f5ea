from django.apps import AppConfig


class InventoryConfig(AppConfig):
    name = 'dashboard.inventory'
    label = 'inventory'
    verbose_name = 'Inventory Logs'
