from rest_framework import serializers


class NormalizedAuditEntrySerializer(serializers.Serializer):
    """Read-only camelCase view of a NormalizedAuditEntry"""
    id = serializers.JSONField()
    idIsSynthetic = serializers.BooleanField(source='id_is_synthetic')
    product = serializers.DictField()
    productBatch = serializers.DictField(source='product_batch')
    changeType = serializers.CharField(source='change_type')
    quantityChanged = serializers.JSONField(source='quantity_changed')
    reason = serializers.CharField()
    saleId = serializers.JSONField(source='sale_id')
    purchaseId = serializers.JSONField(source='purchase_id')
    adjustmentReference = serializers.CharField(source='adjustment_reference', allow_null=True)
    createdAt = serializers.CharField(source='created_at')


class InventoryLogSummarySerializer(serializers.Serializer):
    total = serializers.IntegerField()
    stock_in = serializers.IntegerField()
    stock_out = serializers.IntegerField()
    adjustments = serializers.IntegerField()


class InventoryLogListSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    summary = InventoryLogSummarySerializer()
    results = NormalizedAuditEntrySerializer(many=True)
