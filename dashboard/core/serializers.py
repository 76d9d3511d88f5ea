from rest_framework import serializers


class ErrorReportSerializer(serializers.Serializer):
    """Wire shape of an ErrorReport: {kind, title, message, details, suggestions[]}"""
    kind = serializers.SerializerMethodField()
    title = serializers.CharField()
    message = serializers.CharField()
    details = serializers.CharField()
    suggestions = serializers.ListField(child=serializers.CharField())

    def get_kind(self, report):
        return report.kind.value
