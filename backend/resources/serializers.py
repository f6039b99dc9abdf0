from rest_framework import serializers
from .models import Resource


class ResourceSerializer(serializers.ModelSerializer):
    file_name = serializers.SerializerMethodField()
    file_size = serializers.SerializerMethodField()

    class Meta:
        model = Resource
        fields = ['id', 'title', 'file_type', 'file_name', 'file_size', 'class_ids', 'uploaded_by', 'uploaded_at']
        read_only_fields = ['id', 'uploaded_at']

    def get_file_name(self, obj):
        return obj.file.name.rsplit('/', 1)[-1] if obj.file else None

    def get_file_size(self, obj):
        if not obj.file or not obj.file.storage.exists(obj.file.name):
            return None
        return obj.file.size
