from django.db import models
from django.utils import timezone

# Allowed upload types and the extension each is stored under
RESOURCE_TYPES = {
    'application/pdf': 'pdf',
    'application/msword': 'doc',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document': 'docx',
    'image/jpeg': 'jpg',
    'image/jpg': 'jpg',
    'image/png': 'png',
    'text/plain': 'txt',
    'application/vnd.ms-excel': 'xls',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet': 'xlsx',
}


class Resource(models.Model):
    """Teaching material shared with one or more classes"""
    title = models.CharField(max_length=255)
    file_type = models.CharField(max_length=150)
    file = models.FileField(upload_to='resources')
    class_ids = models.JSONField(default=list, blank=True)
    uploaded_by = models.CharField(max_length=255)
    uploaded_at = models.DateTimeField(default=timezone.now, db_index=True)

    def __str__(self):
        return self.title

    def is_for_class(self, class_id):
        return str(class_id) in [str(value) for value in self.class_ids or []]

    class Meta:
        db_table = 'resources'
        ordering = ['-uploaded_at']
