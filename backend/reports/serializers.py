from rest_framework import serializers
from .models import WeeklyReport

LIST_FIELDS = ('achievements', 'challenges', 'next_week_goals', 'attachments')


class WeeklyReportSerializer(serializers.ModelSerializer):
    class Meta:
        model = WeeklyReport
        fields = [
            'id', 'user_id', 'user_name', 'user_role', 'week_start', 'week_end', 'report_type', 'content',
            'achievements', 'challenges', 'next_week_goals', 'attachments', 'status', 'submitted_at', 'updated_at'
        ]
        read_only_fields = ['id', 'submitted_at', 'updated_at']

    def validate(self, attrs):
        # Only lists are stored in the JSON columns
        for field in LIST_FIELDS:
            if field in attrs and not isinstance(attrs[field], list):
                attrs[field] = None
        week_start, week_end = attrs.get('week_start'), attrs.get('week_end')
        if week_start and week_end and week_end < week_start:
            raise serializers.ValidationError({'week_end': 'Week end must not be before week start'})
        return attrs
