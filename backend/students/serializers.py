from rest_framework import serializers
from .models import Student, DroppedAccessNumber

PARENT_FIELDS = {
    'name': 'parent_name',
    'nin': 'parent_nin',
    'ninType': 'parent_nin_type',
    'phone': 'parent_phone',
    'phoneCountryCode': 'parent_phone_country_code',
    'email': 'parent_email',
    'address': 'parent_address',
    'occupation': 'parent_occupation',
    'story': 'parent_story',
    'age': 'parent_age',
    'familySize': 'parent_family_size',
    'relationship': 'parent_relationship',
}

SECOND_PARENT_FIELDS = {
    'name': 'second_parent_name',
    'nin': 'second_parent_nin',
    'phone': 'second_parent_phone',
    'phoneCountryCode': 'second_parent_phone_country_code',
    'email': 'second_parent_email',
    'address': 'second_parent_address',
    'occupation': 'second_parent_occupation',
}


def flatten_parents(data):
    """Copy of a payload with nested parent objects moved onto flat fields"""
    data = dict(data.items()) if hasattr(data, 'items') else data
    for key, mapping in (('parent', PARENT_FIELDS), ('secondParent', SECOND_PARENT_FIELDS),
                         ('second_parent', SECOND_PARENT_FIELDS)):
        nested = data.pop(key, None)
        if isinstance(nested, dict):
            for source, target in mapping.items():
                value = nested.get(source)
                if value not in (None, ''):
                    data[target] = value
    if 'class' in data and 'class_name' not in data:
        data['class_name'] = data.pop('class')
    return data


class StudentSerializer(serializers.ModelSerializer):
    fee_balance = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Student
        fields = '__all__'
        read_only_fields = ['conduct_notes', 'fees_paid', 'created_at', 'updated_at']

    def to_internal_value(self, data):
        return super().to_internal_value(flatten_parents(data))


class StudentListSerializer(serializers.ModelSerializer):
    class Meta:
        model = Student
        fields = ['id', 'name', 'access_number', 'admission_id', 'class_name', 'stream', 'status',
                  'sponsorship_status', 'residence_type', 'admitted_by', 'parent_name', 'created_at']


class DroppedAccessNumberSerializer(serializers.ModelSerializer):
    class Meta:
        model = DroppedAccessNumber
        fields = ['id', 'access_number', 'class_name', 'stream_name', 'dropped_at', 'reason']
