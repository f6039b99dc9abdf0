from django.contrib import admin
from .models import Sponsorship


@admin.register(Sponsorship)
class SponsorshipAdmin(admin.ModelAdmin):
    list_display = ['sponsor_name', 'student', 'amount', 'status', 'start_date', 'end_date']
    list_filter = ['status', 'type', 'sponsor_country']
    search_fields = ['sponsor_name', 'student__name', 'student__access_number']
    readonly_fields = ['created_at', 'updated_at']
