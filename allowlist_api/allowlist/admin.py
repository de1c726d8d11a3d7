from django.contrib import admin

from allowlist_api.address import format_for_display
from .models import AllowlistRecord


class AllowlistRecordAdmin(admin.ModelAdmin):
    readonly_fields = [
        'created_at',
        'updated_at',
    ]

    list_display = [
        'short_address',
        'role',
        'active',
        'updated_at',
    ]

    list_filter = [
        'role',
        'active',
    ]

    search_fields = [
        'address',
    ]

    def short_address(self, obj):
        return format_for_display(obj.address)


admin.site.register(AllowlistRecord, AllowlistRecordAdmin)
