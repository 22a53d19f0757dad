from django.contrib import admin
from .models import KeyValue


@admin.register(KeyValue)
class KeyValueAdmin(admin.ModelAdmin):
    list_display = ['key', 'namespace', 'updated_at']
    search_fields = ['key']
    readonly_fields = ['updated_at']

    fieldsets = (
        ('Entry', {
            'fields': ('key',)
        }),
        ('Document', {
            'fields': ('value',),
            'description': 'JSON document stored under this key'
        }),
        ('Metadata', {
            'fields': ('updated_at',)
        }),
    )

    def namespace(self, obj):
        return obj.key.split(':', 1)[0]
    namespace.short_description = 'Namespace'
