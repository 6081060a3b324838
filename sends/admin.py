from django.contrib import admin

from .models import Send, Sendable


class SendableInline(admin.TabularInline):
    model = Sendable
    extra = 0
    fields = ('content_type', 'object_id', 'content_object')
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Send)
class SendAdmin(admin.ModelAdmin):
    list_display = ('id', 'subject', 'mail_class', 'uuid', 'sent_at')
    list_filter = ('mail_class', 'sent_at')
    search_fields = ('subject', 'uuid', 'mail_class')
    date_hierarchy = 'sent_at'
    inlines = [SendableInline]

    fieldsets = (
        ('Message', {
            'fields': ('subject', 'uuid', 'mail_class', 'sent_at')
        }),
        ('Addresses', {
            'fields': ('from_address', 'reply_to', 'to', 'cc', 'bcc')
        }),
        ('Content', {
            'fields': ('content',),
            'classes': ('collapse',)
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in Send._meta.fields]

    def has_add_permission(self, request):
        return False
