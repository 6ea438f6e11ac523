# apps/reports/admin.py

from django.contrib import admin, messages

from .models import Report


@admin.action(description="Resolve (delete) selected reports")
def resolve_reports(modeladmin, request, queryset):
    count, _ = queryset.delete()
    modeladmin.message_user(request, f"Resolved {count} report(s).", messages.SUCCESS)


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    actions = [resolve_reports]
    list_display = ('group_title', 'reason', 'status', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('group_title', 'group_id', 'reason')
    readonly_fields = ('group_id', 'group_title', 'reason', 'status', 'created_at')

    def has_add_permission(self, request):
        return False
