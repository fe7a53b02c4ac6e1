from django.contrib import admin

from . import models


class ExtensionRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'student', 'review_spec', 'faculty_type', 'faculty', 'status', 'new_deadline', 'created_at', 'resolved_at')
    list_filter = ('status', 'faculty_type')
    search_fields = ('student__reg_no', 'faculty__username', 'faculty__employee_id')
    readonly_fields = ('created_at', 'resolved_at', 'resolved_by')
    date_hierarchy = 'created_at'


admin.site.register(models.ExtensionRequest, ExtensionRequestAdmin)
