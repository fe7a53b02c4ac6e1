from django.contrib import admin

from . import models


class ReviewSpecInline(admin.TabularInline):
    model = models.ReviewSpec
    extra = 0
    fields = ('order', 'review_name', 'display_name', 'faculty_type', 'components', 'deadline_from', 'deadline_to', 'requires_ppt')


class RubricDefinitionAdmin(admin.ModelAdmin):
    list_display = ('school', 'department', 'updated_at')
    search_fields = ('school', 'department')
    inlines = (ReviewSpecInline,)


class ReviewSpecAdmin(admin.ModelAdmin):
    list_display = ('review_name', 'display_name', 'rubric', 'faculty_type', 'deadline_from', 'deadline_to', 'requires_ppt')
    list_filter = ('faculty_type', 'requires_ppt', 'rubric__school')
    search_fields = ('review_name', 'display_name')


admin.site.register(models.RubricDefinition, RubricDefinitionAdmin)
admin.site.register(models.ReviewSpec, ReviewSpecAdmin)
