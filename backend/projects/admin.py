from django.contrib import admin

from . import models


class StudentInline(admin.TabularInline):
    model = models.Student
    extra = 0
    fields = ('reg_no', 'name', 'email', 'ppt_approved', 'ppt_locked')


class ReviewRecordInline(admin.TabularInline):
    model = models.ReviewRecord
    extra = 0
    fields = ('review_spec', 'marks', 'comments', 'attendance_value', 'attendance_locked', 'locked')
    readonly_fields = ('review_spec',)


class PanelAdmin(admin.ModelAdmin):
    list_display = ('id', 'faculty1', 'faculty2', 'school', 'department')
    list_filter = ('school', 'department')


class ProjectAdmin(admin.ModelAdmin):
    list_display = ('name', 'school', 'department', 'guide_faculty', 'panel', 'ppt_approved', 'best_project')
    list_filter = ('school', 'department', 'ppt_approved', 'best_project')
    search_fields = ('name', 'students__reg_no')
    inlines = (StudentInline,)


class StudentAdmin(admin.ModelAdmin):
    list_display = ('reg_no', 'name', 'project', 'school', 'department', 'ppt_approved')
    list_filter = ('school', 'department', 'ppt_approved')
    search_fields = ('reg_no', 'name', 'email')
    inlines = (ReviewRecordInline,)


class DeadlineOverrideAdmin(admin.ModelAdmin):
    list_display = ('student', 'review_spec', 'from_at', 'to_at')
    readonly_fields = ('student', 'review_spec', 'from_at', 'to_at')


admin.site.register(models.Panel, PanelAdmin)
admin.site.register(models.Project, ProjectAdmin)
admin.site.register(models.Student, StudentAdmin)
admin.site.register(models.ReviewRecord)
admin.site.register(models.DeadlineOverride, DeadlineOverrideAdmin)
