from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    # inherit Django's user add/change forms which correctly handle password hashing
    list_display = ('username', 'email', 'employee_id', 'role', 'school', 'department', 'is_active')
    list_filter = ('role', 'school', 'department', 'is_active')
    search_fields = ('username', 'email', 'employee_id', 'first_name', 'last_name')

    fieldsets = DjangoUserAdmin.fieldsets + (
        ('Faculty', {'fields': ('employee_id', 'role', 'school', 'department')}),
    )

    add_fieldsets = DjangoUserAdmin.add_fieldsets + (
        ('Faculty', {'fields': ('employee_id', 'role', 'school', 'department')}),
    )
