from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import User, Profile

admin.site.register(User, UserAdmin)

@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    search_fields = ("full_name", "user__email")
    list_display = ("full_name", "user", "role")
    list_filter = ("role",)
