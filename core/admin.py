from django.contrib import admin

from .models import AccessToken


@admin.register(AccessToken)
class AccessTokenAdmin(admin.ModelAdmin):
    list_display = ("user", "label", "created_at", "last_used_at")
    search_fields = ("user__username", "user__email", "label")
    readonly_fields = ("key", "created_at", "last_used_at")
