from django.contrib import admin
from .models import CoursePage, Profile

@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ("username", "is_active", "is_admin", "created_at")
    list_filter = ("is_active", "is_admin")
    search_fields = ("username",)

@admin.register(CoursePage)
class CoursePageAdmin(admin.ModelAdmin):
    list_display = ("title", "slug", "sort_order", "updated_at")
    search_fields = ("title", "slug")
    ordering = ("sort_order", "id")
