from django.contrib import admin

from .models import Company, Site


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "currency", "created_at"]
    search_fields = ["code", "name"]


@admin.register(Site)
class SiteAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "legal_company", "created_at"]
    list_filter = ["legal_company"]
    search_fields = ["code", "name"]
