# organization/models.py
"""
Company and site reference data.

A site belongs to a legal company through `legal_company`, a plain code
rather than a foreign key: imported site records may point at a legal
entity that has no company record of its own.
"""

from django.db import models


class Company(models.Model):
    code = models.CharField(max_length=5, unique=True)
    name = models.CharField(max_length=100, blank=True, default="")
    currency = models.CharField(max_length=3, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Company"
        verbose_name_plural = "Companies"
        ordering = ["code"]

    def __str__(self):
        return self.code


class Site(models.Model):
    code = models.CharField(max_length=5, unique=True)
    name = models.CharField(max_length=100, blank=True, default="")
    legal_company = models.CharField(max_length=5, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Site"
        verbose_name_plural = "Sites"
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} ({self.legal_company})"
