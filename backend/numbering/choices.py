# numbering/choices.py
"""Stored integer codes for counter definitions."""

from django.db import models


class ComponentType(models.IntegerChoices):
    UNSET = 0, "Unset"
    CONSTANT = 1, "Constant"
    YEAR = 2, "Year"
    MONTH = 3, "Month"
    WEEK = 4, "Week"
    DAY = 5, "Day"
    COMPANY = 6, "Company"
    SITE = 7, "Site"
    SEQUENCE_NUMBER = 8, "Sequence number"
    COMPLEMENT = 9, "Complement"
    FISCAL_YEAR = 10, "Fiscal year"
    PERIOD = 11, "Period"
    FORMULA = 12, "Formula"


class RtzLevel(models.IntegerChoices):
    """Reset-to-zero policy: how often the counter restarts."""
    NONE = 1, "No reset"
    ANNUAL = 2, "Annual"
    MONTHLY = 3, "Monthly"
    FISCAL_YEAR = 4, "Fiscal year"
    PERIOD = 5, "Period"
    DECENNIAL = 99, "Decennial"


class DefinitionLevel(models.IntegerChoices):
    """Scope under which a counter is tracked independently."""
    GLOBAL = 1, "Global"
    LEGAL_ENTITY = 2, "Legal entity"
    SITE = 3, "Site"


class SequenceType(models.IntegerChoices):
    ALPHANUMERIC = 1, "Alphanumeric"
    NUMERIC = 2, "Numeric"


class ChronologicalControl(models.IntegerChoices):
    NONE = 1, "None"
    CONTROLLED = 2, "Controlled"
