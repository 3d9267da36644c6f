# organization/lookups.py
"""
Read-only lookups used by other apps.

Both functions take the database alias explicitly so callers running
inside a transaction on a non-default connection read through it.
"""

from typing import Optional

from django.db import DEFAULT_DB_ALIAS

from organization.models import Company, Site


def site_legal_entity(site_code: str, using: str = DEFAULT_DB_ALIAS) -> Optional[str]:
    """Return the legal company code of a site, or None for an unknown site."""
    if not site_code:
        return None
    return (
        Site.objects.using(using)
        .filter(code=site_code)
        .values_list("legal_company", flat=True)
        .first()
    )


def company_exists(code: str, using: str = DEFAULT_DB_ALIAS) -> bool:
    if not code:
        return False
    return Company.objects.using(using).filter(code=code).exists()
