# numbering/scopes.py
"""
Scope resolution: the partition string a counter is tracked under.

- GLOBAL: one counter for the whole installation ("")
- LEGAL_ENTITY: one counter per legal company; the site's legal company
  wins when it exists as a company record, otherwise the caller's company
- SITE: one counter per site
"""

from django.db import DEFAULT_DB_ALIAS

from numbering.choices import DefinitionLevel
from organization.lookups import company_exists, site_legal_entity


def resolve_scope(
    definition_level: int,
    company: str,
    site: str,
    using: str = DEFAULT_DB_ALIAS,
) -> str:
    if definition_level == DefinitionLevel.GLOBAL:
        return ""
    if definition_level == DefinitionLevel.LEGAL_ENTITY:
        legal_company = site_legal_entity(site, using=using)
        if legal_company and company_exists(legal_company, using=using):
            return legal_company
        return company
    if definition_level == DefinitionLevel.SITE:
        return site
    return ""
