"""Pydantic schemas package.

Folder intent:
  common.py        — CamelModel base, blank-to-None field types, HealthResponse
  organization.py  — Organizations and Contacts
  project.py       — Projects
  service.py       — Service catalog
  settings.py      — Corporate entities, payment terms / delivery conditions, offer links
  member.py        — Dashboard members
  offer.py         — Offers, line items, pricing breakdown, access logs
  public.py        — Public offer/project pages and acceptance
  table.py         — List endpoint search/filter/sort configuration
  form.py          — Rendered form descriptions and submission results
"""
