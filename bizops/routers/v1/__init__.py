"""v1 router package — all /api/v1/* endpoints live here.

Files:
  organizations.py — organizations (+ linked contacts/projects/offers) and contacts
  projects.py      — projects
  services.py      — service catalog
  offers.py        — offers, pricing preview, status, accept, access logs
  settings.py      — corporate entities, payment terms, delivery conditions, offer links
  members.py       — dashboard members
  forms.py         — form descriptions/validation and table configs
  public.py        — unauthenticated offer/project pages and offer acceptance
  common.py        — Idempotency-Key replay, client IP

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to bizops/services/.
"""
