"""Services package — all business logic lives here, never in routers.

Files:
  base.py           — EntityService, the CRUD pattern every entity service follows
  pricing.py        — offer totals (pure; the single rounding policy)
  table.py          — search/filter/sort pipeline and per-entity table configs (pure)
  listing.py        — runs loaded rows through table.py and paginates
  lookups.py        — option lists for widgets and filters (cached)
  forms.py          — metadata-driven entity forms: rendering and submission checks
  offers.py         — offers, lines, selected links, quotes, acceptance
  public.py         — public offer/project pages and public acceptance
  idempotency.py    — Idempotency-Key storage and replay

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers.
"""
