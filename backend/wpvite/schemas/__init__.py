"""
WPVite Backend — Pydantic Schemas
===================================

API contracts, kept separate from the ORM models so the wire format
(camelCase, no internal columns) can evolve independently of the tables.
"""
