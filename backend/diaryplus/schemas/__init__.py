"""
DiaryPlus Backend — Pydantic Schemas
=====================================

Request and response contracts, one module per resource.
"""
