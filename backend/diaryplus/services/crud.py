"""
Helpers shared by the per-resource services.
"""

from typing import Any, Dict

from pydantic import BaseModel
from sqlalchemy import JSON


def apply_update(row: Any, body: BaseModel) -> Dict[str, Any]:
    """
    Copy the fields a PATCH body actually sent onto an ORM row.

    An explicit null for a NOT NULL column is ignored, except JSON list
    columns which are reset to an empty list. Returns the applied changes.
    """
    columns = row.__table__.columns
    applied: Dict[str, Any] = {}
    for field, value in body.model_dump(exclude_unset=True).items():
        column = columns.get(field)
        if column is None:
            continue
        if value is None and not column.nullable:
            if not isinstance(column.type, JSON):
                continue
            value = []
        setattr(row, field, value)
        applied[field] = value
    return applied
