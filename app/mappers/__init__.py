"""
app/mappers package marker.
"""

from app.mappers.schema_mapper import REQUIRED_COLUMNS, SchemaMapper

__all__ = [
    "REQUIRED_COLUMNS",
    "SchemaMapper",
]
