"""Schema inference for record collections."""

from record_search.schema.type_mappings import TypeMapper
from record_search.schema.extractor import FieldStatsExtractor

__all__ = ["TypeMapper", "FieldStatsExtractor"]
