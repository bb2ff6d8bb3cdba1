"""
Field statistics extraction.

Derives per-field statistics from a normalized record collection. The
statistics only feed the planning prompt (field names and types).
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Sequence

from record_search.core.errors import InvalidInputError
from record_search.core.models import FieldStats, Record
from record_search.schema.type_mappings import TypeMapper

logger = logging.getLogger("record_search.schema.extractor")


class FieldStatsExtractor:
    """
    Computes FieldStats for every field seen in a record collection.

    Records are heterogeneous: the field set is the union of all record
    keys, in first-seen order.
    """

    @staticmethod
    def validate_records(records: Any) -> Sequence[Record]:
        """
        Check that records is a sequence of mappings.

        Args:
            records: Candidate record collection

        Returns:
            The same records object

        Raises:
            InvalidInputError: If records is absent or malformed
        """
        if records is None:
            raise InvalidInputError("Record collection is required")
        if not isinstance(records, (list, tuple)):
            raise InvalidInputError(
                f"Record collection must be a list of records, got {type(records).__name__}"
            )
        for index, record in enumerate(records):
            if not isinstance(record, Mapping):
                raise InvalidInputError(
                    f"Record at index {index} is not a mapping",
                    context={"index": index, "type": type(record).__name__},
                )
        return records

    @classmethod
    def compute(cls, records: Sequence[Record]) -> Dict[str, FieldStats]:
        """
        Compute field statistics.

        Args:
            records: Sequence of records

        Returns:
            Dictionary mapping field names to FieldStats
        """
        cls.validate_records(records)
        logger.debug("Computing statistics for %d records", len(records))

        if not records:
            return {}

        field_stats: Dict[str, FieldStats] = {}
        for field in cls.field_names(records):
            values = [record.get(field) for record in records]
            non_null = [v for v in values if v is not None and v != ""]
            unique = {cls._hashable(v) for v in non_null}
            field_type = TypeMapper.type_of(non_null[0]) if non_null else "null"

            field_stats[field] = FieldStats(
                type=field_type,
                null_count=len(values) - len(non_null),
                unique_count=len(unique),
            )

        logger.debug("Computed statistics for %d fields", len(field_stats))
        return field_stats

    @staticmethod
    def field_names(records: Sequence[Record]) -> List[str]:
        """Union of record keys in first-seen order."""
        seen: Dict[str, None] = {}
        for record in records:
            for key in record.keys():
                seen.setdefault(key, None)
        return list(seen)

    @staticmethod
    def _hashable(value: Any) -> Any:
        try:
            hash(value)
            return value
        except TypeError:
            return json.dumps(value, sort_keys=True, default=str)
