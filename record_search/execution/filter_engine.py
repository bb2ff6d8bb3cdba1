"""
Deterministic plan evaluation.

Applies a Plan (filters, then sort, then limit) to a sequence of records
without calling the LLM and without mutating the caller's data.
"""

import functools
import logging
from typing import List, Sequence

from record_search.core.models import Filter, Plan, Record, RecordCollection, SortOrder
from record_search.execution.predicates import compare_for_sort, matches

logger = logging.getLogger("record_search.execution.filter_engine")


class FilterEngine:
    """
    Evaluates search plans against in-memory records.

    Stateless: one instance can serve any number of concurrent queries.
    """

    def execute(self, records: Sequence[Record], plan: Plan) -> List[Record]:
        """
        Run a plan over records.

        Args:
            records: Records to search (left untouched)
            plan: Filters, sort and limit to apply

        Returns:
            New list holding the matching records, sorted and truncated
        """
        logger.debug("Executing search plan: %d filters", len(plan.filters))

        results = list(records)
        start_count = len(results)

        for condition in plan.filters:
            before = len(results)
            results = self.apply_filter(results, condition)
            logger.debug(
                "After filter %s %s %r: %d -> %d records",
                condition.field,
                condition.operator.value,
                condition.value,
                before,
                len(results),
            )

        if plan.sort_by:
            results = self.sort_records(results, plan.sort_by, plan.sort_order)
            logger.debug("Sorted by %s %s", plan.sort_by, plan.sort_order.value)

        if plan.limit is not None and plan.limit > 0:
            results = results[: plan.limit]

        logger.info(
            "Query executed: %d -> %d records (filtered %d)",
            start_count,
            len(results),
            start_count - len(results),
        )
        return results

    def execute_collection(self, collection: RecordCollection, plan: Plan) -> List[Record]:
        """Run a plan over a RecordCollection."""
        return self.execute(collection.records, plan)

    @staticmethod
    def apply_filter(records: Sequence[Record], condition: Filter) -> List[Record]:
        """Keep the records satisfying a single filter."""
        return [record for record in records if matches(record, condition)]

    @staticmethod
    def sort_records(
        records: Sequence[Record],
        sort_by: str,
        sort_order: SortOrder = SortOrder.DESC,
    ) -> List[Record]:
        """
        Stable sort by one field.

        Records whose sort field is missing or null go last in either
        direction, keeping their relative order.

        Args:
            records: Records to sort
            sort_by: Field name
            sort_order: asc or desc

        Returns:
            New sorted list
        """
        present = [r for r in records if r.get(sort_by) is not None]
        missing = [r for r in records if r.get(sort_by) is None]

        key = functools.cmp_to_key(lambda a, b: compare_for_sort(a[sort_by], b[sort_by]))
        present = sorted(present, key=key, reverse=sort_order is SortOrder.DESC)
        return present + missing
