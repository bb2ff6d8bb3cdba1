"""Tests for LLM plan generation, retries and fallback."""

import pytest

from record_search.core.errors import CollaboratorError
from record_search.core.models import FilterOperator, RecordCollection, SearchConfig, SortOrder
from record_search.query.planner import PlanGenerator

from fakes import FakeTextGenerator


def _planner(generator, config=None, sleep=None):
    kwargs = {"config": config or SearchConfig(backoff_base_seconds=0)}
    if sleep is not None:
        kwargs["sleep"] = sleep
    return PlanGenerator(generator, **kwargs)


class TestPlanRetries:
    @pytest.mark.asyncio
    async def test_first_valid_response_wins(self, people):
        generator = FakeTextGenerator([{"filters": [{"field": "city", "operator": "=", "value": "NYC"}]}])
        outcome = await _planner(generator).plan_for_collection(RecordCollection.from_records(people), "people in NYC")

        assert not outcome.degraded
        assert outcome.attempts == 1
        assert len(generator.text_calls) == 1
        assert outcome.plan.filters[0].field == "city"
        assert outcome.plan.filters[0].operator is FilterOperator.EQ

    @pytest.mark.asyncio
    async def test_empty_responses_fall_back_after_three_attempts(self, sleep_recorder):
        generator = FakeTextGenerator([""])
        planner = PlanGenerator(generator, SearchConfig(), sleep=sleep_recorder)

        outcome = await planner.plan([], "anything", limit_hint=7)

        assert len(generator.text_calls) == 3
        assert outcome.degraded
        assert outcome.attempts == 3
        assert outcome.plan.filters == []
        assert outcome.plan.limit == 7
        assert sleep_recorder.delays == [2.0, 4.0]

    @pytest.mark.asyncio
    async def test_fallback_uses_default_limit_without_hint(self):
        outcome = await _planner(FakeTextGenerator(["not json"])).plan([], "anything")
        assert outcome.degraded
        assert outcome.plan.limit == 10
        assert "JSON" in outcome.reason

    @pytest.mark.asyncio
    async def test_recovers_after_malformed_response(self, sleep_recorder):
        generator = FakeTextGenerator(["sorry, I cannot help", '{"filters": [], "limit": 4}'])
        planner = PlanGenerator(generator, SearchConfig(), sleep=sleep_recorder)

        outcome = await planner.plan([], "anything")

        assert not outcome.degraded
        assert outcome.attempts == 2
        assert outcome.plan.limit == 4
        assert sleep_recorder.delays == [2.0]

    @pytest.mark.asyncio
    async def test_attempt_count_is_configurable(self, sleep_recorder):
        generator = FakeTextGenerator([""])
        config = SearchConfig(max_plan_attempts=4, backoff_base_seconds=0.5)
        outcome = await PlanGenerator(generator, config, sleep=sleep_recorder).plan([], "q")

        assert outcome.attempts == 4
        assert sleep_recorder.delays == [0.5, 1.0, 2.0]

    @pytest.mark.asyncio
    async def test_fatal_collaborator_error_propagates_without_retry(self):
        generator = FakeTextGenerator([CollaboratorError("authentication failed")])
        with pytest.raises(CollaboratorError):
            await _planner(generator).plan([], "q")
        assert len(generator.text_calls) == 1

    @pytest.mark.asyncio
    async def test_planning_call_settings(self, people):
        generator = FakeTextGenerator(['{"filters": []}'])
        collection = RecordCollection.from_records(people)
        await _planner(generator).plan_for_collection(collection, "people in NYC")

        call = generator.text_calls[0]
        assert call["temperature"] == 0
        assert call["max_tokens"] == 400
        assert '"people in NYC"' in call["prompt"]
        assert 'age (number): 30' in call["prompt"]
        assert 'city (string): "NYC"' in call["prompt"]

    @pytest.mark.asyncio
    async def test_fenced_json_is_accepted(self):
        generator = FakeTextGenerator(['```json\n{"filters": [], "sortBy": "age"}\n```'])
        outcome = await _planner(generator).plan([], "q")
        assert outcome.plan.sort_by == "age"

    def test_backoff_delay(self):
        planner = PlanGenerator(FakeTextGenerator(), SearchConfig())
        assert [planner.backoff_delay(n) for n in (1, 2, 3)] == [2.0, 4.0, 8.0]


class TestParsePlan:
    def setup_method(self):
        self.planner = PlanGenerator(FakeTextGenerator(), SearchConfig())

    def test_unknown_operator_drops_only_that_filter(self):
        plan = self.planner.parse_plan(
            {
                "filters": [
                    {"field": "age", "operator": "between", "value": [1, 2]},
                    {"field": "city", "operator": "=", "value": "NYC"},
                ]
            }
        )
        assert [(f.field, f.operator) for f in plan.filters] == [("city", FilterOperator.EQ)]

    def test_malformed_filters_are_dropped(self):
        plan = self.planner.parse_plan(
            {
                "filters": [
                    "city = NYC",
                    {"field": "city", "operator": "="},
                    {"field": "", "operator": "=", "value": 1},
                    {"field": "age", "operator": ">=", "value": 30},
                ]
            }
        )
        assert [f.field for f in plan.filters] == ["age"]

    def test_null_value_is_kept(self):
        plan = self.planner.parse_plan({"filters": [{"field": "city", "operator": "!=", "value": None}]})
        assert plan.filters[0].value is None

    def test_filters_not_a_list(self):
        assert self.planner.parse_plan({"filters": {"field": "x"}}).filters == []

    @pytest.mark.parametrize(
        "raw,expected",
        [(None, SortOrder.DESC), ("asc", SortOrder.ASC), ("ASC", SortOrder.ASC), ("sideways", SortOrder.DESC)],
    )
    def test_sort_order(self, raw, expected):
        data = {"filters": [], "sortBy": "age"}
        if raw is not None:
            data["sortOrder"] = raw
        assert self.planner.parse_plan(data).sort_order is expected

    def test_blank_sort_by_is_ignored(self):
        assert self.planner.parse_plan({"sortBy": "  "}).sort_by is None

    @pytest.mark.parametrize(
        "raw,hint,expected",
        [
            (5, None, 5),
            (None, 7, 7),
            (None, None, 10),
            (0, 7, 7),
            (-3, None, 10),
            (3.0, None, 3),
            (True, 6, 6),
            ("5", None, 10),
        ],
    )
    def test_limit_resolution(self, raw, hint, expected):
        data = {"filters": []}
        if raw is not None:
            data["limit"] = raw
        assert self.planner.parse_plan(data, limit_hint=hint).limit == expected
