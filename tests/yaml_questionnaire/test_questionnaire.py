"""Tests for running questionnaires and filling records."""

from dataclasses import dataclass, field
from unittest.mock import patch

import pytest
import typer

from yaml_questionnaire.builder import build_plan
from yaml_questionnaire.config import QuestionnaireConfig
from yaml_questionnaire.exceptions import (
    InvalidIntegerInput,
    NotAStruct,
    SlotOrderError,
    UnsupportedFieldType,
)
from yaml_questionnaire.prompts import Slot
from yaml_questionnaire.questionnaire import fill_values, parse_int, run_questionnaire
from yaml_questionnaire.schema import yaml_field

from .sample_models import (
    AppConfig,
    FloatConfig,
    JsonTagged,
    MixedConfig,
    RequiredUntagged,
    ServiceModel,
)


class TestParseInt:
    """Test strict base-10 parsing."""

    @pytest.mark.parametrize("raw, expected", [("30", 30), ("-7", -7), ("+12", 12), ("007", 7)])
    def test_valid(self, raw, expected):
        assert parse_int(raw) == expected

    @pytest.mark.parametrize("raw", ["", "thirty", " 30", "30 ", "1_000", "3.0", "0x1f", "+"])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_int(raw)

    @pytest.mark.parametrize("raw", ["9223372036854775807", "-9223372036854775808"])
    def test_int64_bounds(self, raw):
        assert parse_int(raw) == int(raw)

    @pytest.mark.parametrize("raw", ["9223372036854775808", "-9223372036854775809", "9" * 30])
    def test_out_of_range(self, raw):
        with pytest.raises(ValueError, match="out of range"):
            parse_int(raw)

    def test_out_of_range_answer_fails_fill(self, answers):
        with pytest.raises(InvalidIntegerInput, match="out of range"):
            run_questionnaire(AppConfig, runner=answers("Alice", "9" * 30, True))


class TestRunQuestionnaire:
    """Test the build, run, fill flow."""

    def test_round_trip(self, answers):
        record = run_questionnaire(AppConfig, runner=answers("Alice", "30", True))
        assert record == AppConfig(Name="Alice", Age=30, Active=True)
        assert isinstance(record.Age, int)

    def test_invalid_integer(self, answers):
        with pytest.raises(InvalidIntegerInput) as exc_info:
            run_questionnaire(AppConfig, runner=answers("Alice", "thirty", True))
        assert exc_info.value.field_name == "Age"
        assert exc_info.value.value == "thirty"
        assert isinstance(exc_info.value.cause, ValueError)
        assert "invalid integer value for Age" in str(exc_info.value)

    def test_untagged_fields_keep_defaults(self, answers):
        record = run_questionnaire(
            MixedConfig,
            runner=answers("db.internal", "5432", True, "ops", False),
        )
        assert record == MixedConfig(
            host="db.internal", port=5432, debug=True, owner="ops", strict=False,
        )
        assert record.internal == "keep-me"
        assert record.retries == 3
        assert record.tags == []

    def test_untagged_fields_without_tags_stay_zero(self, answers):
        record = run_questionnaire(RequiredUntagged, runner=answers("n"))
        assert record == RequiredUntagged(name="n")
        assert (record.label, record.count, record.ratio, record.enabled) == ("", 0, 0.0, False)

    def test_pydantic_model(self, answers):
        record = run_questionnaire(ServiceModel, runner=answers("api", "9000", True))
        assert isinstance(record, ServiceModel)
        assert record.name == "api"
        assert record.port == 9000
        assert record.verbose is True
        assert record.note == "untouched"

    def test_custom_tag_name(self, answers):
        record = run_questionnaire(JsonTagged, tag_name="json", runner=answers("Dune"))
        assert record == JsonTagged(title="Dune", pages=0)

    def test_config_tag_name_wins(self, answers):
        config = QuestionnaireConfig(tag_name="json")
        record = run_questionnaire(JsonTagged, config=config, runner=answers("Dune"))
        assert record.title == "Dune"

    def test_str_subclass_converted(self, answers):
        class Hostname(str):
            pass

        @dataclass
        class Server:
            host: Hostname = yaml_field("host")

        record = run_questionnaire(Server, runner=answers("example.org"))
        assert type(record.host) is Hostname

    def test_single_group_handed_to_runner(self, recording_runner):
        """The runner sees every prompt at once; Age is left unanswered."""
        with pytest.raises(InvalidIntegerInput):
            run_questionnaire(AppConfig, runner=recording_runner)
        (form,) = recording_runner.calls
        assert len(form.groups) == 1
        assert [f.title for f in form.groups[0].fields] == ["Name", "Age", "Active"]

    def test_unanswered_integer_fails(self, recording_runner):
        """An empty integer answer does not parse."""
        with pytest.raises(InvalidIntegerInput):
            run_questionnaire(AppConfig, runner=recording_runner)

    def test_default_runner_uses_engine(self):
        with patch("yaml_questionnaire.prompts.typer.prompt", side_effect=["Alice", "30"]), \
                patch("yaml_questionnaire.prompts.typer.confirm", return_value=True):
            record = run_questionnaire(AppConfig)
        assert record == AppConfig(Name="Alice", Age=30, Active=True)


class TestRunQuestionnaireErrors:
    """Failures are terminal and nothing partial is returned."""

    def test_not_a_struct(self, recording_runner):
        with pytest.raises(NotAStruct):
            run_questionnaire(int, runner=recording_runner)
        assert recording_runner.calls == []

    def test_unsupported_field_prompts_nothing(self, recording_runner):
        with pytest.raises(UnsupportedFieldType):
            run_questionnaire(FloatConfig, runner=recording_runner)
        assert recording_runner.calls == []

    def test_engine_failure_propagates_verbatim(self):
        error = typer.Abort()

        def _abort(form):
            raise error

        with pytest.raises(typer.Abort) as exc_info:
            run_questionnaire(AppConfig, runner=_abort)
        assert exc_info.value is error

    def test_engine_failure_after_partial_answers(self):
        """Answers written before the failure are not applied."""

        def _partial(form):
            form.groups[0].fields[0].slot.value = "Alice"
            raise RuntimeError("terminal lost")

        with pytest.raises(RuntimeError, match="terminal lost"):
            run_questionnaire(AppConfig, runner=_partial)

    def test_invalid_integer_stops_fill(self):
        """Fields after the failing one are not processed."""

        @dataclass
        class Order:
            first: int = yaml_field("first")
            second: int = yaml_field("second")
            third: str = yaml_field("third")

        plan = build_plan(Order)
        for slot, value in zip(plan.text_slots, ["1", "two", "three"]):
            slot.value = value
        with pytest.raises(InvalidIntegerInput, match="second"):
            fill_values(plan)
        assert [slot.field_name for slot in plan.text_slots] == ["third"]


class TestFillValues:
    """Test fill_values() slot draining."""

    def test_drains_queues(self):
        plan = build_plan(AppConfig)
        plan.text_slots[0].value = "Bob"
        plan.text_slots[1].value = "41"
        plan.bool_slots[0].value = True
        values = fill_values(plan)
        assert values == {"Name": "Bob", "Age": 41, "Active": True}
        assert not plan.text_slots
        assert not plan.bool_slots

    def test_reordered_slots_detected(self):
        plan = build_plan(AppConfig)
        plan.text_slots.rotate(1)
        with pytest.raises(SlotOrderError) as exc_info:
            fill_values(plan)
        assert exc_info.value.field_name == "Name"
        assert exc_info.value.slot_field == "Age"

    def test_missing_slot_detected(self):
        plan = build_plan(AppConfig)
        plan.text_slots[1].value = "1"
        plan.bool_slots.clear()
        with pytest.raises(SlotOrderError, match="no slot left"):
            fill_values(plan)

    def test_second_fill_fails(self):
        plan = build_plan(AppConfig)
        plan.text_slots[1].value = "1"
        fill_values(plan)
        with pytest.raises(SlotOrderError):
            fill_values(plan)

    def test_foreign_slot_detected(self):
        plan = build_plan(AppConfig)
        plan.bool_slots[0] = Slot("Other", True)
        plan.text_slots[1].value = "1"
        with pytest.raises(SlotOrderError, match="Other"):
            fill_values(plan)


class TestInitFalseFields:
    """Fields excluded from __init__ still end up at their zero value."""

    def test_untagged_init_false_field_gets_zero(self, answers):
        @dataclass
        class Cached:
            name: str = yaml_field("name")
            cache: str = field(init=False)
            hits: int = field(init=False)

        record = run_questionnaire(Cached, runner=answers("n"))
        assert record.name == "n"
        assert record.cache == ""
        assert record.hits == 0

    def test_post_init_value_is_kept(self, answers):
        @dataclass
        class Derived:
            name: str = yaml_field("name")
            upper: str = field(init=False)

            def __post_init__(self):
                self.upper = self.name.upper()

        record = run_questionnaire(Derived, runner=answers("abc"))
        assert record.upper == "ABC"
