"""Tests for TimelinessValidator — the restriction evaluator."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime, time, timedelta
from types import SimpleNamespace
from typing import Any

import pytest

from tests.conftest import AwareRecord, RawRecord, Record
from timeguard.config.models import MessageCatalog
from timeguard.config.settings import TimeguardSettings, configure
from timeguard.domain.operands import attr, now, today
from timeguard.domain.outcome import OutcomeStatus, RestrictionFailed, RestrictionPassed
from timeguard.domain.spec import ConfigurationError, compile_spec
from timeguard.domain.types import RestrictionKind
from timeguard.services.validator import (
    TimelinessValidator,
    attribute_raw_value,
    resolve_operand,
    timezone_aware,
)


def _validate(validator: TimelinessValidator, value: Any, **attrs: Any) -> Record:
    record = Record(value=value, **attrs)
    validator.validate_each(record, "value", value)
    return record


class TestConstruction:
    def test_from_options(self) -> None:
        validator = TimelinessValidator(type="date", before=date(2020, 1, 1))
        assert validator.temporal_type.value == "date"
        assert validator.spec.restriction_kinds == [RestrictionKind.BEFORE]
        assert validator.kind == "timeliness"

    def test_from_spec(self) -> None:
        spec = compile_spec(type="time")
        assert TimelinessValidator(spec).spec is spec

    def test_bad_between_fails_fast(self) -> None:
        with pytest.raises(ConfigurationError):
            TimelinessValidator(between="2020")


class TestTypeCheck:
    def test_date_scenario(self, settings: TimeguardSettings) -> None:
        validator = TimelinessValidator(
            type="date", on_or_after=date(2020, 1, 1), settings=settings
        )

        early = _validate(validator, "2019-12-31")
        assert early.errors.kinds("value") == ["on_or_after"]
        [error] = early.errors.for_attribute("value")
        assert error.restriction_value == "2020-01-01"
        assert error.message == "must be on or after 2020-01-01"

        assert not _validate(validator, "2020-01-01").errors

        garbage = _validate(validator, "not-a-date")
        assert garbage.errors.kinds("value") == ["invalid_date"]
        assert garbage.errors["value"] == ["is not a valid date"]

    @pytest.mark.parametrize(
        ("temporal_type", "key"),
        [("date", "invalid_date"), ("time", "invalid_time"), ("datetime", "invalid_datetime")],
    )
    def test_invalid_key_per_type(self, temporal_type: str, key: str) -> None:
        record = _validate(TimelinessValidator(type=temporal_type), "garbage")
        assert record.errors.kinds("value") == [key]

    def test_invalid_message_override(self) -> None:
        validator = TimelinessValidator(type="date", invalid_date_message="not a day")
        assert _validate(validator, "xx").errors["value"] == ["not a day"]

    def test_invalid_skips_restrictions(self) -> None:
        ref_reads: list[str] = []

        class Spy(Record):
            @property
            def ends_on(self) -> date:
                ref_reads.append("ends_on")
                return date(2020, 1, 1)

        validator = TimelinessValidator(type="date", before=attr("ends_on"))
        record = Spy()
        outcome = validator.validate_each(record, "starts_on", "31/31/2020")
        assert outcome.status is OutcomeStatus.INVALID_TYPE
        assert outcome.results == []
        assert ref_reads == []

    def test_nil_without_allow_nil_is_invalid(self) -> None:
        record = _validate(TimelinessValidator(type="date"), None)
        assert record.errors.kinds("value") == ["invalid_date"]

    def test_non_temporal_value_is_invalid(self) -> None:
        record = _validate(TimelinessValidator(), 12345)
        assert record.errors.kinds("value") == ["invalid_datetime"]

    def test_typed_value_accepted(self) -> None:
        validator = TimelinessValidator(type="date", before=date(2020, 1, 1))
        assert not _validate(validator, datetime(2019, 12, 31, 23, 59)).errors

    def test_explicit_format(self) -> None:
        validator = TimelinessValidator(type="date", format="%d/%m/%Y", after="01/01/2020")
        assert not _validate(validator, "02/01/2020").errors
        assert _validate(validator, "2020-01-02").errors.kinds("value") == ["invalid_date"]

    def test_format_with_iso_operand(self) -> None:
        validator = TimelinessValidator(type="date", format="%d/%m/%Y", after="2019-01-01")
        outcome = validator.validate_each(Record(), "value", "31/12/2019")
        assert outcome.status is OutcomeStatus.VALID
        assert _validate(validator, "01/01/2018").errors["value"] == ["must be after 2019-01-01"]


class TestEmptyCheck:
    def test_allow_nil(self) -> None:
        validator = TimelinessValidator(allow_nil=True, before=date(1900, 1, 1))
        outcome = validator.validate(None)
        assert outcome.status is OutcomeStatus.SKIPPED
        assert outcome.errors == []

    def test_allow_nil_does_not_allow_blank(self) -> None:
        validator = TimelinessValidator(allow_nil=True)
        assert validator.validate("").status is OutcomeStatus.INVALID_TYPE

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_allow_blank(self, value: Any) -> None:
        validator = TimelinessValidator(allow_blank=True, after=now())
        assert validator.validate(value).status is OutcomeStatus.SKIPPED

    def test_record_without_error_sink(self) -> None:
        validator = TimelinessValidator(type="date")
        with pytest.raises(TypeError, match="errors has no add"):
            validator.validate("2020-01-01", record=SimpleNamespace(errors=[]))


class TestRawValue:
    def test_raw_value_preferred(self) -> None:
        """The framework coerced the bad input to None; the raw text is still reported."""
        validator = TimelinessValidator(type="date", allow_nil=True)
        record = RawRecord(raw={"starts_on": "not-a-date"}, starts_on=None)
        outcome = validator.validate_each(record, "starts_on", None)
        assert outcome.status is OutcomeStatus.INVALID_TYPE
        assert record.errors.kinds("starts_on") == ["invalid_date"]

    def test_falls_back_to_value(self) -> None:
        validator = TimelinessValidator(type="date", before=date(2020, 1, 1))
        record = RawRecord(raw={}, starts_on=date(2021, 1, 1))
        validator.validate_each(record, "starts_on", date(2021, 1, 1))
        assert record.errors.kinds("starts_on") == ["before"]

    def test_helpers(self) -> None:
        assert attribute_raw_value(Record(), "x") is None
        assert attribute_raw_value(RawRecord(raw={"x": "1"}), "x") == "1"
        assert timezone_aware(Record(), "starts_at") is False
        assert timezone_aware(AwareRecord(), "starts_at") is True
        assert timezone_aware(AwareRecord(), "ends_at") is False


class TestRestrictions:
    def test_is_at(self) -> None:
        validator = TimelinessValidator(type="date", is_at=date(2020, 1, 1))
        assert not _validate(validator, "2020-01-01").errors
        assert not _validate(validator, datetime(2020, 1, 1, 18)).errors
        assert _validate(validator, "2020-01-02").errors.kinds("value") == ["is_at"]

    @pytest.mark.parametrize(
        ("kind", "passing", "failing"),
        [
            ("before", "2020-01-01 11:59:59", "2020-01-01 12:00:00"),
            ("after", "2020-01-01 12:00:01", "2020-01-01 12:00:00"),
            ("on_or_before", "2020-01-01 12:00:00", "2020-01-01 12:00:01"),
            ("on_or_after", "2020-01-01 12:00:00", "2020-01-01 11:59:59"),
        ],
    )
    def test_relational(self, kind: str, passing: str, failing: str) -> None:
        validator = TimelinessValidator(**{kind: datetime(2020, 1, 1, 12)})
        assert not _validate(validator, passing).errors
        record = _validate(validator, failing)
        [error] = record.errors.for_attribute("value")
        assert error.kind == kind
        assert error.restriction == RestrictionKind(kind)
        assert error.restriction_value == "2020-01-01 12:00:00"

    def test_first_violation_wins(self) -> None:
        validator = TimelinessValidator(
            type="date", before=date(2020, 1, 1), after=date(2021, 1, 1)
        )
        outcome = validator.validate(date(2022, 1, 1))
        assert outcome.status is OutcomeStatus.VIOLATED
        assert [e.kind for e in outcome.errors] == ["before"]
        assert len(outcome.results) == 1

    def test_all_pass(self) -> None:
        validator = TimelinessValidator(
            type="date", after=date(2020, 1, 1), before=date(2021, 1, 1)
        )
        outcome = validator.validate("2020-06-01")
        assert outcome.status is OutcomeStatus.VALID
        assert outcome.valid
        assert all(isinstance(r, RestrictionPassed) for r in outcome.results)

    def test_between(self) -> None:
        validator = TimelinessValidator(type="time", between=[time(9), "17:00"])
        assert not _validate(validator, "09:00").errors
        assert not _validate(validator, "17:00").errors
        late = _validate(validator, "17:00:01")
        assert late.errors.kinds("value") == ["on_or_before"]
        assert late.errors["value"] == ["must be on or before 17:00:00"]
        assert _validate(validator, "08:59").errors.kinds("value") == ["on_or_after"]

    def test_restriction_message_override(self) -> None:
        validator = TimelinessValidator(
            type="date",
            before=date(2020, 1, 1),
            before_message="pick something before {restriction}",
        )
        assert _validate(validator, "2020-01-05").errors["value"] == [
            "pick something before 2020-01-01"
        ]

    def test_unknown_message_field_left_in_place(self) -> None:
        validator = TimelinessValidator(
            type="date",
            before="2020-01-01",
            before_message="must be before {restriction} (see {docs})",
        )
        outcome = validator.validate("2021-01-01")
        assert outcome.status is OutcomeStatus.VIOLATED
        assert outcome.errors[0].message == "must be before 2020-01-01 (see {docs})"

    def test_restriction_field_in_invalid_message(self) -> None:
        validator = TimelinessValidator(type="date", invalid_date_message="not {restriction}")
        [error] = validator.validate("nope").errors
        assert error.message == "not {restriction}"

    def test_unbalanced_message_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="before_message"):
            TimelinessValidator(type="date", before="2020-01-01", before_message="oops {")

    def test_catalog_formats_used(self) -> None:
        catalog = MessageCatalog(error_value_formats={"date": "%d.%m.%Y"})
        validator = TimelinessValidator(
            type="date", before=date(2020, 1, 1), settings=TimeguardSettings(catalog=catalog)
        )
        assert _validate(validator, "2020-01-05").errors["value"] == ["must be before 01.01.2020"]

    def test_no_restrictions_checks_type_only(self) -> None:
        outcome = TimelinessValidator(type="date").validate("2020-01-01")
        assert outcome.status is OutcomeStatus.VALID
        assert outcome.results == []


class TestOperands:
    def test_attribute_reference(self) -> None:
        validator = TimelinessValidator(type="date", before=attr("ends_on"))
        assert not _validate(validator, "2020-01-01", ends_on=date(2020, 2, 1)).errors
        record = _validate(validator, "2020-03-01", ends_on="2020-02-01")
        assert record.errors.kinds("value") == ["before"]
        assert record.errors.for_attribute("value")[0].restriction_value == "2020-02-01"

    def test_operand_resolved_each_call(self) -> None:
        validator = TimelinessValidator(type="date", after=attr("starts_on"))
        record = Record(starts_on=date(2020, 1, 1))
        assert validator.validate_each(record, "ends_on", date(2020, 6, 1)).valid
        record.starts_on = date(2021, 1, 1)
        assert not validator.validate_each(record, "ends_on", date(2020, 6, 1)).valid

    def test_now(self) -> None:
        validator = TimelinessValidator(before=now())
        assert validator.validate(datetime.now(UTC) - timedelta(hours=1)).valid
        assert not validator.validate(datetime.now(UTC) + timedelta(hours=1)).valid

    def test_today(self) -> None:
        validator = TimelinessValidator(type="date", on_or_before=today())
        assert validator.validate(datetime.now(UTC).date()).valid
        assert not validator.validate(date(2999, 1, 1)).valid

    def test_resolve_literal(self, settings: TimeguardSettings) -> None:
        from timeguard.domain.operands import Literal
        from timeguard.services.normalizer import Normalizer

        normalizer = Normalizer(settings)
        assert resolve_operand(Literal("x"), Record(), normalizer) == "x"
        assert resolve_operand(attr("a"), Record(a=1), normalizer) == 1


class TestTimezoneAware:
    def test_aware_attribute_compares_in_zone(self) -> None:
        settings = TimeguardSettings(time_zone="Asia/Tokyo")
        validator = TimelinessValidator(
            type="date", on_or_after=date(2020, 1, 2), settings=settings
        )
        # 2020-01-01 20:00 UTC is already 2020-01-02 in Tokyo.
        moment = datetime(2020, 1, 1, 20, tzinfo=UTC)
        aware = AwareRecord()
        assert validator.validate_each(aware, "starts_at", moment).valid
        plain = AwareRecord()
        assert not validator.validate_each(plain, "ends_at", moment).valid

    def test_aware_text_and_now(self) -> None:
        settings = TimeguardSettings(time_zone="Europe/Berlin")
        validator = TimelinessValidator(before=now(), settings=settings)
        record = AwareRecord()
        outcome = validator.validate_each(record, "starts_at", "2001-01-01 00:00:00")
        assert outcome.status is OutcomeStatus.VALID


class TestRestrictionErrors:
    def test_missing_attribute_reported(self, settings: TimeguardSettings) -> None:
        validator = TimelinessValidator(type="date", before=attr("missing"), settings=settings)
        record = Record()
        outcome = validator.validate_each(record, "starts_on", date(2020, 1, 1))
        assert outcome.status is OutcomeStatus.ERRORED
        [error] = record.errors.for_attribute("starts_on")
        assert error.kind == "restriction_error"
        assert error.restriction is RestrictionKind.BEFORE
        assert error.message.startswith(
            "Error occurred validating starts_on for 'before' restriction:\n"
        )
        assert "missing" in error.message

    def test_raising_operand_reported(self, settings: TimeguardSettings) -> None:
        class Broken(Record):
            @property
            def deadline(self) -> date:
                raise RuntimeError("deadline lookup failed")

        validator = TimelinessValidator(type="date", before=attr("deadline"), settings=settings)
        record = Broken()
        validator.validate_each(record, "due_on", date(2020, 1, 1))
        assert "deadline lookup failed" in record.errors["due_on"][0]

    def test_unparsable_operand_reported(self, settings: TimeguardSettings) -> None:
        validator = TimelinessValidator(type="date", after=attr("other"), settings=settings)
        record = Record(other="whenever")
        validator.validate_each(record, "value", date(2020, 1, 1))
        assert record.errors.kinds("value") == ["restriction_error"]

    def test_reported_error_does_not_stop_loop(self, settings: TimeguardSettings) -> None:
        validator = TimelinessValidator(
            type="date", before=attr("missing"), after=date(2021, 1, 1), settings=settings
        )
        record = Record()
        outcome = validator.validate_each(record, "value", date(2020, 1, 1))
        assert record.errors.kinds("value") == ["restriction_error", "after"]
        assert outcome.status is OutcomeStatus.VIOLATED

    def test_ignored_when_switch_set(self) -> None:
        settings = TimeguardSettings(ignore_restriction_errors=True)
        validator = TimelinessValidator(
            type="date", before=attr("missing"), after=date(2021, 1, 1), settings=settings
        )
        record = Record()
        outcome = validator.validate_each(record, "value", date(2020, 1, 1))
        assert record.errors.kinds("value") == ["after"]
        failed = outcome.results[0]
        assert isinstance(failed, RestrictionFailed)
        assert failed.suppressed is True
        assert failed.error_type == "AttributeError"

    def test_ignored_only_error_is_valid(self) -> None:
        settings = TimeguardSettings(ignore_restriction_errors=True)
        validator = TimelinessValidator(type="date", before=attr("missing"), settings=settings)
        outcome = validator.validate(date(2020, 1, 1))
        assert outcome.status is OutcomeStatus.VALID
        assert outcome.errors == []

    def test_process_wide_switch_read_at_evaluation(self) -> None:
        validator = TimelinessValidator(type="date", before=attr("missing"))
        assert validator.validate(date(2020, 1, 1)).status is OutcomeStatus.ERRORED
        configure(ignore_restriction_errors=True)
        assert validator.validate(date(2020, 1, 1)).status is OutcomeStatus.VALID

    def test_per_call_settings_override(self) -> None:
        validator = TimelinessValidator(type="date", before=attr("missing"))
        outcome = validator.validate(
            date(2020, 1, 1), settings=TimeguardSettings(ignore_restriction_errors=True)
        )
        assert outcome.errors == []

    def test_failure_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        validator = TimelinessValidator(type="date", before=attr("missing"))
        with caplog.at_level(logging.DEBUG, logger="timeguard"):
            validator.validate(date(2020, 1, 1))
        assert any("could not be evaluated" in r.getMessage() for r in caplog.records)
