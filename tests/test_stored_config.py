"""
Tests for the stored commission field, sub-deal aggregation and the
JSON entry points used by the panel backend.
"""

import json
import logging
from decimal import Decimal

import pytest

from commission_engine import (
    CommissionEngine,
    StoredCommissionConfig,
    compute_summary_from_dict,
    compute_summary_from_json,
    ensure_config,
    format_currency,
    has_unsaved_changes,
    merge_with_sub_deals,
    parse_stored_config,
    parse_sub_deal_ids,
    serialize_config,
)


LINES = [
    {"id": "a", "name": "Partner A", "appliesTo": "total", "percent": 65, "fixed": 0},
    {"id": "b", "name": "Partner B", "appliesTo": "total", "percent": 35, "fixed": 0},
]


class TestParseStoredConfig:
    """Test both custom-field formats."""

    def test_combined_format(self):
        stored = parse_stored_config(
            {"commissionConfig": LINES, "depositPercent": 20, "dealValue": 1000})

        assert [line.name for line in stored.lines] == ["Partner A", "Partner B"]
        assert stored.deposit_percent == Decimal('20')
        assert stored.deal_value == Decimal('1000')

    def test_combined_format_as_json_string(self):
        raw = json.dumps({"commissionConfig": LINES, "depositPercent": "150"})
        stored = parse_stored_config(raw)

        assert len(stored.lines) == 2
        assert stored.deposit_percent == Decimal('100')
        assert stored.deal_value is None

    def test_nested_json_string_config(self):
        raw = {"commissionConfig": json.dumps(LINES), "depositPercent": 10}
        assert len(parse_stored_config(raw).lines) == 2

    def test_legacy_array_format(self):
        stored = parse_stored_config(json.dumps(LINES))

        assert len(stored.lines) == 2
        assert stored.deposit_percent == Decimal('0')
        assert stored.deal_value is None

    @pytest.mark.parametrize("value", [None, "", "   ", 42, True])
    def test_missing_or_unsupported_value(self, value):
        assert parse_stored_config(value) == StoredCommissionConfig()

    def test_broken_json_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="commission_engine"):
            stored = parse_stored_config("[{broken")

        assert stored == StoredCommissionConfig()
        assert "Failed to parse commission config" in caplog.text


class TestSerializeConfig:
    def test_serialized_config_parses_back(self):
        raw = serialize_config(LINES, 20, 1000)
        data = json.loads(raw)

        assert set(data) == {"commissionConfig", "depositPercent", "dealValue"}
        assert data["dealValue"] == 1000.0
        assert parse_stored_config(raw) == parse_stored_config(
            {"commissionConfig": LINES, "depositPercent": 20, "dealValue": 1000})

    def test_serialization_sanitizes_lines(self):
        data = json.loads(serialize_config([None, {"percent": "5"}], -3))

        assert data["depositPercent"] == 0.0
        assert data["dealValue"] is None
        assert data["commissionConfig"] == [{
            "id": "line-2",
            "name": "Line 2",
            "appliesTo": "total",
            "percent": 5.0,
            "fixed": 0.0,
            "substractOtherDepostit": False,
            "comment": None,
        }]


class TestEnsureConfig:
    def test_default_split_when_empty(self):
        lines = ensure_config([None, "x"])

        assert [line.name for line in lines] == ["Partner A", "Partner B"]
        assert [line.percent for line in lines] == [Decimal('65'), Decimal('35')]

    def test_default_split_balances(self):
        summary = CommissionEngine().compute_summary(1000, 0, ensure_config([]))
        assert summary.matches_deal_value is True

    def test_configured_lines_are_kept(self):
        lines = ensure_config([{"name": "Solo", "percent": 100}])
        assert [line.name for line in lines] == ["Solo"]


class TestHasUnsavedChanges:
    """Dirty tracking compares sanitized snapshots by value."""

    def test_same_content_in_different_shapes_is_clean(self):
        persisted = json.dumps({"commissionConfig": LINES, "depositPercent": 20})
        edited = {"commissionConfig": [dict(line, name=f" {line['name']} ") for line in LINES],
                  "depositPercent": "20.0"}

        assert has_unsaved_changes(persisted, edited) is False

    def test_changed_percent_is_dirty(self):
        edited = [dict(line) for line in LINES]
        edited[1]["percent"] = 30

        assert has_unsaved_changes(
            {"commissionConfig": LINES}, {"commissionConfig": edited}) is True

    def test_changed_deposit_is_dirty(self):
        assert has_unsaved_changes(
            {"commissionConfig": LINES, "depositPercent": 20},
            {"commissionConfig": LINES, "depositPercent": 25}) is True

    @pytest.mark.parametrize("raw", [
        [{"percent": "12.3456789012345678"}],
        [{"fixed": "0.1000000000000000055511151231257827", "appliesTo": "deposit"}],
        LINES,
    ])
    def test_just_saved_config_is_clean(self, raw):
        saved = serialize_config(raw, 20)

        assert has_unsaved_changes(
            saved, {"commissionConfig": raw, "depositPercent": 20}) is False

    def test_deal_value_is_ignored(self):
        assert has_unsaved_changes(
            parse_stored_config({"commissionConfig": LINES, "dealValue": 1000}),
            parse_stored_config({"commissionConfig": LINES, "dealValue": 2000})) is False


class TestSubDeals:
    """Test sub-deal id parsing and the merged view."""

    @pytest.mark.parametrize("value, expected", [
        ('["12", " 34 ", ""]', ["12", "34"]),
        ([5, None, "7"], ["5", "7"]),
        ("not json", []),
        ('{"id": 1}', []),
        (None, []),
        ("", []),
    ])
    def test_parse_sub_deal_ids(self, value, expected):
        assert parse_sub_deal_ids(value) == expected

    def test_merge_groups_lines_by_name(self):
        main = CommissionEngine().compute_summary(1000, 20, LINES)
        sub_deals = [
            {"id": 12, "title": "Kitchen", "value": 500, "depositPercent": 10,
             "commissionConfig": json.dumps([
                 {"name": "Partner A", "percent": 50},
                 {"name": "Installer", "percent": 50},
             ])},
            {"id": 13, "title": "Empty", "value": 200, "depositPercent": 50,
             "commissionConfig": []},
            "not a deal",
        ]

        merged = merge_with_sub_deals(main, sub_deals)
        groups = {group["name"]: group for group in merged["groups"]}

        assert [group["name"] for group in merged["groups"]] == [
            "Partner A", "Partner B", "Installer"]
        assert groups["Partner A"]["total"] == 900.0
        assert [item["source"] for item in groups["Partner A"]["items"]] == ["main", "subdeal"]
        assert groups["Partner A"]["items"][1]["dealTitle"] == "Kitchen"
        assert groups["Partner A"]["items"][1]["dealId"] == "12"
        assert groups["Installer"]["total"] == 250.0
        # sub-deal without lines still counts towards the sub-totals
        assert merged["subDealsDepositTotal"] == 150.0
        assert merged["subDealsRemainingTotal"] == 550.0

    def test_merge_without_sub_deals(self):
        main = CommissionEngine().compute_summary(1000, 20, LINES)
        merged = merge_with_sub_deals(main, None)

        assert len(merged["groups"]) == 2
        assert merged["subDealsDepositTotal"] == 0.0


class TestFormatCurrency:
    @pytest.mark.parametrize("value, currency, expected", [
        (1234.5, "EUR", "€1\u202f234,50"),
        ("-0.005", "EUR", "€-0,01"),
        ("abc", "USD", "$0,00"),
        (1000000, "CHF", "1\u202f000\u202f000,00 CHF"),
        (12, None, "12,00"),
    ])
    def test_format_currency(self, value, currency, expected):
        assert format_currency(value, currency) == expected


class TestApiFunctions:
    """Test the dict and JSON entry points."""

    def test_from_dict(self):
        result = compute_summary_from_dict(
            {"dealValue": 1000, "depositPercent": 20, "commissionConfig": LINES})

        assert result["matchesDealValue"] is True
        assert [line["total"] for line in result["lines"]] == [650.0, 350.0]

    def test_from_dict_simple_model(self):
        result = compute_summary_from_dict({
            "dealValue": 1000, "depositPercent": 50, "model": "simple",
            "commissionConfig": [
                {"appliesTo": "deposit", "percent": 10},
                {"appliesTo": "deposit", "percent": 10, "substractOtherDepostit": True},
            ]})

        assert result["model"] == "simple"
        assert [line["total"] for line in result["lines"]] == [50.0, 50.0]

    def test_from_dict_accepts_config_string(self):
        result = compute_summary_from_dict(
            {"dealValue": 1000, "commissionConfig": json.dumps(LINES)})
        assert len(result["lines"]) == 2

    def test_from_json(self):
        output = json.loads(compute_summary_from_json(json.dumps(
            {"dealValue": 1000, "depositPercent": 20, "commissionConfig": LINES})))

        assert output["totalDisbursed"] == 1000.0
        assert output["depositAmount"] == 200.0

    @pytest.mark.parametrize("json_input", ["{not json", "[1, 2]", "null"])
    def test_from_json_invalid_input(self, json_input):
        output = json.loads(compute_summary_from_json(json_input))
        assert output["status"] == "validation_failed"

    def test_from_json_unknown_model(self):
        output = json.loads(compute_summary_from_json(json.dumps({"model": "x"})))

        assert output["status"] == "validation_failed"
        assert "Invalid model" in output["error"]
