"""Unit tests for chain actions.

Tests cover:
    - AssignAction: single-element copy, empty input
    - SplitAction: verbatim parts, trim, strict and lenient part counts
    - FindAction: first/last/all, remove mode, named groups
    - MapAction: scalar and deferred writes, misses
    - NoopAction: never matches, never writes
    - Guard conditions and ConditionalAction
"""
import re

import pytest

from supplier_rules.engine.actions import (
    ActionResult,
    AssignAction,
    ConditionalAction,
    FindAction,
    MapAction,
    NoopAction,
    SplitAction,
)
from supplier_rules.engine.conditions import parse_condition
from supplier_rules.engine.lookups import LookupTable


class TestActionResult:
    """Tests for ActionResult truthiness."""

    def test_hit_is_truthy(self):
        assert ActionResult.hit()
        assert ActionResult.hit().reason is None

    def test_no_match_is_falsy_with_reason(self):
        result = ActionResult.no_match("nothing")
        assert not result
        assert result.reason == "nothing"


class TestAssignAction:
    """Tests for AssignAction."""

    def test_copies_raw_text(self, make_ctx, bag):
        action = AssignAction("Text", "Name")
        assert action.execute(make_ctx("Bleu de Chanel"))
        assert bag["Name[0]"] == "Bleu de Chanel"
        assert bag["Name.Length"] == "1"
        assert bag["Name.Valid"] == "true"

    def test_copies_bag_value(self, make_ctx, bag):
        bag.write_list("Parts", ["CHANEL", "MENS"])
        action = AssignAction("Parts[1]", "Gender")
        assert action.execute(make_ctx())
        assert bag["Gender[0]"] == "MENS"

    @pytest.mark.parametrize("input_key", ["Text", "Missing[0]"])
    def test_empty_input(self, make_ctx, bag, input_key):
        action = AssignAction(input_key, "Name")
        result = action.execute(make_ctx(""))
        assert not result
        assert bag["Name.Length"] == "0"
        assert bag["Name.Valid"] == "false"
        assert "Name[0]" not in bag

    def test_empty_input_clears_previous_value(self, make_ctx, bag):
        action = AssignAction("Text", "Name")
        action.execute(make_ctx("first"))
        action.execute(make_ctx(""))
        assert "Name[0]" not in bag
        assert bag["Name.Length"] == "0"


class TestSplitAction:
    """Tests for SplitAction."""

    def test_split_default_delimiter(self, make_ctx, bag):
        action = SplitAction("Text", "Parts")
        assert action.execute(make_ctx("CHANEL:MENS:T123"))
        assert bag.read_list("Parts") == ["CHANEL", "MENS", "T123"]
        assert bag["Parts.Length"] == "3"
        assert bag["Parts.Valid"] == "true"

    @pytest.mark.parametrize("text,delimiter", [
        ("a : b :c", ":"),
        ("one||two|| three", "||"),
        ("::x", ":"),
        ("no delimiter", ";"),
    ])
    def test_parts_rejoin_to_input(self, make_ctx, bag, text, delimiter):
        action = SplitAction("Text", "Parts", delimiter=delimiter)
        assert action.execute(make_ctx(text))
        assert delimiter.join(bag.read_list("Parts")) == text

    def test_trim(self, make_ctx, bag):
        action = SplitAction("Text", "Parts", delimiter="/", trim=True)
        action.execute(make_ctx(" Dior / Sauvage "))
        assert bag.read_list("Parts") == ["Dior", "Sauvage"]

    @pytest.mark.parametrize("text", ["", ":", "::"])
    def test_no_non_empty_parts(self, make_ctx, bag, text):
        action = SplitAction("Text", "Parts")
        assert not action.execute(make_ctx(text))
        assert bag["Parts.Length"] == "0"
        assert bag["Parts.Valid"] == "false"

    def test_strict_mismatch_writes_no_slots(self, make_ctx, bag):
        action = SplitAction("Text", "Parts", expected_parts=3, strict=True)
        result = action.execute(make_ctx("CHANEL:MENS"))
        assert not result
        assert "expected 3" in result.reason
        assert bag["Parts.Length"] == "0"
        assert bag["Parts.Valid"] == "false"
        assert "Parts[0]" not in bag
        assert "Parts[1]" not in bag

    def test_lenient_mismatch_still_writes(self, make_ctx, bag):
        action = SplitAction("Text", "Parts", expected_parts=3)
        assert action.execute(make_ctx("CHANEL:MENS"))
        assert bag.read_list("Parts") == ["CHANEL", "MENS"]

    def test_empty_delimiter_rejected(self):
        with pytest.raises(ValueError):
            SplitAction("Text", "Parts", delimiter="")


class TestFindAction:
    """Tests for FindAction."""

    def test_first_match_by_default(self, make_ctx, bag):
        action = FindAction("Text", "Found", re.compile(r"\d+"))
        assert action.execute(make_ctx("abc123def45"))
        assert bag.read_list("Found") == ["123"]
        assert bag["Found.Length"] == "1"

    def test_last_match(self, make_ctx, bag):
        action = FindAction("Text", "Found", re.compile(r"\d+"), options={"last"})
        action.execute(make_ctx("abc123def45"))
        assert bag.read_list("Found") == ["45"]

    def test_all_matches(self, make_ctx, bag):
        action = FindAction("Text", "Found", re.compile(r"\d+"), options={"all"})
        action.execute(make_ctx("a1b22c333"))
        assert bag.read_list("Found") == ["1", "22", "333"]
        assert bag["Found.Valid"] == "true"

    def test_remove_all(self, make_ctx, bag):
        action = FindAction("Text", "Found", re.compile(r"\d+"), options={"all", "remove"})
        assert action.execute(make_ctx("abc123def45"))
        assert bag["Found.Clean"] == "abcdef"
        assert bag.read_list("Found") == ["123", "45"]
        assert bag["Found.Length"] == "2"

    def test_remove_first_only(self, make_ctx, bag):
        action = FindAction("Text", "Found", re.compile(r"\d+"), options={"remove"})
        action.execute(make_ctx("abc123def45"))
        assert bag["Found.Clean"] == "abcdef45"

    def test_remove_keeps_whitespace_exactly(self, make_ctx, bag):
        text = "Sauvage  100ml  EDT"
        action = FindAction("Text", "Size", re.compile(r"\d+ml"), options={"remove"})
        action.execute(make_ctx(text))
        clean = bag["Size.Clean"]
        assert clean == "Sauvage    EDT"
        position = text.index("100ml")
        assert clean[:position] + "100ml" + clean[position:] == text

    def test_remove_without_match_keeps_input(self, make_ctx, bag):
        action = FindAction("Text", "Found", re.compile(r"\d+"), options={"remove"})
        assert not action.execute(make_ctx("no digits"))
        assert bag["Found.Clean"] == "no digits"
        assert bag["Found.Length"] == "0"
        assert bag["Found.Valid"] == "false"

    def test_named_groups(self, make_ctx, bag):
        pattern = re.compile(r"(?P<num>\d+)\s*(?P<unit>ml|g)?")
        action = FindAction("Text", "Found", pattern)
        action.execute(make_ctx("Sauvage 100 ml"))
        assert bag["Found[0]"] == "100 ml"
        assert bag["Found.3.num"] == "100"
        assert bag["Found.3.unit"] == "ml"

    def test_non_participating_group_is_empty(self, make_ctx, bag):
        pattern = re.compile(r"(?P<num>\d+)(?P<unit>ml)?")
        action = FindAction("Text", "Found", pattern)
        action.execute(make_ctx("size 50"))
        assert bag["Found.3.unit"] == ""

    def test_groups_reflect_latest_match(self, make_ctx, bag):
        pattern = re.compile(r"(?P<num>\d+)")
        action = FindAction("Text", "Found", pattern, options={"all"})
        action.execute(make_ctx("1 and 2"))
        assert bag["Found.3.num"] == "2"

    def test_zero_length_matches_ignored(self, make_ctx, bag):
        action = FindAction("Text", "Found", re.compile(r"\d*"), options={"all"})
        action.execute(make_ctx("ab12"))
        assert bag.read_list("Found") == ["12"]

    def test_empty_input(self, make_ctx, bag):
        action = FindAction("Text", "Found", re.compile(r"\d+"))
        assert not action.execute(make_ctx(""))
        assert bag["Found.Valid"] == "false"


class TestMapAction:
    """Tests for MapAction."""

    @pytest.fixture
    def genders(self):
        return LookupTable({"MENS": "Men", "WOMENS": "Women"})

    def test_hit_writes_scalar(self, make_ctx, bag, genders):
        action = MapAction("Text", "Gender", "Genders", genders)
        assert action.execute(make_ctx("mens"))
        assert bag["Gender"] == "Men"
        assert "assign:Gender" not in bag

    def test_hit_with_assign_writes_deferred(self, make_ctx, bag, genders):
        action = MapAction("Text", "Product.Gender", "Genders", genders, assign=True)
        assert action.execute(make_ctx("WOMENS"))
        assert bag["assign:Product.Gender"] == "Women"
        assert "Product.Gender" not in bag

    def test_stripped_value_is_tried(self, make_ctx, bag, genders):
        action = MapAction("Text", "Gender", "Genders", genders)
        assert action.execute(make_ctx(" MENS "))
        assert bag["Gender"] == "Men"

    @pytest.mark.parametrize("text", ["", "KIDS"])
    def test_miss_writes_nothing(self, make_ctx, bag, genders, text):
        action = MapAction("Text", "Gender", "Genders", genders)
        assert not action.execute(make_ctx(text))
        assert len(bag) == 0

    def test_hit_with_empty_canonical_value(self, make_ctx, bag):
        table = LookupTable({"N/A": ""})
        action = MapAction("Text", "Gender", "Genders", table)
        assert action.execute(make_ctx("n/a"))
        assert bag["Gender"] == ""

    def test_empty_table(self, make_ctx, bag):
        action = MapAction("Text", "Gender", "Genders", LookupTable())
        assert not action.execute(make_ctx("MENS"))
        assert len(bag) == 0

    def test_reads_bag_input(self, make_ctx, bag, genders):
        bag.write_list("Parts", ["CHANEL", "MENS"])
        action = MapAction("Parts[1]", "Gender", "Genders", genders)
        assert action.execute(make_ctx("ignored"))
        assert bag["Gender"] == "Men"


class TestNoopAction:
    """Tests for NoopAction."""

    def test_never_matches_or_writes(self, make_ctx, bag):
        action = NoopAction("upper", "Text", "Out")
        result = action.execute(make_ctx("value"))
        assert not result
        assert "upper" in result.reason
        assert action.original_op == "upper"
        assert len(bag) == 0


class TestActionCondition:
    """Tests for the optional guard shared by every action."""

    def test_true_condition_runs_action(self, make_ctx, bag):
        bag.write_list("Parts", ["CHANEL", "MENS"])
        action = AssignAction("Parts[1]", "Gender", condition=parse_condition("Parts.Length == 2"))
        assert action.run(make_ctx("ignored"))
        assert bag["Gender[0]"] == "MENS"

    def test_false_condition_skips_without_writing(self, make_ctx, bag):
        bag.write_list("Parts", ["CHANEL"])
        action = AssignAction("Parts[0]", "Brand", condition=parse_condition("Parts.Length == 2"))
        result = action.run(make_ctx("ignored"))
        assert not result
        assert "condition" in result.reason
        assert "Brand.Valid" not in bag

    def test_no_condition_always_runs(self, make_ctx, bag):
        assert AssignAction("Text", "Name").run(make_ctx("x"))
        assert bag["Name[0]"] == "x"

    @pytest.mark.parametrize("expression,expected", [
        ("Parts[0] == 'CHANEL'", True),
        ('Parts[0] == "chanel"', False),
        ("Parts[1] != ''", True),
        ("Parts[5] == ''", True),
        ("Text == CHANEL:MENS", False),
        ("Text == 'CHANEL:MENS'", True),
        ("Parts.Length != 3", True),
        ("Flag == true", True),
    ])
    def test_condition_operands(self, make_ctx, bag, expression, expected):
        bag.write_list("Parts", ["CHANEL", "MENS"])
        bag["Flag"] = "true"
        assert parse_condition(expression).evaluate(make_ctx("CHANEL:MENS")) is expected

    @pytest.mark.parametrize("expression", ["", "   ", "Parts.Length > 2"])
    def test_unsupported_condition(self, expression):
        with pytest.raises(ValueError):
            parse_condition(expression)


class TestConditionalAction:
    """Tests for ConditionalAction."""

    def test_copies_scalar_when_condition_holds(self, make_ctx, bag):
        bag.write_list("Parts", ["CHANEL", "MENS"])
        action = ConditionalAction("Parts[1]", "Gender", parse_condition("Parts.Length == 2"))
        assert action.execute(make_ctx("ignored"))
        assert bag["Gender"] == "MENS"

    def test_assign_writes_deferred(self, make_ctx, bag):
        bag.write_list("Parts", ["CHANEL", "MENS"])
        action = ConditionalAction(
            "Parts[1]", "Product.Gender", parse_condition("Parts.Length == 2"), assign=True,
        )
        assert action.execute(make_ctx("ignored"))
        assert bag["assign:Product.Gender"] == "MENS"

    def test_skips_when_condition_fails(self, make_ctx, bag):
        bag.write_list("Parts", ["CHANEL"])
        action = ConditionalAction("Parts[0]", "Brand", parse_condition("Parts.Length == 2"))
        assert not action.execute(make_ctx("ignored"))
        assert "Brand" not in bag

    def test_empty_input_does_not_match(self, make_ctx, bag):
        action = ConditionalAction("Missing", "Out", parse_condition("1 == 1"))
        assert not action.execute(make_ctx("x"))
        assert "Out" not in bag
