"""Unit tests for lookup tables, merging and lookup patterns."""
import re

import pytest

from supplier_rules.engine.lookups import (
    LookupTable,
    LookupTables,
    build_lookup_pattern,
    merge_lookup_tables,
    parse_lookup_reference,
    rebuild_lookup_tables,
    validate_lookup_tables,
)


class TestLookupTables:
    """Tests for the two-level case-insensitive mapping."""

    def test_table_and_alias_lookup_ignore_case(self, lookups):
        assert lookups["brands"]["CHANEL"] == "Chanel"
        assert lookups["BRANDS"].get("christian dior") == "Dior"

    def test_plain_mappings_are_wrapped(self):
        tables = LookupTables()
        tables["Sizes"] = {"100ml": "100 ml"}
        assert isinstance(tables["sizes"], LookupTable)

    def test_aliases_longest_first(self):
        table = LookupTable({"Eau": "x", "Eau de Parfum": "y", "": "z", "EDP": "y"})
        assert table.aliases_longest_first() == ["Eau de Parfum", "Eau", "EDP"]


class TestMergeLookupTables:
    """Tests for in-place lookup merging."""

    def test_merge_adds_and_overrides(self):
        target = LookupTables.from_mapping({"Brands": {"dior": "Dior"}})
        merge_lookup_tables(target, {"brands": {"DIOR": "Christian Dior", "ysl": "YSL"}})
        assert target["Brands"]["dior"] == "Christian Dior"
        assert target["Brands"]["ysl"] == "YSL"
        assert len(target["Brands"]) == 2

    def test_merge_preserves_table_identity(self):
        target = LookupTables.from_mapping({"Brands": {"dior": "Dior"}})
        table = target["Brands"]
        merge_lookup_tables(target, {"Brands": {"chanel": "Chanel"}})
        assert target["Brands"] is table

    def test_merge_is_idempotent(self):
        source = {"Brands": {"dior": "Dior"}, "Sizes": {"50ml": "50 ml"}}
        target = LookupTables()
        merge_lookup_tables(target, source)
        tables_before = {name: target[name] for name in target}
        merge_lookup_tables(target, source)
        assert {name: target[name] for name in target} == tables_before
        assert all(target[name] is table for name, table in tables_before.items())
        assert len(target["Brands"]) == 1


class TestRebuildLookupTables:
    """Tests for layered lookup resolution."""

    def test_later_layer_wins(self):
        target = LookupTables()
        rebuild_lookup_tables(target, [
            {"Brands": {"dior": "Dior", "chanel": "Chanel"}},
            {"brands": {"Dior": "Christian Dior"}},
        ])
        assert target["Brands"]["dior"] == "Christian Dior"
        assert target["Brands"]["chanel"] == "Chanel"

    def test_rebuild_keeps_identity_and_drops_removed(self):
        target = LookupTables()
        rebuild_lookup_tables(target, [{"Brands": {"dior": "Dior"}, "Old": {"a": "b"}}])
        brands = target["Brands"]

        rebuild_lookup_tables(target, [{"Brands": {"chanel": "Chanel"}}])

        assert target["Brands"] is brands
        assert dict(brands.items()) == {"chanel": "Chanel"}
        assert "Old" not in target

    def test_rebuild_skips_missing_layers(self):
        target = rebuild_lookup_tables(LookupTables(), [None, {"Sizes": {"50ml": "50 ml"}}])
        assert list(target) == ["Sizes"]


class TestValidateLookupTables:
    """Tests for lookup structure validation."""

    def test_valid(self):
        assert validate_lookup_tables({"Brands": {"dior": "Dior"}}) == []

    def test_null_dictionary(self):
        assert validate_lookup_tables(None) == ["Lookups dictionary is null"]

    def test_reports_structural_problems(self):
        errors = validate_lookup_tables({
            "": {"a": "b"},
            "Nulls": None,
            "Values": {"x": None},
            "List": ["a"],
        })
        assert "Lookup table has empty name" in errors
        assert "Lookup table 'Nulls' has null entries dictionary" in errors
        assert "Lookup 'Values' contains a null value for key 'x'" in errors
        assert any("'List'" in error for error in errors)


class TestLookupPattern:
    """Tests for Lookup:<table> references and generated patterns."""

    @pytest.mark.parametrize("pattern,expected", [
        ("Lookup:Brands", "Brands"),
        ("lookup: Brands ", "Brands"),
        ("LOOKUP:Sizes", "Sizes"),
        (r"\d+", None),
        ("", None),
        (None, None),
    ])
    def test_parse_lookup_reference(self, pattern, expected):
        assert parse_lookup_reference(pattern) == expected

    def test_pattern_prefers_longest_alias(self):
        table = LookupTable({"Eau": "EDT", "Eau de Parfum": "EDP"})
        regex = re.compile(build_lookup_pattern(table))
        assert regex.search("Sauvage eau de parfum 100ml").group(0) == "eau de parfum"

    def test_pattern_is_whole_word_and_escaped(self):
        table = LookupTable({"D&G": "Dolce & Gabbana", "YSL": "Yves Saint Laurent"})
        regex = re.compile(build_lookup_pattern(table))
        assert regex.search("perfume d&g men").group(0) == "d&g"
        assert regex.search("YSLX") is None

    @pytest.mark.parametrize("text,expected", [
        ("Sauvage E.D.T.", "E.D.T."),
        ("Sauvage e.d.t. 100ml", "e.d.t."),
        ("(EDP) Sauvage", "(EDP)"),
    ])
    def test_pattern_matches_punctuated_aliases(self, text, expected):
        table = LookupTable({"E.D.T.": "EDT", "(EDP)": "EDP"})
        regex = re.compile(build_lookup_pattern(table))
        assert regex.search(text).group(0) == expected

    def test_pattern_rejects_alias_inside_word(self):
        table = LookupTable({"E.D.T.": "EDT"})
        regex = re.compile(build_lookup_pattern(table))
        assert regex.search("XE.D.T.") is None

    def test_empty_table_has_no_pattern(self):
        assert build_lookup_pattern(LookupTable()) is None
