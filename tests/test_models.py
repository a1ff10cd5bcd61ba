"""Tests for the Struct / Field models and their Go rendering."""

from __future__ import annotations

import pydantic
import pytest

from skygen.errors import NoPrimaryKeyError
from skygen.models import Field, Struct, go_quote


def _user(pk_index: int = 0) -> Struct:
    return Struct(
        type="User",
        store_name="users",
        pk_index=pk_index,
        fields=(
            Field(name="ID", type="string", column="id", is_pk=pk_index == 0),
            Field(name="Name", type="*string", column="name"),
        ),
    )


class TestInvariants:
    def test_valid_struct(self):
        s = _user()
        assert s.has_pk()
        assert s.pk_field().column == "id"

    def test_view_has_no_pk(self):
        s = _user(pk_index=-1)
        assert not s.has_pk()
        with pytest.raises(NoPrimaryKeyError):
            s.pk_field()

    def test_pk_lookup_error_is_lookup_error(self):
        with pytest.raises(LookupError):
            _user(pk_index=-1).pk_field()

    def test_empty_fields_rejected(self):
        with pytest.raises(pydantic.ValidationError, match="no mapped fields"):
            Struct(type="T", store_name="t", fields=())

    def test_duplicate_columns_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            Struct(
                type="T",
                store_name="t",
                fields=(
                    Field(name="A", type="int", column="x"),
                    Field(name="B", type="int", column="x"),
                ),
            )

    def test_two_pks_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            Struct(
                type="T",
                store_name="t",
                pk_index=0,
                fields=(
                    Field(name="A", type="int", column="a", is_pk=True),
                    Field(name="B", type="int", column="b", is_pk=True),
                ),
            )

    def test_pk_index_must_match_pk_field(self):
        with pytest.raises(pydantic.ValidationError):
            Struct(
                type="T",
                store_name="t",
                pk_index=1,
                fields=(
                    Field(name="A", type="int", column="a", is_pk=True),
                    Field(name="B", type="int", column="b"),
                ),
            )

    def test_frozen(self):
        s = _user()
        with pytest.raises(pydantic.ValidationError):
            s.store_name = "other"
        with pytest.raises(pydantic.ValidationError):
            s.fields[0].column = "other"


class TestGoString:
    def test_field(self):
        f = Field(name="ID", type="string", column="id", is_pk=True)
        assert f.go_string() == '{Name: "ID", Type: "string", Column: "id"}'

    def test_struct(self):
        expected = (
            "gen.Struct{\n"
            '\tType: "User",\n'
            '\tSQLName: "users",\n'
            "\tFields: []gen.Field{\n"
            '\t\t{Name: "ID", Type: "string", Column: "id"},\n'
            '\t\t{Name: "Name", Type: "*string", Column: "name"},\n'
            "\t},\n"
            "\tPKFieldIndex: 0,\n"
            "}"
        )
        assert _user().go_string() == expected

    def test_view_renders_negative_index(self):
        assert "\tPKFieldIndex: -1,\n" in _user(pk_index=-1).go_string()

    def test_quoting(self):
        assert go_quote('a"b\\c') == '"a\\"b\\\\c"'
        assert go_quote("tab\there") == '"tab\\there"'

    def test_quoting_matches_go_escapes(self):
        assert go_quote("a\x01 b") == '"a\\x01 b"'
        assert go_quote("\x7f\a\v") == '"\\x7f\\a\\v"'
        assert go_quote("line\u2028sep") == '"line\\u2028sep"'
        assert go_quote("nb\xa0sp") == '"nb\\u00a0sp"'
        assert go_quote("é\U0001F600") == '"é\U0001F600"'
        assert go_quote("\U000E0001") == '"\\U000e0001"'
        assert go_quote("\udc80") == '"\\x80"'

    def test_field_renders_control_chars_go_style(self):
        f = Field(name="A", type="string", column="a\x01 b")
        assert f.go_string() == '{Name: "A", Type: "string", Column: "a\\x01 b"}'

    def test_json_dump(self):
        data = _user().model_dump(mode="json")
        assert data["store_name"] == "users"
        assert [f["column"] for f in data["fields"]] == ["id", "name"]
