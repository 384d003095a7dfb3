import pytest

from lsp_metamodel import (
    BaseType,
    BaseTypes,
    MessageDirection,
    TypeKind,
    UnrecognizedTag,
    parse_type,
    to_json,
)


def test_base_type_tags() -> None:
    assert [member.value for member in BaseTypes] == [
        "URI",
        "DocumentUri",
        "integer",
        "uinteger",
        "decimal",
        "RegExp",
        "string",
        "boolean",
        "null",
    ]


def test_type_kind_tags() -> None:
    assert {member.value for member in TypeKind} == {
        "base",
        "reference",
        "array",
        "map",
        "and",
        "or",
        "tuple",
        "literal",
        "stringLiteral",
        "integerLiteral",
        "booleanLiteral",
    }


def test_message_direction_tags() -> None:
    assert [member.value for member in MessageDirection] == [
        "clientToServer",
        "serverToClient",
        "both",
    ]


@pytest.mark.parametrize("member", list(BaseTypes))
def test_base_type_tag_round_trip(member) -> None:
    parsed = parse_type(member.value)
    assert parsed == BaseType(name=member)
    assert to_json(parsed)["name"] == member.value


@pytest.mark.parametrize("value", ["uri", "Integer", " string", "", 1, None])
def test_base_type_tags_match_exactly(value) -> None:
    with pytest.raises(UnrecognizedTag) as excinfo:
        parse_type({"kind": "base", "name": value})
    assert excinfo.value.enumeration == "BaseTypes"
    assert excinfo.value.value == value
