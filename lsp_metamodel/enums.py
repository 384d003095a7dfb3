from __future__ import annotations

from enum import Enum


class BaseTypes(str, Enum):
    """Primitive types of the protocol, by their meta model tag."""

    URI = "URI"
    DOCUMENT_URI = "DocumentUri"
    INTEGER = "integer"
    UINTEGER = "uinteger"
    DECIMAL = "decimal"
    REG_EXP = "RegExp"
    STRING = "string"
    BOOLEAN = "boolean"
    NULL = "null"


class TypeKind(str, Enum):
    """The `kind` discriminator of every structured type."""

    BASE = "base"
    REFERENCE = "reference"
    ARRAY = "array"
    MAP = "map"
    AND = "and"
    OR = "or"
    TUPLE = "tuple"
    LITERAL = "literal"
    STRING_LITERAL = "stringLiteral"
    INTEGER_LITERAL = "integerLiteral"
    BOOLEAN_LITERAL = "booleanLiteral"


class MessageDirection(str, Enum):
    """Indicates in which direction a message is sent in the protocol."""

    CLIENT_TO_SERVER = "clientToServer"
    SERVER_TO_CLIENT = "serverToClient"
    BOTH = "both"


# Base types usable as map keys. URI and DocumentUri extend string, integer and
# uinteger because published meta models key maps by DocumentUri.
MAP_KEY_BASE_TYPES = frozenset(
    {
        BaseTypes.STRING,
        BaseTypes.INTEGER,
        BaseTypes.UINTEGER,
        BaseTypes.URI,
        BaseTypes.DOCUMENT_URI,
    }
)

ENUMERATION_BASE_TYPES = frozenset(
    {BaseTypes.STRING, BaseTypes.INTEGER, BaseTypes.UINTEGER}
)
