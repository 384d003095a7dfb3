from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    Tag,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .enums import MAP_KEY_BASE_TYPES, BaseTypes

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

Int32 = Annotated[StrictInt, Field(ge=INT32_MIN, le=INT32_MAX)]


class MetaModelEntity(BaseModel):
    """Common configuration: immutable, closed, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Documented(MetaModelEntity):
    """Lifecycle metadata shared by most named entities."""

    # An optional documentation.
    documentation: Optional[str] = None
    # Since when (release number) this entity is available.
    since: Optional[str] = None
    # Whether this is a proposed feature. If omitted the feature is final.
    proposed: Optional[bool] = None
    # The deprecation message, if deprecated.
    deprecated: Optional[str] = None


class BaseType(MetaModelEntity):
    """A base type like ``string`` or ``DocumentUri``.

    Also written as the bare name, e.g. an array ``element`` of ``"string"``.
    """

    kind: Literal["base"] = "base"
    name: BaseTypes

    @model_validator(mode="before")
    @classmethod
    def _from_bare_name(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return data


class ReferenceType(MetaModelEntity):
    """A reference to a structure, enumeration or type alias by name.

    The name is kept verbatim; it is not resolved against the model.
    """

    kind: Literal["reference"] = "reference"
    name: StrictStr


class ArrayType(MetaModelEntity):
    """An array type (e.g. ``TextDocument[]``)."""

    kind: Literal["array"] = "array"
    element: Type


class BaseMapKeyType(MetaModelEntity):
    """A base type used as a map key; must be string or integer compatible."""

    kind: Literal["base"] = "base"
    name: BaseTypes

    @field_validator("name")
    @classmethod
    def _key_compatible(cls, value: BaseTypes) -> BaseTypes:
        if value not in MAP_KEY_BASE_TYPES:
            raise ValueError(f"{value.value} cannot be used as a map key type")
        return value


class MapType(MetaModelEntity):
    """A JSON object map (e.g. ``{ [key: K]: V }``)."""

    kind: Literal["map"] = "map"
    key: MapKeyType
    value: Type


class AndType(MetaModelEntity):
    """An intersection (e.g. ``TextDocumentParams & WorkDoneProgressParams``)."""

    kind: Literal["and"] = "and"
    items: tuple[Type, ...] = Field(min_length=1)


class OrType(MetaModelEntity):
    """A union (e.g. ``Location | LocationLink``)."""

    kind: Literal["or"] = "or"
    items: tuple[Type, ...]


class TupleType(MetaModelEntity):
    """A tuple (e.g. ``[integer, integer]``)."""

    kind: Literal["tuple"] = "tuple"
    items: tuple[Type, ...]


class Property(Documented):
    """An object property."""

    name: StrictStr
    type: Type
    # If omitted, the property is mandatory.
    optional: Optional[bool] = None


class StructureLiteral(Documented):
    """An unnamed structure of an object literal."""

    properties: tuple[Property, ...]


class StructureLiteralType(MetaModelEntity):
    """A literal structure (e.g. ``{ start: uinteger; end: uinteger; }``)."""

    kind: Literal["literal"] = "literal"
    value: StructureLiteral


class StringLiteralType(MetaModelEntity):
    """A string literal type (e.g. ``kind: 'rename'``)."""

    kind: Literal["stringLiteral"] = "stringLiteral"
    value: StrictStr


class IntegerLiteralType(MetaModelEntity):
    """An integer literal type (e.g. ``kind: 1``)."""

    kind: Literal["integerLiteral"] = "integerLiteral"
    value: Int32


class BooleanLiteralType(MetaModelEntity):
    """A boolean literal type (e.g. ``kind: true``)."""

    kind: Literal["booleanLiteral"] = "booleanLiteral"
    value: StrictBool


def _kind_tag(value: Any) -> Optional[str]:
    # A bare string is a base type name.
    if isinstance(value, str):
        return "base"
    if isinstance(value, dict):
        return value.get("kind")
    return getattr(value, "kind", None)


def _map_key_tag(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return None
    return _kind_tag(value)


Type = Annotated[
    Union[
        Annotated[BaseType, Tag("base")],
        Annotated[ReferenceType, Tag("reference")],
        Annotated[ArrayType, Tag("array")],
        Annotated[MapType, Tag("map")],
        Annotated[AndType, Tag("and")],
        Annotated[OrType, Tag("or")],
        Annotated[TupleType, Tag("tuple")],
        Annotated[StructureLiteralType, Tag("literal")],
        Annotated[StringLiteralType, Tag("stringLiteral")],
        Annotated[IntegerLiteralType, Tag("integerLiteral")],
        Annotated[BooleanLiteralType, Tag("booleanLiteral")],
    ],
    Discriminator(_kind_tag),
]

MapKeyType = Annotated[
    Union[
        Annotated[BaseMapKeyType, Tag("base")],
        Annotated[ReferenceType, Tag("reference")],
    ],
    Discriminator(_map_key_tag),
]

# An enumeration entry value.
Value = Union[StrictStr, Int32]

Params = Union[Type, tuple[Type, ...]]

ArrayType.model_rebuild()
MapType.model_rebuild()
AndType.model_rebuild()
OrType.model_rebuild()
TupleType.model_rebuild()
Property.model_rebuild()
StructureLiteral.model_rebuild()
StructureLiteralType.model_rebuild()
