"""Typed model of the Language Server Protocol meta model."""

from .enums import BaseTypes, MessageDirection, TypeKind
from .errors import (
    AmbiguousType,
    InvalidEnumerationType,
    InvalidMapKeyType,
    MalformedDocument,
    MissingRequiredField,
    NestingTooDeep,
    ParseError,
    TypeMismatch,
    UnknownField,
    UnrecognizedShape,
    UnrecognizedTag,
)
from .models import (
    Enumeration,
    EnumerationEntry,
    EnumerationType,
    MetaData,
    MetaModel,
    Notification,
    Request,
    Structure,
    TypeAlias,
)
from .serialization import dumps, loads, to_json
from .types import (
    AndType,
    ArrayType,
    BaseMapKeyType,
    BaseType,
    BooleanLiteralType,
    IntegerLiteralType,
    MapKeyType,
    MapType,
    OrType,
    Params,
    Property,
    ReferenceType,
    StringLiteralType,
    StructureLiteral,
    StructureLiteralType,
    TupleType,
    Type,
    Value,
)
from .validations import (
    MetaModelParser,
    parse_enumeration,
    parse_enumeration_entry,
    parse_enumeration_type,
    parse_map_key_type,
    parse_meta_data,
    parse_meta_model,
    parse_notification,
    parse_params,
    parse_property,
    parse_request,
    parse_structure,
    parse_structure_literal,
    parse_type,
    parse_type_alias,
    parse_value,
)

__all__ = [
    "AmbiguousType",
    "AndType",
    "ArrayType",
    "BaseMapKeyType",
    "BaseType",
    "BaseTypes",
    "BooleanLiteralType",
    "Enumeration",
    "EnumerationEntry",
    "EnumerationType",
    "IntegerLiteralType",
    "InvalidEnumerationType",
    "InvalidMapKeyType",
    "MalformedDocument",
    "MapKeyType",
    "MapType",
    "MessageDirection",
    "MetaData",
    "MetaModel",
    "MetaModelParser",
    "MissingRequiredField",
    "NestingTooDeep",
    "Notification",
    "OrType",
    "Params",
    "ParseError",
    "Property",
    "ReferenceType",
    "Request",
    "StringLiteralType",
    "Structure",
    "StructureLiteral",
    "StructureLiteralType",
    "TupleType",
    "Type",
    "TypeAlias",
    "TypeKind",
    "TypeMismatch",
    "UnknownField",
    "UnrecognizedShape",
    "UnrecognizedTag",
    "Value",
    "dumps",
    "loads",
    "parse_enumeration",
    "parse_enumeration_entry",
    "parse_enumeration_type",
    "parse_map_key_type",
    "parse_meta_data",
    "parse_meta_model",
    "parse_notification",
    "parse_params",
    "parse_property",
    "parse_request",
    "parse_structure",
    "parse_structure_literal",
    "parse_type",
    "parse_type_alias",
    "parse_value",
    "to_json",
]
