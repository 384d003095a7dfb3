from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from functools import lru_cache
from typing import Any, Optional, TypeVar

from pydantic import BaseModel

from .enums import (
    ENUMERATION_BASE_TYPES,
    MAP_KEY_BASE_TYPES,
    BaseTypes,
    MessageDirection,
    TypeKind,
)
from .errors import (
    InvalidEnumerationType,
    InvalidMapKeyType,
    MissingRequiredField,
    NestingTooDeep,
    ParseError,
    TypeMismatch,
    UnknownField,
    UnrecognizedShape,
    UnrecognizedTag,
    json_kind,
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
from .types import (
    INT32_MAX,
    INT32_MIN,
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

DEFAULT_MAX_DEPTH = 64
ROOT_LABEL = "metaModel"

E = TypeVar("E", bound=Enum)
T = TypeVar("T")


class MetaModelParser:
    """Turns a decoded JSON document into a :class:`MetaModel`.

    ``max_depth`` bounds how deeply types may nest (array elements, map
    values, and/or/tuple items, literal properties) so pathological input
    fails with :class:`NestingTooDeep` instead of exhausting the stack.
    """

    def __init__(
        self,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        logger: logging.Logger | None = None,
    ) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.max_depth = max_depth
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self._type_decoders: dict[
            TypeKind, Callable[[Mapping[str, Any], str, int], Type]
        ] = {
            TypeKind.BASE: self._base_type,
            TypeKind.REFERENCE: self._reference_type,
            TypeKind.ARRAY: self._array_type,
            TypeKind.MAP: self._map_type,
            TypeKind.AND: self._and_type,
            TypeKind.OR: self._or_type,
            TypeKind.TUPLE: self._tuple_type,
            TypeKind.LITERAL: self._structure_literal_type,
            TypeKind.STRING_LITERAL: self._string_literal_type,
            TypeKind.INTEGER_LITERAL: self._integer_literal_type,
            TypeKind.BOOLEAN_LITERAL: self._boolean_literal_type,
        }

    def parse(self, document: Any) -> MetaModel:
        """Parse a whole meta model document; all or nothing."""
        try:
            model = self._meta_model(document, ROOT_LABEL)
        except ParseError as exc:
            self.logger.debug("Meta model rejected: %s", exc)
            raise
        self.logger.info(
            "Parsed meta model %s: %d requests, %d notifications, %d structures, "
            "%d enumerations, %d type aliases",
            model.meta_data.version,
            len(model.requests),
            len(model.notifications),
            len(model.structures),
            len(model.enumerations),
            len(model.type_aliases),
        )
        return model

    # --- types ---

    def parse_type(self, value: Any, label: str = "type") -> Type:
        return self._type(value, label, 0)

    def parse_map_key_type(self, value: Any, label: str = "key") -> MapKeyType:
        if not isinstance(value, Mapping) or "kind" not in value:
            raise UnrecognizedShape(
                "MapKeyType",
                value,
                label=label,
                reason=f"expected an object with a 'kind', got {json_kind(value)}",
            )
        kind = _parse_tag(TypeKind, value["kind"], _join(label, "kind"))
        if kind is TypeKind.REFERENCE:
            return _reference(value, label)
        if kind is TypeKind.BASE:
            _check_fields(value, BaseMapKeyType, label)
            name = _parse_tag(BaseTypes, value["name"], _join(label, "name"))
            if name not in MAP_KEY_BASE_TYPES:
                raise InvalidMapKeyType(name.value, label=_join(label, "name"))
            return BaseMapKeyType(name=name)
        raise UnrecognizedShape(
            "MapKeyType",
            value,
            label=label,
            reason=f"kind {kind.value!r} cannot be used as a map key",
        )

    def parse_value(self, value: Any, label: str = "value") -> Value:
        if isinstance(value, str) or _is_int32(value):
            return value
        raise TypeMismatch(
            "a string or a 32-bit integer",
            value,
            label=label,
            entity="EnumerationEntry",
            field="value",
        )

    def parse_params(self, value: Any, label: str = "params") -> Params:
        if isinstance(value, (list, tuple)):
            return tuple(
                self._type(item, _index(label, position), 0)
                for position, item in enumerate(value)
            )
        return self._type(value, label, 0)

    def _type(self, value: Any, label: str, depth: int) -> Type:
        if depth >= self.max_depth:
            raise NestingTooDeep(self.max_depth, label=label)
        if isinstance(value, str):
            return BaseType(name=_parse_tag(BaseTypes, value, label))
        if not isinstance(value, Mapping):
            raise UnrecognizedShape(
                "Type",
                value,
                label=label,
                reason=(
                    f"expected a base type name or an object, got {json_kind(value)}"
                ),
            )
        if "kind" not in value:
            raise UnrecognizedShape(
                "Type", value, label=label, reason="object has no 'kind'"
            )
        kind = _parse_tag(TypeKind, value["kind"], _join(label, "kind"))
        return self._type_decoders[kind](value, label, depth + 1)

    def _optional_type(
        self, obj: Mapping[str, Any], key: str, entity: str, label: str
    ) -> Optional[Type]:
        value = _value(obj, key, entity, label)
        if value is None:
            return None
        return self._type(value, _join(label, key), 0)

    def _types(
        self, obj: Mapping[str, Any], key: str, entity: str, label: str, depth: int
    ) -> Optional[tuple[Type, ...]]:
        return _sequence(
            obj,
            key,
            entity,
            label,
            lambda item, item_label: self._type(item, item_label, depth),
        )

    def _base_type(self, obj: Mapping[str, Any], label: str, depth: int) -> BaseType:
        _check_fields(obj, BaseType, label)
        return BaseType(name=_parse_tag(BaseTypes, obj["name"], _join(label, "name")))

    def _reference_type(
        self, obj: Mapping[str, Any], label: str, depth: int
    ) -> ReferenceType:
        return _reference(obj, label)

    def _array_type(self, obj: Mapping[str, Any], label: str, depth: int) -> ArrayType:
        _check_fields(obj, ArrayType, label)
        return ArrayType(
            element=self._type(obj["element"], _join(label, "element"), depth)
        )

    def _map_type(self, obj: Mapping[str, Any], label: str, depth: int) -> MapType:
        _check_fields(obj, MapType, label)
        return MapType(
            key=self.parse_map_key_type(obj["key"], _join(label, "key")),
            value=self._type(obj["value"], _join(label, "value"), depth),
        )

    def _and_type(self, obj: Mapping[str, Any], label: str, depth: int) -> AndType:
        _check_fields(obj, AndType, label)
        items = self._types(obj, "items", "AndType", label, depth)
        if not items:
            raise UnrecognizedShape(
                "AndType",
                obj,
                label=_join(label, "items"),
                reason="an 'and' type needs at least one item",
            )
        return AndType(items=items)

    def _or_type(self, obj: Mapping[str, Any], label: str, depth: int) -> OrType:
        _check_fields(obj, OrType, label)
        return OrType(items=self._types(obj, "items", "OrType", label, depth))

    def _tuple_type(self, obj: Mapping[str, Any], label: str, depth: int) -> TupleType:
        _check_fields(obj, TupleType, label)
        return TupleType(items=self._types(obj, "items", "TupleType", label, depth))

    def _structure_literal_type(
        self, obj: Mapping[str, Any], label: str, depth: int
    ) -> StructureLiteralType:
        _check_fields(obj, StructureLiteralType, label)
        return StructureLiteralType(
            value=self._structure_literal(obj["value"], _join(label, "value"), depth)
        )

    def _string_literal_type(
        self, obj: Mapping[str, Any], label: str, depth: int
    ) -> StringLiteralType:
        _check_fields(obj, StringLiteralType, label)
        return StringLiteralType(
            value=_string(obj, "value", "StringLiteralType", label)
        )

    def _integer_literal_type(
        self, obj: Mapping[str, Any], label: str, depth: int
    ) -> IntegerLiteralType:
        _check_fields(obj, IntegerLiteralType, label)
        value = obj["value"]
        if not _is_int32(value):
            raise TypeMismatch(
                "a 32-bit integer",
                value,
                label=_join(label, "value"),
                entity="IntegerLiteralType",
                field="value",
            )
        return IntegerLiteralType(value=value)

    def _boolean_literal_type(
        self, obj: Mapping[str, Any], label: str, depth: int
    ) -> BooleanLiteralType:
        _check_fields(obj, BooleanLiteralType, label)
        return BooleanLiteralType(
            value=_boolean(obj, "value", "BooleanLiteralType", label)
        )

    # --- entities ---

    def parse_property(self, value: Any, label: str = "property") -> Property:
        return self._property(value, label, 0)

    def parse_structure_literal(
        self, value: Any, label: str = "literal"
    ) -> StructureLiteral:
        return self._structure_literal(value, label, 0)

    def _property(self, value: Any, label: str, depth: int) -> Property:
        obj = _object(value, Property, label)
        return Property(
            name=_string(obj, "name", "Property", label),
            type=self._type(obj["type"], _join(label, "type"), depth),
            optional=_boolean(obj, "optional", "Property", label),
            **_lifecycle(obj, "Property", label),
        )

    def _structure_literal(
        self, value: Any, label: str, depth: int
    ) -> StructureLiteral:
        obj = _object(value, StructureLiteral, label)
        return StructureLiteral(
            properties=_sequence(
                obj,
                "properties",
                "StructureLiteral",
                label,
                lambda item, item_label: self._property(item, item_label, depth),
            ),
            **_lifecycle(obj, "StructureLiteral", label),
        )

    def parse_structure(self, value: Any, label: str = "structure") -> Structure:
        obj = _object(value, Structure, label)
        return Structure(
            name=_string(obj, "name", "Structure", label),
            extends=self._types(obj, "extends", "Structure", label, 0),
            mixins=self._types(obj, "mixins", "Structure", label, 0),
            properties=_sequence(
                obj, "properties", "Structure", label, self.parse_property
            ),
            **_lifecycle(obj, "Structure", label),
        )

    def parse_type_alias(self, value: Any, label: str = "typeAlias") -> TypeAlias:
        obj = _object(value, TypeAlias, label)
        return TypeAlias(
            name=_string(obj, "name", "TypeAlias", label),
            type=self._type(obj["type"], _join(label, "type"), 0),
            **_lifecycle(obj, "TypeAlias", label),
        )

    def parse_enumeration_entry(
        self, value: Any, label: str = "entry"
    ) -> EnumerationEntry:
        obj = _object(value, EnumerationEntry, label)
        return EnumerationEntry(
            name=_string(obj, "name", "EnumerationEntry", label),
            value=self.parse_value(obj["value"], _join(label, "value")),
            **_lifecycle(obj, "EnumerationEntry", label),
        )

    def parse_enumeration_type(
        self, value: Any, label: str = "type"
    ) -> EnumerationType:
        obj = _object(value, EnumerationType, label)
        kind = _parse_tag(TypeKind, obj["kind"], _join(label, "kind"))
        if kind is not TypeKind.BASE:
            raise UnrecognizedShape(
                "EnumerationType",
                obj,
                label=label,
                reason=f"kind must be 'base', got {kind.value!r}",
            )
        name = _parse_tag(BaseTypes, obj["name"], _join(label, "name"))
        if name not in ENUMERATION_BASE_TYPES:
            raise InvalidEnumerationType(name.value, label=_join(label, "name"))
        return EnumerationType(name=name)

    def parse_enumeration(self, value: Any, label: str = "enumeration") -> Enumeration:
        obj = _object(value, Enumeration, label)
        return Enumeration(
            name=_string(obj, "name", "Enumeration", label),
            type=self.parse_enumeration_type(obj["type"], _join(label, "type")),
            values=_sequence(
                obj, "values", "Enumeration", label, self.parse_enumeration_entry
            ),
            supports_custom_values=_boolean(
                obj, "supportsCustomValues", "Enumeration", label
            ),
            **_lifecycle(obj, "Enumeration", label),
        )

    def parse_request(self, value: Any, label: str = "request") -> Request:
        obj = _object(value, Request, label)
        return Request(
            method=_string(obj, "method", "Request", label),
            params=self._params(obj, "Request", label),
            result=self._type(obj["result"], _join(label, "result"), 0),
            partial_result=self._optional_type(obj, "partialResult", "Request", label),
            error_data=self._optional_type(obj, "errorData", "Request", label),
            registration_method=_string(obj, "registrationMethod", "Request", label),
            registration_options=self._optional_type(
                obj, "registrationOptions", "Request", label
            ),
            message_direction=_parse_tag(
                MessageDirection,
                obj["messageDirection"],
                _join(label, "messageDirection"),
            ),
            **_lifecycle(obj, "Request", label),
        )

    def parse_notification(
        self, value: Any, label: str = "notification"
    ) -> Notification:
        obj = _object(value, Notification, label)
        return Notification(
            method=_string(obj, "method", "Notification", label),
            params=self._params(obj, "Notification", label),
            registration_method=_string(
                obj, "registrationMethod", "Notification", label
            ),
            registration_options=self._optional_type(
                obj, "registrationOptions", "Notification", label
            ),
            message_direction=_parse_tag(
                MessageDirection,
                obj["messageDirection"],
                _join(label, "messageDirection"),
            ),
            **_lifecycle(obj, "Notification", label),
        )

    def _params(
        self, obj: Mapping[str, Any], entity: str, label: str
    ) -> Optional[Params]:
        value = _value(obj, "params", entity, label)
        if value is None:
            return None
        return self.parse_params(value, _join(label, "params"))

    def parse_meta_data(self, value: Any, label: str = "metaData") -> MetaData:
        obj = _object(value, MetaData, label)
        return MetaData(version=_string(obj, "version", "MetaData", label))

    def _meta_model(self, value: Any, label: str) -> MetaModel:
        obj = _object(value, MetaModel, label)
        return MetaModel(
            meta_data=self.parse_meta_data(obj["metaData"], _join(label, "metaData")),
            requests=_sequence(obj, "requests", "MetaModel", label, self.parse_request),
            notifications=_sequence(
                obj, "notifications", "MetaModel", label, self.parse_notification
            ),
            structures=_sequence(
                obj, "structures", "MetaModel", label, self.parse_structure
            ),
            enumerations=_sequence(
                obj, "enumerations", "MetaModel", label, self.parse_enumeration
            ),
            type_aliases=_sequence(
                obj, "typeAliases", "MetaModel", label, self.parse_type_alias
            ),
        )


@lru_cache(maxsize=None)
def _schema(model: type[BaseModel]) -> tuple[tuple[str, ...], frozenset[str]]:
    """Return the required keys (in declaration order) and allowed keys."""
    required: list[str] = []
    allowed: set[str] = set()
    for name, info in model.model_fields.items():
        key = info.alias or name
        allowed.add(key)
        # The tag has a default on the model but is required in documents.
        if info.is_required() or name == "kind":
            required.append(key)
    return tuple(required), frozenset(allowed)


def _check_fields(
    obj: Mapping[str, Any], model: type[BaseModel], label: str
) -> None:
    required, allowed = _schema(model)
    _require_keys(obj, required, model.__name__, label)
    extra_fields = set(obj.keys()) - allowed
    if extra_fields:
        raise UnknownField(model.__name__, extra_fields, label=label)


def _object(value: Any, model: type[BaseModel], label: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeMismatch("an object", value, label=label, entity=model.__name__)
    _check_fields(value, model, label)
    return value


def _require_keys(
    container: Mapping[str, Any], required: Iterable[str], entity: str, label: str
) -> None:
    for key in required:
        if key not in container:
            raise MissingRequiredField(entity, key, label=label)


def _value(obj: Mapping[str, Any], key: str, entity: str, label: str) -> Any:
    """Return ``obj[key]``, or None when absent. An explicit null is rejected."""
    if key not in obj:
        return None
    value = obj[key]
    if value is None:
        raise TypeMismatch(
            "a non-null value",
            value,
            label=_join(label, key),
            entity=entity,
            field=key,
        )
    return value


def _string(obj: Mapping[str, Any], key: str, entity: str, label: str) -> Any:
    value = _value(obj, key, entity, label)
    if value is not None and not isinstance(value, str):
        raise TypeMismatch(
            "a string", value, label=_join(label, key), entity=entity, field=key
        )
    return value


def _boolean(obj: Mapping[str, Any], key: str, entity: str, label: str) -> Any:
    value = _value(obj, key, entity, label)
    if value is not None and not isinstance(value, bool):
        raise TypeMismatch(
            "a boolean", value, label=_join(label, key), entity=entity, field=key
        )
    return value


def _sequence(
    obj: Mapping[str, Any],
    key: str,
    entity: str,
    label: str,
    parse_item: Callable[[Any, str], T],
) -> Optional[tuple[T, ...]]:
    value = _value(obj, key, entity, label)
    if value is None:
        return None
    sequence_label = _join(label, key)
    if not isinstance(value, (list, tuple)):
        raise TypeMismatch(
            "an array", value, label=sequence_label, entity=entity, field=key
        )
    return tuple(
        parse_item(item, _index(sequence_label, position))
        for position, item in enumerate(value)
    )


def _lifecycle(obj: Mapping[str, Any], entity: str, label: str) -> dict[str, Any]:
    return {
        "documentation": _string(obj, "documentation", entity, label),
        "since": _string(obj, "since", entity, label),
        "proposed": _boolean(obj, "proposed", entity, label),
        "deprecated": _string(obj, "deprecated", entity, label),
    }


def _reference(obj: Mapping[str, Any], label: str) -> ReferenceType:
    _check_fields(obj, ReferenceType, label)
    return ReferenceType(name=_string(obj, "name", "ReferenceType", label))


def _parse_tag(enumeration: type[E], value: Any, label: str) -> E:
    if isinstance(value, str):
        try:
            return enumeration(value)
        except ValueError:
            pass
    raise UnrecognizedTag(enumeration.__name__, value, label=label)


def _is_int32(value: Any) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and INT32_MIN <= value <= INT32_MAX
    )


def _join(label: str, key: str) -> str:
    return f"{label}.{key}"


def _index(label: str, position: int) -> str:
    return f"{label}[{position}]"


_DEFAULT_PARSER = MetaModelParser()

parse_type = _DEFAULT_PARSER.parse_type
parse_map_key_type = _DEFAULT_PARSER.parse_map_key_type
parse_value = _DEFAULT_PARSER.parse_value
parse_params = _DEFAULT_PARSER.parse_params
parse_property = _DEFAULT_PARSER.parse_property
parse_structure_literal = _DEFAULT_PARSER.parse_structure_literal
parse_structure = _DEFAULT_PARSER.parse_structure
parse_type_alias = _DEFAULT_PARSER.parse_type_alias
parse_enumeration_entry = _DEFAULT_PARSER.parse_enumeration_entry
parse_enumeration_type = _DEFAULT_PARSER.parse_enumeration_type
parse_enumeration = _DEFAULT_PARSER.parse_enumeration
parse_request = _DEFAULT_PARSER.parse_request
parse_notification = _DEFAULT_PARSER.parse_notification
parse_meta_data = _DEFAULT_PARSER.parse_meta_data


def parse_meta_model(
    document: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    logger: logging.Logger | None = None,
) -> MetaModel:
    """Parse a decoded meta model document (see :class:`MetaModelParser`)."""
    return MetaModelParser(max_depth=max_depth, logger=logger).parse(document)
