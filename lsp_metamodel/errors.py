from __future__ import annotations

from typing import Any, Iterable


class ParseError(ValueError):
    """Base class of all meta model parse failures."""

    def __init__(
        self,
        message: str,
        *,
        label: str,
        entity: str | None = None,
        field: str | None = None,
        value: Any = None,
    ) -> None:
        super().__init__(f"{label}: {message}")
        self.label = label
        self.entity = entity
        self.field = field
        self.value = value


class UnrecognizedTag(ParseError):
    """A string does not match any tag of a closed enumeration."""

    def __init__(self, enumeration: str, value: Any, *, label: str) -> None:
        super().__init__(
            f"{value!r} is not a valid {enumeration}",
            label=label,
            entity=enumeration,
            value=value,
        )
        self.enumeration = enumeration


class UnknownField(ParseError):
    def __init__(self, entity: str, fields: Iterable[str], *, label: str) -> None:
        self.fields = tuple(sorted(fields))
        super().__init__(
            f"{entity} has unknown keys: {', '.join(self.fields)}",
            label=label,
            entity=entity,
            field=self.fields[0],
        )


class MissingRequiredField(ParseError):
    def __init__(self, entity: str, field: str, *, label: str) -> None:
        super().__init__(
            f"{entity} is missing required key: {field}",
            label=label,
            entity=entity,
            field=field,
        )


class UnrecognizedShape(ParseError):
    """A union value (Type, MapKeyType, Params) fits none of its variants."""

    def __init__(self, entity: str, value: Any, *, label: str, reason: str) -> None:
        super().__init__(
            f"cannot classify {entity}: {reason}",
            label=label,
            entity=entity,
            value=value,
        )


AmbiguousType = UnrecognizedShape


class InvalidMapKeyType(ParseError):
    def __init__(self, value: Any, *, label: str) -> None:
        super().__init__(
            f"{value!r} cannot be used as a map key type",
            label=label,
            entity="MapKeyType",
            field="name",
            value=value,
        )


class InvalidEnumerationType(ParseError):
    def __init__(self, value: Any, *, label: str) -> None:
        super().__init__(
            f"{value!r} cannot back an enumeration",
            label=label,
            entity="EnumerationType",
            field="name",
            value=value,
        )


class TypeMismatch(ParseError, TypeError):
    """A value has the wrong JSON kind for its field."""

    def __init__(
        self,
        expected: str,
        value: Any,
        *,
        label: str,
        entity: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(
            f"must be {expected}, got {json_kind(value)}",
            label=label,
            entity=entity,
            field=field,
            value=value,
        )
        self.expected = expected


class NestingTooDeep(ParseError):
    def __init__(self, max_depth: int, *, label: str) -> None:
        super().__init__(
            f"types nested deeper than {max_depth} levels",
            label=label,
            entity="Type",
        )
        self.max_depth = max_depth


class MalformedDocument(ParseError):
    """The input text is not JSON at all."""


def json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__
