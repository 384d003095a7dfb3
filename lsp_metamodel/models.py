from __future__ import annotations

from typing import Literal, Optional

from pydantic import StrictStr, field_validator

from .enums import ENUMERATION_BASE_TYPES, BaseTypes, MessageDirection
from .types import (
    Documented,
    MetaModelEntity,
    Params,
    Property,
    Type,
    Value,
)


class Structure(Documented):
    """A named object-shaped entity.

    ``extends`` forms a polymorphic hierarchy; the properties of ``mixins`` are
    copied into the structure without one. Both normally hold references to
    other structures and are preserved as given.
    """

    name: StrictStr
    extends: Optional[tuple[Type, ...]] = None
    mixins: Optional[tuple[Type, ...]] = None
    properties: tuple[Property, ...]


class TypeAlias(Documented):
    """A type alias (e.g. ``type Definition = Location | LocationLink``)."""

    name: StrictStr
    type: Type


class EnumerationEntry(Documented):
    name: StrictStr
    value: Value


class EnumerationType(MetaModelEntity):
    """The base type backing an enumeration's values."""

    kind: Literal["base"] = "base"

    name: BaseTypes

    @field_validator("name")
    @classmethod
    def _backs_enumeration(cls, value: BaseTypes) -> BaseTypes:
        if value not in ENUMERATION_BASE_TYPES:
            raise ValueError(f"{value.value} cannot back an enumeration")
        return value


class Enumeration(Documented):
    name: StrictStr
    type: EnumerationType
    values: tuple[EnumerationEntry, ...]
    # Whether values outside of `values` are accepted. If omitted they are not.
    supports_custom_values: Optional[bool] = None


class Request(Documented):
    """A protocol request."""

    method: StrictStr
    params: Optional[Params] = None
    result: Type
    # Set when the request supports partial result reporting.
    partial_result: Optional[Type] = None
    error_data: Optional[Type] = None
    # Only set when it differs from `method`.
    registration_method: Optional[str] = None
    registration_options: Optional[Type] = None
    message_direction: MessageDirection


class Notification(Documented):
    """A protocol notification."""

    method: StrictStr
    params: Optional[Params] = None
    registration_method: Optional[str] = None
    registration_options: Optional[Type] = None
    message_direction: MessageDirection


class MetaData(MetaModelEntity):
    # The protocol version.
    version: StrictStr


class MetaModel(MetaModelEntity):
    """The parsed meta model document.

    Lookups return the first entity with the given name, or ``None``. They do
    not check that references elsewhere in the model resolve.
    """

    meta_data: MetaData
    requests: tuple[Request, ...]
    notifications: tuple[Notification, ...]
    structures: tuple[Structure, ...]
    enumerations: tuple[Enumeration, ...]
    type_aliases: tuple[TypeAlias, ...]

    def request(self, method: str) -> Request | None:
        return next((item for item in self.requests if item.method == method), None)

    def notification(self, method: str) -> Notification | None:
        return next(
            (item for item in self.notifications if item.method == method), None
        )

    def structure(self, name: str) -> Structure | None:
        return next((item for item in self.structures if item.name == name), None)

    def enumeration(self, name: str) -> Enumeration | None:
        return next((item for item in self.enumerations if item.name == name), None)

    def type_alias(self, name: str) -> TypeAlias | None:
        return next((item for item in self.type_aliases if item.name == name), None)
