from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

from .errors import MalformedDocument
from .models import MetaModel
from .validations import ROOT_LABEL, parse_meta_model


def to_json(entity: Any) -> Any:
    """Return the JSON form of any meta model value.

    Field names use the document's camelCase spelling and absent optional
    fields are left out, so the result parses back to an equal value.
    A ``BaseType`` read from the bare-string shorthand (``"string"``) is
    always written in object form, ``{"kind": "base", "name": "string"}``.
    """
    if isinstance(entity, BaseModel):
        return entity.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(entity, (list, tuple)):
        return [to_json(item) for item in entity]
    return entity


def dumps(entity: Any, *, indent: int | None = None) -> str:
    return json.dumps(to_json(entity), indent=indent, ensure_ascii=False)


def loads(text: str | bytes) -> MetaModel:
    """Decode JSON text and parse it as a meta model document."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedDocument(
            f"not a JSON document ({exc.msg} at line {exc.lineno} column {exc.colno})",
            label=ROOT_LABEL,
        ) from exc
    return parse_meta_model(document)
