from __future__ import annotations

import copy
import logging

import pytest

from lsp_metamodel import (
    AndType,
    ArrayType,
    BaseMapKeyType,
    BaseType,
    BaseTypes,
    BooleanLiteralType,
    IntegerLiteralType,
    MapType,
    MessageDirection,
    MetaModel,
    MetaModelParser,
    OrType,
    ReferenceType,
    StringLiteralType,
    StructureLiteralType,
    TupleType,
    TypeMismatch,
    UnknownField,
    parse_meta_model,
    to_json,
)


def test_parse_minimal_meta_model(meta_model_minimal) -> None:
    """An empty model parses to empty collections."""
    # Arrange: minimal document fixture.

    # Act: parse it.
    model = parse_meta_model(meta_model_minimal)

    # Assert: metadata kept, every collection empty.
    assert model.meta_data.version == "3.17"
    assert model.requests == ()
    assert model.notifications == ()
    assert model.structures == ()
    assert model.enumerations == ()
    assert model.type_aliases == ()


def test_parse_meta_model_excerpt(meta_model_document) -> None:
    """Parse an excerpt of the published meta model end to end."""
    # Act: parse the document.
    model = parse_meta_model(meta_model_document)

    # Assert: collections keep document order.
    assert [request.method for request in model.requests] == [
        "textDocument/definition",
        "shutdown",
    ]
    assert [structure.name for structure in model.structures] == [
        "DefinitionParams",
        "WorkspaceEdit",
        "Range",
        "InlineValueText",
    ]

    definition = model.request("textDocument/definition")
    assert definition is not None
    assert isinstance(definition.result, OrType)
    assert definition.result.items[2] == BaseType(name=BaseTypes.NULL)
    assert definition.registration_options == ReferenceType(
        name="DefinitionRegistrationOptions"
    )
    assert definition.error_data is None

    params = model.structure("DefinitionParams")
    assert params is not None
    assert params.extends == (ReferenceType(name="TextDocumentPositionParams"),)
    assert [mixin.name for mixin in params.mixins] == [
        "WorkDoneProgressParams",
        "PartialResultParams",
    ]

    changes, annotations = model.structure("WorkspaceEdit").properties
    assert changes.optional is True
    assert changes.type == MapType(
        key=BaseMapKeyType(name=BaseTypes.DOCUMENT_URI),
        value=ArrayType(element=ReferenceType(name="TextEdit")),
    )
    assert annotations.type.key == ReferenceType(name="ChangeAnnotationIdentifier")
    assert annotations.since == "3.16.0"

    literal_types = [prop.type for prop in model.structure("InlineValueText").properties]
    assert [type(item) for item in literal_types] == [
        StructureLiteralType,
        StringLiteralType,
        IntegerLiteralType,
        BooleanLiteralType,
        TupleType,
        AndType,
    ]
    assert literal_types[0].value.properties[1].name == "end"

    exit_notification = model.notification("exit")
    assert exit_notification.params is None
    assert exit_notification.message_direction is MessageDirection.CLIENT_TO_SERVER

    symbol_kind = model.enumeration("SymbolKind")
    assert [entry.value for entry in symbol_kind.values] == [1, 2]
    assert model.enumeration("FoldingRangeKind").supports_custom_values is True
    assert model.type_alias("ChangeAnnotationIdentifier").type == BaseType(
        name=BaseTypes.STRING
    )
    assert model.structure("Missing") is None


def test_meta_model_round_trip(meta_model_document) -> None:
    model = parse_meta_model(meta_model_document)
    assert parse_meta_model(to_json(model)) == model


def test_model_validates_its_own_json(meta_model_document) -> None:
    """The pydantic models accept what ``to_json`` writes."""
    # Arrange
    model = parse_meta_model(meta_model_document)

    # Act
    validated = MetaModel.model_validate(to_json(model))

    # Assert
    assert validated == model
    assert MetaModel.model_validate(meta_model_document) == model


def test_round_trip_reproduces_object_form_documents(meta_model_document) -> None:
    """Documents written in the published object form serialize back unchanged."""
    model = parse_meta_model(meta_model_document)
    assert to_json(model) == meta_model_document


def test_parse_fails_on_first_violation_deep_in_document(meta_model_document) -> None:
    """A single drifted field anywhere rejects the whole document."""
    # Arrange: add an unknown field to a nested literal property.
    document = copy.deepcopy(meta_model_document)
    literal = document["structures"][3]["properties"][0]["type"]["value"]
    literal["properties"][1]["readonly"] = True

    # Act + Assert: the error points at the nested property.
    with pytest.raises(UnknownField) as excinfo:
        parse_meta_model(document)
    assert excinfo.value.label == (
        "metaModel.structures[3].properties[0].type.value.properties[1]"
    )


def test_parse_rejects_non_object_document() -> None:
    with pytest.raises(TypeMismatch, match="metaModel: must be an object"):
        parse_meta_model([])


def test_parse_logs_summary(meta_model_document, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="lsp_metamodel.validations"):
        parse_meta_model(meta_model_document)
    assert "Parsed meta model 3.17.0: 2 requests, 2 notifications" in caplog.text


def test_parse_logs_rejection_to_given_logger(meta_model_minimal, caplog) -> None:
    logger = logging.getLogger("tests.meta_model")
    parser = MetaModelParser(logger=logger)
    meta_model_minimal["metaData"]["revision"] = 1
    with caplog.at_level(logging.DEBUG, logger="tests.meta_model"):
        with pytest.raises(UnknownField):
            parser.parse(meta_model_minimal)
    assert "Meta model rejected: metaModel.metaData" in caplog.text
