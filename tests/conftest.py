from tests.fixtures.meta_model_fixtures import (  # noqa: F401
    meta_model_document,
    meta_model_minimal,
)
