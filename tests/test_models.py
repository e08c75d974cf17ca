"""
Tests for schema models, configuration and runtime support.
"""

import ast
import pickle

import pytest
from pydantic import ValidationError

from recordbuilder.config import GeneratorConfig
from recordbuilder.enums import FieldKind
from recordbuilder.models import BuilderSchema, Classification, FieldSchema, RecordSchema
from recordbuilder.runtime import MISSING, MissingFieldError


def field(name: str, type_source: str = "int", kind=None) -> FieldSchema:
    declared = ast.parse(type_source, mode="eval").body
    classification = None
    if kind is not None:
        classification = Classification(kind=kind, effective_type=declared)
    return FieldSchema(name=name, declared_type=declared, classification=classification)


class TestRecordSchema:
    """Tests for RecordSchema."""

    def test_create(self):
        """Test creating a record schema."""
        schema = RecordSchema(name="Point", fields=(field("x"), field("y")))
        assert schema.field_names == ["x", "y"]

    def test_duplicate_names_rejected(self):
        """Test field names must be unique."""
        with pytest.raises(ValidationError, match="duplicate field name: x"):
            RecordSchema(name="Point", fields=(field("x"), field("x")))

    def test_empty_fields_rejected(self):
        """Test a record needs at least one field."""
        with pytest.raises(ValidationError):
            RecordSchema(name="Empty", fields=())

    def test_frozen(self):
        """Test schemas are immutable."""
        schema = RecordSchema(name="Point", fields=(field("x"),))
        with pytest.raises(ValidationError):
            schema.name = "Other"

    def test_classified_copy(self):
        """Test attaching a classification returns a new field."""
        original = field("x")
        classification = Classification(kind=FieldKind.REQUIRED, effective_type=original.declared_type)
        updated = original.classified(classification)
        assert original.classification is None
        assert updated.classification.kind == FieldKind.REQUIRED


class TestBuilderSchema:
    """Tests for BuilderSchema."""

    def test_from_record(self):
        """Test slots mirror the record fields."""
        schema = RecordSchema(
            name="Person",
            fields=(
                field("name", "str", FieldKind.REQUIRED),
                field("nickname", "str", FieldKind.OPTIONAL),
            ),
        )
        builder = BuilderSchema.from_record(schema, "PersonBuilder")
        assert builder.builder_name == "PersonBuilder"
        assert builder.attributes == ["_name", "_nickname"]
        assert [s.kind for s in builder.slots] == [FieldKind.REQUIRED, FieldKind.OPTIONAL]

    def test_requires_classification(self):
        """Test unclassified records cannot be turned into builders."""
        schema = RecordSchema(name="Person", fields=(field("name"),))
        with pytest.raises(ValueError, match="unclassified"):
            BuilderSchema.from_record(schema, "PersonBuilder")


class TestGeneratorConfig:
    """Tests for GeneratorConfig."""

    def test_defaults(self):
        """Test default naming."""
        config = GeneratorConfig()
        assert config.builder_name("Person") == "PersonBuilder"
        assert config.factory_name == "builder"
        assert config.finalizer_name == "build"
        assert config.wrapper_name == "Optional"
        assert config.collect_missing is False

    @pytest.mark.parametrize("name", ["", "class", "not valid", "1abc"])
    def test_invalid_identifiers(self, name):
        """Test generated names must be identifiers."""
        with pytest.raises(ValidationError):
            GeneratorConfig(factory_name=name)

    def test_invalid_suffix(self):
        """Test the suffix must keep the class name an identifier."""
        with pytest.raises(ValidationError):
            GeneratorConfig(builder_suffix="-Builder")

    def test_numeric_suffix_allowed(self):
        """Test suffixes only need to be valid after a name."""
        assert GeneratorConfig(builder_suffix="2").builder_name("Point") == "Point2"


class TestRuntime:
    """Tests for the runtime support used by generated code."""

    def test_missing_is_singleton(self):
        """Test MISSING survives copying."""
        assert pickle.loads(pickle.dumps(MISSING)) is MISSING
        assert not MISSING
        assert repr(MISSING) == "MISSING"

    def test_missing_field_error_single(self):
        """Test the message for one missing field."""
        error = MissingFieldError("name")
        assert str(error) == "missing required field: name"
        assert error.field_name == "name"
        assert isinstance(error, ValueError)

    def test_missing_field_error_multiple(self):
        """Test the message for several missing fields."""
        error = MissingFieldError("a", "b")
        assert str(error) == "missing required fields: a, b"
        assert error.field_names == ("a", "b")

    def test_missing_field_error_needs_name(self):
        """Test at least one field name is required."""
        with pytest.raises(TypeError):
            MissingFieldError()
