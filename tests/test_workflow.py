"""
Tests for the expansion workflow, including generated code behavior.
"""

import ast
import textwrap

import pytest

from recordbuilder.config import GeneratorConfig
from recordbuilder.enums import Severity
from recordbuilder.runtime import MissingFieldError
from recordbuilder.tools import transform_module
from recordbuilder.workflow import BuilderExpander, ExpansionResult, expand_class

RECORDS = """
from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from recordbuilder import derive_builder


@derive_builder
@dataclass
class Person:
    name: str
    nickname: Optional[str] = None


@derive_builder
@dataclass
class Command:
    executable: str
    args: list[str]
    env: Optional[list[str]]
    current_dir: str


@derive_builder
class Point(NamedTuple):
    x: float
    y: float
    label: Optional[Optional[str]] = None


@derive_builder
@dataclass
class Nullable:
    value: int | None
"""


def load_records(config: GeneratorConfig = None) -> dict:
    """Generate the records module and execute it."""
    result = transform_module(RECORDS, config or GeneratorConfig(), filename="records.py")
    assert not result.has_errors, [d.render() for d in result.diagnostics]
    namespace = {"__name__": "generated_records"}
    exec(compile(result.source, "records.py", "exec"), namespace)
    return namespace


@pytest.fixture(scope="module")
def records():
    return load_records()


class TestBuilderExpander:
    """Tests for BuilderExpander."""

    def test_expand_record(self):
        """Test a record expands into builder, factory and imports."""
        node = ast.parse("class Person:\n    name: str\n    nickname: Optional[str]\n").body[0]
        result = BuilderExpander().expand(node)
        assert result.is_complete
        assert not result.has_errors
        assert result.builder.name == "PersonBuilder"
        assert result.factory.name == "builder"
        assert len(result.declarations) == 2

    def test_shape_error_becomes_diagnostic(self):
        """Test unsupported shapes produce a diagnostic and no declarations."""
        node = ast.parse("class Empty:\n    pass\n").body[0]
        result = expand_class(node)
        assert not result.is_complete
        assert result.has_errors
        assert result.declarations == []
        assert result.diagnostics[0].severity == Severity.ERROR
        assert "no named fields" in result.diagnostics[0].message

    def test_non_class_diagnostic(self):
        """Test function declarations are reported, not raised."""
        node = ast.parse("def f():\n    pass\n").body[0]
        result = expand_class(node)
        assert result.record_name == "f"
        assert result.has_errors

    def test_reserved_names_follow_config(self):
        """Test the finalizer and factory names are reserved."""
        node = ast.parse("class R:\n    finish: bool\n").body[0]
        assert expand_class(node).is_complete
        result = expand_class(node, GeneratorConfig(finalizer_name="finish"))
        assert "collides" in result.diagnostics[0].message

    def test_factory_name_reserved(self):
        """Test a field named like the factory is rejected."""
        node = ast.parse("class R:\n    builder: str\n").body[0]
        assert expand_class(node).has_errors

    def test_summary(self):
        """Test the summary lists fields and their kinds."""
        node = ast.parse("class Person:\n    name: str\n    nickname: Optional[str]\n").body[0]
        summary = expand_class(node).summary()
        assert "Builder: PersonBuilder" in summary
        assert "nickname: Optional[str] (optional)" in summary

    def test_summary_with_errors(self):
        """Test the summary reports diagnostics."""
        summary = ExpansionResult(record_name="X").summary()
        assert "Not generated" in summary


class TestGeneratedBuilders:
    """End-to-end behavior of generated builders."""

    def test_factory_returns_fresh_builder(self, records):
        """Test the factory returns a new empty builder each time."""
        Person = records["Person"]
        first = Person.builder()
        second = Person.builder()
        assert isinstance(first, records["PersonBuilder"])
        assert first is not second

    def test_required_only(self, records):
        """Test setting only the required field succeeds."""
        person = records["Person"].builder().name("Ada").build()
        assert person == records["Person"](name="Ada", nickname=None)

    def test_missing_required_field(self, records):
        """Test finalizing without a required field fails with its name."""
        with pytest.raises(MissingFieldError, match="missing required field: name") as exc:
            records["Person"].builder().nickname("A").build()
        assert exc.value.field_name == "name"

    def test_fails_iff_required_missing(self, records):
        """Test optional fields never cause a failure."""
        Command = records["Command"]
        builder = Command.builder().executable("cargo").args(["build"])
        with pytest.raises(MissingFieldError, match="current_dir"):
            builder.build()
        command = builder.current_dir("..").build()
        assert command.env is None

    def test_fail_fast_reports_first_missing(self, records):
        """Test required fields are checked in declaration order."""
        with pytest.raises(MissingFieldError) as exc:
            records["Command"].builder().build()
        assert exc.value.field_names == ("executable",)

    def test_setters_chain(self, records):
        """Test setters return the builder itself."""
        builder = records["Person"].builder()
        assert builder.name("Ada") is builder

    def test_last_write_wins(self, records):
        """Test repeated setter calls keep the last value."""
        Person = records["Person"]
        twice = Person.builder().name("A").name("B").nickname("x").nickname("y").build()
        once = Person.builder().name("B").nickname("y").build()
        assert twice == once == Person(name="B", nickname="y")

    def test_builder_reusable(self, records):
        """Test building does not consume the builder."""
        builder = records["Person"].builder().name("Ada")
        assert builder.build() == builder.build()
        assert builder.build() is not builder.build()

    def test_named_tuple_record(self, records):
        """Test NamedTuple records and nested optional inner types."""
        Point = records["Point"]
        point = Point.builder().x(1.0).y(2.0).label(None).build()
        assert point == Point(1.0, 2.0, None)
        assert Point.builder().x(0).y(0).build().label is None

    def test_required_field_accepts_none(self, records):
        """Test None counts as a value for required fields."""
        Nullable = records["Nullable"]
        assert Nullable.builder().value(None).build() == Nullable(value=None)
        with pytest.raises(MissingFieldError):
            Nullable.builder().build()

    def test_builder_has_slots(self, records):
        """Test builders reject unknown attributes."""
        builder = records["Person"].builder()
        with pytest.raises(AttributeError):
            builder.age = 3

    def test_collect_missing(self):
        """Test the collecting policy reports every missing field."""
        records = load_records(GeneratorConfig(collect_missing=True))
        with pytest.raises(MissingFieldError) as exc:
            records["Command"].builder().args([]).build()
        assert exc.value.field_names == ("executable", "current_dir")
        assert str(exc.value) == "missing required fields: executable, current_dir"


class TestTransformedSource:
    """Tests for the shape of the transformed module."""

    def test_decorator_removed_and_factory_added(self):
        """Test the record keeps its fields and gains the factory."""
        source = transform_module(textwrap.dedent(RECORDS)).source
        module = ast.parse(source)
        person = next(n for n in module.body if isinstance(n, ast.ClassDef) and n.name == "Person")
        assert [ast.unparse(d) for d in person.decorator_list] == ["dataclass"]
        assert person.body[-1].name == "builder"

    def test_builder_follows_record(self):
        """Test each builder is placed right after its record."""
        module = ast.parse(transform_module(RECORDS).source)
        names = [n.name for n in module.body if isinstance(n, ast.ClassDef)]
        assert names == [
            "Person", "PersonBuilder",
            "Command", "CommandBuilder",
            "Point", "PointBuilder",
            "Nullable", "NullableBuilder",
        ]
