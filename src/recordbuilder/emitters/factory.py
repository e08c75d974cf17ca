"""
Emitter for the builder factory attached to a record.
"""

import ast

from recordbuilder.config import DEFAULT_CONFIG, GeneratorConfig
from recordbuilder.models import RecordSchema

from . import nodes


def emit_factory(schema: RecordSchema, config: GeneratorConfig = DEFAULT_CONFIG) -> ast.FunctionDef:
    """
    Generate the zero-argument static factory for a record.

    The result is meant to live in the record's class body::

        @staticmethod
        def builder() -> 'PersonBuilder':
            return PersonBuilder()
    """
    builder_name = config.builder_name(schema.name)
    factory = nodes.function(
        config.factory_name,
        nodes.arguments(),
        [ast.Return(value=ast.Call(func=nodes.load(builder_name), args=[], keywords=[]))],
        returns=ast.Constant(value=builder_name),
        decorators=[nodes.load("staticmethod")],
    )
    return ast.fix_missing_locations(factory)
