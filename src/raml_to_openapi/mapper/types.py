"""Converts RAML type declarations into OpenAPI schemas.

Resolution order for every node:

1. ``T[]`` where ``T`` is registered: a reference to the synthesized
   ``TArray`` schema when it is registered, otherwise an inline array of
   references to ``T``.
2. A registered base type name: a bare reference.
3. Otherwise the node is converted structurally by its kind.
"""

import json
import logging
from typing import Any

from raml_to_openapi.mapper.context import MapperContext
from raml_to_openapi.openapi.model import Schema
from raml_to_openapi.raml.model import BUILTIN_TYPES, TypeDeclaration

logger = logging.getLogger(__name__)

ARRAY_SCHEMA_SUFFIX = "Array"

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

# RAML integer formats -> OpenAPI integer formats
INTEGER_FORMATS = {
    "int64": "int64",
    "long": "int64",
    "int32": "int32",
    "int": "int32",
    "int16": "int32",
    "int8": "int32",
}


def array_schema_name(base: str) -> str:
    return base + ARRAY_SCHEMA_SUFFIX


def open_object() -> Schema:
    return Schema(type="object", additional_properties=True)


def parse_example_value(value: Any) -> Any:
    """Decode JSON given as a string example; other values are returned unchanged."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if text.startswith(("{", "[")):
        try:
            return json.loads(text)
        except ValueError:
            logger.debug("Example is not valid JSON, keeping it as text")
    return value


class TypeConverter:
    """Maps a ``TypeDeclaration`` to a ``Schema``."""

    def __init__(self):
        self._by_kind = {
            "string": self._convert_string,
            "number": self._convert_number,
            "integer": self._convert_integer,
            "boolean": self._convert_boolean,
            "array": self._convert_array,
            "object": self._convert_object,
            "union": self._convert_union,
            "datetime": self._convert_datetime,
            "date-only": self._convert_date_only,
            "time-only": self._convert_time_only,
            "datetime-only": self._convert_datetime_only,
            "file": self._convert_file,
            "nil": self._convert_nil,
            "any": self._convert_any,
        }

    def convert(self, type_decl: TypeDeclaration | None, context: MapperContext) -> Schema:
        if type_decl is None:
            return open_object()

        registry = context.registry
        logger.debug("Converting type: %s (%s)", type_decl.name, type_decl.type)

        base = type_decl.array_base()
        if base is not None and registry.exists(base):
            array_name = array_schema_name(base)
            if registry.exists(array_name):
                return Schema.reference(array_name)
            return Schema(type="array", items=Schema.reference(base))

        if type_decl.type not in BUILTIN_TYPES and registry.exists(type_decl.type):
            return Schema.reference(type_decl.type)

        return self.convert_structure(type_decl, context)

    def convert_structure(self, type_decl: TypeDeclaration, context: MapperContext) -> Schema:
        """Convert by kind only, without resolving the declared base as a reference."""
        converter = self._by_kind.get(type_decl.kind)
        if converter is None:
            logger.warning("Unknown type kind '%s' for '%s', defaulting to object", type_decl.kind, type_decl.name)
            return open_object()
        return converter(type_decl, context)

    def convert_property(self, prop: TypeDeclaration, context: MapperContext) -> Schema:
        """Convert a property and attach its description, example, default and annotations."""
        schema = self.convert(prop, context)
        if schema.ref is not None:
            # siblings of $ref are ignored by OpenAPI 3.0 tooling
            return schema

        if prop.description:
            schema.description = prop.description
        if prop.example is not None:
            schema.example = parse_example_value(prop.example)
        if prop.default is not None and schema.default is None:
            schema.default = prop.default
        if prop.display_name and prop.display_name != prop.name:
            schema.extensions["x-raml-displayName"] = prop.display_name
        add_annotation_extensions(prop, schema)
        return schema

    def convert_properties(
        self, properties: list[TypeDeclaration], context: MapperContext
    ) -> tuple[dict[str, Schema], list[str]]:
        """Convert properties in declaration order; returns ``(schemas, required_names)``."""
        schemas: dict[str, Schema] = {}
        required: list[str] = []
        for prop in properties:
            schemas[prop.name] = self.convert_property(prop, context)
            if prop.required:
                required.append(prop.name)
        return schemas, required

    # -- kinds ----------------------------------------------------------------

    def _convert_string(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        schema = Schema(type="string", format=t.format)
        schema.pattern = t.pattern
        schema.min_length = t.min_length
        schema.max_length = t.max_length
        if t.enum:
            schema.enum = list(t.enum)
        return schema

    def _convert_number(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        schema = Schema(type="number", format=t.format)
        _apply_numeric_facets(t, schema)
        return schema

    def _convert_integer(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        schema = Schema(type="integer")

        if t.format:
            raml_format = t.format.lower()
            schema.format = INTEGER_FORMATS.get(raml_format, t.format)
            if raml_format in ("int8", "int16"):
                schema.extensions["x-raml-format"] = raml_format
        elif t.minimum is not None or t.maximum is not None:
            low = t.minimum if t.minimum is not None else float("-inf")
            high = t.maximum if t.maximum is not None else float("inf")
            schema.format = "int32" if INT32_MIN <= low and high <= INT32_MAX else "int64"
        else:
            schema.format = "int32"

        _apply_numeric_facets(t, schema)

        if t.default is not None:
            try:
                schema.default = int(t.default)
            except (TypeError, ValueError):
                logger.warning("Invalid default value for integer '%s': %r", t.name, t.default)
        return schema

    def _convert_boolean(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        return Schema(type="boolean")

    def _convert_array(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        items = self.convert(t.items, context) if t.items is not None else Schema()
        return Schema(
            type="array",
            items=items,
            min_items=t.min_items,
            max_items=t.max_items,
            unique_items=t.unique_items,
        )

    def _convert_object(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        schema = open_object()
        properties, required = self.convert_properties(t.properties, context)
        if properties:
            schema.properties = properties
        if required:
            schema.required = required
        return schema

    def _convert_union(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        members = [m for m in t.of if m.kind != "nil"]
        schema = Schema(one_of=[self.convert(m, context) for m in members])
        if len(members) != len(t.of):
            schema.nullable = True
        logger.debug("  Union of %d type(s)", len(members))
        return schema

    def _convert_datetime(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        schema = Schema(type="string", format="date-time")
        if t.format and t.format.lower() != "rfc3339":
            schema.extensions["x-raml-format"] = t.format
        return schema

    def _convert_date_only(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        return Schema(type="string", format="date")

    def _convert_time_only(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        return Schema(type="string", extensions={"x-raml-type": "time-only"})

    def _convert_datetime_only(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        return Schema(type="string", format="date-time", extensions={"x-raml-type": "datetime-only"})

    def _convert_file(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        schema = Schema(type="string", format="binary")
        if t.file_types:
            schema.extensions["x-raml-fileTypes"] = list(t.file_types)
        if t.min_length is not None:
            schema.min_length = int(t.min_length)
        if t.max_length is not None:
            schema.max_length = int(t.max_length)
        return schema

    def _convert_nil(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        return Schema(nullable=True)

    def _convert_any(self, t: TypeDeclaration, context: MapperContext) -> Schema:
        return Schema()


def _apply_numeric_facets(t: TypeDeclaration, schema: Schema) -> None:
    schema.minimum = t.minimum
    schema.maximum = t.maximum
    schema.multiple_of = t.multiple_of
    if t.enum:
        schema.enum = list(t.enum)


def add_annotation_extensions(t: TypeDeclaration, schema: Schema) -> None:
    for name, value in t.annotations.items():
        if value is not None:
            schema.extensions[f"x-raml-annotation-{name}"] = value
