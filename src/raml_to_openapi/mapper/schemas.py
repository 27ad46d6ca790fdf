"""Maps the document's named types to ``components.schemas``."""

import logging

from raml_to_openapi.errors import FatalInputError
from raml_to_openapi.mapper.arrays import ArrayTypeSynthesizer
from raml_to_openapi.mapper.context import MapperContext
from raml_to_openapi.mapper.inheritance import InheritanceResolver, parent_type_name
from raml_to_openapi.mapper.types import TypeConverter, add_annotation_extensions, parse_example_value
from raml_to_openapi.openapi.model import Schema
from raml_to_openapi.raml.model import RamlDocument, TypeDeclaration

logger = logging.getLogger(__name__)


class SchemaMapper:
    """Two-pass named-type conversion plus array schema synthesis.

    Pass 1 registers every declared name so forward references resolve.
    The resource tree is then scanned once for ``T[]`` bodies and the
    ``TArray`` names are registered. Pass 2 converts the declarations, and
    the synthesized array schemas are appended after them.
    """

    def __init__(self, converter: TypeConverter | None = None):
        self.converter = converter or TypeConverter()
        self.inheritance = InheritanceResolver(self.converter)
        self.arrays = ArrayTypeSynthesizer()

    def map(self, document: RamlDocument, context: MapperContext) -> dict[str, Schema]:
        if document is None:
            raise FatalInputError("Cannot map null RAML document to schemas")

        logger.debug("Found %d type definition(s)", len(document.types))
        for type_decl in document.types:
            context.registry.register(type_decl.name)

        bases = self.arrays.collect(document.resources)
        array_names = self.arrays.register(bases, context)

        schemas: dict[str, Schema] = {}
        for type_decl in document.types:
            try:
                schemas[type_decl.name] = self.map_type_definition(type_decl, context)
                logger.debug("Mapped type: %s", type_decl.name)
            except Exception as e:
                context.fail("type", type_decl.name, e)

        schemas.update(self.arrays.build(bases, array_names))
        logger.debug("Schema mapping completed: %d schema(s)", len(schemas))
        return schemas

    def map_type_definition(self, type_decl: TypeDeclaration, context: MapperContext) -> Schema:
        parent = parent_type_name(type_decl, context.registry)
        if parent is not None:
            schema = self.inheritance.resolve(type_decl, parent, context)
        elif type_decl.type == type_decl.name:
            schema = self.converter.convert_structure(type_decl, context)
        else:
            schema = self.converter.convert(type_decl, context)

        if schema.ref is not None:
            # an alias of another schema; wrap so title and description survive
            schema = Schema(all_of=[schema])

        schema.title = type_decl.display_name or type_decl.name
        if type_decl.description:
            schema.description = type_decl.description
        if type_decl.example is not None:
            schema.example = parse_example_value(type_decl.example)
        add_annotation_extensions(type_decl, schema)
        return schema
