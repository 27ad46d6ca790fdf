"""Emulates RAML nominal inheritance with ``allOf`` composition."""

import logging

from raml_to_openapi.mapper.context import MapperContext, TypeRegistry
from raml_to_openapi.mapper.types import INTEGER_FORMATS, TypeConverter, open_object
from raml_to_openapi.openapi.model import Schema
from raml_to_openapi.raml.model import ARRAY_MARKER, BUILTIN_TYPES, TypeDeclaration

logger = logging.getLogger(__name__)

FACET_FIELDS = (
    "pattern",
    "min_length",
    "max_length",
    "enum",
    "minimum",
    "maximum",
    "multiple_of",
    "format",
    "min_items",
    "max_items",
    "unique_items",
)


def parent_type_name(type_decl: TypeDeclaration, registry: TypeRegistry) -> str | None:
    """Name of the registered named type ``type_decl`` extends, if any.

    Built-in bases, self references, array and union expressions and
    unregistered names are not inheritance.
    """
    base = type_decl.type
    if not base or base in BUILTIN_TYPES or base == type_decl.name:
        return None
    if base.endswith(ARRAY_MARKER) or "|" in base:
        return None
    if not registry.exists(base):
        logger.debug("Base type '%s' of '%s' is not a declared type", base, type_decl.name)
        return None
    return base


class InheritanceResolver:
    """Builds ``allOf: [parent reference, own properties and facets]`` for derived types."""

    def __init__(self, converter: TypeConverter):
        self.converter = converter

    def resolve(self, type_decl: TypeDeclaration, parent: str, context: MapperContext) -> Schema:
        logger.debug("  Creating inherited schema: %s extends %s", type_decl.name, parent)
        all_of = [Schema.reference(parent)]

        # Only the properties declared on the child itself; the parent
        # reference contributes the rest.
        properties, required = self.converter.convert_properties(type_decl.properties, context)
        facets = own_facets(type_decl)

        if properties or facets:
            own = open_object() if properties else Schema()
            if properties:
                own.properties = properties
                own.required = required or None
                logger.debug("    Added child properties: %s", list(properties))
            for field, value in facets.items():
                setattr(own, field, value)
            all_of.append(own)

        return Schema(all_of=all_of)


def own_facets(type_decl: TypeDeclaration) -> dict:
    """Restricting facets a derived type declares on top of its parent."""
    facets = {
        field: getattr(type_decl, field)
        for field in FACET_FIELDS
        if getattr(type_decl, field) is not None
    }
    if "format" in facets:
        facets["format"] = INTEGER_FORMATS.get(facets["format"].lower(), facets["format"])
    return facets
