"""Materializes ``TArray`` schemas for ``T[]`` request and response bodies."""

import logging

from raml_to_openapi.mapper.context import MapperContext
from raml_to_openapi.mapper.types import array_schema_name
from raml_to_openapi.openapi.model import Schema
from raml_to_openapi.raml.model import Resource

logger = logging.getLogger(__name__)


class ArrayTypeSynthesizer:
    """Finds inline array bodies over named types and builds companion array schemas."""

    def collect(self, resources: list[Resource]) -> list[str]:
        """Distinct base names of ``T[]`` bodies, in first-seen order, over the whole tree."""
        bases: dict[str, None] = {}
        self._scan(resources, bases)
        return list(bases)

    def _scan(self, resources: list[Resource], bases: dict[str, None]) -> None:
        for resource in resources:
            for method in resource.methods:
                bodies = list(method.body)
                for response in method.responses:
                    bodies.extend(response.body)
                for body in bodies:
                    base = body.array_base()
                    if base:
                        bases.setdefault(base, None)
            self._scan(resource.resources, bases)

    def register(self, bases: list[str], context: MapperContext) -> list[str]:
        """Register ``TArray`` for every registered base; returns the new names."""
        registry = context.registry
        names = []
        for base in bases:
            if not registry.exists(base):
                logger.debug("Array body over undeclared type '%s', not synthesizing", base)
                continue
            name = array_schema_name(base)
            if registry.exists(name):
                logger.warning("Type '%s' is already declared; not synthesizing an array schema for '%s[]'", name, base)
                continue
            registry.register(name)
            names.append(name)
        return names

    def build(self, bases: list[str], names: list[str]) -> dict[str, Schema]:
        schemas = {}
        for base in bases:
            name = array_schema_name(base)
            if name in names:
                schemas[name] = Schema(type="array", items=Schema.reference(base))
                logger.debug("Generated array schema: %s", name)
        return schemas
