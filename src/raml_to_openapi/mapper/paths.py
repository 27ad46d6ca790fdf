"""Walks the RAML resource tree and builds OpenAPI path items."""

import logging
import re

from raml_to_openapi.errors import FatalInputError
from raml_to_openapi.mapper.context import MapperContext
from raml_to_openapi.mapper.operations import OperationMapper
from raml_to_openapi.mapper.types import TypeConverter
from raml_to_openapi.openapi.model import PathItem
from raml_to_openapi.raml.model import RamlDocument, Resource, TypeDeclaration

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

URI_TEMPLATE_VARIABLE = re.compile(r"\{([^}]+)\}")


def join_path(parent: str, relative: str) -> str:
    if not relative.startswith("/"):
        relative = "/" + relative
    return parent.rstrip("/") + relative


def resource_uri_parameters(resource: Resource) -> list[TypeDeclaration]:
    """Declared URI parameters, plus string parameters for undeclared ``{name}`` segments."""
    params = list(resource.uri_parameters)
    declared = {p.name for p in params}
    for name in URI_TEMPLATE_VARIABLE.findall(resource.relative_uri):
        if name not in declared:
            params.append(TypeDeclaration(name=name, type="string", kind="string"))
            declared.add(name)
    return params


class PathMapper:
    def __init__(self, converter: TypeConverter | None = None):
        self.operations = OperationMapper(converter or TypeConverter())

    def walk(self, document: RamlDocument, context: MapperContext) -> dict[str, PathItem]:
        if document is None:
            raise FatalInputError("Cannot map null RAML document to paths")

        paths: dict[str, PathItem] = {}
        logger.debug("Found %d top-level resource(s)", len(document.resources))
        for resource in document.resources:
            self._map_resource(resource, "", [], paths, document, context)

        logger.debug("Path mapping completed: %d path(s)", len(paths))
        return paths

    def _map_resource(
        self,
        resource: Resource,
        parent_path: str,
        parent_params: list[TypeDeclaration],
        paths: dict[str, PathItem],
        document: RamlDocument,
        context: MapperContext,
    ) -> None:
        path = join_path(parent_path, resource.relative_uri)
        params = parent_params + resource_uri_parameters(resource)
        logger.debug("Mapping resource: %s", path)

        if resource.methods:
            item = paths.setdefault(path, PathItem())
            if resource.description:
                item.description = resource.description

            for method in resource.methods:
                name = method.method.lower()
                if name not in HTTP_METHODS:
                    logger.warning("Unsupported HTTP method '%s' on %s", method.method, path)
                    continue
                try:
                    operation = self.operations.map(method, params, path, resource, document, context)
                except Exception as e:
                    context.fail("operation", f"{name.upper()} {path}", e)
                    continue
                setattr(item, name, operation)

        for child in resource.resources:
            self._map_resource(child, path, params, paths, document, context)
