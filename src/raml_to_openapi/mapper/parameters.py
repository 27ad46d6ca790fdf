"""Maps RAML URI parameters, query parameters and headers to OpenAPI parameters."""

import logging

from raml_to_openapi.mapper.context import MapperContext
from raml_to_openapi.mapper.types import TypeConverter
from raml_to_openapi.openapi.model import Parameter
from raml_to_openapi.raml.model import TypeDeclaration

logger = logging.getLogger(__name__)


class ParameterMapper:
    def __init__(self, converter: TypeConverter):
        self.converter = converter

    def map_uri_parameters(self, params: list[TypeDeclaration], context: MapperContext) -> list[Parameter]:
        # path parameters are always required
        return [self._map(p, "path", True, context) for p in params]

    def map_query_parameters(self, params: list[TypeDeclaration], context: MapperContext) -> list[Parameter]:
        return [self._map(p, "query", p.required, context) for p in params]

    def map_headers(self, params: list[TypeDeclaration], context: MapperContext) -> list[Parameter]:
        return [self._map(p, "header", p.required, context) for p in params]

    def _map(self, param: TypeDeclaration, location: str, required: bool, context: MapperContext) -> Parameter:
        logger.debug("    %s parameter: %s (required: %s)", location, param.name, required)
        schema = self.converter.convert(param, context)
        if schema.ref is None and schema.default is None and param.default is not None:
            schema.default = param.default
        return Parameter(
            name=param.name,
            in_=location,
            required=required,
            description=param.description,
            schema_=schema,
            example=param.example,
        )
