"""Maps RAML responses and bodies to OpenAPI responses and media types."""

import logging

from raml_to_openapi.mapper.context import MapperContext
from raml_to_openapi.mapper.types import TypeConverter, parse_example_value
from raml_to_openapi.openapi.model import Example, Header, MediaType, Response
from raml_to_openapi.raml import model as raml

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "200"
DEFAULT_DESCRIPTION = "Successful response"

STATUS_DESCRIPTIONS = {
    "200": "Successful response",
    "201": "Created",
    "202": "Accepted",
    "204": "No content",
    "400": "Bad request",
    "401": "Unauthorized",
    "403": "Forbidden",
    "404": "Not found",
    "409": "Conflict",
    "422": "Unprocessable entity",
    "500": "Internal server error",
    "502": "Bad gateway",
    "503": "Service unavailable",
}


def status_description(code: str) -> str:
    return STATUS_DESCRIPTIONS.get(code, "Response")


class ResponseMapper:
    def __init__(self, converter: TypeConverter):
        self.converter = converter

    def map_responses(self, responses: list[raml.Response], context: MapperContext) -> dict[str, Response]:
        if not responses:
            return {DEFAULT_STATUS: Response(description=DEFAULT_DESCRIPTION)}

        result = {}
        for raml_response in responses:
            result[raml_response.code] = self.map_response(raml_response, context)
            logger.debug("    Response: %s", raml_response.code)
        return result

    def map_response(self, raml_response: raml.Response, context: MapperContext) -> Response:
        response = Response(description=raml_response.description or status_description(raml_response.code))
        if raml_response.body:
            response.content = self.map_content(raml_response.body, context)
        if raml_response.headers:
            response.headers = self.map_headers(raml_response.headers, context)
        return response

    def map_content(self, bodies: list[raml.TypeDeclaration], context: MapperContext) -> dict[str, MediaType]:
        """One media type entry per body, keyed by the body's media type name."""
        return {body.name: self.map_media_type(body, context) for body in bodies}

    def map_media_type(self, body: raml.TypeDeclaration, context: MapperContext) -> MediaType:
        media_type = MediaType(schema_=self.converter.convert(body, context))
        if body.examples:
            media_type.examples = {
                name: Example(summary=name, value=parse_example_value(value))
                for name, value in body.examples.items()
            }
        elif body.example is not None:
            media_type.example = parse_example_value(body.example)
        return media_type

    def map_headers(self, headers: list[raml.TypeDeclaration], context: MapperContext) -> dict[str, Header]:
        return {
            header.name: Header(
                description=header.description,
                required=header.required,
                schema_=self.converter.convert(header, context),
                example=header.example,
            )
            for header in headers
        }
