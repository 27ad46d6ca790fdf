"""Maps a RAML method on a resource to an OpenAPI operation."""

import logging
import re

from raml_to_openapi.mapper.context import MapperContext
from raml_to_openapi.mapper.parameters import ParameterMapper
from raml_to_openapi.mapper.responses import ResponseMapper
from raml_to_openapi.mapper.security import resolve_requirement
from raml_to_openapi.mapper.types import TypeConverter
from raml_to_openapi.openapi.model import Operation, RequestBody
from raml_to_openapi.raml import model as raml

logger = logging.getLogger(__name__)

# Words skipped when deriving an operation id from a description.
STOP_WORDS = {
    "a", "an", "the", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "should",
    "could", "may", "might", "must", "can", "of", "for", "to", "in", "on",
    "at", "by", "with", "from", "as", "into", "through", "during", "before",
    "after", "above", "below", "between", "under", "public", "private",
}


def generate_operation_id(method: str, path: str | None, description: str | None = None) -> str:
    """Operation id from ``method + "_" + sanitized path``, else the description, else the method.

    Ids are not made unique: two paths that sanitize to the same text
    produce the same id.
    """
    method = method.lower()

    if path and path != "/":
        part = path.lstrip("/").replace("/", "_").replace("{", "").replace("}", "")
        part = re.sub(r"[^a-zA-Z0-9_]", "_", part)
        part = re.sub(r"_+", "_", part).strip("_")
        if part:
            return f"{method}_{part}"

    if description:
        from_description = _operation_id_from_description(description)
        if from_description:
            return from_description

    return method


def _operation_id_from_description(description: str) -> str | None:
    """"Create product (admin only)" -> "createProduct"."""
    cleaned = re.sub(r"\([^)]*\)", "", description)
    words = []
    for word in cleaned.split():
        word = re.sub(r"[^a-z0-9]", "", word.lower())
        if word and word not in STOP_WORDS:
            words.append(word)

    if not words:
        return None
    result = words[0] + "".join(w[0].upper() + w[1:] for w in words[1:])
    # too short to be meaningful
    if len(result) < 3:
        return None
    return result


class OperationMapper:
    def __init__(self, converter: TypeConverter):
        self.converter = converter
        self.parameters = ParameterMapper(converter)
        self.responses = ResponseMapper(converter)

    def map(
        self,
        method: raml.Method,
        uri_parameters: list[raml.TypeDeclaration],
        path: str,
        resource: raml.Resource,
        document: raml.RamlDocument,
        context: MapperContext,
    ) -> Operation:
        logger.debug("  Mapping method: %s", method.method.upper())

        operation = Operation(operation_id=generate_operation_id(method.method, path, method.description))

        if method.description:
            operation.summary = method.description
            operation.description = method.description
        elif method.display_name:
            operation.summary = method.display_name

        parameters = []
        parameters.extend(self.parameters.map_uri_parameters(uri_parameters, context))
        parameters.extend(self.parameters.map_query_parameters(method.query_parameters, context))
        parameters.extend(self.parameters.map_headers(method.headers, context))
        if parameters:
            operation.parameters = parameters

        if method.body:
            operation.request_body = self._map_request_body(method.body, context)

        operation.responses = self.responses.map_responses(method.responses, context)

        security = resolve_requirement(method, resource, document)
        if security is not None:
            operation.security = security
            logger.debug("    Security: %d requirement(s)", len(security))

        return operation

    def _map_request_body(self, bodies: list[raml.TypeDeclaration], context: MapperContext) -> RequestBody:
        description = next((body.description for body in bodies if body.description), None)
        return RequestBody(
            description=description,
            content=self.responses.map_content(bodies, context),
            required=any(body.required for body in bodies),
        )
