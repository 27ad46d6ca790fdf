"""Maps the RAML ``baseUri`` to OpenAPI servers."""

import logging
import re

from raml_to_openapi.openapi.model import Server, ServerVariable
from raml_to_openapi.raml.model import RamlDocument, TypeDeclaration

logger = logging.getLogger(__name__)

URI_VARIABLE = re.compile(r"\{([^}]+)\}")


def map_servers(document: RamlDocument) -> list[Server]:
    base_uri = (document.base_uri or "").strip()
    if not base_uri:
        logger.warning("No baseUri specified in RAML, using default server")
        return [Server(url="/", description="Default server")]

    server = Server(url=base_uri)
    declared = {p.name: p for p in document.base_uri_parameters}
    variables = {}
    for name in URI_VARIABLE.findall(base_uri):
        if name not in variables:
            variables[name] = _server_variable(name, declared.get(name), document)
    if variables:
        server.variables = variables

    if document.description:
        server.description = f"Base server for {document.title or 'API'}"
    return [server]


def _server_variable(name: str, param: TypeDeclaration | None, document: RamlDocument) -> ServerVariable:
    default = None
    if param is not None:
        if param.default is not None:
            default = param.default
        elif param.example is not None:
            default = param.example
        elif param.enum:
            default = param.enum[0]
    if default is None:
        default = _default_for(name, document)

    variable = ServerVariable(default=str(default))
    if param is not None:
        variable.description = param.description
        if param.enum:
            variable.enum = [str(value) for value in param.enum]
    logger.debug("    Server variable '%s' default: %s", name, variable.default)
    return variable


def _default_for(name: str, document: RamlDocument) -> str:
    lower = name.lower()
    if lower == "version" and document.version:
        return str(document.version)
    if "version" in lower:
        return "v1"
    if "environment" in lower or "env" in lower:
        return "production"
    if "region" in lower:
        return "us-east-1"
    if "host" in lower:
        return "api.example.com"
    return "default"
