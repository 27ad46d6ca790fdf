"""RAML 1.0 to OpenAPI 3.0 conversion entry point."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from raml_to_openapi.errors import FatalInputError
from raml_to_openapi.mapper.context import MapperContext
from raml_to_openapi.mapper.info import map_info
from raml_to_openapi.mapper.paths import PathMapper
from raml_to_openapi.mapper.schemas import SchemaMapper
from raml_to_openapi.mapper.security import SecurityMapper
from raml_to_openapi.mapper.servers import map_servers
from raml_to_openapi.mapper.types import TypeConverter
from raml_to_openapi.openapi.model import Components, OpenApiDocument
from raml_to_openapi.raml.model import RamlDocument
from raml_to_openapi.raml.reader import read_raml

logger = logging.getLogger(__name__)


class RamlConverter:
    """Converts ``RamlDocument`` trees into ``OpenApiDocument`` models.

    In strict mode every mapping failure is collected and a
    ``StrictModeError`` is raised once the whole document has been walked.
    Otherwise failed entities are logged and left out of the output.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        converter = TypeConverter()
        self.schemas = SchemaMapper(converter)
        self.security = SecurityMapper()
        self.paths = PathMapper(converter)

    def convert(self, document: RamlDocument) -> OpenApiDocument:
        if document is None:
            raise FatalInputError("Cannot convert null RAML document")

        logger.info("Converting RAML to OpenAPI: %s", document.file_name or document.title or "<document>")
        context = MapperContext(strict=self.strict)

        info = map_info(document)
        servers = map_servers(document)
        schemas = self.schemas.map(document, context)
        security_schemes = self.security.map(document, context)
        paths = self.paths.walk(document, context)

        if self.strict:
            context.raise_failures()

        components = None
        if schemas or security_schemes:
            components = Components(
                schemas=schemas or None,
                security_schemes=security_schemes or None,
            )

        result = OpenApiDocument(info=info, servers=servers, paths=paths, components=components)
        logger.info("Conversion completed: %s", conversion_stats(result))
        return result

    def convert_file(self, path: Path) -> OpenApiDocument:
        return self.convert(read_raml(path))

    def convert_many(self, paths: list[Path], max_workers: int | None = None) -> list[OpenApiDocument]:
        """Convert independent files in parallel; results keep input order."""
        if not paths:
            return []
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(self.convert_file, paths))


def conversion_stats(document: OpenApiDocument) -> dict[str, int]:
    components = document.components
    return {
        "paths": len(document.paths),
        "operations": len(document.operations()),
        "schemas": len(components.schemas or {}) if components else 0,
        "security_schemes": len(components.security_schemes or {}) if components else 0,
    }
