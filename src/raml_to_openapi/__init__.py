"""Convert RAML 1.0 API definitions to OpenAPI 3.0."""

from raml_to_openapi.converter import RamlConverter
from raml_to_openapi.raml.reader import parse_raml, read_raml

__version__ = "0.1.0"

__all__ = ["RamlConverter", "parse_raml", "read_raml"]
