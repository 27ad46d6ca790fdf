"""Maps the RAML document header to the OpenAPI ``info`` object."""

import logging
import re

from raml_to_openapi.openapi.model import Info
from raml_to_openapi.raml.model import RamlDocument

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled API"
DEFAULT_VERSION = "1.0.0"


def map_info(document: RamlDocument) -> Info:
    info = Info(
        title=document.title or DEFAULT_TITLE,
        version=str(document.version) if document.version else DEFAULT_VERSION,
        description=document.description,
    )
    if document.media_types:
        info.extensions["x-raml-mediaType"] = document.media_types[0]
    for item in document.documentation:
        logger.debug("  Documentation: %s", item.title)
        slug = _extension_slug(item.title)
        if slug:
            info.extensions[f"x-raml-documentation-{slug}"] = item.content
    return info


def _extension_slug(name: str) -> str:
    slug = re.sub(r"[^a-z0-9-]", "-", name.lower())
    return re.sub(r"-+", "-", slug).strip("-")
