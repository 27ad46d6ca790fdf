"""Serialize OpenAPI documents to YAML or JSON."""

import json
import logging
from pathlib import Path

import yaml

from raml_to_openapi.openapi.model import OpenApiDocument

logger = logging.getLogger(__name__)

FORMATS = ("yaml", "json")

EXTENSIONS = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
}


def dump_yaml(document: OpenApiDocument) -> str:
    return yaml.safe_dump(
        document.to_dict(),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def dump_json(document: OpenApiDocument) -> str:
    # dates loaded by PyYAML from examples are written as ISO strings
    return json.dumps(document.to_dict(), indent=2, ensure_ascii=False, default=str) + "\n"


def detect_output_format(path: Path, default: str = "yaml") -> str:
    """Output format from the file extension, ``default`` when it is not recognised."""
    return EXTENSIONS.get(Path(path).suffix.lower(), default)


def output_file_name(source: Path, fmt: str = "yaml") -> str:
    """``api.raml`` -> ``api.yaml`` (or ``api.json``)."""
    return Path(source).stem + "." + fmt


def write_document(document: OpenApiDocument, path: Path, fmt: str | None = None) -> Path:
    path = Path(path)
    fmt = fmt or detect_output_format(path)
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported output format: {fmt}")

    content = dump_json(document) if fmt == "json" else dump_yaml(document)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.info("Wrote %s (%s)", path, fmt)
    return path
