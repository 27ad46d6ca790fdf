"""Detect and validate RAML input files."""

import logging
import re
from pathlib import Path

from raml_to_openapi.errors import FatalInputError

logger = logging.getLogger(__name__)

RAML_EXTENSION = ".raml"
SUPPORTED_VERSION = "1.0"
RAML_HEADER = re.compile(r"^#%RAML\s+(\d+\.\d+)\s*$")


def raml_version(file_path: Path) -> str | None:
    """Version from the ``#%RAML x.y`` header line, or None when there is none."""
    try:
        with open(file_path, encoding="utf-8") as f:
            first_line = f.readline().strip()
    except (OSError, UnicodeDecodeError):
        return None
    match = RAML_HEADER.match(first_line)
    return match.group(1) if match else None


def is_raml_file(file_path: Path) -> bool:
    file_path = Path(file_path)
    return (
        file_path.is_file()
        and file_path.suffix.lower() == RAML_EXTENSION
        and raml_version(file_path) == SUPPORTED_VERSION
    )


def validate_raml_file(file_path: Path) -> None:
    """Raise ``FatalInputError`` unless ``file_path`` is a readable RAML 1.0 file."""
    file_path = Path(file_path)
    if not file_path.exists():
        raise FatalInputError(f"File not found: {file_path}")
    if not file_path.is_file():
        raise FatalInputError(f"Not a file: {file_path}")
    if file_path.suffix.lower() != RAML_EXTENSION:
        raise FatalInputError(f"Not a RAML file (expected {RAML_EXTENSION} extension): {file_path}")

    version = raml_version(file_path)
    if version is None:
        raise FatalInputError(f"Missing '#%RAML {SUPPORTED_VERSION}' header: {file_path}")
    if version != SUPPORTED_VERSION:
        raise FatalInputError(f"Unsupported RAML version {version} (only {SUPPORTED_VERSION}): {file_path}")


def find_raml_files(directory: Path, recursive: bool = False) -> list[Path]:
    """RAML 1.0 files in ``directory``, sorted by path."""
    directory = Path(directory)
    if not directory.is_dir():
        raise FatalInputError(f"Not a directory: {directory}")

    pattern = f"**/*{RAML_EXTENSION}" if recursive else f"*{RAML_EXTENSION}"
    files = []
    for path in sorted(directory.glob(pattern)):
        if is_raml_file(path):
            files.append(path)
        else:
            logger.debug("Skipping %s: no RAML %s header", path, SUPPORTED_VERSION)
    return files
