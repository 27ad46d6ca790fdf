"""Per-document conversion state: the schema-name registry and strict-mode bookkeeping."""

import logging

from raml_to_openapi.errors import MappingError, StrictModeError

logger = logging.getLogger(__name__)


class TypeRegistry:
    """Names of the schemas that will exist under ``components.schemas``.

    A ``$ref`` may only be emitted for a registered name, so every named
    type is registered before any of them is converted.
    """

    def __init__(self, names=None):
        self._names: set[str] = set(names or ())

    def register(self, name: str) -> None:
        self._names.add(name)

    def exists(self, name: str | None) -> bool:
        return name is not None and name in self._names

    def all_names(self) -> set[str]:
        return set(self._names)

    def __contains__(self, name: str) -> bool:
        return self.exists(name)

    def __len__(self) -> int:
        return len(self._names)


class MapperContext:
    """State shared by all mappers while one document is converted.

    Create one per document; never share it across conversions.
    """

    def __init__(self, strict: bool = False, registry: TypeRegistry | None = None):
        self.strict = strict
        self.registry = registry if registry is not None else TypeRegistry()
        self.failures: list[MappingError] = []

    def fail(self, kind: str, name: str, error: Exception) -> None:
        """Record a failed entity: kept for the final strict error, or logged and skipped."""
        failure = error if isinstance(error, MappingError) else MappingError(kind, name, str(error))
        if self.strict:
            self.failures.append(failure)
        else:
            logger.warning("%s; skipping", failure)

    def raise_failures(self) -> None:
        if self.failures:
            raise StrictModeError(self.failures)
