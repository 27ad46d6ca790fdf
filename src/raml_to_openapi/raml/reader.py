"""RAML 1.0 document reader.

Loads a RAML file with PyYAML and builds the ``RamlDocument`` model:
types (including ``T[]``, ``A | B`` and ``name?`` shorthands), resources,
methods, bodies, responses, security schemes and ``securedBy``.
``!include`` is resolved relative to the including file. Libraries
(``uses``) are loaded under their namespace, and traits and resource types
are expanded into the resources and methods that apply them.
"""

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from raml_to_openapi.errors import FatalInputError
from raml_to_openapi.raml.model import (
    ARRAY_MARKER,
    BUILTIN_TYPES,
    DescribedBy,
    DocumentationItem,
    Method,
    RamlDocument,
    Resource,
    Response,
    SecuredBy,
    SecurityScheme,
    SecuritySchemeRef,
    SecuritySchemeSettings,
    TypeDeclaration,
)
from raml_to_openapi.raml.templates import expand, merge, references, resource_path_name

logger = logging.getLogger(__name__)

RAML_HEADER = re.compile(r"^#%RAML\s+(\d+\.\d+)")

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

DEFAULT_MEDIA_TYPE = "application/json"

LIBRARY_SECTIONS = ("types", "traits", "resourceTypes", "securitySchemes")

EXAMPLE_FACETS = {"value", "displayName", "description", "strict"}

ANNOTATION_KEY = re.compile(r"^\((.+)\)$")


def read_raml(file_path: Path) -> RamlDocument:
    """Read a RAML file into a ``RamlDocument``."""
    file_path = Path(file_path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise FatalInputError(f"Cannot read RAML file '{file_path}': {e}") from e
    return parse_raml(text, file_name=file_path.name, base_dir=file_path.parent)


def parse_raml(text: str, file_name: str | None = None, base_dir: Path | None = None) -> RamlDocument:
    """Parse RAML text; ``base_dir`` anchors relative ``!include`` paths."""
    first_line = text.lstrip().split("\n", 1)[0].strip()
    match = RAML_HEADER.match(first_line)
    if match is None:
        logger.warning("Missing '#%%RAML 1.0' header in %s", file_name or "document")
    elif match.group(1) != "1.0":
        logger.warning("RAML %s document %s is read as RAML 1.0", match.group(1), file_name or "")

    data = _load_yaml(text, base_dir or Path.cwd())
    if not isinstance(data, dict):
        raise FatalInputError(f"RAML document is not a mapping: {file_name or '<string>'}")

    document = _DocumentReader(data, base_dir or Path.cwd()).read()
    document.file_name = file_name
    return document


def _load_yaml(text: str, base_dir: Path) -> Any:
    class Loader(yaml.SafeLoader):
        pass

    def include(loader, node):
        target = base_dir / loader.construct_scalar(node)
        try:
            content = target.read_text(encoding="utf-8")
        except OSError as e:
            raise FatalInputError(f"Cannot resolve !include '{target}': {e}") from e
        if target.suffix.lower() in (".raml", ".yaml", ".yml", ".json"):
            return _load_yaml(content, target.parent)
        return content

    Loader.add_constructor("!include", include)
    try:
        return yaml.load(text, Loader=Loader)
    except yaml.YAMLError as e:
        raise FatalInputError(f"Invalid RAML/YAML: {e}") from e


def _as_mapping(value: Any) -> dict:
    """RAML allows both ``{a: x, b: y}`` and ``[{a: x}, {b: y}]``."""
    if isinstance(value, dict):
        return value
    if isinstance(value, list):
        merged = {}
        for entry in value:
            if isinstance(entry, dict):
                merged.update(entry)
        return merged
    return {}


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, dict) and "value" in value:
        value = value["value"]
    return str(value)


def _split_union(expression: str) -> list[str]:
    """Split ``A | (B | C)[]`` on top-level bars only."""
    parts, depth, current = [], 0, []
    for char in expression:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "|" and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return [p for p in parts if p]


def _strip_parens(expression: str) -> str:
    """``((A | B))`` -> ``A | B``; ``(A) | (B)`` is left alone."""
    while expression.startswith("(") and expression.endswith(")"):
        depth = 0
        for index, char in enumerate(expression):
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
            if depth == 0 and index < len(expression) - 1:
                return expression
        expression = expression[1:-1].strip()
    return expression


def _unwrap_example(value: Any) -> Any:
    if isinstance(value, dict) and "value" in value:
        keys = {k for k in value if not ANNOTATION_KEY.match(str(k))}
        if keys <= EXAMPLE_FACETS:
            return value["value"]
    return value


class _DocumentReader:
    def __init__(self, data: dict, base_dir: Path):
        self.data = data
        self.media_types = [str(m) for m in _as_list(data.get("mediaType"))]
        self.declarations = {
            "types": dict(_as_mapping(data.get("types")) or _as_mapping(data.get("schemas"))),
            "traits": dict(_as_mapping(data.get("traits"))),
            "resourceTypes": dict(_as_mapping(data.get("resourceTypes"))),
            "securitySchemes": dict(_as_mapping(data.get("securitySchemes"))),
        }
        self.load_libraries(data.get("uses"), base_dir)
        self.raw_types = self.declarations["types"]
        self.traits = self.declarations["traits"]
        self.resource_types = self.declarations["resourceTypes"]

    def load_libraries(self, uses: Any, base_dir: Path, prefix: str = "") -> None:
        """Add library declarations as ``namespace.Name``."""
        for namespace, location in _as_mapping(uses).items():
            path = base_dir / str(location)
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as e:
                raise FatalInputError(f"Cannot read library '{namespace}' at '{path}': {e}") from e
            library = _load_yaml(text, path.parent)
            if not isinstance(library, dict):
                raise FatalInputError(f"Library '{namespace}' is not a mapping: {path}")

            qualifier = f"{prefix}{namespace}."
            for section in LIBRARY_SECTIONS:
                for name, value in _as_mapping(library.get(section)).items():
                    self.declarations[section][qualifier + str(name)] = value
            logger.debug("Loaded library '%s' from %s", namespace, path)
            self.load_libraries(library.get("uses"), path.parent, qualifier)

    def read(self) -> RamlDocument:
        data = self.data
        return RamlDocument(
            title=_text(data.get("title")),
            version=_text(data.get("version")),
            description=_text(data.get("description")),
            base_uri=_text(data.get("baseUri")),
            base_uri_parameters=self.read_parameters(data.get("baseUriParameters")),
            media_types=self.media_types,
            documentation=[
                DocumentationItem(title=str(item.get("title", "")), content=str(item.get("content", "")))
                for item in _as_list(data.get("documentation"))
                if isinstance(item, dict)
            ],
            types=[self.read_type(str(name), value) for name, value in self.raw_types.items()],
            security_schemes=[
                self.read_security_scheme(str(name), value)
                for name, value in self.declarations["securitySchemes"].items()
            ],
            resources=self.read_resources(data),
            secured_by=read_secured_by(data.get("securedBy")),
        )

    # -- types ----------------------------------------------------------------

    def declared_expression(self, value: Any, default: str) -> str:
        """The type expression a declaration extends."""
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip() or default
        if isinstance(value, list):
            return self.declared_expression(value[0], default) if value else default
        if isinstance(value, dict):
            expression = value.get("type", value.get("schema"))
            if expression is None:
                if "properties" in value:
                    return "object"
                if "items" in value:
                    return "array"
                if "fileTypes" in value:
                    return "file"
                return default
            if isinstance(expression, list):
                if len(expression) > 1:
                    logger.warning("Multiple inheritance %s is not supported, using '%s'", expression, expression[0])
                return self.declared_expression(expression[0], default)
            return self.declared_expression(expression, default)
        return default

    def kind_of(self, expression: str, seen: frozenset = frozenset()) -> str:
        """Structural kind of a type expression, following named types."""
        expression = _strip_parens(expression.strip())
        if len(_split_union(expression)) > 1:
            return "union"
        if expression.endswith(ARRAY_MARKER):
            return "array"
        if expression in BUILTIN_TYPES:
            return expression
        if expression.startswith("{"):
            # inline JSON schema
            return "any"
        if expression in self.raw_types:
            if expression in seen:
                return "object"
            raw = self.raw_types[expression]
            default = "object" if isinstance(raw, dict) and "properties" in raw else "string"
            return self.kind_of(self.declared_expression(raw, default), seen | {expression})
        return expression

    def from_expression(self, name: str | None, expression: str) -> TypeDeclaration:
        expression = expression.strip()
        inner = _strip_parens(expression)
        members = _split_union(inner)
        if len(members) > 1:
            return TypeDeclaration(
                name=name,
                type=expression,
                kind="union",
                of=[self.from_expression(None, m) for m in members],
            )
        if inner.endswith(ARRAY_MARKER):
            return TypeDeclaration(
                name=name,
                type=inner,
                kind="array",
                items=self.from_expression(None, inner[: -len(ARRAY_MARKER)]),
            )
        return TypeDeclaration(name=name, type=inner, kind=self.kind_of(inner))

    def read_type(self, name: str | None, value: Any, default: str = "string") -> TypeDeclaration:
        if isinstance(value, dict) and "properties" in value and "type" not in value and "schema" not in value:
            default = "object"
        decl = self.from_expression(name, self.declared_expression(value, default))
        if not isinstance(value, dict):
            return decl

        decl.display_name = _text(value.get("displayName"))
        decl.description = _text(value.get("description"))
        if "required" in value:
            decl.required = bool(value["required"])
        decl.default = value.get("default")
        if "example" in value:
            decl.example = _unwrap_example(value["example"])
        if isinstance(value.get("examples"), dict):
            decl.examples = {str(k): _unwrap_example(v) for k, v in value["examples"].items()}

        decl.pattern = value.get("pattern")
        decl.min_length = value.get("minLength")
        decl.max_length = value.get("maxLength")
        decl.enum = value.get("enum")
        decl.file_types = value.get("fileTypes")
        decl.minimum = value.get("minimum")
        decl.maximum = value.get("maximum")
        decl.multiple_of = value.get("multipleOf")
        decl.format = value.get("format")
        decl.min_items = value.get("minItems")
        decl.max_items = value.get("maxItems")
        decl.unique_items = value.get("uniqueItems")

        if "items" in value:
            decl.items = self.read_type(None, value["items"])
        if "properties" in value:
            decl.properties = self.read_properties(value["properties"])

        decl.annotations = {
            match.group(1): annotation
            for key, annotation in value.items()
            if (match := ANNOTATION_KEY.match(str(key)))
        }
        return decl

    def read_properties(self, value: Any) -> list[TypeDeclaration]:
        properties = []
        for raw_name, raw in _as_mapping(value).items():
            name = str(raw_name)
            optional = name.endswith("?") and not (isinstance(raw, dict) and "required" in raw)
            prop = self.read_type(name.rstrip("?") if optional else name, raw)
            if optional:
                prop.required = False
            properties.append(prop)
        return properties

    def read_parameters(self, value: Any) -> list[TypeDeclaration]:
        return self.read_properties(value)

    def read_bodies(self, value: Any) -> list[TypeDeclaration]:
        if value is None:
            return []
        if isinstance(value, dict) and value and all("/" in str(key) for key in value):
            return [self.read_type(str(media_type), raw, default="any") for media_type, raw in value.items()]
        # body declared without media types uses the document's defaults
        return [self.read_type(media_type, value, default="any") for media_type in self.media_types or [DEFAULT_MEDIA_TYPE]]

    # -- resources ------------------------------------------------------------

    def read_resources(self, node: dict, parent_path: str = "") -> list[Resource]:
        return [
            self.read_resource(str(key), value or {}, parent_path)
            for key, value in node.items()
            if str(key).startswith("/")
        ]

    def read_resource(self, relative_uri: str, node: dict, parent_path: str = "") -> Resource:
        resource_path = parent_path + relative_uri
        params = {
            "resourcePath": resource_path,
            "resourcePathName": resource_path_name(resource_path),
        }
        node = self.apply_resource_type(node, params)
        return Resource(
            relative_uri=relative_uri,
            display_name=_text(node.get("displayName")),
            description=_text(node.get("description")),
            uri_parameters=self.read_parameters(node.get("uriParameters")),
            methods=[
                self.read_method(str(key), value or {}, node.get("is"), params)
                for key, value in node.items()
                if str(key).lower() in HTTP_METHODS
            ],
            resources=self.read_resources(node, resource_path),
            secured_by=read_secured_by(node.get("securedBy")),
        )

    def apply_resource_type(self, node: dict, params: dict, seen: frozenset = frozenset()) -> dict:
        """Merge the resource type named by ``node['type']`` under ``node``.

        Optional methods (``get?``) of the type apply only when the resource
        declares that method itself.
        """
        refs = references(node.get("type"))
        own = {key: value for key, value in node.items() if key != "type"}
        if not refs:
            return own

        name, args = refs[0]
        if name in seen:
            logger.warning("Resource type '%s' extends itself; ignoring", name)
            return own
        if name not in self.resource_types:
            logger.warning("Unknown resource type '%s' on %s", name, params["resourcePath"])
            return own

        template = expand(self.resource_types[name], {**args, **params})
        template = self.apply_resource_type(template, params, seen | {name})

        base = {}
        for key, value in template.items():
            key_text = str(key)
            if key_text.endswith("?"):
                if key_text[:-1] in node:
                    base[key_text[:-1]] = value
            else:
                base[key] = value
        logger.debug("Applied resource type '%s' to %s", name, params["resourcePath"])
        return merge(base, own)

    def apply_traits(self, node: dict, trait_refs: list[tuple[str, dict]], params: dict) -> dict:
        """Merge traits in order under the method node; the method's own values win."""
        base: dict = {}
        for name, args in trait_refs:
            if name not in self.traits:
                logger.warning("Unknown trait '%s' on %s %s", name, params["methodName"].upper(), params["resourcePath"])
                continue
            base = merge(base, expand(self.traits[name], {**args, **params}))
        return merge(base, node)

    def read_method(
        self,
        name: str,
        node: dict,
        resource_traits: Any = None,
        params: dict | None = None,
    ) -> Method:
        trait_refs = references(resource_traits) + references(node.get("is"))
        if trait_refs:
            method_params = {"resourcePath": "", "resourcePathName": "", **(params or {}), "methodName": name.lower()}
            node = self.apply_traits(node, trait_refs, method_params)
        return Method(
            method=name.lower(),
            display_name=_text(node.get("displayName")),
            description=_text(node.get("description")),
            query_parameters=self.read_parameters(node.get("queryParameters")),
            headers=self.read_parameters(node.get("headers")),
            body=self.read_bodies(node.get("body")),
            responses=self.read_responses(node.get("responses")),
            secured_by=read_secured_by(node.get("securedBy")),
        )

    def read_responses(self, value: Any) -> list[Response]:
        responses = []
        for code, node in _as_mapping(value).items():
            node = node or {}
            responses.append(
                Response(
                    code=str(code),
                    description=_text(node.get("description")),
                    headers=self.read_parameters(node.get("headers")),
                    body=self.read_bodies(node.get("body")),
                )
            )
        return responses

    # -- security -------------------------------------------------------------

    def read_security_scheme(self, name: str, node: Any) -> SecurityScheme:
        node = node or {}
        described_by = node.get("describedBy") or {}
        settings = node.get("settings") or {}
        return SecurityScheme(
            name=name,
            type=str(node.get("type", "")),
            description=_text(node.get("description")),
            described_by=DescribedBy(
                headers=self.read_parameters(described_by.get("headers")),
                query_parameters=self.read_parameters(described_by.get("queryParameters")),
                responses=self.read_responses(described_by.get("responses")),
            ),
            settings=SecuritySchemeSettings(
                authorization_uri=_text(settings.get("authorizationUri")),
                access_token_uri=_text(settings.get("accessTokenUri")),
                authorization_grants=[str(g) for g in _as_list(settings.get("authorizationGrants"))],
                scopes=[str(s) for s in _as_list(settings.get("scopes"))],
                request_token_uri=_text(settings.get("requestTokenUri")),
                token_credentials_uri=_text(settings.get("tokenCredentialsUri")),
                signatures=[str(s) for s in _as_list(settings.get("signatures"))],
            ),
        )


def read_secured_by(value: Any) -> SecuredBy:
    """Interpret a ``securedBy`` value.

    Absent or empty inherits; ``[null]`` opts out of security; scheme names
    (optionally with ``{scopes: [...]}`` parameters) list requirements.
    """
    entries = _as_list(value)
    if not entries:
        return SecuredBy.inherit()

    refs = []
    has_null = False
    for entry in entries:
        if entry is None or entry == "null":
            has_null = True
        elif isinstance(entry, str):
            refs.append(SecuritySchemeRef(name=entry))
        elif isinstance(entry, dict):
            for name, params in entry.items():
                scopes = params.get("scopes") if isinstance(params, dict) else None
                refs.append(SecuritySchemeRef(name=str(name), scopes=[str(s) for s in _as_list(scopes)]))

    if not refs:
        return SecuredBy.no_security()
    return SecuredBy.of(*refs, allow_anonymous=has_null)
