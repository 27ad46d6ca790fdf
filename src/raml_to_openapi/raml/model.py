"""In-memory model of a parsed RAML 1.0 document.

The reader builds these models from RAML files; the mappers only ever
read them.
"""

from typing import Any

from pydantic import BaseModel

# Names that are RAML built-in types rather than user declarations.
BUILTIN_TYPES = {
    "any",
    "array",
    "boolean",
    "date-only",
    "datetime",
    "datetime-only",
    "file",
    "integer",
    "nil",
    "number",
    "object",
    "string",
    "time-only",
}

ARRAY_MARKER = "[]"


class TypeDeclaration(BaseModel):
    """A named or inline RAML type: a type declaration, property, parameter or body."""

    name: str | None = None  # property / parameter name, or media type for bodies
    type: str | None = None  # declared base type: "string", "Animal", "Animal[]", "A | B"
    kind: str = "string"  # string / number / integer / boolean / object / array / union /
    # datetime / date-only / time-only / datetime-only / file / nil / any
    display_name: str | None = None
    description: str | None = None
    required: bool = True
    default: Any = None
    example: Any = None
    examples: dict[str, Any] = {}
    annotations: dict[str, Any] = {}

    # string / file facets
    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    enum: list[Any] | None = None
    file_types: list[str] | None = None

    # number / integer / datetime facets
    minimum: float | int | None = None
    maximum: float | int | None = None
    multiple_of: float | int | None = None
    format: str | None = None

    # array facets
    items: "TypeDeclaration | None" = None
    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool | None = None

    # object facets
    properties: list["TypeDeclaration"] = []

    # union members
    of: list["TypeDeclaration"] = []

    def is_array_reference(self) -> bool:
        return bool(self.type) and self.type.endswith(ARRAY_MARKER)

    def array_base(self) -> str | None:
        """Base name of an inline array type (``Product`` for ``Product[]``)."""
        if not self.is_array_reference():
            return None
        return self.type[: -len(ARRAY_MARKER)]


class SecuritySchemeRef(BaseModel):
    """A reference from ``securedBy`` to a named security scheme."""

    name: str
    scopes: list[str] = []


class SecuredBy(BaseModel):
    """The ``securedBy`` declaration at one level (API, resource or method).

    ``state`` is "inherit" when nothing was declared, "none" when the level
    explicitly opts out of security (``securedBy: [null]``), and "schemes"
    when one or more schemes are listed.
    """

    state: str = "inherit"  # inherit / none / schemes
    schemes: list[SecuritySchemeRef] = []
    allow_anonymous: bool = False  # schemes listed together with null

    @classmethod
    def inherit(cls) -> "SecuredBy":
        return cls()

    @classmethod
    def no_security(cls) -> "SecuredBy":
        return cls(state="none")

    @classmethod
    def of(cls, *refs: SecuritySchemeRef, allow_anonymous: bool = False) -> "SecuredBy":
        return cls(state="schemes", schemes=list(refs), allow_anonymous=allow_anonymous)

    @property
    def is_inherit(self) -> bool:
        return self.state == "inherit"


class Response(BaseModel):
    """A status-coded response of a method."""

    code: str
    description: str | None = None
    headers: list[TypeDeclaration] = []
    body: list[TypeDeclaration] = []


class Method(BaseModel):
    """One HTTP method declared on a resource."""

    method: str  # get / post / put / delete / patch / head / options / trace
    display_name: str | None = None
    description: str | None = None
    query_parameters: list[TypeDeclaration] = []
    headers: list[TypeDeclaration] = []
    body: list[TypeDeclaration] = []
    responses: list[Response] = []
    secured_by: SecuredBy = SecuredBy()


class Resource(BaseModel):
    """A resource node; ``relative_uri`` is relative to its parent."""

    relative_uri: str  # /pets, /{id}
    display_name: str | None = None
    description: str | None = None
    uri_parameters: list[TypeDeclaration] = []
    methods: list[Method] = []
    resources: list["Resource"] = []
    secured_by: SecuredBy = SecuredBy()


class DescribedBy(BaseModel):
    """The ``describedBy`` block of a security scheme."""

    headers: list[TypeDeclaration] = []
    query_parameters: list[TypeDeclaration] = []
    responses: list[Response] = []


class SecuritySchemeSettings(BaseModel):
    """Typed ``settings`` of a security scheme (OAuth 1.0 and OAuth 2.0 keys)."""

    authorization_uri: str | None = None
    access_token_uri: str | None = None
    authorization_grants: list[str] = []
    scopes: list[str] = []
    request_token_uri: str | None = None
    token_credentials_uri: str | None = None
    signatures: list[str] = []


class SecurityScheme(BaseModel):
    """A named security scheme declaration."""

    name: str
    type: str  # "OAuth 2.0", "Basic Authentication", "Pass Through", "x-custom", ...
    description: str | None = None
    described_by: DescribedBy = DescribedBy()
    settings: SecuritySchemeSettings = SecuritySchemeSettings()


class DocumentationItem(BaseModel):
    title: str
    content: str = ""


class RamlDocument(BaseModel):
    """Root of a parsed RAML document."""

    title: str | None = None
    version: str | None = None
    description: str | None = None
    base_uri: str | None = None
    base_uri_parameters: list[TypeDeclaration] = []
    media_types: list[str] = []
    documentation: list[DocumentationItem] = []
    types: list[TypeDeclaration] = []
    security_schemes: list[SecurityScheme] = []
    resources: list[Resource] = []
    secured_by: SecuredBy = SecuredBy()
    file_name: str | None = None
