"""OpenAPI 3.0 document models produced by the converter.

Field aliases carry the OpenAPI spelling; ``extensions`` holds ``x-`` vendor
keys which are merged into the serialized output.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer

OPENAPI_VERSION = "3.0.0"
SCHEMA_REF_PREFIX = "#/components/schemas/"


class OpenApiModel(BaseModel):
    """Base for all output models."""

    model_config = ConfigDict(populate_by_name=True)

    extensions: dict[str, Any] = {}

    @model_serializer(mode="wrap")
    def _merge_extensions(self, handler):
        data = handler(self)
        extensions = data.pop("extensions", None) or {}
        data.update(extensions)
        return data

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Schema(OpenApiModel):
    """A schema object: primitive, object, array, composition or reference."""

    ref: str | None = Field(None, alias="$ref")
    title: str | None = None
    description: str | None = None
    type: str | None = None
    format: str | None = None
    nullable: bool | None = None

    pattern: str | None = None
    min_length: int | None = Field(None, alias="minLength")
    max_length: int | None = Field(None, alias="maxLength")
    enum: list[Any] | None = None

    minimum: float | int | None = None
    maximum: float | int | None = None
    multiple_of: float | int | None = Field(None, alias="multipleOf")

    items: "Schema | None" = None
    min_items: int | None = Field(None, alias="minItems")
    max_items: int | None = Field(None, alias="maxItems")
    unique_items: bool | None = Field(None, alias="uniqueItems")

    properties: dict[str, "Schema"] | None = None
    required: list[str] | None = None
    additional_properties: bool | None = Field(None, alias="additionalProperties")

    all_of: list["Schema"] | None = Field(None, alias="allOf")
    one_of: list["Schema"] | None = Field(None, alias="oneOf")

    default: Any = None
    example: Any = None

    @classmethod
    def reference(cls, name: str) -> "Schema":
        return cls(ref=SCHEMA_REF_PREFIX + name)

    @property
    def ref_name(self) -> str | None:
        if self.ref and self.ref.startswith(SCHEMA_REF_PREFIX):
            return self.ref[len(SCHEMA_REF_PREFIX):]
        return None


class Example(OpenApiModel):
    summary: str | None = None
    value: Any = None


class MediaType(OpenApiModel):
    schema_: Schema | None = Field(None, alias="schema")
    example: Any = None
    examples: dict[str, Example] | None = None


class Parameter(OpenApiModel):
    name: str
    in_: str = Field(..., alias="in")  # path / query / header
    required: bool = False
    description: str | None = None
    schema_: Schema | None = Field(None, alias="schema")
    example: Any = None


class Header(OpenApiModel):
    description: str | None = None
    required: bool = False
    schema_: Schema | None = Field(None, alias="schema")
    example: Any = None


class RequestBody(OpenApiModel):
    description: str | None = None
    content: dict[str, MediaType] = {}
    required: bool = False


class Response(OpenApiModel):
    description: str
    headers: dict[str, Header] | None = None
    content: dict[str, MediaType] | None = None


class Operation(OpenApiModel):
    operation_id: str | None = Field(None, alias="operationId")
    summary: str | None = None
    description: str | None = None
    parameters: list[Parameter] | None = None
    request_body: RequestBody | None = Field(None, alias="requestBody")
    responses: dict[str, Response] = {}
    security: list[dict[str, list[str]]] | None = None


class PathItem(OpenApiModel):
    description: str | None = None
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None


class OAuthFlow(OpenApiModel):
    authorization_url: str | None = Field(None, alias="authorizationUrl")
    token_url: str | None = Field(None, alias="tokenUrl")
    scopes: dict[str, str] = {}


class OAuthFlows(OpenApiModel):
    implicit: OAuthFlow | None = None
    password: OAuthFlow | None = None
    client_credentials: OAuthFlow | None = Field(None, alias="clientCredentials")
    authorization_code: OAuthFlow | None = Field(None, alias="authorizationCode")


class SecurityScheme(OpenApiModel):
    type: str  # oauth2 / http / apiKey
    description: str | None = None
    name: str | None = None
    in_: str | None = Field(None, alias="in")
    scheme: str | None = None
    flows: OAuthFlows | None = None


class ServerVariable(OpenApiModel):
    default: str
    enum: list[str] | None = None
    description: str | None = None


class Server(OpenApiModel):
    url: str
    description: str | None = None
    variables: dict[str, ServerVariable] | None = None


class Info(OpenApiModel):
    title: str
    version: str
    description: str | None = None


class Components(OpenApiModel):
    schemas: dict[str, Schema] | None = None
    security_schemes: dict[str, SecurityScheme] | None = Field(None, alias="securitySchemes")


class OpenApiDocument(OpenApiModel):
    """The root OpenAPI document."""

    openapi: str = OPENAPI_VERSION
    info: Info
    servers: list[Server] = []
    paths: dict[str, PathItem] = {}
    components: Components | None = None

    def schema_names(self) -> list[str]:
        if self.components is None:
            return []
        return list(self.components.schemas or {})

    def operations(self) -> list[tuple[str, str, Operation]]:
        """All ``(path, method, operation)`` triples in document order."""
        result = []
        for path, item in self.paths.items():
            for method in ("get", "put", "post", "delete", "options", "head", "patch", "trace"):
                operation = getattr(item, method)
                if operation is not None:
                    result.append((path, method, operation))
        return result
