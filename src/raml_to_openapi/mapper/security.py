"""Security scheme mapping and per-operation security requirement resolution."""

import logging

from raml_to_openapi.errors import FatalInputError
from raml_to_openapi.mapper.context import MapperContext
from raml_to_openapi.openapi.model import OAuthFlow, OAuthFlows, SecurityScheme
from raml_to_openapi.raml import model as raml

logger = logging.getLogger(__name__)

DEFAULT_API_KEY_HEADER = "Authorization"


class SecurityMapper:
    """Maps RAML security scheme declarations to OpenAPI security schemes."""

    def __init__(self):
        self._by_kind = {
            "oauth 2.0": self._map_oauth2,
            "oauth 1.0": self._map_oauth1,
            "basic authentication": self._map_basic,
            "digest authentication": self._map_digest,
            "pass through": self._map_pass_through,
        }

    def map(self, document: raml.RamlDocument, context: MapperContext) -> dict[str, SecurityScheme]:
        if document is None:
            raise FatalInputError("Cannot map null RAML document to security schemes")

        schemes: dict[str, SecurityScheme] = {}
        for raml_scheme in document.security_schemes:
            try:
                schemes[raml_scheme.name] = self.map_scheme(raml_scheme)
                logger.debug("Mapped security scheme: %s", raml_scheme.name)
            except Exception as e:
                context.fail("security scheme", raml_scheme.name, e)

        logger.debug("Security mapping completed: %d scheme(s)", len(schemes))
        return schemes

    def map_scheme(self, raml_scheme: raml.SecurityScheme) -> SecurityScheme:
        kind = raml_scheme.type.strip().lower()
        mapper = self._by_kind.get(kind)
        if mapper is None:
            if not kind.startswith("x-"):
                logger.warning("Unknown security scheme type: %s, treating as custom", raml_scheme.type)
            mapper = self._map_custom

        scheme = mapper(raml_scheme)
        if raml_scheme.description:
            scheme.description = raml_scheme.description
        return scheme

    def _map_oauth2(self, raml_scheme: raml.SecurityScheme) -> SecurityScheme:
        settings = raml_scheme.settings
        authorization_url = settings.authorization_uri
        token_url = settings.access_token_uri
        scopes = settings.scopes

        flows = OAuthFlows()
        grants = settings.authorization_grants or ["authorization_code"]
        for grant in grants:
            grant_kind = grant.lower()
            if grant_kind == "authorization_code":
                flows.authorization_code = _oauth_flow(authorization_url, token_url, scopes)
            elif grant_kind == "implicit":
                flows.implicit = _oauth_flow(authorization_url, None, scopes)
            elif grant_kind == "password":
                flows.password = _oauth_flow(None, token_url, scopes)
            elif grant_kind == "client_credentials":
                flows.client_credentials = _oauth_flow(None, token_url, scopes)
            else:
                logger.warning("Unknown OAuth grant type: %s", grant)

        return SecurityScheme(type="oauth2", flows=flows)

    def _map_oauth1(self, raml_scheme: raml.SecurityScheme) -> SecurityScheme:
        logger.warning("OAuth 1.0 is not supported by OpenAPI 3.0, mapping '%s' as an API key", raml_scheme.name)
        return SecurityScheme(
            type="apiKey",
            in_="header",
            name=DEFAULT_API_KEY_HEADER,
            extensions={"x-raml-type": "OAuth 1.0"},
        )

    def _map_basic(self, raml_scheme: raml.SecurityScheme) -> SecurityScheme:
        return SecurityScheme(type="http", scheme="basic")

    def _map_digest(self, raml_scheme: raml.SecurityScheme) -> SecurityScheme:
        return SecurityScheme(type="http", scheme="digest")

    def _map_pass_through(self, raml_scheme: raml.SecurityScheme) -> SecurityScheme:
        described_by = raml_scheme.described_by
        if described_by.headers:
            name, location = described_by.headers[0].name, "header"
        elif described_by.query_parameters:
            name, location = described_by.query_parameters[0].name, "query"
        else:
            name, location = DEFAULT_API_KEY_HEADER, "header"
        logger.debug("    API key in %s: %s", location, name)
        return SecurityScheme(type="apiKey", in_=location, name=name)

    def _map_custom(self, raml_scheme: raml.SecurityScheme) -> SecurityScheme:
        return SecurityScheme(
            type="apiKey",
            in_="header",
            name=DEFAULT_API_KEY_HEADER,
            extensions={"x-raml-type": raml_scheme.type},
        )


def _oauth_flow(authorization_url: str | None, token_url: str | None, scopes: list[str]) -> OAuthFlow:
    return OAuthFlow(
        authorization_url=authorization_url or None,
        token_url=token_url or None,
        scopes={scope: _scope_description(scope) for scope in scopes},
    )


def _scope_description(scope: str) -> str:
    return scope.replace(":", " - ").replace("_", " ")


def requirements_for(secured_by: raml.SecuredBy) -> list[dict[str, list[str]]] | None:
    """Requirements declared at one level; ``None`` means the level inherits."""
    if secured_by.state == "inherit":
        return None
    if secured_by.state == "none":
        return []
    requirements = [{ref.name: list(ref.scopes)} for ref in secured_by.schemes]
    if secured_by.allow_anonymous:
        requirements.append({})
    return requirements


def resolve_requirement(
    method: raml.Method,
    resource: raml.Resource | None,
    document: raml.RamlDocument | None,
) -> list[dict[str, list[str]]] | None:
    """Nearest-wins security for an operation: method, then resource, then document.

    Returns ``[]`` when the nearest declaring level opts out of security and
    ``None`` when no level declares anything.
    """
    levels = [("method", method.secured_by)]
    if resource is not None:
        levels.append(("resource", resource.secured_by))
    if document is not None:
        levels.append(("API", document.secured_by))

    for level, secured_by in levels:
        requirements = requirements_for(secured_by)
        if requirements is not None:
            logger.debug("    Using %s-level security", level)
            return requirements
    return None
