import pytest

from raml_to_openapi.errors import FatalInputError
from raml_to_openapi.mapper.context import MapperContext
from raml_to_openapi.mapper.security import SecurityMapper, requirements_for, resolve_requirement
from raml_to_openapi.raml.model import (
    DescribedBy,
    Method,
    RamlDocument,
    Resource,
    SecuredBy,
    SecurityScheme,
    SecuritySchemeRef,
    SecuritySchemeSettings,
    TypeDeclaration,
)


def _map(scheme):
    return SecurityMapper().map_scheme(scheme).to_dict()


class TestOAuth2:
    def test_authorization_code_flow(self):
        scheme = SecurityScheme(
            name="oauth",
            type="OAuth 2.0",
            settings=SecuritySchemeSettings(
                authorization_uri="https://auth/authorize",
                access_token_uri="https://auth/token",
                authorization_grants=["authorization_code"],
                scopes=["read", "write"],
            ),
        )
        assert _map(scheme) == {
            "type": "oauth2",
            "flows": {
                "authorizationCode": {
                    "authorizationUrl": "https://auth/authorize",
                    "tokenUrl": "https://auth/token",
                    "scopes": {"read": "read", "write": "write"},
                },
            },
        }

    def test_default_grant_is_authorization_code(self):
        scheme = SecurityScheme(name="oauth", type="OAuth 2.0")
        assert "authorizationCode" in _map(scheme)["flows"]

    def test_other_grants(self):
        scheme = SecurityScheme(
            name="oauth",
            type="OAuth 2.0",
            settings=SecuritySchemeSettings(
                authorization_uri="A",
                access_token_uri="B",
                authorization_grants=["implicit", "password", "client_credentials", "urn:custom"],
                scopes=["user:read_all"],
            ),
        )
        flows = _map(scheme)["flows"]
        assert flows["implicit"] == {"authorizationUrl": "A", "scopes": {"user:read_all": "user - read all"}}
        assert flows["password"]["tokenUrl"] == "B"
        assert "authorizationUrl" not in flows["clientCredentials"]
        assert set(flows) == {"implicit", "password", "clientCredentials"}


class TestOtherSchemes:
    def test_basic_and_digest(self):
        assert _map(SecurityScheme(name="b", type="Basic Authentication")) == {"type": "http", "scheme": "basic"}
        assert _map(SecurityScheme(name="d", type="Digest Authentication")) == {"type": "http", "scheme": "digest"}

    def test_oauth1_as_api_key(self):
        assert _map(SecurityScheme(name="o", type="OAuth 1.0")) == {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "x-raml-type": "OAuth 1.0",
        }

    def test_pass_through_header(self):
        scheme = SecurityScheme(
            name="key",
            type="Pass Through",
            described_by=DescribedBy(headers=[TypeDeclaration(name="X-API-Key")]),
        )
        assert _map(scheme) == {"type": "apiKey", "name": "X-API-Key", "in": "header"}

    def test_pass_through_query(self):
        scheme = SecurityScheme(
            name="key",
            type="Pass Through",
            described_by=DescribedBy(query_parameters=[TypeDeclaration(name="api_key")]),
        )
        assert _map(scheme) == {"type": "apiKey", "name": "api_key", "in": "query"}

    def test_pass_through_default(self):
        assert _map(SecurityScheme(name="key", type="Pass Through"))["name"] == "Authorization"

    def test_custom_scheme(self):
        scheme = SecurityScheme(name="hmac", type="x-hmac", description="Signed requests")
        assert _map(scheme) == {
            "type": "apiKey",
            "description": "Signed requests",
            "name": "Authorization",
            "in": "header",
            "x-raml-type": "x-hmac",
        }

    def test_map_document(self):
        document = RamlDocument(
            security_schemes=[
                SecurityScheme(name="basic", type="Basic Authentication"),
                SecurityScheme(name="key", type="Pass Through"),
            ]
        )
        schemes = SecurityMapper().map(document, MapperContext())
        assert list(schemes) == ["basic", "key"]

    def test_map_null_document(self):
        with pytest.raises(FatalInputError):
            SecurityMapper().map(None, MapperContext())


def _schemes(*names):
    return SecuredBy.of(*[SecuritySchemeRef(name=n) for n in names])


class TestRequirements:
    def test_requirements_for_states(self):
        assert requirements_for(SecuredBy.inherit()) is None
        assert requirements_for(SecuredBy.no_security()) == []
        assert requirements_for(_schemes("a", "b")) == [{"a": []}, {"b": []}]

    def test_anonymous_alternative(self):
        secured = SecuredBy.of(SecuritySchemeRef(name="oauth", scopes=["read"]), allow_anonymous=True)
        assert requirements_for(secured) == [{"oauth": ["read"]}, {}]


class TestResolveRequirement:
    def test_method_none_stops_inheritance(self):
        method = Method(method="get", secured_by=SecuredBy.no_security())
        resource = Resource(relative_uri="/a", secured_by=_schemes("oauth"))
        document = RamlDocument(secured_by=_schemes("apiKeyAuth"))
        assert resolve_requirement(method, resource, document) == []

    def test_resource_level(self):
        method = Method(method="get")
        resource = Resource(relative_uri="/a", secured_by=_schemes("oauth"))
        document = RamlDocument(secured_by=_schemes("apiKeyAuth"))
        assert resolve_requirement(method, resource, document) == [{"oauth": []}]

    def test_document_level(self):
        method = Method(method="get")
        resource = Resource(relative_uri="/a")
        document = RamlDocument(secured_by=_schemes("apiKeyAuth"))
        assert resolve_requirement(method, resource, document) == [{"apiKeyAuth": []}]

    def test_method_level_wins(self):
        method = Method(method="get", secured_by=_schemes("basic"))
        resource = Resource(relative_uri="/a", secured_by=_schemes("oauth"))
        assert resolve_requirement(method, resource, RamlDocument()) == [{"basic": []}]

    def test_nothing_declared(self):
        assert resolve_requirement(Method(method="get"), Resource(relative_uri="/a"), RamlDocument()) is None

    def test_idempotent(self):
        method = Method(method="get")
        resource = Resource(relative_uri="/a", secured_by=_schemes("oauth"))
        first = resolve_requirement(method, resource, None)
        assert resolve_requirement(method, resource, None) == first
