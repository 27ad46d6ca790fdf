from raml_to_openapi.openapi.model import (
    Components,
    Info,
    OpenApiDocument,
    Operation,
    Parameter,
    PathItem,
    Response,
    Schema,
)
from raml_to_openapi.raml.model import SecuredBy, SecuritySchemeRef, TypeDeclaration


class TestTypeDeclaration:
    def test_defaults(self):
        t = TypeDeclaration(name="id")
        assert t.kind == "string"
        assert t.required is True
        assert t.properties == []
        assert t.annotations == {}

    def test_array_base(self):
        t = TypeDeclaration(name="application/json", type="Pet[]", kind="array")
        assert t.is_array_reference() is True
        assert t.array_base() == "Pet"

    def test_not_array_reference(self):
        t = TypeDeclaration(type="Pet", kind="object")
        assert t.is_array_reference() is False
        assert t.array_base() is None


class TestSecuredBy:
    def test_default_inherits(self):
        assert SecuredBy().is_inherit is True
        assert SecuredBy.inherit().state == "inherit"

    def test_no_security(self):
        secured = SecuredBy.no_security()
        assert secured.state == "none"
        assert secured.is_inherit is False

    def test_of_schemes(self):
        secured = SecuredBy.of(SecuritySchemeRef(name="oauth", scopes=["read"]), allow_anonymous=True)
        assert secured.state == "schemes"
        assert secured.schemes[0].scopes == ["read"]
        assert secured.allow_anonymous is True


class TestSchemaSerialization:
    def test_reference(self):
        schema = Schema.reference("Pet")
        assert schema.to_dict() == {"$ref": "#/components/schemas/Pet"}
        assert schema.ref_name == "Pet"

    def test_aliases_and_none_dropped(self):
        schema = Schema(type="string", min_length=1, max_length=10)
        assert schema.to_dict() == {"type": "string", "minLength": 1, "maxLength": 10}

    def test_extensions_merged(self):
        schema = Schema(type="string", extensions={"x-raml-type": "time-only"})
        assert schema.to_dict() == {"type": "string", "x-raml-type": "time-only"}

    def test_nested_all_of(self):
        schema = Schema(all_of=[Schema.reference("Animal"), Schema(type="object")])
        assert schema.to_dict() == {
            "allOf": [{"$ref": "#/components/schemas/Animal"}, {"type": "object"}],
        }


class TestOpenApiDocument:
    def _document(self):
        operation = Operation(
            operation_id="get_pets",
            parameters=[Parameter(name="limit", in_="query", schema_=Schema(type="integer"))],
            responses={"200": Response(description="OK")},
        )
        return OpenApiDocument(
            info=Info(title="Pets", version="1.0"),
            paths={"/pets": PathItem(get=operation, post=Operation(operation_id="post_pets"))},
            components=Components(schemas={"Pet": Schema(type="object")}),
        )

    def test_to_dict_uses_openapi_spelling(self):
        data = self._document().to_dict()
        assert data["openapi"] == "3.0.0"
        operation = data["paths"]["/pets"]["get"]
        assert operation["operationId"] == "get_pets"
        assert operation["parameters"][0]["in"] == "query"
        assert operation["parameters"][0]["schema"] == {"type": "integer"}
        assert "security" not in operation

    def test_operations_in_method_order(self):
        operations = self._document().operations()
        assert [(path, method) for path, method, _ in operations] == [("/pets", "get"), ("/pets", "post")]

    def test_schema_names(self):
        assert self._document().schema_names() == ["Pet"]
        assert OpenApiDocument(info=Info(title="Empty", version="1")).schema_names() == []
