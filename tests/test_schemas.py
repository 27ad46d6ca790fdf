from pathlib import Path

import pytest

from raml_to_openapi.errors import FatalInputError
from raml_to_openapi.mapper.arrays import ArrayTypeSynthesizer
from raml_to_openapi.mapper.context import MapperContext, TypeRegistry
from raml_to_openapi.mapper.inheritance import parent_type_name
from raml_to_openapi.mapper.schemas import SchemaMapper
from raml_to_openapi.raml.model import Method, RamlDocument, Resource, Response, TypeDeclaration
from raml_to_openapi.raml.reader import parse_raml, read_raml

FIXTURES = Path(__file__).parent / "fixtures"


def _map(document, strict=False):
    context = MapperContext(strict=strict)
    schemas = SchemaMapper().map(document, context)
    return {name: schema.to_dict() for name, schema in schemas.items()}, context


def _body(type_name):
    items = TypeDeclaration(type=type_name[:-2], kind="object") if type_name.endswith("[]") else None
    kind = "array" if items else "object"
    return TypeDeclaration(name="application/json", type=type_name, kind=kind, items=items)


class TestNamedTypes:
    def test_petstore_schema_order(self):
        schemas, _ = _map(read_raml(FIXTURES / "petstore.raml"))
        assert list(schemas) == ["Animal", "Dog", "Pet", "Owner", "PetOrDog", "PetArray", "DogArray"]

    def test_title_and_description(self):
        schemas, _ = _map(read_raml(FIXTURES / "petstore.raml"))
        assert schemas["Pet"]["title"] == "Pet"
        assert schemas["Pet"]["description"] == "A pet in the store"
        assert schemas["Pet"]["example"]["name"] == "Rex"
        assert schemas["Owner"]["title"] == "Owner"

    def test_forward_reference(self):
        schemas, _ = _map(read_raml(FIXTURES / "petstore.raml"))
        assert schemas["Pet"]["properties"]["owner"] == {"$ref": "#/components/schemas/Owner"}

    def test_union_of_named_types(self):
        schemas, _ = _map(read_raml(FIXTURES / "petstore.raml"))
        assert schemas["PetOrDog"]["oneOf"] == [
            {"$ref": "#/components/schemas/Pet"},
            {"$ref": "#/components/schemas/Dog"},
        ]

    def test_alias_is_wrapped_in_all_of(self):
        document = RamlDocument(
            types=[
                TypeDeclaration(name="Pet", type="object", kind="object"),
                TypeDeclaration(name="Animal", type="Pet", kind="object", description="Alias"),
            ]
        )
        schemas, _ = _map(document)
        # Animal has no own properties: inheritance with a lone parent reference
        assert schemas["Animal"]["allOf"] == [{"$ref": "#/components/schemas/Pet"}]
        assert schemas["Animal"]["description"] == "Alias"

    def test_array_alias_inlines_array_without_synthesized_schema(self):
        document = RamlDocument(
            types=[
                TypeDeclaration(name="Pet", type="object", kind="object"),
                TypeDeclaration(
                    name="Pets", type="Pet[]", kind="array", items=TypeDeclaration(type="Pet", kind="object")
                ),
            ]
        )
        schemas, _ = _map(document)
        assert schemas["Pets"] == {
            "title": "Pets",
            "type": "array",
            "items": {"$ref": "#/components/schemas/Pet"},
        }

    def test_null_document(self):
        with pytest.raises(FatalInputError):
            SchemaMapper().map(None, MapperContext())


class TestInheritance:
    def test_dog_extends_animal(self):
        schemas, _ = _map(read_raml(FIXTURES / "petstore.raml"))
        assert schemas["Dog"] == {
            "title": "Dog",
            "allOf": [
                {"$ref": "#/components/schemas/Animal"},
                {
                    "type": "object",
                    "additionalProperties": True,
                    "properties": {"breed": {"type": "string"}},
                    "required": ["breed"],
                },
            ],
        }

    def test_grandchild_composes_against_direct_parent(self):
        document = parse_raml(
            "#%RAML 1.0\ntitle: T\ntypes:\n"
            "  Animal:\n    properties:\n      name: string\n"
            "  Dog:\n    type: Animal\n    properties:\n      breed: string\n"
            "  Puppy:\n    type: Dog\n    properties:\n      age: integer\n"
        )
        schemas, _ = _map(document)
        all_of = schemas["Puppy"]["allOf"]
        assert all_of[0] == {"$ref": "#/components/schemas/Dog"}
        assert all_of[1]["properties"] == {"age": {"type": "integer", "format": "int32"}}
        assert all_of[1]["required"] == ["age"]
        assert schemas["Dog"]["allOf"][0] == {"$ref": "#/components/schemas/Animal"}

    def test_scalar_restriction_keeps_facets(self):
        document = parse_raml(
            "#%RAML 1.0\ntitle: T\ntypes:\n"
            "  Name: string\n"
            "  ShortName:\n    type: Name\n    maxLength: 10\n    pattern: ^[a-z]+$\n"
        )
        schemas, _ = _map(document)
        assert schemas["ShortName"]["allOf"] == [
            {"$ref": "#/components/schemas/Name"},
            {"maxLength": 10, "pattern": "^[a-z]+$"},
        ]

    def test_parent_type_name(self):
        registry = TypeRegistry(["Animal", "Dog"])
        assert parent_type_name(TypeDeclaration(name="Dog", type="Animal"), registry) == "Animal"
        assert parent_type_name(TypeDeclaration(name="Dog", type="object"), registry) is None
        assert parent_type_name(TypeDeclaration(name="Dog", type="Dog"), registry) is None
        assert parent_type_name(TypeDeclaration(name="Dogs", type="Animal[]"), registry) is None
        assert parent_type_name(TypeDeclaration(name="Any", type="Animal | Dog"), registry) is None
        assert parent_type_name(TypeDeclaration(name="Cat", type="Feline"), registry) is None


class TestArraySynthesis:
    def _document(self, *bodies, types=("Pet",)):
        responses = [Response(code="200", body=list(bodies))]
        return RamlDocument(
            types=[TypeDeclaration(name=name, type="object", kind="object") for name in types],
            resources=[Resource(relative_uri="/pets", methods=[Method(method="get", responses=responses)])],
        )

    def test_collect_in_first_seen_order(self):
        resources = [
            Resource(
                relative_uri="/a",
                methods=[Method(method="post", body=[_body("B[]")], responses=[Response(code="200", body=[_body("A[]")])])],
                resources=[Resource(relative_uri="/b", methods=[Method(method="get", body=[_body("B[]")])])],
            )
        ]
        assert ArrayTypeSynthesizer().collect(resources) == ["B", "A"]

    def test_pet_array_schema(self):
        schemas, _ = _map(self._document(_body("Pet[]")))
        assert schemas["PetArray"] == {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}

    def test_undeclared_base_is_not_synthesized(self):
        schemas, _ = _map(self._document(_body("Ghost[]")))
        assert "GhostArray" not in schemas

    def test_existing_array_name_is_kept(self):
        schemas, _ = _map(self._document(_body("Pet[]"), types=("Pet", "PetArray")))
        assert schemas["PetArray"]["title"] == "PetArray"
        assert list(schemas) == ["Pet", "PetArray"]


class TestStrictMode:
    def _broken_document(self):
        broken = TypeDeclaration(name="Broken", type="integer", kind="integer")
        return RamlDocument(types=[broken, TypeDeclaration(name="Ok", type="string", kind="string")])

    def test_lenient_skips_failed_type(self):
        def explode(t, context):
            raise ValueError("boom")

        mapper = SchemaMapper()
        mapper.converter._by_kind["integer"] = explode
        context = MapperContext(strict=False)
        schemas = mapper.map(self._broken_document(), context)
        assert list(schemas) == ["Ok"]
        assert context.failures == []

    def test_strict_records_failure(self):
        def explode(t, context):
            raise ValueError("boom")

        mapper = SchemaMapper()
        mapper.converter._by_kind["integer"] = explode
        context = MapperContext(strict=True)
        schemas = mapper.map(self._broken_document(), context)
        assert list(schemas) == ["Ok"]
        assert len(context.failures) == 1
        failure = context.failures[0]
        assert (failure.kind, failure.name) == ("type", "Broken")
        assert "boom" in str(failure)
