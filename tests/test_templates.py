from raml_to_openapi.raml.templates import (
    expand,
    merge,
    references,
    resource_path_name,
    substitute,
    transform,
)


class TestResourcePathName:
    def test_rightmost_segment_without_parameters(self):
        assert resource_path_name("/users/{id}") == "users"
        assert resource_path_name("/users/{id}/orders") == "orders"
        assert resource_path_name("/{id}") == ""


class TestReferences:
    def test_forms(self):
        assert references("paged") == [("paged", {})]
        assert references(["paged", {"secured": {"scope": "read"}}]) == [
            ("paged", {}),
            ("secured", {"scope": "read"}),
        ]
        assert references(None) == []


class TestMerge:
    def test_override_wins_and_nested_keys_merge(self):
        base = {"queryParameters": {"page": {"type": "integer"}, "size": {"maximum": 50}}}
        override = {"queryParameters": {"size": {"maximum": 10}}, "description": "Own"}
        assert merge(base, override) == {
            "queryParameters": {"page": {"type": "integer"}, "size": {"maximum": 10}},
            "description": "Own",
        }

    def test_empty_override_keeps_base(self):
        assert merge({"responses": {204: None}}, None) == {"responses": {204: None}}

    def test_trait_lists_are_combined(self):
        assert merge({"is": ["paged"]}, {"is": ["traced", "paged"]}) == {"is": ["paged", "traced"]}


class TestSubstitute:
    def test_placeholders_in_keys_and_values(self):
        params = {"resourcePathName": "users", "methodName": "get"}
        value = {"<<resourcePathName>>Id": "Read <<resourcePathName>> with <<methodName>>"}
        assert substitute(value, params) == {"usersId": "Read users with get"}

    def test_whole_value_keeps_type(self):
        assert substitute({"maximum": "<<max>>"}, {"max": 50}) == {"maximum": 50}

    def test_functions_chain(self):
        value = "<<resourcePathName | !singularize | !uppercamelcase>>[]"
        assert substitute(value, {"resourcePathName": "categories"}) == "Category[]"

    def test_missing_parameter_left_in_place(self):
        assert substitute("<<unknown>> items", {}) == "<<unknown>> items"

    def test_expand_drops_usage(self):
        assert expand({"usage": "Apply to lists", "description": "<<a>>"}, {"a": "x"}) == {"description": "x"}


class TestTransform:
    def test_inflection(self):
        assert transform("users", "singularize") == "user"
        assert transform("boxes", "singularize") == "box"
        assert transform("user", "pluralize") == "users"
        assert transform("category", "pluralize") == "categories"

    def test_cases(self):
        assert transform("userId", "uppercase") == "USERID"
        assert transform("user_name", "lowercamelcase") == "userName"
        assert transform("user-name", "uppercamelcase") == "UserName"
        assert transform("userName", "lowerunderscorecase") == "user_name"
        assert transform("userName", "upperhyphencase") == "USER-NAME"

    def test_unknown_function(self):
        assert transform("users", "reverse") == "users"
