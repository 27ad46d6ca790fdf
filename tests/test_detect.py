from pathlib import Path

import pytest

from raml_to_openapi.detect import find_raml_files, is_raml_file, raml_version, validate_raml_file
from raml_to_openapi.errors import FatalInputError

FIXTURES = Path(__file__).parent / "fixtures"


class TestRamlVersion:
    def test_version_header(self):
        assert raml_version(FIXTURES / "petstore.raml") == "1.0"
        assert raml_version(FIXTURES / "old.raml") == "0.8"

    def test_missing_header(self):
        assert raml_version(FIXTURES / "apis" / "notes.raml") is None


class TestIsRamlFile:
    def test_raml_1_0(self):
        assert is_raml_file(FIXTURES / "petstore.raml") is True

    def test_other_version_or_extension(self, tmp_path):
        assert is_raml_file(FIXTURES / "old.raml") is False
        f = tmp_path / "api.yaml"
        f.write_text("#%RAML 1.0\ntitle: T\n")
        assert is_raml_file(f) is False


class TestValidateRamlFile:
    def test_valid(self):
        validate_raml_file(FIXTURES / "petstore.raml")

    @pytest.mark.parametrize(
        "name, message",
        [
            ("missing.raml", "File not found"),
            ("apis/notes.raml", "Missing '#%RAML 1.0' header"),
            ("old.raml", "Unsupported RAML version 0.8"),
            ("examples/items.json", "Not a RAML file"),
            ("apis", "Not a file"),
        ],
    )
    def test_invalid(self, name, message):
        with pytest.raises(FatalInputError, match=message):
            validate_raml_file(FIXTURES / name)


class TestFindRamlFiles:
    def test_top_level_only(self):
        files = find_raml_files(FIXTURES / "apis")
        assert [f.name for f in files] == ["one.raml", "two.raml"]

    def test_recursive(self):
        files = find_raml_files(FIXTURES / "apis", recursive=True)
        assert sorted(f.name for f in files) == ["one.raml", "three.raml", "two.raml"]

    def test_not_a_directory(self):
        with pytest.raises(FatalInputError):
            find_raml_files(FIXTURES / "petstore.raml")
