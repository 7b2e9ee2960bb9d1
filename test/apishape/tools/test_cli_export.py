# Purpose: End-to-end test of the 'apishape-export' CLI against the petstore
#          DSL example.

from pathlib import Path
import json

import pytest
import yaml

from apishape.core.path.registry import get_current_path_registry
from apishape.tools.cli import main, run_export

ROOT = Path(__file__).resolve().parents[3]
PETSTORE = ROOT / "examples" / "petstore" / "dsl"


def test_cli_exports_petstore_yaml(tmp_path: Path):
    out = tmp_path / "docs" / "openapi.yaml"
    main(
        [
            "--module",
            str(PETSTORE),
            "--out",
            str(out),
            "--title",
            "Petstore",
            "--version",
            "1.2.0",
            "--description",
            "Sample pets API",
        ]
    )

    doc = yaml.safe_load(out.read_text(encoding="utf-8"))
    assert doc["openapi"] == "3.1.0"
    assert doc["info"] == {
        "title": "Petstore",
        "version": "1.2.0",
        "description": "Sample pets API",
    }
    assert list(doc["paths"]) == ["/pets", "/pets/{id}", "/pets/{id}/photo"]
    assert doc["paths"]["/pets"]["summary"] == "Pet collection"

    list_pets = doc["paths"]["/pets"]["get"]
    assert [(p["name"], p["in"]) for p in list_pets["parameters"]] == [
        ("limit", "query"),
        ("status", "query"),
        ("X-Request-Id", "header"),
    ]
    assert list_pets["parameters"][1]["style"] == "form"
    assert list_pets["parameters"][1]["explode"] is False
    assert list_pets["x-forbid-unknown-query"] is True
    assert "requestBody" not in list_pets
    ok = list_pets["responses"]["200"]
    assert ok["description"] == "A page of pets"
    assert list(ok["headers"]) == ["X-Total-Count"]
    assert ok["content"]["application/json"]["schema"] == {
        "$ref": "#/components/schemas/PetList"
    }
    assert list_pets["responses"]["default"]["content"]["application/json"]["schema"] == {
        "$ref": "#/components/schemas/Error"
    }

    create = doc["paths"]["/pets"]["post"]
    assert create["requestBody"]["description"] == "Pet to add"
    assert list(create["responses"]) == ["201", "4XX"]
    assert create["responses"]["201"]["description"] == "A pet in the store"

    get_pet = doc["paths"]["/pets/{id}"]["get"]
    assert get_pet["parameters"][0]["required"] is True
    assert get_pet["responses"]["404"] == {"description": "Not Found"}

    upload = doc["paths"]["/pets/{id}/photo"]["post"]
    assert list(upload["requestBody"]["content"]) == ["multipart/form-data"]
    assert upload["responses"]["204"] == {"description": "No Content"}

    schemas = doc["components"]["schemas"]
    assert schemas["PetList"] == {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}
    assert schemas["FormDataPetPhoto"]["properties"]["photo"] == {
        "type": "string",
        "format": "binary",
    }
    assert schemas["FormDataPetPhoto"]["required"] == ["photo"]


def test_run_export_json_and_isolated_registry(tmp_path: Path):
    before = get_current_path_registry()
    path = run_export(
        modules=[PETSTORE / "petstore.py"],
        out=tmp_path / "openapi.json",
        title="Petstore",
        version="1.0.0",
    )
    assert get_current_path_registry() is before
    doc = json.loads(path.read_text(encoding="utf-8"))
    assert doc["info"] == {"title": "Petstore", "version": "1.0.0"}
    assert len(doc["paths"]) == 3


def test_missing_module_exits(tmp_path: Path):
    with pytest.raises(SystemExit):
        run_export(
            modules=[tmp_path / "nope.py"],
            out=tmp_path / "x.yaml",
            title="T",
            version="1",
        )


def test_compile_errors_exit_with_message(tmp_path: Path):
    dsl = tmp_path / "broken.py"
    dsl.write_text(
        "from apishape.core.path import body, get, path\n"
        "from apishape.core.schema import field\n"
        "\n"
        "class ByID:\n"
        "    id = field('string', path='id')\n"
        "\n"
        "@path('/things')\n"
        "class Things:\n"
        "    @get(request=body(ByID))\n"
        "    def read(self):\n"
        "        pass\n",
        encoding="utf-8",
    )
    with pytest.raises(SystemExit) as exc:
        run_export(modules=[dsl], out=tmp_path / "x.yaml", title="T", version="1")
    assert "missing path parameter placeholder in url: id" in str(exc.value)


def test_main_requires_module():
    with pytest.raises(SystemExit):
        main(["--out", "x.yaml"])
