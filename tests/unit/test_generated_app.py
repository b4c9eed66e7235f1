"""
Runtime tests for generated code.

Generated sources are written to a temporary directory, imported and
exercised through FastAPI's test client.
"""

import ast
import importlib
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from via.codegen import generate
from via.codegen.utils import pluralize, snake_case
from via.core import ir
from via.core.parser import parse_file, parse_str
from via.writer import write_files


def _load(out: Path, resources: list[ir.ResourceSpec]) -> None:
    write_files(out, generate(resources).files)
    importlib.invalidate_caches()


class TestGeneratedModel:
    """The model honors serialize and optional rules at runtime."""

    def test_hidden_field_excluded(self, generated_package: Path, article: ir.ResourceSpec) -> None:
        _load(generated_package, [article])
        module = importlib.import_module("src.models.article")

        item = module.Article(title="Hello", views=3)
        assert item.views == 3
        assert item.body is None
        assert item.model_dump() == {"title": "Hello", "body": None}
        assert "views" not in item.model_dump_json()

    def test_keyword_alias_round_trips(self, generated_package: Path) -> None:
        resources = parse_str("resource Trip { model { from: String to?: String } }", "trip.via")
        _load(generated_package, resources)
        module = importlib.import_module("src.models.trip")

        trip = module.Trip.model_validate({"from": "Oslo"})
        assert trip.from_ == "Oslo"
        assert trip.model_dump(by_alias=True) == {"from": "Oslo", "to": None}


class TestGeneratedAutoCrud:
    """The AutoCrud router works end to end."""

    @pytest.fixture
    def client(self, generated_package: Path, simple_resource: ir.ResourceSpec) -> TestClient:
        _load(generated_package, [simple_resource])
        app_module = importlib.import_module("src.app")
        return TestClient(app_module.create_app())

    def test_crud_cycle(self, client: TestClient) -> None:
        created = client.post("/tasks", json={"title": "Write tests"})
        assert created.status_code == 201
        assert created.json() == {"id": 1, "title": "Write tests", "done": None}

        assert client.get("/tasks").json() == [{"id": 1, "title": "Write tests", "done": None}]
        assert client.get("/tasks/1").json()["title"] == "Write tests"

        updated = client.patch("/tasks/1", json={"done": True})
        assert updated.status_code == 200
        assert updated.json() == {"id": 1, "title": "Write tests", "done": True}

        assert client.delete("/tasks/1").status_code == 204
        assert client.get("/tasks/1").status_code == 404

    def test_missing_required_field(self, client: TestClient) -> None:
        assert client.post("/tasks", json={"done": True}).status_code == 422

    def test_unlisted_format_rejected(self, client: TestClient) -> None:
        assert client.get("/tasks?format=xml").status_code == 406
        assert client.get("/tasks?format=json").status_code == 200


class TestGeneratedFormats:
    """Declared response formats are negotiated with ``?format=``."""

    def test_html_default(self, generated_package: Path) -> None:
        resources = parse_str(
            """
            resource Note {
              model { text: String }
              controller {
                params { editable text }
                respond_with [html, json]
              }
            }
            """,
            "note.via",
        )
        _load(generated_package, resources)
        client = TestClient(importlib.import_module("src.app").create_app())

        client.post("/notes?format=json", json={"text": "<b>hi</b>"})
        html = client.get("/notes")
        assert html.headers["content-type"].startswith("text/html")
        assert "&lt;b&gt;hi&lt;/b&gt;" in html.text
        assert client.get("/notes?format=json").json() == [{"id": 1, "text": "<b>hi</b>"}]


class TestGeneratedIds:
    """The store's record id is the id clients see."""

    def test_record_id_overrides_id_field(self, generated_package: Path) -> None:
        resources = parse_str(
            "resource Item { model { id: Int title: String } "
            "controller { params { editable [id, title] } } }",
            "item.via",
        )
        _load(generated_package, resources)
        client = TestClient(importlib.import_module("src.app").create_app())

        created = client.post("/items", json={"id": 42, "title": "a"})
        assert created.status_code == 201
        assert created.json()["id"] == 1
        assert client.get("/items/1").json() == {"id": 1, "title": "a"}
        assert [item["id"] for item in client.get("/items").json()] == [1]
        assert client.delete("/items/1").status_code == 204


class TestGeneratedNames:
    """Keyword and framework resource names still yield working routers."""

    @pytest.mark.parametrize(
        "name", ["class", "None", "Response", "Request", "Any", "BaseModel", "Field"]
    )
    def test_crud_round_trip(self, generated_package: Path, name: str) -> None:
        resources = parse_str(
            f"resource {name} {{ model {{ title: String }} "
            "controller { params { editable title } } }",
            f"{name}.via",
        )
        result = generate(resources)
        for generated in result.files:
            if generated.relative_path.suffix == ".py":
                ast.parse(generated.contents, filename=str(generated.relative_path))

        _load(generated_package, resources)
        client = TestClient(importlib.import_module("src.app").create_app())
        prefix = "/" + pluralize(snake_case(name))

        created = client.post(prefix, json={"title": "a"})
        assert created.status_code == 201
        assert created.json() == {"id": 1, "title": "a"}
        assert client.get(f"{prefix}/1").json()["title"] == "a"
        assert client.patch(f"{prefix}/1", json={"title": "b"}).json()["title"] == "b"
        assert client.delete(f"{prefix}/1").status_code == 204
        assert client.get(f"{prefix}/1").status_code == 404

    def test_renamed_attributes_keep_wire_names(self, generated_package: Path) -> None:
        resources = parse_str("resource Pair { model { _x: String field_x: Int } }", "pair.via")
        _load(generated_package, resources)
        module = importlib.import_module("src.models.pair")

        pair = module.Pair.model_validate({"_x": "a", "field_x": 1})
        assert pair.field_x_ == "a"
        assert pair.field_x == 1
        assert pair.model_dump(by_alias=True) == {"_x": "a", "field_x": 1}


class TestGeneratedManualActions:
    """Embedded action bodies run against the router module's helpers."""

    @pytest.fixture
    def client(self, generated_package: Path, fixtures_dir: Path) -> TestClient:
        resources = parse_file(fixtures_dir / "via_runtime" / "note.via")
        _load(generated_package, resources)
        return TestClient(importlib.import_module("src.app").create_app())

    def test_create_body(self, client: TestClient) -> None:
        created = client.post("/notes", json={"text": "hi"})
        assert created.status_code == 201
        assert created.json() == {"id": 1, "text": "hi", "pinned": None}

    def test_named_params_body(self, client: TestClient) -> None:
        client.post("/notes", json={"text": "hi"})
        pinned = client.post("/notes/pin", json={"note_id": 1})
        assert pinned.status_code == 200
        assert pinned.json() == {"id": 1, "text": "hi", "pinned": True}

    def test_body_negotiates_format(self, client: TestClient) -> None:
        created = client.post("/notes?format=html", json={"text": "<i>"})
        assert created.status_code == 201
        assert created.headers["content-type"].startswith("text/html")
        assert "&lt;i&gt;" in created.text

    def test_body_uses_not_found_helper(self, client: TestClient) -> None:
        assert client.post("/notes/pin", json={"note_id": 7}).status_code == 404

    def test_action_without_body_returns_null(self, client: TestClient) -> None:
        client.post("/notes", json={"text": "hi"})
        shown = client.get("/notes/1")
        assert shown.status_code == 200
        assert shown.json() is None

    def test_undeclared_actions_are_absent(self, client: TestClient) -> None:
        assert client.delete("/notes/1").status_code == 405
