import json

from todo_service.generate_openapi import generate_openapi


class TestGenerateOpenAPI:
    def test_writes_schema(self, tmp_path):
        out = generate_openapi(str(tmp_path / "interfaces" / "openapi.json"))
        with open(out, encoding="utf-8") as f:
            schema = json.load(f)

        assert schema["info"]["title"] == "Todo Service"
        for path in ["/", "/users/register", "/users/login", "/todos", "/todos/{todo_id}"]:
            assert path in schema["paths"]
        assert set(schema["paths"]["/todos/{todo_id}"]) == {"get", "put", "delete"}
        assert {t["name"] for t in schema["tags"]} >= {"health", "users", "todos"}

    def test_password_hash_not_in_any_schema(self, tmp_path):
        out = generate_openapi(str(tmp_path / "openapi.json"))
        with open(out, encoding="utf-8") as f:
            assert "password_hash" not in f.read()
