import pytest


class TestHealth:
    def test_health_check(self, client):
        res = client.get("/")
        assert res.status_code == 200
        data = res.json()
        assert data["message"] == "Healthy"
        assert data["backend"] == "memory"


class TestRegister:
    def test_register_success(self, register):
        res = register("alice", "secret1")
        assert res.status_code == 201
        body = res.json()
        assert body == {"message": "User registered successfully"}

    def test_register_stores_hash_not_plaintext(self, app, register):
        register("alice", "secret1")
        user = app.state.repositories.users.find_by_username("alice")
        assert user["password_hash"] != "secret1"
        assert app.state.password_hasher.verify("secret1", user["password_hash"])

    def test_register_duplicate_username(self, register):
        assert register("alice", "secret1").status_code == 201
        res = register("alice", "other")
        assert res.status_code == 400
        # not distinguishable from any other invalid input
        assert res.json() == {"error": "InvalidInput", "message": "Invalid data"}

    def test_usernames_are_case_sensitive(self, register):
        assert register("alice", "secret1").status_code == 201
        assert register("Alice", "secret1").status_code == 201

    def test_register_missing_fields(self, client):
        res = client.post("/users/register", json={"username": "alice"})
        assert res.status_code == 400
        assert res.json()["message"] == "Invalid data"

    def test_register_empty_username(self, register):
        assert register("", "secret1").status_code == 400

    def test_register_username_too_long(self, register):
        assert register("a" * 129, "secret1").status_code == 400
        assert register("a" * 128, "secret1").status_code == 201

    def test_register_password_too_long(self, register):
        assert register("alice", "p" * 73).status_code == 400
        # multi-byte characters count by encoded length
        assert register("bob", "é" * 37).status_code == 400

    def test_validation_error_does_not_echo_input(self, client):
        res = client.post("/users/register", json={"username": "", "password": "hunter2"})
        assert res.status_code == 400
        assert "hunter2" not in res.text


class TestLogin:
    def test_login_returns_token_for_user(self, app, register, login):
        register("alice", "secret1")
        res = login("alice", "secret1")
        assert res.status_code == 200
        token = res.json()["token"]
        user = app.state.repositories.users.find_by_username("alice")
        assert app.state.token_service.verify(token) == user["id"]

    def test_login_wrong_password(self, register, login):
        register("alice", "secret1")
        res = login("alice", "wrong")
        assert res.status_code == 401
        assert res.json() == {"error": "InvalidCredentials", "message": "Invalid credentials"}

    def test_login_unknown_user(self, login):
        res = login("nobody", "secret1")
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid credentials"

    def test_login_is_case_sensitive(self, register, login):
        register("alice", "secret1")
        assert login("ALICE", "secret1").status_code == 401

    def test_login_malformed_body(self, client):
        res = client.post("/users/login", json={"password": "secret1"})
        assert res.status_code == 400

    @pytest.mark.parametrize(
        "username,password",
        [("alice", ""), ("alice", "p" * 73), ("a" * 129, "secret1"), ("", "secret1")],
    )
    def test_login_out_of_range_values_are_invalid_credentials(self, register, login, username, password):
        register("alice", "secret1")
        res = login(username, password)
        assert res.status_code == 401
        assert res.json()["message"] == "Invalid credentials"

    def test_login_rejects_password_with_stored_prefix(self, register, login):
        stored = "p" * 72
        assert register("alice", stored).status_code == 201
        assert login("alice", stored + "extra").status_code == 401
        assert login("alice", stored).status_code == 200
