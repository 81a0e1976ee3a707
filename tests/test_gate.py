import pytest

from todo_service.errors import InvalidInput, TokenInvalid, Unauthenticated
from todo_service.gate import (
    AuthGate,
    Rejection,
    RequestContext,
    extract_bearer,
    verify_bearer,
)
from todo_service.tokens import TokenService


@pytest.fixture
def tokens():
    return TokenService("gate-test-secret")


@pytest.fixture
def gate(tokens):
    return AuthGate.with_tokens(tokens)


class TestExtractBearer:
    @pytest.mark.parametrize("header", [None, "", "   ", "Bearer", "Bearer   "])
    def test_missing_credential_is_unauthenticated(self, header):
        result = extract_bearer(RequestContext(authorization=header))
        assert isinstance(result, Rejection)
        assert isinstance(result.error, Unauthenticated)

    def test_bearer_scheme_is_stripped(self):
        result = extract_bearer(RequestContext(authorization="Bearer abc.def.ghi"))
        assert isinstance(result, RequestContext)
        assert result.token == "abc.def.ghi"

    def test_scheme_is_case_insensitive(self):
        result = extract_bearer(RequestContext(authorization="bearer abc"))
        assert result.token == "abc"

    def test_other_scheme_passed_through_whole(self):
        result = extract_bearer(RequestContext(authorization="Basic dXNlcjpwYXNz"))
        assert result.token == "Basic dXNlcjpwYXNz"


class TestVerifyBearer:
    def test_resolves_user_id(self, tokens):
        step = verify_bearer(tokens)
        result = step(RequestContext(authorization=None, token=tokens.issue(5)))
        assert result.user_id == 5

    def test_invalid_token_rejected(self, tokens):
        result = verify_bearer(tokens)(RequestContext(authorization=None, token="garbage"))
        assert isinstance(result, Rejection)
        assert isinstance(result.error, TokenInvalid)

    def test_no_token_in_context(self, tokens):
        result = verify_bearer(tokens)(RequestContext(authorization=None))
        assert isinstance(result.error, Unauthenticated)


class TestAuthGate:
    def test_authenticate_valid_header(self, gate, tokens):
        assert gate.authenticate(f"Bearer {tokens.issue(9)}") == 9

    def test_authenticate_missing_header(self, gate):
        with pytest.raises(Unauthenticated):
            gate.authenticate(None)

    def test_authenticate_garbled_token(self, gate):
        with pytest.raises(TokenInvalid):
            gate.authenticate("Bearer not-a-token")

    def test_token_without_scheme_still_verifies(self, gate, tokens):
        assert gate.authenticate(tokens.issue(11)) == 11

    def test_pipeline_runs_in_order_and_short_circuits(self):
        calls = []

        def first(ctx):
            calls.append("first")
            return Rejection(InvalidInput())

        def second(ctx):
            calls.append("second")
            return ctx

        result = AuthGate([first, second]).run(RequestContext(authorization="Bearer x"))
        assert isinstance(result, Rejection)
        assert calls == ["first"]

    def test_pipeline_passes_enriched_context(self):
        seen = []

        def enrich(ctx):
            return RequestContext(authorization=ctx.authorization, token="t", user_id=3)

        def observe(ctx):
            seen.append(ctx)
            return ctx

        result = AuthGate([enrich, observe]).run(RequestContext(authorization="h"))
        assert seen[0].user_id == 3
        assert result.user_id == 3

    def test_pipeline_without_identity_is_unauthenticated(self):
        with pytest.raises(Unauthenticated):
            AuthGate([lambda ctx: ctx]).authenticate("Bearer x")
