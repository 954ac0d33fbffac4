"""Tests for Subsonic token authentication."""

import doctest
import hashlib
import re

from src.subsonic import auth as auth_module
from src.subsonic.auth import (
    API_VERSION,
    CLIENT_NAME,
    compute_token,
    create_auth_params,
    generate_salt,
    generate_token,
    verify_token,
)


class TestSalt:
    def test_salt_is_eight_lowercase_alphanumerics(self):
        for _ in range(50):
            assert re.fullmatch(r"[a-z0-9]{8}", generate_salt())

    def test_salts_differ(self):
        assert len({generate_salt() for _ in range(20)}) > 1


class TestToken:
    def test_known_vector(self):
        # Example from the Subsonic API documentation.
        assert compute_token("sesame", "c19b2d") == "26719a1196d2a940705a59634eb18eab"

    def test_generate_token_with_salt(self):
        token = generate_token("admin", "sesame", salt="c19b2d")

        assert token.token == "26719a1196d2a940705a59634eb18eab"
        assert token.salt == "c19b2d"
        assert token.username == "admin"
        assert token.to_auth_params() == {
            "u": "admin",
            "t": "26719a1196d2a940705a59634eb18eab",
            "s": "c19b2d",
        }

    def test_generated_token_matches_md5_of_password_and_salt(self):
        token = generate_token("admin", "p@ss wörd")

        expected = hashlib.md5(("p@ss wörd" + token.salt).encode("utf-8")).hexdigest()
        assert token.token == expected
        assert re.fullmatch(r"[0-9a-f]{32}", token.token)

    def test_verify_token(self):
        token = generate_token("admin", "sesame")

        assert verify_token("sesame", token.token, token.salt)
        assert not verify_token("wrong", token.token, token.salt)


class TestAuthParams:
    def test_contains_all_parameters(self):
        params = create_auth_params("john", "secret")

        assert set(params) == {"u", "t", "s", "v", "c", "f"}
        assert params["u"] == "john"
        assert params["v"] == API_VERSION == "1.16.1"
        assert params["c"] == CLIENT_NAME == "CassoFlow"
        assert params["f"] == "json"
        assert params["t"] == compute_token("secret", params["s"])

    def test_fresh_salt_per_call(self):
        salts = {create_auth_params("john", "secret")["s"] for _ in range(10)}
        assert len(salts) > 1


def test_module_examples_run():
    results = doctest.testmod(auth_module)

    assert results.attempted > 0
    assert results.failed == 0
