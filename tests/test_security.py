import time

from lecturer_api.app.core.security import create_access_token, decode_access_token


class TestTokens:
    """Signed caller tokens."""

    def test_round_trip(self):
        token = create_access_token({"sub": "42"}, secret_key="s1")
        payload = decode_access_token(token, secret_key="s1")
        assert payload["sub"] == "42"
        assert payload["exp"] > time.time()

    def test_wrong_secret(self):
        token = create_access_token({"sub": "42"}, secret_key="s1")
        assert decode_access_token(token, secret_key="s2") is None

    def test_tampered_payload(self):
        header, _, signature = create_access_token({"sub": "42"}, secret_key="s1").split(".")
        other_payload = create_access_token({"sub": "admin"}, secret_key="s1").split(".")[1]
        assert decode_access_token(f"{header}.{other_payload}.{signature}", secret_key="s1") is None

    def test_expired(self):
        token = create_access_token({"sub": "42"}, expires_delta=-10, secret_key="s1")
        assert decode_access_token(token, secret_key="s1") is None

    def test_garbage(self):
        assert decode_access_token("garbage", secret_key="s1") is None
        assert decode_access_token("a.b.c", secret_key="s1") is None


def test_token_without_subject_is_rejected(client):
    token = create_access_token({"role": "user"}, secret_key="test-secret")
    response = client.post(
        "/api/v1/plugins/lecturer/add",
        json={"courseSection": "MATH 101-1", "lecturerName": "Dr. A"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 401
