from datetime import timedelta
from uuid import uuid4

from jose import jwt

from linkfolio.core.security import create_access_token, decode_access_token


def test_token_round_trip():
    user_id = uuid4()
    token = create_access_token(user_id, email="alice@example.com")

    data = decode_access_token(token)

    assert data is not None
    assert data.user_id == user_id
    assert data.email == "alice@example.com"


def test_expired_token_is_rejected():
    token = create_access_token(uuid4(), expires_delta=timedelta(seconds=-10))
    assert decode_access_token(token) is None


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({"sub": str(uuid4()), "exp": 4102444800}, "other-key", algorithm="HS256")
    assert decode_access_token(token) is None


def test_token_with_non_uuid_subject_is_rejected():
    token = jwt.encode({"sub": "not-a-uuid", "exp": 4102444800}, "test-secret-key", algorithm="HS256")
    assert decode_access_token(token) is None


def test_garbage_token_is_rejected():
    assert decode_access_token("not.a.token") is None
