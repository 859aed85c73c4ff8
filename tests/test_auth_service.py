from datetime import datetime, timedelta, timezone
import jwt
import pytest

from imagedb.auth_service import service
from imagedb.auth_service.models import Identity, LoginRequest
from imagedb.settings import settings
from imagedb.exceptions import UnauthorizedException, UserNotFoundException


def test_hash_and_verify_password():
    hashed = service.hash_password("pw")
    assert hashed != "pw"
    assert service.verify_password("pw", hashed)
    assert not service.verify_password("other", hashed)


def test_verify_password_non_bcrypt_hash():
    assert service.verify_password("pw", "plaintext") is False


def test_token_round_trip():
    token = service.create_token(Identity(email="a@b.c", name="A"))
    identity = service.decode_token(token)
    assert identity.email == "a@b.c"
    assert identity.name == "A"


def test_token_expires_after_configured_days():
    token = service.create_token(Identity(email="a@b.c"))
    payload = jwt.decode(token, settings.session_secret, algorithms=["HS256"])
    lifetime = datetime.fromtimestamp(payload["exp"], tz=timezone.utc) - datetime.now(timezone.utc)
    assert timedelta(days=settings.token_expire_days) - timedelta(minutes=1) < lifetime
    assert lifetime <= timedelta(days=settings.token_expire_days)


def test_decode_wrong_secret():
    token = jwt.encode(
        {"email": "a@b.c", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        "another-secret-that-is-long-enough-for-hs256",
        algorithm="HS256",
    )
    with pytest.raises(UnauthorizedException):
        service.decode_token(token)


def test_decode_expired():
    token = jwt.encode(
        {"email": "a@b.c", "exp": datetime.now(timezone.utc) - timedelta(seconds=5)},
        settings.session_secret,
        algorithm="HS256",
    )
    with pytest.raises(UnauthorizedException) as exc:
        service.decode_token(token)
    assert exc.value.status_code == 401


def test_decode_garbage():
    with pytest.raises(UnauthorizedException):
        service.decode_token("not-a-token")


def test_decode_without_email():
    token = jwt.encode({"name": "x"}, settings.session_secret, algorithm="HS256")
    with pytest.raises(UnauthorizedException):
        service.decode_token(token)


# ------------------------------
# authenticate
# ------------------------------

def test_authenticate_unknown_user(mocker):
    mock_db = mocker.Mock()
    mock_db.find_user.return_value = None
    with pytest.raises(UserNotFoundException):
        service.authenticate(mock_db, LoginRequest(email="x@y.z", password="pw"))


def test_authenticate_wrong_password(mocker, password_hash):
    mock_db = mocker.Mock()
    mock_db.find_user.return_value = {"email": "a@b.c", "name": "A", "password": password_hash}
    with pytest.raises(UnauthorizedException):
        service.authenticate(mock_db, LoginRequest(email="a@b.c", password="wrong"))


def test_authenticate_success(mocker):
    mock_db = mocker.Mock()
    mock_db.find_user.return_value = {"email": "a@b.c", "name": "A", "password": service.hash_password("pw")}
    token = service.authenticate(mock_db, LoginRequest(email="a@b.c", password="pw"))
    assert service.decode_token(token) == Identity(email="a@b.c", name="A")


# ------------------------------
# seed_admin
# ------------------------------

def test_seed_admin_configured(mocker):
    mocker.patch.object(settings, "admin_email", "root@example.com")
    mocker.patch.object(settings, "admin_name", "Root")
    mocker.patch.object(settings, "admin_password", "pw")
    mock_db = mocker.Mock()

    service.seed_admin(mock_db)

    kwargs = mock_db.upsert_user.call_args.kwargs
    assert kwargs["email"] == "root@example.com"
    assert kwargs["name"] == "Root"
    assert service.verify_password("pw", kwargs["password_hash"])


def test_seed_admin_not_configured(mocker):
    mocker.patch.object(settings, "admin_email", None)
    mock_db = mocker.Mock()
    service.seed_admin(mock_db)
    mock_db.upsert_user.assert_not_called()
