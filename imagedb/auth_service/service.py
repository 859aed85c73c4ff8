from datetime import datetime, timedelta, timezone
import logging
import bcrypt
import jwt
from pymongo.errors import PyMongoError

from imagedb.storage.mongo import MongoService
from imagedb.auth_service.models import Identity, LoginRequest
from imagedb.exceptions import DatabaseException, UnauthorizedException, UserNotFoundException
from imagedb.settings import settings

log = logging.getLogger(__name__)

ALGORITHM = "HS256"

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False

def create_token(identity: Identity) -> str:
    """Signs a token embedding the identity, valid for the configured number of days."""
    payload = identity.model_dump()
    payload["exp"] = datetime.now(timezone.utc) + timedelta(days=settings.token_expire_days)
    return jwt.encode(payload, settings.session_secret, algorithm=ALGORITHM)

def decode_token(token: str) -> Identity:
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedException("Token has expired.")
    except jwt.InvalidTokenError:
        raise UnauthorizedException("Invalid token.")
    if "email" not in payload:
        raise UnauthorizedException("Invalid token.")
    return Identity(email=payload["email"], name=payload.get("name"))

def authenticate(db: MongoService, credentials: LoginRequest) -> str:
    """Checks the credentials against the users collection and issues a token."""
    try:
        user = db.find_user(credentials.email)
    except PyMongoError as e:
        log.error(f"MongoDB find_user failed: {e}")
        raise DatabaseException(f"Failed to look up user: {e}")
    if user is None:
        raise UserNotFoundException(credentials.email)
    if not verify_password(credentials.password, user.get("password", "")):
        log.info("Login rejected for %s", credentials.email)
        raise UnauthorizedException("Incorrect password.")
    log.info("Login accepted for %s", credentials.email)
    return create_token(Identity(email=user["email"], name=user.get("name")))

def seed_admin(db: MongoService):
    """Creates or refreshes the single configured account, if one is configured."""
    if not (settings.admin_email and settings.admin_password):
        log.debug("No admin account configured")
        return
    db.upsert_user(
        email=settings.admin_email,
        name=settings.admin_name or settings.admin_email,
        password_hash=hash_password(settings.admin_password),
    )
