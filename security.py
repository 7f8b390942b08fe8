from datetime import datetime, timedelta, timezone

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

import config
from errors import ForbiddenError


# ------------------------------------------------------------
# Passwords
# ------------------------------------------------------------

def hash_password(password):
    return generate_password_hash(password, method=config.PASSWORD_HASH_METHOD)


def verify_password(password_hash, password):
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


# ------------------------------------------------------------
# Signed download tokens
# One token grants access to one stored file until it expires.
# ------------------------------------------------------------

def issue_file_token(filename, ttl_seconds=None):
    ttl = ttl_seconds if ttl_seconds is not None else config.FILE_TOKEN_TTL_SECONDS
    payload = {
        "file": filename,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=ttl),
    }
    return jwt.encode(payload, config.FILE_TOKEN_SECRET, algorithm=config.FILE_TOKEN_ALGORITHM)


def check_file_token(token, filename):
    if not token:
        raise ForbiddenError("Unauthorized access")
    try:
        payload = jwt.decode(token, config.FILE_TOKEN_SECRET, algorithms=[config.FILE_TOKEN_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ForbiddenError("Download link has expired")
    except jwt.InvalidTokenError:
        raise ForbiddenError("Unauthorized access")
    if payload.get("file") != filename:
        raise ForbiddenError("Unauthorized access")
    return payload
