# bontemp/core/security.py
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Any, Dict, Optional

from flask import request, g
from firebase_admin import auth as firebase_auth

ANONYMOUS_PROVIDER = 'anonymous'


@dataclass(frozen=True)
class CallerIdentity:
    """Verified claims of the caller, taken from a Firebase ID token."""
    uid: str
    name: Optional[str] = None
    picture: Optional[str] = None
    sign_in_provider: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return self.sign_in_provider == ANONYMOUS_PROVIDER

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> 'CallerIdentity':
        firebase_claims = claims.get('firebase') or {}
        return cls(
            uid=claims.get('uid') or claims['sub'],
            name=claims.get('name'),
            picture=claims.get('picture'),
            sign_in_provider=firebase_claims.get('sign_in_provider')
        )


def identity_from_header(auth_header: Optional[str]) -> Optional[CallerIdentity]:
    """
    Verifies the Bearer token of an Authorization header.

    A missing header, a malformed header or a token that fails verification all
    mean "no verified caller", so the caller gets None rather than an error.
    """
    if not auth_header or not auth_header.startswith("Bearer "):
        return None

    token = auth_header.split(" ", 1)[1].strip()
    if not token:
        return None

    try:
        claims = firebase_auth.verify_id_token(token)
    except (ValueError, firebase_auth.InvalidIdTokenError, firebase_auth.CertificateFetchError) as e:
        logging.warning(f"ID token rejected: {type(e).__name__}")
        return None

    return CallerIdentity.from_claims(claims)


def identity_optional(f):
    """Stores the verified caller (or None) in ``g.caller`` before running the view."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.caller = identity_from_header(request.headers.get("Authorization"))
        return f(*args, **kwargs)

    return decorated_function
