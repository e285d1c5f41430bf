"""JWT access token creation and validation (ES256).

Tokens are the only source of a principal's roles: the guards in
``campus_access.api.dependencies`` rebuild the Principal from the signed
claims on every request and never consult client-side state.

Claims: sub, iss, aud, exp, iat, jti, roles, parent_of.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

import jwt
from cryptography.hazmat.primitives.asymmetric import ec

from campus_access.core.config import SETTINGS

# Dev/test: ephemeral EC key pair generated on import.
_private_key = ec.generate_private_key(ec.SECP256R1())
_public_key = _private_key.public_key()

ALGORITHM = "ES256"
ISSUER = "campus-access"
AUDIENCE = "campus-access"


def create_access_token(
    *,
    sub: str,
    roles: Iterable[str] = (),
    parent_of: Iterable[str] = (),
    ttl: timedelta | None = None,
) -> str:
    """Build and sign an access token.

    ``roles`` are written as given; unknown values are dropped later when
    the token is turned back into a Principal.
    """
    now = datetime.now(UTC)
    if ttl is None:
        ttl = timedelta(minutes=SETTINGS.access_token_ttl_min)
    payload = {
        "sub": sub,
        "iss": ISSUER,
        "aud": AUDIENCE,
        "exp": now + ttl,
        "iat": now,
        "jti": str(uuid.uuid4()),
        "roles": [str(r) for r in roles],
        "parent_of": [str(s) for s in parent_of],
    }
    return jwt.encode(payload, _private_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify signature and claims, return the payload.

    Pins the algorithm to ES256 (no alg:none or alg switching) and
    validates exp, iss and aud.

    Raises jwt.ExpiredSignatureError, jwt.InvalidTokenError on failure.
    """
    return jwt.decode(
        token,
        _public_key,
        algorithms=[ALGORITHM],
        issuer=ISSUER,
        audience=AUDIENCE,
        options={"require": ["sub", "exp", "iat", "jti"]},
    )
