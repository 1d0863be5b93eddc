# scholarhub/infra/jwt/flask_jwt_token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast

import jwt as pyjwt
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException

from scholarhub.services._shared.ports import TokenClaims, TokenDecodeError, TokenProvider

PURPOSE_CLAIM = "purpose"


@dataclass(slots=True)
class FlaskJWTTokenProvider(TokenProvider):
    """
    Adapter for Flask-JWT-Extended.

    Session and reset tokens are both HS256 access tokens; a reset token
    carries an extra ``purpose`` claim. Decoding accepts only the algorithms
    listed in ``JWT_DECODE_ALGORITHMS``.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def create_token(
        self,
        *,
        identity: int | str,
        expires_delta: timedelta,
        purpose: str | None = None,
    ) -> str:
        claims: dict[str, Any] = {}
        if purpose is not None:
            claims[PURPOSE_CLAIM] = purpose
        # Flask-JWT-Extended >= 4.7 requires ``sub`` to be a string.
        return cast(
            str,
            create_access_token(
                identity=str(identity),
                additional_claims=claims,
                expires_delta=expires_delta,
            ),
        )

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = cast(dict[str, Any], decode_token(token))
        except pyjwt.ExpiredSignatureError as exc:
            raise TokenDecodeError("expired") from exc
        except pyjwt.InvalidAlgorithmError as exc:
            raise TokenDecodeError("algorithm") from exc
        except pyjwt.InvalidTokenError as exc:
            raise TokenDecodeError("invalid") from exc
        except JWTExtendedException as exc:
            raise TokenDecodeError(type(exc).__name__) from exc

        try:
            subject = str(payload["sub"])
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=UTC)
        except (KeyError, TypeError, ValueError) as exc:
            raise TokenDecodeError("claims") from exc

        return TokenClaims(
            subject=subject,
            expires_at=expires_at,
            purpose=payload.get(PURPOSE_CLAIM),
            raw=payload,
        )
