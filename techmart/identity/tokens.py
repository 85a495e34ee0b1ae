"""
===============================================================================
TARJETA CRC — identity/tokens.py
===============================================================================

Módulo:
    Emisor de Tokens (JWT de acceso, HS256)

Responsabilidades:
    - Emitir JWT firmados con id, email, roles, iss, aud, iat, exp, jti.
    - Validar JWT: firma, issuer, audience y expiración (sin tolerancia).
    - Traducir errores de PyJWT a una jerarquía propia (InvalidTokenError).

Colaboradores:
    - crosscutting.config.get_settings: secreto, issuer, audience, TTL.
    - identity.users: User / UserRole.
    - identity.auth_users: usa validate() en las dependencias FastAPI.
    - application.usecases.auth: usa issue() en register/login.

Decisiones de diseño:
    - Settings -> TokenSettings (snapshot inmutable) pasado explícitamente.
    - El reloj es inyectable: validate() es función pura de
      (token, claves configuradas, ahora).
    - Secreto vacío = error fatal de configuración al construir el emisor.
    - No loguear tokens ni secretos.
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, FrozenSet
from uuid import UUID, uuid4

import jwt

from ..crosscutting.config import Settings, get_settings
from ..crosscutting.exceptions import ConfigurationError
from .users import User, UserRole

# ---------------------------------------------------------------------------
# Constantes (evitan strings mágicos)
# ---------------------------------------------------------------------------

JWT_ALGORITHM: str = "HS256"

CLAIM_SUB: str = "sub"
CLAIM_EMAIL: str = "email"
CLAIM_ROLES: str = "roles"
CLAIM_ISS: str = "iss"
CLAIM_AUD: str = "aud"
CLAIM_IAT: str = "iat"
CLAIM_EXP: str = "exp"
CLAIM_JTI: str = "jti"
CLAIM_TYP: str = "typ"

TOKEN_TYPE_ACCESS: str = "access"

REQUIRED_CLAIMS = [CLAIM_SUB, CLAIM_EMAIL, CLAIM_ISS, CLAIM_AUD, CLAIM_IAT, CLAIM_EXP]


# ---------------------------------------------------------------------------
# Errores de validación
# ---------------------------------------------------------------------------


class InvalidTokenError(Exception):
    """Token mal formado, claims faltantes o tipo inválido."""

    reason: str = "invalid"


class TokenExpiredError(InvalidTokenError):
    reason = "expired"


class BadSignatureError(InvalidTokenError):
    reason = "bad_signature"


class IssuerMismatchError(InvalidTokenError):
    reason = "issuer_mismatch"


class AudienceMismatchError(InvalidTokenError):
    reason = "audience_mismatch"


# ---------------------------------------------------------------------------
# Contratos
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TokenSettings:
    """Settings de tokens (snapshot)."""

    secret: str
    issuer: str
    audience: str
    access_ttl_minutes: int

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenSettings":
        return cls(
            secret=settings.jwt_secret,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            access_ttl_minutes=settings.jwt_access_ttl_minutes,
        )


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_in: int
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Claims validados de un access token."""

    user_id: UUID
    email: str
    roles: FrozenSet[UserRole]
    issued_at: datetime
    expires_at: datetime
    token_id: str | None = None

    def has_any_role(self, roles) -> bool:
        return bool(self.roles & frozenset(roles))


def get_token_settings() -> TokenSettings:
    """Construye un snapshot de settings de tokens."""
    return TokenSettings.from_settings(get_settings())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Emisor
# ---------------------------------------------------------------------------


class TokenIssuer:
    """Emite y valida JWT de acceso."""

    def __init__(
        self,
        settings: TokenSettings,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not (settings.secret or "").strip():
            raise ConfigurationError("JWT signing key is not configured")
        if settings.access_ttl_minutes <= 0:
            raise ConfigurationError("JWT access TTL must be greater than 0")
        self._settings = settings
        self._clock = clock

    @property
    def access_ttl_seconds(self) -> int:
        return int(self._settings.access_ttl_minutes * 60)

    def issue(self, user: User) -> IssuedToken:
        issued_at = int(self._clock().timestamp())
        expires_in = self.access_ttl_seconds
        # exp en segundos enteros: exp - iat == TTL exacto.
        expires = issued_at + expires_in
        expires_at = datetime.fromtimestamp(expires, tz=timezone.utc)

        payload: dict[str, object] = {
            CLAIM_SUB: str(user.id),
            CLAIM_EMAIL: user.email,
            CLAIM_ROLES: sorted(role.value for role in user.roles),
            CLAIM_ISS: self._settings.issuer,
            CLAIM_AUD: self._settings.audience,
            CLAIM_IAT: issued_at,
            CLAIM_EXP: expires,
            CLAIM_JTI: uuid4().hex,
            CLAIM_TYP: TOKEN_TYPE_ACCESS,
        }

        token = jwt.encode(payload, self._settings.secret, algorithm=JWT_ALGORITHM)
        return IssuedToken(token=token, expires_in=expires_in, expires_at=expires_at)

    def validate(self, token: str) -> TokenClaims:
        """
        Decodifica y valida un JWT de acceso.

        Errores:
            - BadSignatureError: firma no verifica con la clave configurada.
            - IssuerMismatchError / AudienceMismatchError.
            - TokenExpiredError: now >= exp (sin leeway).
            - InvalidTokenError: mal formado o claims faltantes.
        """
        if not token:
            raise InvalidTokenError("Empty token")

        # R: exp/iat se verifican contra el reloj inyectado, no contra time.time().
        try:
            payload = jwt.decode(
                token,
                self._settings.secret,
                algorithms=[JWT_ALGORITHM],
                audience=self._settings.audience,
                issuer=self._settings.issuer,
                leeway=0,
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError as exc:
            raise BadSignatureError("Signature verification failed") from exc
        except jwt.InvalidIssuerError as exc:
            raise IssuerMismatchError("Issuer mismatch") from exc
        except jwt.InvalidAudienceError as exc:
            raise AudienceMismatchError("Audience mismatch") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Malformed token") from exc

        return self._claims_from_payload(payload)

    def _claims_from_payload(self, payload: dict) -> TokenClaims:
        token_type = payload.get(CLAIM_TYP)
        if token_type is not None and token_type != TOKEN_TYPE_ACCESS:
            raise InvalidTokenError("Unexpected token type")

        try:
            exp = int(payload[CLAIM_EXP])
            iat = int(payload[CLAIM_IAT])
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError("Invalid time claims") from exc

        if self._clock().timestamp() >= exp:
            raise TokenExpiredError("Token expired")

        try:
            user_id = UUID(str(payload[CLAIM_SUB]))
            roles = UserRole.parse_many(payload.get(CLAIM_ROLES) or [])
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError("Invalid subject or roles") from exc

        email = str(payload.get(CLAIM_EMAIL) or "")
        if not email:
            raise InvalidTokenError("Missing email claim")

        jti = payload.get(CLAIM_JTI)
        return TokenClaims(
            user_id=user_id,
            email=email,
            roles=roles,
            issued_at=datetime.fromtimestamp(iat, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc),
            token_id=str(jti) if jti else None,
        )
