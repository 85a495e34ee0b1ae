"""
Name: Token Issuer Tests

Responsibilities:
  - Emisión de JWT (claims, roles, expiración)
  - Validación: firma, issuer, audience, expiración exacta (sin leeway)
  - Fail-fast de configuración (secreto vacío / TTL inválido)
"""

from datetime import timedelta
from uuid import UUID

import jwt
import pytest

from techmart.crosscutting.exceptions import ConfigurationError
from techmart.identity.tokens import (
    AudienceMismatchError,
    BadSignatureError,
    InvalidTokenError,
    IssuerMismatchError,
    TokenExpiredError,
    TokenIssuer,
    TokenSettings,
)
from techmart.identity.users import UserRole

pytestmark = pytest.mark.unit


class _MutableClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


def _issuer(settings, clock=None, **overrides) -> TokenIssuer:
    values = dict(
        secret=settings.secret,
        issuer=settings.issuer,
        audience=settings.audience,
        access_ttl_minutes=settings.access_ttl_minutes,
    )
    values.update(overrides)
    if clock is None:
        return TokenIssuer(TokenSettings(**values))
    return TokenIssuer(TokenSettings(**values), clock=clock)


class TestIssue:
    def test_issue_embeds_identity_claims(self, token_settings, sample_user, fixed_clock):
        issued = _issuer(token_settings, fixed_clock).issue(sample_user)

        payload = jwt.decode(
            issued.token,
            token_settings.secret,
            algorithms=["HS256"],
            audience=token_settings.audience,
            options={"verify_exp": False},
        )
        assert payload["sub"] == str(sample_user.id)
        assert payload["email"] == sample_user.email
        assert payload["roles"] == ["Customer"]
        assert payload["iss"] == "techmart-identity"
        assert payload["aud"] == "techmart-clients"
        assert payload["exp"] - payload["iat"] == 3600
        assert payload["jti"]

    def test_issue_reports_expiry(self, token_settings, sample_user, fixed_clock):
        issued = _issuer(token_settings, fixed_clock).issue(sample_user)

        assert issued.expires_in == 3600
        assert issued.expires_at == fixed_clock() + timedelta(minutes=60)

    def test_sub_second_issue_time_keeps_full_lifetime(
        self, token_settings, sample_user, fixed_clock
    ):
        issued_at = fixed_clock() + timedelta(milliseconds=900)
        issued = _issuer(token_settings, lambda: issued_at).issue(sample_user)

        payload = jwt.decode(
            issued.token,
            token_settings.secret,
            algorithms=["HS256"],
            audience=token_settings.audience,
            options={"verify_exp": False},
        )
        assert payload["iat"] == int(fixed_clock().timestamp())
        assert payload["exp"] - payload["iat"] == 3600
        assert issued.expires_at == fixed_clock() + timedelta(minutes=60)

    def test_each_token_has_unique_id(self, token_settings, sample_user, fixed_clock):
        issuer = _issuer(token_settings, fixed_clock)

        first = issuer.validate(issuer.issue(sample_user).token)
        second = issuer.validate(issuer.issue(sample_user).token)

        assert first.token_id != second.token_id


class TestValidate:
    def test_round_trip_returns_claims(self, token_settings, sample_user, fixed_clock):
        issuer = _issuer(token_settings, fixed_clock)

        claims = issuer.validate(issuer.issue(sample_user).token)

        assert isinstance(claims.user_id, UUID)
        assert claims.user_id == sample_user.id
        assert claims.email == sample_user.email
        assert claims.roles == frozenset({UserRole.CUSTOMER})
        assert claims.has_any_role([UserRole.CUSTOMER, UserRole.ADMIN])
        assert not claims.has_any_role([UserRole.ADMIN])

    def test_token_expires_exactly_at_ttl(self, token_settings, sample_user, fixed_clock):
        clock = _MutableClock(fixed_clock())
        issuer = _issuer(token_settings, clock)
        token = issuer.issue(sample_user).token

        clock.now = fixed_clock() + timedelta(minutes=60) - timedelta(seconds=1)
        assert issuer.validate(token).email == sample_user.email

        clock.now = fixed_clock() + timedelta(minutes=60)
        with pytest.raises(TokenExpiredError):
            issuer.validate(token)

    def test_rejects_token_signed_with_other_secret(
        self, token_settings, sample_user, fixed_clock
    ):
        forged = _issuer(token_settings, fixed_clock, secret="another-secret-value-0123456789abcdef")
        token = forged.issue(sample_user).token

        with pytest.raises(BadSignatureError):
            _issuer(token_settings, fixed_clock).validate(token)

    def test_rejects_issuer_mismatch(self, token_settings, sample_user, fixed_clock):
        token = _issuer(token_settings, fixed_clock, issuer="evil").issue(sample_user).token

        with pytest.raises(IssuerMismatchError):
            _issuer(token_settings, fixed_clock).validate(token)

    def test_rejects_audience_mismatch(self, token_settings, sample_user, fixed_clock):
        token = (
            _issuer(token_settings, fixed_clock, audience="other-app")
            .issue(sample_user)
            .token
        )

        with pytest.raises(AudienceMismatchError):
            _issuer(token_settings, fixed_clock).validate(token)

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    def test_rejects_malformed_tokens(self, token_settings, token):
        with pytest.raises(InvalidTokenError):
            _issuer(token_settings).validate(token)

    def test_rejects_token_without_required_claims(self, token_settings):
        token = jwt.encode(
            {"sub": "x", "iss": token_settings.issuer, "aud": token_settings.audience},
            token_settings.secret,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            _issuer(token_settings).validate(token)

    def test_rejects_unknown_role(self, token_settings, sample_user, fixed_clock):
        now = int(fixed_clock().timestamp())
        token = jwt.encode(
            {
                "sub": str(sample_user.id),
                "email": sample_user.email,
                "roles": ["superuser"],
                "iss": token_settings.issuer,
                "aud": token_settings.audience,
                "iat": now,
                "exp": now + 60,
            },
            token_settings.secret,
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            _issuer(token_settings, fixed_clock).validate(token)


class TestConfiguration:
    @pytest.mark.parametrize("secret", ["", "   "])
    def test_empty_secret_fails_fast(self, token_settings, secret):
        with pytest.raises(ConfigurationError):
            _issuer(token_settings, secret=secret)

    def test_non_positive_ttl_fails_fast(self, token_settings):
        with pytest.raises(ConfigurationError):
            _issuer(token_settings, access_ttl_minutes=0)
