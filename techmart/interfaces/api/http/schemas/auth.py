"""
===============================================================================
TARJETA CRC — schemas/auth.py
===============================================================================

Módulo:
    Schemas HTTP de Autenticación (registro, login, usuario actual)

Responsabilidades:
    - DTOs de request/response para /auth/*.
    - Normalizar email en el borde (trim + lower).

Notas:
    - La política de password NO se valida acá: la aplica el Credential Store y
      sus violaciones vuelven como REGISTRATION_REJECTED con la lista completa.
===============================================================================
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from .....identity.tokens import IssuedToken
from .....identity.users import UserView
from .base import ApiModel


class RegisterReq(ApiModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=512)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("email")
    @classmethod
    def normalizar_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginReq(ApiModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=512)

    @field_validator("email")
    @classmethod
    def normalizar_email(cls, v: str) -> str:
        return v.strip().lower()


class UserRes(ApiModel):
    id: UUID
    email: str
    first_name: str
    last_name: str

    @classmethod
    def from_view(cls, view: UserView) -> "UserRes":
        return cls(
            id=view.id,
            email=view.email,
            first_name=view.first_name,
            last_name=view.last_name,
        )


class AuthRes(ApiModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    expires_at: datetime
    user: UserRes

    @classmethod
    def build(cls, issued: IssuedToken, view: UserView) -> "AuthRes":
        return cls(
            token=issued.token,
            expires_in=issued.expires_in,
            expires_at=issued.expires_at,
            user=UserRes.from_view(view),
        )
