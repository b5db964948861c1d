from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ROLE_ADMIN = "ADMIN"
ROLE_STAFF = "STAFF"


def normalize_role(role: Any) -> str:
    """
    Normaliza o role vindo do backend:
    - número: 1 = ADMIN, qualquer outro = STAFF
    - texto: em maiúsculas ("admin" -> "ADMIN")
    - qualquer outra coisa: STAFF
    """
    if isinstance(role, bool):
        return ROLE_STAFF
    if isinstance(role, int):
        return ROLE_ADMIN if role == 1 else ROLE_STAFF
    if isinstance(role, str) and role.strip():
        return role.strip().upper()
    return ROLE_STAFF


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class Usuario(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    email: str = ""
    role: str = ROLE_STAFF

    @field_validator("id", mode="before")
    @classmethod
    def _id_como_texto(cls, v):
        return str(v) if v is not None else v

    @field_validator("role", mode="before")
    @classmethod
    def _role(cls, v):
        return normalize_role(v)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


class AuthResponse(Usuario):
    token: str


class LoginResponse(BaseModel):
    success: bool = True
    redirect_to: Optional[str] = "/dashboard"
