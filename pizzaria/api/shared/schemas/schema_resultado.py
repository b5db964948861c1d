from typing import Any, Optional

from pydantic import BaseModel


class ResultadoAcao(BaseModel):
    """Resultado devolvido pelas ações para a interface: {success, error}."""

    success: bool
    error: str = ""
    data: Optional[Any] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ResultadoAcao":
        return cls(success=True, error="", data=data)

    @classmethod
    def falha(cls, error: str) -> "ResultadoAcao":
        return cls(success=False, error=error)
