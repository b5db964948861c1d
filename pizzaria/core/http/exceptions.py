from typing import Optional


class HttpClientError(Exception):
    """Erro base das chamadas à API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class HttpError(HttpClientError):
    """Resposta HTTP fora da faixa 2xx."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message, status_code=status_code)


class ServerUnreachableError(HttpClientError):
    """Falha de conexão com o backend (recusada, timeout, DNS)."""

    def __init__(self, base_url: str):
        self.base_url = base_url
        super().__init__(
            f"Não foi possível conectar ao servidor em {base_url}. "
            f"Verifique se o backend está rodando e acessível."
        )
