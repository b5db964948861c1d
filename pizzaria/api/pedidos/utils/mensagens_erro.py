from typing import Optional

from pizzaria.core.http.exceptions import HttpClientError, ServerUnreachableError

MSG_SESSAO_EXPIRADA = "Sessão expirada. Faça login novamente."
MSG_PEDIDO_NAO_ENCONTRADO = "Pedido não encontrado. Ele pode ter sido removido."


def classificar_erro(
    erro: Exception,
    padrao: str,
    *,
    validacao: Optional[str] = None,
    nao_encontrado: str = MSG_PEDIDO_NAO_ENCONTRADO,
) -> str:
    """
    Converte uma exceção da camada HTTP em mensagem legível para a interface.

    - 400 -> `validacao` (ou a mensagem do backend com dica de preenchimento)
    - 401 -> sessão expirada
    - 404 -> `nao_encontrado`
    - servidor inacessível -> mensagem da própria exceção
    """
    if isinstance(erro, ServerUnreachableError):
        return erro.message

    if isinstance(erro, HttpClientError):
        status_code = erro.status_code
        if status_code == 400:
            return validacao or (
                f"{padrao}: {erro.message}. "
                f"Verifique se todos os campos obrigatórios foram preenchidos corretamente."
            )
        if status_code == 401:
            return MSG_SESSAO_EXPIRADA
        if status_code == 404:
            return nao_encontrado
        return erro.message or padrao

    return str(erro) or padrao
