from fastapi import HTTPException, status

from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao


def resultado_ou_erro(resultado: ResultadoAcao, status_code: int = status.HTTP_400_BAD_REQUEST) -> ResultadoAcao:
    """Levanta HTTPException com a mensagem da ação quando ela falha."""
    if not resultado.success:
        raise HTTPException(status_code=status_code, detail=resultado.error)
    return resultado
