from __future__ import annotations

from datetime import date
from typing import Any, List, Optional

from pizzaria.api.caixas.schemas.schema_caixa import CaixaStatus, TrocoResponse, Venda
from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao
from pizzaria.core.context import AppContext
from pizzaria.core.http.client import HttpRequestOptions
from pizzaria.core.http.exceptions import HttpClientError, ServerUnreachableError
from pizzaria.utils.formatacao import reais_para_centavos
from pizzaria.utils.logger import logger


def _endpoint_indisponivel(acao: str, endpoint: str) -> str:
    return (
        f"Funcionalidade não disponível: O endpoint de {acao} de caixa não está implementado "
        f"no backend. Por favor, implemente o endpoint {endpoint} no servidor."
    )


def calcular_troco(recebido_reais: float, total_centavos: int) -> TrocoResponse:
    """Troco em centavos; nunca negativo."""
    recebido = reais_para_centavos(recebido_reais)
    return TrocoResponse(
        total=total_centavos,
        recebido=recebido,
        troco=max(0, recebido - total_centavos),
    )


class CaixaService:
    def __init__(self, ctx: AppContext):
        self.api = ctx.api

    async def obter_status(self, token: Optional[str]) -> CaixaStatus:
        """Status do caixa. Endpoint ausente ou qualquer erro -> caixa fechado zerado."""
        try:
            dados = await self.api.get("/api/caixa/status", HttpRequestOptions(token=token, silent404=True))
            if not dados:
                return CaixaStatus()
            return CaixaStatus.model_validate(dados)
        except Exception as e:
            logger.warning(f"[Caixa] Status indisponível, usando padrão: {e}")
            return CaixaStatus()

    async def abrir_caixa(self, valor_reais: float, token: Optional[str]) -> ResultadoAcao:
        if not token:
            return ResultadoAcao.falha("Erro ao abrir caixa")
        if valor_reais is None or valor_reais <= 0:
            return ResultadoAcao.falha("Por favor, informe um valor inicial válido.")

        centavos = reais_para_centavos(valor_reais)
        try:
            await self.api.post(
                "/api/caixa/open", {"initialAmount": centavos}, HttpRequestOptions(token=token)
            )
        except HttpClientError as e:
            logger.error(f"[Caixa] Erro ao abrir caixa: {e}")
            return ResultadoAcao.falha(self._mensagem(e, "abertura", "POST /caixa/open", "Erro ao abrir caixa"))

        logger.info(f"[Caixa] Caixa aberto com {centavos} centavos")
        return ResultadoAcao.ok()

    async def fechar_caixa(self, token: Optional[str]) -> ResultadoAcao:
        if not token:
            return ResultadoAcao.falha("Erro ao fechar caixa")
        try:
            await self.api.post("/api/caixa/close", None, HttpRequestOptions(token=token))
        except HttpClientError as e:
            logger.error(f"[Caixa] Erro ao fechar caixa: {e}")
            return ResultadoAcao.falha(
                self._mensagem(e, "fechamento", "POST /caixa/close", "Erro ao fechar caixa")
            )
        logger.info("[Caixa] Caixa fechado")
        return ResultadoAcao.ok()

    @staticmethod
    def _mensagem(erro: HttpClientError, acao: str, endpoint: str, padrao: str) -> str:
        if isinstance(erro, ServerUnreachableError):
            return erro.message
        if erro.status_code in (404, 405, 501):
            return _endpoint_indisponivel(acao, endpoint)
        return f"{padrao}. Verifique se o backend está configurado corretamente."

    async def listar_vendas(self, token: Optional[str], data: Optional[date] = None) -> List[Venda]:
        dia = (data or date.today()).isoformat()
        dados: Any = await self.api.get(
            f"/api/caixa/sales?date={dia}", HttpRequestOptions(token=token, silent404=True)
        )
        if isinstance(dados, dict):
            dados = dados.get("data") or dados.get("items")
        return [Venda.model_validate(v) for v in (dados or [])]

    async def obter_venda(self, venda_id: str, token: Optional[str]) -> Optional[Venda]:
        dados = await self.api.get(
            f"/api/caixa/sales/{venda_id}", HttpRequestOptions(token=token, silent404=True)
        )
        return Venda.model_validate(dados) if dados else None
