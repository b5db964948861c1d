from decimal import ROUND_HALF_UP, Decimal
from typing import Union


def formatar_preco(centavos: Union[int, float, None]) -> str:
    """Formata um valor em centavos como moeda brasileira (ex.: 1250 -> 'R$ 12,50')."""
    reais = Decimal(centavos or 0) / 100
    reais = reais.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sinal = "-" if reais < 0 else ""
    texto = f"{abs(reais):,.2f}"
    # 1,234.56 -> 1.234,56
    texto = texto.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sinal}R$ {texto}"


def reais_para_centavos(valor: Union[int, float, Decimal, None]) -> int:
    """Converte reais para centavos arredondando para o inteiro mais próximo."""
    if not valor:
        return 0
    return int((Decimal(str(valor)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
