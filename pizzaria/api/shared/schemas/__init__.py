"""
Schemas compartilhados entre diferentes domínios
"""

from pizzaria.api.shared.schemas.schema_resultado import ResultadoAcao

__all__ = ["ResultadoAcao"]
