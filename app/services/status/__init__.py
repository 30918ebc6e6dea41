"""
Modulo de status exibido.

Estrutura:
- types: Enums e snapshots de contadores
- campanha: Status de campanhas (combina status gravado + contadores)
- evento: Status de eventos (apenas contadores)
"""
from app.services.status.campanha import (
    badge_status_campanha,
    calcular_status_campanha,
    normalizar_status_base,
)
from app.services.status.evento import (
    badge_status_evento,
    calcular_status_evento,
    status_exibicao_evento,
)
from app.services.status.types import (
    BadgeStatus,
    ContadoresCampanha,
    ContadoresEvento,
    StatusBaseCampanha,
    StatusCampanha,
    StatusEvento,
)

__all__ = [
    "BadgeStatus",
    "ContadoresCampanha",
    "ContadoresEvento",
    "StatusBaseCampanha",
    "StatusCampanha",
    "StatusEvento",
    "badge_status_campanha",
    "badge_status_evento",
    "calcular_status_campanha",
    "calcular_status_evento",
    "normalizar_status_base",
    "status_exibicao_evento",
]
