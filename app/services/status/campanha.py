"""
Status exibido de campanhas.

O status gravado (StatusBaseCampanha) expressa a intencao do usuario;
os contadores de mensagens expressam o progresso real. O status exibido
combina os dois e nunca e persistido.
"""
from typing import Optional, Union

from app.services.status.types import (
    BadgeStatus,
    ContadoresCampanha,
    StatusBaseCampanha,
    StatusCampanha,
)

# Valores legados gravados pelo frontend antigo
_ALIASES_STATUS_BASE = {
    "active": StatusBaseCampanha.EM_EXECUCAO,
}

_BADGES_CAMPANHA = {
    StatusCampanha.RASCUNHO: BadgeStatus("Rascunho", "secondary"),
    StatusCampanha.AGENDADA: BadgeStatus("Agendada", "secondary"),
    StatusCampanha.ENVIANDO: BadgeStatus("Enviando", "default"),
    StatusCampanha.PAUSADA: BadgeStatus("Pausada", "secondary"),
    StatusCampanha.CANCELADA: BadgeStatus("Cancelada", "outline"),
    StatusCampanha.FALHOU: BadgeStatus("Falhada", "destructive"),
    StatusCampanha.CONCLUIDA: BadgeStatus(
        "Concluído", "secondary", "bg-green-500/10 text-green-600 border-green-200"
    ),
}

_BADGE_DESCONHECIDO = BadgeStatus("Desconhecida", "outline")


def normalizar_status_base(
    valor: Union[StatusBaseCampanha, str, None],
) -> StatusBaseCampanha:
    """
    Converte o valor gravado no banco para StatusBaseCampanha.

    None e valores desconhecidos viram RASCUNHO.
    """
    if isinstance(valor, StatusBaseCampanha):
        return valor
    if not valor:
        return StatusBaseCampanha.RASCUNHO

    texto = str(getattr(valor, "value", valor)).strip().lower()
    if texto in _ALIASES_STATUS_BASE:
        return _ALIASES_STATUS_BASE[texto]
    try:
        return StatusBaseCampanha(texto)
    except ValueError:
        return StatusBaseCampanha.RASCUNHO


def calcular_status_campanha(
    contadores: Optional[ContadoresCampanha],
    status_base: Union[StatusBaseCampanha, str, None] = None,
) -> StatusCampanha:
    """
    Calcula o status exibido de uma campanha.

    Regras avaliadas em ordem, a primeira que casar vence:
    1. Sem mensagens: reflete o status gravado.
    2. Fila nao vazia: cancelada > pausada > agendada > enviando.
    3. Fila vazia e enviadas >= total: concluida (salvo cancelada).
    4. Fila vazia e enviadas < total: falhou (salvo cancelada).

    Os contadores nao sao validados; negativos ou incoerentes seguem
    as mesmas regras.

    Args:
        contadores: Snapshot de contadores (None = tudo zero)
        status_base: Status gravado (None = rascunho)

    Returns:
        StatusCampanha
    """
    contadores = contadores or ContadoresCampanha()
    base = normalizar_status_base(status_base)

    total = contadores.total_mensagens
    fila = contadores.mensagens_na_fila
    enviadas = contadores.mensagens_enviadas

    if total <= 0:
        if base == StatusBaseCampanha.CANCELADA:
            return StatusCampanha.CANCELADA
        if base == StatusBaseCampanha.CONCLUIDA:
            return StatusCampanha.CONCLUIDA
        if base == StatusBaseCampanha.PAUSADA:
            return StatusCampanha.PAUSADA
        if base == StatusBaseCampanha.AGENDADA:
            return StatusCampanha.AGENDADA
        return StatusCampanha.RASCUNHO

    if fila > 0:
        if base == StatusBaseCampanha.CANCELADA:
            return StatusCampanha.CANCELADA
        if base == StatusBaseCampanha.PAUSADA:
            return StatusCampanha.PAUSADA
        if base == StatusBaseCampanha.AGENDADA:
            return StatusCampanha.AGENDADA
        return StatusCampanha.ENVIANDO

    if base == StatusBaseCampanha.CANCELADA:
        return StatusCampanha.CANCELADA

    if enviadas >= total:
        return StatusCampanha.CONCLUIDA

    # Fila vazia sem bater o total: erro de envio ou contagem divergente
    return StatusCampanha.FALHOU


def badge_status_campanha(status: Union[StatusCampanha, str, None]) -> BadgeStatus:
    """Retorna label/variant do badge de uma campanha."""
    try:
        return _BADGES_CAMPANHA[StatusCampanha(status)]
    except ValueError:
        return _BADGE_DESCONHECIDO
