"""
Status exibido de eventos.

Diferente das campanhas, o calculo nao consulta status gravado: apenas
os contadores. Ativo/cancelado vem do campo status do evento e sao
combinados em status_exibicao_evento.
"""
from typing import Optional, Union

from app.services.status.types import BadgeStatus, ContadoresEvento, StatusEvento

_BADGES_EVENTO = {
    StatusEvento.RASCUNHO: BadgeStatus("Rascunho", "outline", "text-muted-foreground"),
    StatusEvento.ENVIANDO: BadgeStatus(
        "Enviando", "default", "bg-blue-500/10 text-blue-600 border-blue-200"
    ),
    StatusEvento.ATIVO: BadgeStatus("Ativo", "default", "bg-primary/10 text-primary"),
    StatusEvento.CONCLUIDO: BadgeStatus(
        "Concluído", "secondary", "bg-green-500/10 text-green-600 border-green-200"
    ),
    StatusEvento.FALHOU: BadgeStatus(
        "Falhado", "destructive", "bg-red-500/10 text-red-600 border-red-200"
    ),
    StatusEvento.CANCELADO: BadgeStatus(
        "Cancelado", "destructive", "bg-destructive/10 text-destructive"
    ),
}


def calcular_status_evento(contadores: Optional[ContadoresEvento] = None) -> StatusEvento:
    """
    Calcula o status de um evento a partir dos contadores.

    - Sem contadores ou sem mensagens: rascunho
    - Fila nao vazia: enviando
    - Houve erro e nada foi entregue: falhou
    - Caso contrario: concluido
    """
    if contadores is None or contadores.total_mensagens == 0:
        return StatusEvento.RASCUNHO

    if contadores.mensagens_na_fila > 0:
        return StatusEvento.ENVIANDO

    if contadores.mensagens_com_erro > 0 and contadores.mensagens_entregues == 0:
        return StatusEvento.FALHOU

    return StatusEvento.CONCLUIDO


def _status_gravado(valor: Union[StatusEvento, str, None]) -> StatusEvento:
    try:
        return StatusEvento(valor)
    except ValueError:
        return StatusEvento.RASCUNHO


def status_exibicao_evento(
    status_armazenado: Union[StatusEvento, str, None],
    contadores: Optional[ContadoresEvento] = None,
) -> StatusEvento:
    """
    Escolhe o status do badge de um evento.

    Cancelado gravado sempre prevalece. Sem snapshot de contadores, exibe o
    status gravado; com snapshot, exibe o status calculado.
    """
    gravado = _status_gravado(status_armazenado)

    if gravado == StatusEvento.CANCELADO:
        return StatusEvento.CANCELADO

    if contadores is None:
        return gravado

    return calcular_status_evento(contadores)


def badge_status_evento(status: Union[StatusEvento, str, None]) -> BadgeStatus:
    """Retorna label/variant do badge de um evento (desconhecido = rascunho)."""
    try:
        return _BADGES_EVENTO[StatusEvento(status)]
    except ValueError:
        return _BADGES_EVENTO[StatusEvento.RASCUNHO]
