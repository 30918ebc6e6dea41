"""
Tipos e enums de status de campanhas e eventos.

Os valores dos enums sao as strings trocadas com o banco e o frontend.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class StatusBaseCampanha(str, Enum):
    """Status persistido pelas acoes de gestao da campanha."""

    RASCUNHO = "draft"
    AGENDADA = "scheduled"
    EM_EXECUCAO = "running"
    PAUSADA = "paused"
    CANCELADA = "cancelled"
    CONCLUIDA = "completed"


class StatusCampanha(str, Enum):
    """Status exibido da campanha, calculado a cada leitura."""

    RASCUNHO = "draft"
    AGENDADA = "scheduled"
    ENVIANDO = "sending"
    PAUSADA = "paused"
    CANCELADA = "cancelled"
    FALHOU = "failed"
    CONCLUIDA = "completed"


class StatusEvento(str, Enum):
    """
    Status exibido do evento.

    ATIVO e CANCELADO nunca sao derivados dos contadores; vem do campo
    status gravado no evento.
    """

    RASCUNHO = "draft"
    ENVIANDO = "sending"
    CONCLUIDO = "completed"
    FALHOU = "failed"
    ATIVO = "active"
    CANCELADO = "cancelled"


def _inteiro(data: dict, *chaves: str) -> int:
    """Primeiro valor presente entre as chaves, ou 0."""
    for chave in chaves:
        valor = data.get(chave)
        if valor is not None:
            return int(valor)
    return 0


@dataclass(frozen=True)
class ContadoresCampanha:
    """Snapshot de contadores de mensagens de uma campanha."""

    total_mensagens: int = 0
    mensagens_na_fila: int = 0
    mensagens_enviadas: int = 0  # tentativas finalizadas (sucesso ou erro)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ContadoresCampanha":
        """Aceita chaves snake_case ou camelCase; ausentes viram 0."""
        if not data:
            return cls()
        return cls(
            total_mensagens=_inteiro(data, "total_mensagens", "totalMessages"),
            mensagens_na_fila=_inteiro(data, "mensagens_na_fila", "queuedMessages"),
            mensagens_enviadas=_inteiro(data, "mensagens_enviadas", "sentMessages"),
        )


@dataclass(frozen=True)
class ContadoresEvento:
    """Snapshot de contadores de mensagens de um evento."""

    total_mensagens: int = 0
    mensagens_entregues: int = 0
    mensagens_lidas: int = 0
    mensagens_respondidas: int = 0
    mensagens_com_erro: int = 0
    mensagens_na_fila: int = 0

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ContadoresEvento":
        """Aceita chaves snake_case ou camelCase; ausentes viram 0."""
        if not data:
            return cls()
        return cls(
            total_mensagens=_inteiro(data, "total_mensagens", "totalMessages"),
            mensagens_entregues=_inteiro(data, "mensagens_entregues", "deliveredMessages"),
            mensagens_lidas=_inteiro(data, "mensagens_lidas", "readMessages"),
            mensagens_respondidas=_inteiro(data, "mensagens_respondidas", "responseMessages"),
            mensagens_com_erro=_inteiro(data, "mensagens_com_erro", "errorMessages"),
            mensagens_na_fila=_inteiro(data, "mensagens_na_fila", "queuedMessages"),
        )


@dataclass(frozen=True)
class BadgeStatus:
    """Configuracao visual de um badge de status."""

    label: str
    variant: str  # default | secondary | destructive | outline
    class_name: Optional[str] = None

    def to_dict(self) -> dict:
        """Converte para dicionario."""
        return {
            "label": self.label,
            "variant": self.variant,
            "class_name": self.class_name,
        }
