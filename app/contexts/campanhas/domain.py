"""
Modelos de dominio do contexto de Campanhas.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Tuple

from app.services.status import StatusBaseCampanha, normalizar_status_base

METRICAS_PADRAO = ("sent", "delivered", "read", "failed")


@dataclass
class CampanhaData:
    """Linha da tabela campaigns."""

    id: str
    organization_id: str
    name: str
    status: StatusBaseCampanha = StatusBaseCampanha.RASCUNHO
    description: Optional[str] = None
    template_id: Optional[str] = None
    target_contacts: Optional[Any] = None
    scheduled_at: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    metrics: Dict[str, int] = field(default_factory=dict)
    created_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_db_row(cls, row: dict) -> "CampanhaData":
        """Cria a partir de linha do banco."""
        metrics = row.get("metrics") or {}
        return cls(
            id=row["id"],
            organization_id=row.get("organization_id", ""),
            name=row.get("name", ""),
            status=normalizar_status_base(row.get("status")),
            description=row.get("description"),
            template_id=row.get("template_id"),
            target_contacts=row.get("target_contacts"),
            scheduled_at=row.get("scheduled_at"),
            started_at=row.get("started_at"),
            completed_at=row.get("completed_at"),
            metrics={chave: int(metrics.get(chave) or 0) for chave in METRICAS_PADRAO},
            created_by=row.get("created_by"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def to_dict(self) -> dict:
        """Converte para dicionario."""
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "name": self.name,
            "status": self.status.value,
            "description": self.description,
            "template_id": self.template_id,
            "target_contacts": self.target_contacts,
            "scheduled_at": self.scheduled_at,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
            "metrics": self.metrics,
            "created_by": self.created_by,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


# acao -> (status destino, status de origem permitidos)
ACOES_STATUS: Dict[str, Tuple[StatusBaseCampanha, FrozenSet[StatusBaseCampanha]]] = {
    "agendar": (
        StatusBaseCampanha.AGENDADA,
        frozenset({
            StatusBaseCampanha.RASCUNHO,
            StatusBaseCampanha.AGENDADA,
            StatusBaseCampanha.PAUSADA,
        }),
    ),
    "iniciar": (
        StatusBaseCampanha.EM_EXECUCAO,
        frozenset({StatusBaseCampanha.RASCUNHO, StatusBaseCampanha.AGENDADA}),
    ),
    "pausar": (
        StatusBaseCampanha.PAUSADA,
        frozenset({StatusBaseCampanha.EM_EXECUCAO, StatusBaseCampanha.AGENDADA}),
    ),
    "retomar": (
        StatusBaseCampanha.EM_EXECUCAO,
        frozenset({StatusBaseCampanha.PAUSADA}),
    ),
    "cancelar": (
        StatusBaseCampanha.CANCELADA,
        frozenset({
            StatusBaseCampanha.RASCUNHO,
            StatusBaseCampanha.AGENDADA,
            StatusBaseCampanha.EM_EXECUCAO,
            StatusBaseCampanha.PAUSADA,
        }),
    ),
    "concluir": (
        StatusBaseCampanha.CONCLUIDA,
        frozenset({StatusBaseCampanha.EM_EXECUCAO, StatusBaseCampanha.PAUSADA}),
    ),
}
