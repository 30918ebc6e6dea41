"""
Repository para eventos.
"""
import logging
from typing import List, Optional

from app.contexts.eventos.domain import EventoData
from app.core.exceptions import DatabaseError

from .base import BaseRepository

logger = logging.getLogger(__name__)


class EventoRepository(BaseRepository[EventoData]):
    """Repository para operacoes de eventos."""

    @property
    def table_name(self) -> str:
        return "events"

    def _para_entidade(self, row: dict) -> EventoData:
        return EventoData.from_db_row(row)

    async def listar_slugs(self, organization_id: str) -> List[str]:
        """Slugs (event_id) ja usados pela organizacao."""
        try:
            response = (
                self.db.table(self.table_name)
                .select("event_id")
                .eq("organization_id", organization_id)
                .execute()
            )
        except Exception as e:
            raise self._erro("listar slugs", e, organization_id=organization_id)

        return [row["event_id"] for row in (response.data or []) if row.get("event_id")]

    async def buscar_publico(self, evento_id: str) -> Optional[EventoData]:
        """Busca sem escopo de organizacao (pagina publica de status)."""
        try:
            return await self.buscar_por_id(evento_id)
        except DatabaseError:
            logger.warning(f"Evento publico invalido: {evento_id}")
            return None
