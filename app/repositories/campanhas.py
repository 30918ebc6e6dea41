"""
Repository para campanhas.
"""
import logging
from typing import Optional

from app.contexts.campanhas.domain import METRICAS_PADRAO, CampanhaData
from app.core.exceptions import DatabaseError
from app.core.timezone import iso_utc
from app.services.status import StatusBaseCampanha

from .base import BaseRepository

logger = logging.getLogger(__name__)


class CampanhaRepository(BaseRepository[CampanhaData]):
    """
    Repository para operacoes de campanhas.

    Uso:
        repo = CampanhaRepository(supabase)
        campanha = await repo.buscar_por_id(campanha_id, organization_id)
    """

    @property
    def table_name(self) -> str:
        return "campaigns"

    def _para_entidade(self, row: dict) -> CampanhaData:
        return CampanhaData.from_db_row(row)

    async def atualizar_status(
        self,
        campanha_id: str,
        novo_status: StatusBaseCampanha,
        organization_id: Optional[str] = None,
        scheduled_at: Optional[str] = None,
    ) -> Optional[CampanhaData]:
        """
        Atualiza status gravado da campanha.

        Args:
            campanha_id: ID da campanha
            novo_status: Novo status
            organization_id: Escopo da organizacao
            scheduled_at: Data de agendamento (apenas para AGENDADA)

        Returns:
            Campanha atualizada ou None se nao encontrada
        """
        data = {"status": novo_status.value}

        # Timestamps especificos
        if novo_status == StatusBaseCampanha.EM_EXECUCAO:
            data["started_at"] = iso_utc()
        elif novo_status == StatusBaseCampanha.CONCLUIDA:
            data["completed_at"] = iso_utc()
        elif novo_status == StatusBaseCampanha.AGENDADA and scheduled_at:
            data["scheduled_at"] = scheduled_at

        campanha = await self.atualizar(campanha_id, data, organization_id)
        if campanha:
            logger.info(f"Campanha {campanha_id} atualizada para status {novo_status.value}")
        return campanha

    async def incrementar_metrica(self, campanha_id: str, chave: str) -> bool:
        """
        Incrementa um contador do JSON metrics da campanha.

        Leitura + escrita, sem atomicidade: webhooks simultaneos da mesma
        campanha podem perder incrementos.

        Returns:
            True se incrementado, False se campanha nao encontrada
        """
        if chave not in METRICAS_PADRAO:
            logger.debug(f"Metrica ignorada: {chave}")
            return False

        try:
            response = (
                self.db.table(self.table_name)
                .select("metrics")
                .eq("id", campanha_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise self._erro("buscar metricas", e, id=campanha_id)

        if not response.data:
            return False

        atual = response.data[0].get("metrics") or {}
        metrics = {k: int(atual.get(k) or 0) for k in METRICAS_PADRAO}
        metrics[chave] += 1

        try:
            self.db.table(self.table_name).update({"metrics": metrics}).eq(
                "id", campanha_id
            ).execute()
        except Exception as e:
            raise self._erro("atualizar metricas", e, id=campanha_id)

        logger.info(f"Metrica {chave} da campanha {campanha_id} incrementada")
        return True

    async def buscar_publica(self, campanha_id: str) -> Optional[CampanhaData]:
        """Busca sem escopo de organizacao (pagina publica de status)."""
        try:
            return await self.buscar_por_id(campanha_id)
        except DatabaseError:
            # ID malformado gera erro de cast no Postgres
            logger.warning(f"Campanha publica invalida: {campanha_id}")
            return None
