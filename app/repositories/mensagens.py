"""
Repository do log de mensagens.

Fonte das contagens de campanhas e eventos. Contagens usam count exato
(head request) para nao esbarrar no limite de 1000 linhas do PostgREST;
linhas para graficos sao paginadas.
"""
import logging
from typing import Any, Callable, List, Optional, Tuple

from tenacity import AsyncRetrying, before_sleep_log, stop_after_attempt, wait_exponential

from app.core.config import AnalyticsConfig
from app.core.timezone import iso_utc
from app.services.analytics.types import MetricasMensagens

from .base import SupabaseRepository

logger = logging.getLogger(__name__)

Janela = Optional[Tuple[str, str]]

COLUNAS_LOG = "status, data_envio, data_leitura, data_resposta, sentimento, perfil_contato"
COLUNAS_EVENT_MESSAGES = "status, sent_at, read_at, responded_at, sentiment, contact_profile"


class MensagemRepository(SupabaseRepository):
    """
    Acesso as tabelas de mensagens.

    - mensagens_enviadas: log principal (campanhas e eventos, por id_campanha)
    - event_messages: log legado de eventos
    - new_contact_event: contatos importados para um evento
    - messages: mensagens com whatsapp_message_id (atualizadas por webhook)
    """

    TABLE_LOG = "mensagens_enviadas"
    TABLE_EVENT_MESSAGES = "event_messages"
    TABLE_CONTATOS_EVENTO = "new_contact_event"
    TABLE_MESSAGES = "messages"

    def __init__(self, db_client: Any = None, espera=None, tentativas: Optional[int] = None):
        """
        Args:
            db_client: Cliente de banco (None = global)
            espera: Estrategia de espera do tenacity entre tentativas
            tentativas: Maximo de tentativas por contagem
        """
        super().__init__(db_client)
        self._espera = espera or wait_exponential(
            multiplier=1, min=1, max=AnalyticsConfig.BACKOFF_MAX_SEGUNDOS
        )
        self._tentativas = tentativas or AnalyticsConfig.MAX_TENTATIVAS

    # === CONTAGENS ===

    async def _contar(self, montar_query: Callable[[], Any]) -> int:
        """Executa uma contagem exata com retry (espera sem bloquear o event loop)."""
        response = None
        try:
            async for tentativa in AsyncRetrying(
                stop=stop_after_attempt(self._tentativas),
                wait=self._espera,
                reraise=True,
                before_sleep=before_sleep_log(logger, logging.WARNING),
            ):
                with tentativa:
                    response = montar_query().execute()
        except Exception as e:
            raise self._falha(
                f"Contagem falhou apos {self._tentativas} tentativas", e
            )
        return response.count or 0

    def _contagem_log(self, coluna_id: str, valor_id: str, janela: Janela):
        def base():
            query = (
                self.db.table(self.TABLE_LOG)
                .select("id", count="exact", head=True)
                .eq(coluna_id, valor_id)
            )
            if janela:
                query = query.gte("data_envio", janela[0]).lt("data_envio", janela[1])
            return query
        return base

    async def contar_log(self, id_campanha: str, janela: Janela = None) -> MetricasMensagens:
        """
        Conta mensagens de mensagens_enviadas para uma campanha/evento.

        Args:
            id_campanha: UUID gravado em id_campanha (campanha ou evento)
            janela: Intervalo (inicio, fim) UTC sobre data_envio
        """
        base = self._contagem_log("id_campanha", id_campanha, janela)

        total = await self._contar(base)
        if total == 0:
            return MetricasMensagens()

        return MetricasMensagens(
            total=total,
            na_fila=await self._contar(
                lambda: base().in_("status", list(AnalyticsConfig.STATUS_FILA))
            ),
            entregues=await self._contar(lambda: base().eq("status", "enviado")),
            lidas=await self._contar(lambda: base().eq("status", "lido")),
            respondidas=await self._contar(lambda: base().not_.is_("data_resposta", "null")),
            com_erro=await self._contar(lambda: base().eq("status", "erro")),
        )

    async def contar_event_messages(self, evento_id: str, janela: Janela = None) -> MetricasMensagens:
        """Contagens na tabela legada event_messages (status em ingles)."""
        def base():
            query = (
                self.db.table(self.TABLE_EVENT_MESSAGES)
                .select("id", count="exact", head=True)
                .eq("event_id", evento_id)
            )
            if janela:
                query = query.gte("sent_at", janela[0]).lt("sent_at", janela[1])
            return query

        return MetricasMensagens(
            total=await self._contar(base),
            na_fila=await self._contar(
                lambda: base().in_("status", list(AnalyticsConfig.STATUS_FILA_EVENTO))
            ),
            entregues=await self._contar(
                lambda: base().in_("status", list(AnalyticsConfig.STATUS_ENTREGUE_EVENTO))
            ),
            lidas=await self._contar(lambda: base().not_.is_("read_at", "null")),
            respondidas=await self._contar(lambda: base().not_.is_("responded_at", "null")),
            com_erro=await self._contar(lambda: base().eq("status", "failed")),
        )

    async def contar_evento(self, evento_id: str, janela: Janela = None) -> MetricasMensagens:
        """
        Contagens de um evento.

        Usa mensagens_enviadas; se nao houver linhas para o evento, cai para
        event_messages.
        """
        metricas = await self.contar_log(evento_id, janela)
        if metricas.total > 0:
            return metricas

        logger.debug(f"Evento {evento_id} sem linhas no log, usando event_messages")
        return await self.contar_event_messages(evento_id, janela)

    # === LINHAS PARA GRAFICOS ===

    def _paginar(self, montar_query: Callable[[], Any]) -> List[dict]:
        tamanho = AnalyticsConfig.PAGE_SIZE
        linhas: List[dict] = []
        inicio = 0
        while True:
            try:
                response = montar_query().range(inicio, inicio + tamanho - 1).execute()
            except Exception as e:
                raise self._falha("Erro ao paginar mensagens", e, inicio=inicio)
            pagina = response.data or []
            linhas.extend(pagina)
            if len(pagina) < tamanho:
                break
            inicio += tamanho
        return linhas

    async def listar_log(self, id_campanha: str, janela: Janela = None) -> List[dict]:
        """Linhas de mensagens_enviadas ordenadas por data_envio."""
        def query():
            q = (
                self.db.table(self.TABLE_LOG)
                .select(COLUNAS_LOG)
                .eq("id_campanha", id_campanha)
            )
            if janela:
                q = q.gte("data_envio", janela[0]).lt("data_envio", janela[1])
            return q.order("data_envio")

        return self._paginar(query)

    async def listar_mensagens_evento(
        self, evento_id: str, slug: str, janela: Janela = None
    ) -> List[dict]:
        """
        Linhas de um evento no formato de mensagens_enviadas.

        Ordem de fontes: mensagens_enviadas, event_messages, new_contact_event.
        """
        linhas = await self.listar_log(evento_id, janela)
        if linhas:
            return linhas

        def query_legado():
            q = (
                self.db.table(self.TABLE_EVENT_MESSAGES)
                .select(COLUNAS_EVENT_MESSAGES)
                .eq("event_id", evento_id)
            )
            if janela:
                q = q.gte("sent_at", janela[0]).lt("sent_at", janela[1])
            return q.order("sent_at")

        legado = self._paginar(query_legado)
        if legado:
            return [
                {
                    "status": m.get("status"),
                    "data_envio": m.get("sent_at"),
                    "data_leitura": m.get("read_at"),
                    "data_resposta": m.get("responded_at"),
                    "sentimento": m.get("sentiment"),
                    "perfil_contato": m.get("contact_profile"),
                }
                for m in legado
            ]

        contatos = self._paginar(
            lambda: self.db.table(self.TABLE_CONTATOS_EVENTO)
            .select("celular, sentimento, status_envio")
            .eq("event_id", slug)
        )
        return [
            {
                "status": c.get("status_envio") or "fila",
                "data_envio": None,
                "data_leitura": None,
                "data_resposta": None,
                "sentimento": c.get("sentimento"),
                "perfil_contato": None,
            }
            for c in contatos
        ]

    # === WEBHOOK ===

    async def atualizar_status_whatsapp(
        self,
        whatsapp_message_id: str,
        status: str,
        error_message: Optional[str] = None,
    ) -> Optional[dict]:
        """
        Atualiza a mensagem identificada pelo id do WhatsApp.

        Returns:
            Linha atualizada (com campaign_id) ou None se nao existir
        """
        agora = iso_utc()
        data = {
            "status": status,
            "delivered_at": agora if status == "delivered" else None,
            "read_at": agora if status == "read" else None,
            "error_message": error_message,
            "whatsapp_message_id": whatsapp_message_id,
        }
        try:
            response = (
                self.db.table(self.TABLE_MESSAGES)
                .update(data)
                .eq("whatsapp_message_id", whatsapp_message_id)
                .execute()
            )
        except Exception as e:
            raise self._falha(
                "Erro ao atualizar mensagem", e, whatsapp_message_id=whatsapp_message_id
            )
        return response.data[0] if response.data else None

    async def registrar_webhook(
        self, telefone: str, status: str, campanha_id: Optional[str] = None
    ) -> None:
        """Registra o recebimento do webhook no log."""
        try:
            self.db.table(self.TABLE_LOG).insert({
                "contato": telefone,
                "status_mensagem": status,
                "content": f"Webhook: {status}",
                "campanha": campanha_id,
                "evento": "webhook_received",
            }).execute()
        except Exception as e:
            raise self._falha("Erro ao registrar webhook", e, telefone=telefone)
