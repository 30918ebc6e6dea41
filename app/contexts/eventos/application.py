"""
Application Service do Bounded Context: Eventos

Orquestra o repositório de eventos, o log de mensagens e o cálculo do
status exibido. As rotas chamam apenas este módulo.

Lança exceções de domínio (app.core.exceptions), nunca exceções HTTP.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from app.contexts.eventos.domain import EventoData, gerar_slug_unico, slugify
from app.core.exceptions import DatabaseError, NotFoundError, ValidationError
from app.core.timezone import janela_do_dia
from app.repositories.eventos import EventoRepository
from app.repositories.mensagens import MensagemRepository
from app.services.analytics import (
    MetricasMensagens,
    contar_mensagens,
    montar_analise,
    normalizar_linhas,
)
from app.services.status import (
    StatusEvento,
    badge_status_evento,
    status_exibicao_evento,
)

logger = logging.getLogger(__name__)

CAMPOS_EDITAVEIS = (
    "name",
    "message_text",
    "status",
    "event_date",
    "location",
    "message_image",
    "image_filename",
    "instance_id",
)


def _janela(data: Optional[str]) -> Optional[Tuple[str, str]]:
    if not data:
        return None
    try:
        return janela_do_dia(data)
    except ValueError:
        raise ValidationError(
            f"Data inválida: '{data}'. Formato esperado: AAAA-MM-DD",
            details={"data": data},
        )


def _validar_status(valor: Any) -> str:
    try:
        return StatusEvento(valor).value
    except ValueError:
        raise ValidationError(
            f"Status inválido: '{valor}'. "
            f"Valores aceitos: {[s.value for s in StatusEvento]}",
        )


class EventosApplicationService:
    """
    Application Service para o contexto de Eventos.

    Exceções lançadas:
        - NotFoundError: evento não encontrado
        - ValidationError: dados de entrada inválidos
        - DatabaseError: falha na persistência
    """

    def __init__(self, repository=None, mensagens=None):
        """
        Permite injeção de dependências para testes.

        Args:
            repository: Repositório de eventos (default: EventoRepository)
            mensagens: Repositório do log de mensagens (default: MensagemRepository)
        """
        self._repository = repository or EventoRepository()
        self._mensagens = mensagens or MensagemRepository()

    @staticmethod
    def _com_status(evento: EventoData, metricas: Optional[MetricasMensagens]) -> Dict[str, Any]:
        contadores = metricas.contadores_evento() if metricas else None
        status = status_exibicao_evento(evento.status, contadores)
        return {
            **evento.to_dict(),
            "computed_status": status.value,
            "badge": badge_status_evento(status).to_dict(),
            "contadores": metricas.to_dict() if metricas else None,
        }

    async def _analise(self, evento: EventoData, data: Optional[str]) -> Dict[str, Any]:
        """
        Contagens exatas + gráficos de um evento.

        Se a contagem exata falhar (ou não achar linhas), usa as linhas
        carregadas para os gráficos como fonte das contagens.
        """
        janela = _janela(data)
        mensagens = await self._mensagens.listar_mensagens_evento(
            evento.id, evento.event_id, janela
        )

        try:
            metricas = await self._mensagens.contar_evento(evento.id, janela)
        except DatabaseError as e:
            logger.warning(
                f"Contagem exata indisponível para evento {evento.id}, usando linhas: {e}",
                extra={"evento_id": evento.id},
            )
            metricas = None

        if metricas is None or (metricas.total == 0 and mensagens):
            metricas = contar_mensagens(normalizar_linhas(mensagens))

        analise = montar_analise(metricas, mensagens)
        return {**self._com_status(evento, metricas), "analytics": analise.to_dict()}

    async def listar_eventos(
        self,
        organization_id: str,
        limit: int = 50,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """
        Caso de Uso: Listar eventos da organização com status exibido.

        Falha na contagem de um evento não derruba a listagem: o evento
        aparece com o status gravado.
        """
        eventos = await self._repository.listar(organization_id, limit=limit, offset=offset)

        itens = []
        for evento in eventos:
            try:
                metricas = await self._mensagens.contar_evento(evento.id)
            except DatabaseError as e:
                logger.warning(
                    f"Contagem indisponível para evento {evento.id}, usando status gravado: {e}",
                    extra={"evento_id": evento.id},
                )
                metricas = None
            itens.append(self._com_status(evento, metricas))

        return {"eventos": itens, "total": len(itens)}

    async def buscar_evento(self, evento_id: str, organization_id: str) -> EventoData:
        """
        Caso de Uso: Buscar um evento da organização.

        Raises:
            NotFoundError: Se o evento não for encontrado.
        """
        evento = await self._repository.buscar_por_id(evento_id, organization_id)
        if not evento:
            raise NotFoundError("Evento", evento_id)
        return evento

    async def criar_evento(
        self,
        organization_id: str,
        name: str,
        message_text: str = "",
        event_id: Optional[str] = None,
        status: Optional[str] = None,
        event_date: Optional[str] = None,
        location: Optional[str] = None,
        message_image: Optional[str] = None,
        image_filename: Optional[str] = None,
        instance_id: Optional[str] = None,
    ) -> EventoData:
        """
        Caso de Uso: Criar evento.

        O slug público (event_id) é gerado a partir do nome quando não
        informado, evitando colisão com os slugs da organização.

        Raises:
            ValidationError: Nome vazio, status inválido ou slug já usado.
        """
        if not name or not name.strip():
            raise ValidationError("Nome do evento é obrigatório")
        status_valor = _validar_status(status) if status else StatusEvento.RASCUNHO.value

        existentes = await self._repository.listar_slugs(organization_id)
        if event_id:
            slug = slugify(event_id)
            if not slug:
                raise ValidationError(f"Identificador inválido: '{event_id}'")
            if slug in existentes:
                raise ValidationError(
                    f"Identificador '{slug}' já está em uso",
                    details={"event_id": slug},
                )
        else:
            slug = gerar_slug_unico(name, existentes)

        evento = await self._repository.criar({
            "organization_id": organization_id,
            "event_id": slug,
            "name": name.strip(),
            "message_text": message_text,
            "status": status_valor,
            "event_date": event_date,
            "location": location,
            "message_image": message_image,
            "image_filename": image_filename,
            "instance_id": instance_id,
        })

        logger.info(
            f"[EventosApplicationService] Evento criado: id={evento.id}, slug={slug}",
            extra={"organization_id": organization_id, "evento_id": evento.id},
        )
        return evento

    async def atualizar_evento(
        self, evento_id: str, organization_id: str, dados: Dict[str, Any]
    ) -> EventoData:
        """
        Caso de Uso: Editar evento.

        Raises:
            ValidationError: Campos desconhecidos ou status inválido.
            NotFoundError: Se o evento não for encontrado.
        """
        desconhecidos = sorted(set(dados) - set(CAMPOS_EDITAVEIS))
        if desconhecidos:
            raise ValidationError(
                f"Campos não editáveis: {desconhecidos}",
                details={"campos": desconhecidos},
            )
        if "name" in dados and not (dados["name"] or "").strip():
            raise ValidationError("Nome do evento é obrigatório")
        if "status" in dados:
            dados = {**dados, "status": _validar_status(dados["status"])}

        evento = await self._repository.atualizar(evento_id, dados, organization_id)
        if not evento:
            raise NotFoundError("Evento", evento_id)
        return evento

    async def excluir_evento(self, evento_id: str, organization_id: str) -> None:
        """
        Caso de Uso: Excluir evento.

        Raises:
            NotFoundError: Se o evento não for encontrado.
        """
        if not await self._repository.deletar(evento_id, organization_id):
            raise NotFoundError("Evento", evento_id)
        logger.info(
            f"[EventosApplicationService] Evento {evento_id} excluído",
            extra={"organization_id": organization_id, "evento_id": evento_id},
        )

    async def analise_evento(
        self, evento_id: str, organization_id: str, data: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Caso de Uso: Métricas, gráficos e status exibido de um evento.

        Args:
            data: Dia (AAAA-MM-DD, horário de Brasília); None = todo o período
        """
        evento = await self.buscar_evento(evento_id, organization_id)
        return await self._analise(evento, data)

    async def status_publico(self, evento_id: str, data: Optional[str] = None) -> Dict[str, Any]:
        """
        Caso de Uso: Página pública de status do evento (sem autenticação).

        Raises:
            NotFoundError: Se o evento não existir.
        """
        evento = await self._repository.buscar_publico(evento_id)
        if not evento:
            raise NotFoundError("Evento", evento_id)
        return await self._analise(evento, data)


def get_eventos_service() -> EventosApplicationService:
    """Retorna instância do EventosApplicationService."""
    return EventosApplicationService()
