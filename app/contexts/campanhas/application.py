"""
Application Service do Bounded Context: Campanhas

Este módulo é o ponto de entrada para todos os casos de uso do contexto
de Campanhas. Ele orquestra repositórios e o cálculo de status, mas NÃO
contém regras de negócio: essas pertencem ao domínio (domain.py e
app.services.status).

Princípio: as rotas da API chamam apenas este módulo.
A rota não sabe nada sobre Supabase, repositórios ou regras de negócio.

Padrão: API Route -> Application Service -> Repository/Domain Service

IMPORTANTE: Este módulo lança exceções de domínio (app.core.exceptions),
NUNCA exceções HTTP. A conversão para HTTP é responsabilidade do
app.api.error_handlers.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from app.contexts.campanhas.domain import ACOES_STATUS, CampanhaData
from app.core.exceptions import DatabaseError, NotFoundError, ValidationError
from app.core.timezone import janela_do_dia, parse_datetime
from app.repositories.campanhas import CampanhaRepository
from app.repositories.mensagens import MensagemRepository
from app.services.analytics import MetricasMensagens, calcular_taxas, montar_analise
from app.services.status import (
    StatusBaseCampanha,
    StatusCampanha,
    badge_status_campanha,
    calcular_status_campanha,
)

logger = logging.getLogger(__name__)

CAMPOS_EDITAVEIS = ("name", "description", "template_id", "target_contacts", "scheduled_at")


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


def _validar_data(valor: Optional[str], campo: str) -> None:
    if valor and parse_datetime(valor) is None:
        raise ValidationError(f"Data inválida em '{campo}': {valor}", details={campo: valor})


class CampanhasApplicationService:
    """
    Application Service para o contexto de Campanhas.

    Cada método público representa um caso de uso do painel.
    Todas as operações de gestão são escopadas por organization_id.

    Exceções lançadas:
        - NotFoundError: recurso não encontrado
        - ValidationError: dados de entrada ou transição inválidos
        - DatabaseError: falha na persistência
    """

    def __init__(self, repository=None, mensagens=None):
        """
        Permite injeção de dependências para testes.

        Args:
            repository: Repositório de campanhas (default: CampanhaRepository)
            mensagens: Repositório do log de mensagens (default: MensagemRepository)
        """
        self._repository = repository or CampanhaRepository()
        self._mensagens = mensagens or MensagemRepository()

    async def _status_derivado(
        self, campanha: CampanhaData, janela=None
    ) -> Tuple[MetricasMensagens, StatusCampanha]:
        metricas = await self._mensagens.contar_log(campanha.id, janela)
        status = calcular_status_campanha(metricas.contadores_campanha(), campanha.status)
        return metricas, status

    @staticmethod
    def _com_status(
        campanha: CampanhaData, metricas: MetricasMensagens, status: StatusCampanha
    ) -> Dict[str, Any]:
        return {
            **campanha.to_dict(),
            "computed_status": status.value,
            "badge": badge_status_campanha(status).to_dict(),
            "contadores": metricas.to_dict(),
        }

    async def listar_campanhas(
        self,
        organization_id: str,
        status: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Dict[str, Any]:
        """
        Caso de Uso: Listar campanhas da organização com status derivado.

        O filtro `status` se aplica ao status exibido (derivado), não ao gravado.
        Como o status derivado não existe no banco, com filtro todas as
        campanhas da organização são carregadas e a paginação (limit/offset)
        é aplicada sobre o conjunto filtrado. `total` é sempre o total da
        organização (com filtro, o total de campanhas que casam).
        """
        if status:
            try:
                status_filtro = StatusCampanha(status)
            except ValueError:
                raise ValidationError(
                    f"Status inválido: '{status}'. "
                    f"Valores aceitos: {[s.value for s in StatusCampanha]}",
                )
        else:
            status_filtro = None

        if status_filtro is None:
            campanhas = await self._repository.listar(organization_id, limit=limit, offset=offset)
            itens = []
            for campanha in campanhas:
                metricas, status_atual = await self._status_derivado(campanha)
                itens.append(self._com_status(campanha, metricas, status_atual))
            total = await self._repository.contar(organization_id)
            return {"campanhas": itens, "total": total}

        filtradas = []
        for campanha in await self._repository.listar_todos(organization_id):
            metricas, status_atual = await self._status_derivado(campanha)
            if status_atual == status_filtro:
                filtradas.append(self._com_status(campanha, metricas, status_atual))

        return {
            "campanhas": filtradas[offset:offset + limit],
            "total": len(filtradas),
        }

    async def buscar_campanha(self, campanha_id: str, organization_id: str) -> CampanhaData:
        """
        Caso de Uso: Buscar uma campanha da organização.

        Raises:
            NotFoundError: Se a campanha não for encontrada.
        """
        campanha = await self._repository.buscar_por_id(campanha_id, organization_id)
        if not campanha:
            raise NotFoundError("Campanha", campanha_id)
        return campanha

    async def detalhar_campanha(self, campanha_id: str, organization_id: str) -> Dict[str, Any]:
        """Caso de Uso: Campanha com contadores e status derivado."""
        campanha = await self.buscar_campanha(campanha_id, organization_id)
        metricas, status = await self._status_derivado(campanha)
        return self._com_status(campanha, metricas, status)

    async def criar_campanha(
        self,
        organization_id: str,
        name: str,
        description: Optional[str] = None,
        template_id: Optional[str] = None,
        target_contacts: Optional[Any] = None,
        scheduled_at: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> CampanhaData:
        """
        Caso de Uso: Criar uma nova campanha.

        Nasce como rascunho, ou agendada quando `scheduled_at` é informado.

        Raises:
            ValidationError: Se o nome estiver vazio ou a data for inválida.
            DatabaseError: Se a persistência falhar.
        """
        if not name or not name.strip():
            raise ValidationError("Nome da campanha é obrigatório")
        _validar_data(scheduled_at, "scheduled_at")

        status = StatusBaseCampanha.AGENDADA if scheduled_at else StatusBaseCampanha.RASCUNHO
        campanha = await self._repository.criar({
            "organization_id": organization_id,
            "name": name.strip(),
            "description": description,
            "template_id": template_id,
            "target_contacts": target_contacts,
            "scheduled_at": scheduled_at,
            "status": status.value,
            "created_by": created_by,
        })

        logger.info(
            f"[CampanhasApplicationService] Campanha criada: id={campanha.id}, status={status.value}",
            extra={"organization_id": organization_id, "campanha_id": campanha.id},
        )
        return campanha

    async def atualizar_campanha(
        self, campanha_id: str, organization_id: str, dados: Dict[str, Any]
    ) -> CampanhaData:
        """
        Caso de Uso: Editar dados da campanha.

        Mudanças de status passam pelas ações (agendar, iniciar...), não por aqui.

        Raises:
            ValidationError: Se `dados` trouxer status ou campos desconhecidos.
            NotFoundError: Se a campanha não for encontrada.
        """
        if "status" in dados:
            raise ValidationError(
                "Status da campanha deve ser alterado pelas ações "
                f"{list(ACOES_STATUS)}",
            )
        desconhecidos = sorted(set(dados) - set(CAMPOS_EDITAVEIS))
        if desconhecidos:
            raise ValidationError(
                f"Campos não editáveis: {desconhecidos}",
                details={"campos": desconhecidos},
            )
        if "name" in dados and not (dados["name"] or "").strip():
            raise ValidationError("Nome da campanha é obrigatório")
        _validar_data(dados.get("scheduled_at"), "scheduled_at")

        campanha = await self._repository.atualizar(campanha_id, dados, organization_id)
        if not campanha:
            raise NotFoundError("Campanha", campanha_id)
        return campanha

    async def excluir_campanha(self, campanha_id: str, organization_id: str) -> None:
        """
        Caso de Uso: Excluir campanha.

        Raises:
            NotFoundError: Se a campanha não for encontrada.
        """
        if not await self._repository.deletar(campanha_id, organization_id):
            raise NotFoundError("Campanha", campanha_id)
        logger.info(
            f"[CampanhasApplicationService] Campanha {campanha_id} excluída",
            extra={"organization_id": organization_id, "campanha_id": campanha_id},
        )

    async def executar_acao(
        self,
        campanha_id: str,
        organization_id: str,
        acao: str,
        scheduled_at: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Caso de Uso: Transição do status gravado (agendar, iniciar, pausar,
        retomar, cancelar, concluir).

        Raises:
            ValidationError: Ação desconhecida ou transição não permitida.
            NotFoundError: Se a campanha não for encontrada.
            DatabaseError: Se a atualização falhar.
        """
        if acao not in ACOES_STATUS:
            raise ValidationError(
                f"Ação inválida: '{acao}'. Valores aceitos: {list(ACOES_STATUS)}",
            )
        destino, origens = ACOES_STATUS[acao]

        if destino == StatusBaseCampanha.AGENDADA:
            if not scheduled_at:
                raise ValidationError("Data de agendamento é obrigatória")
            _validar_data(scheduled_at, "scheduled_at")

        campanha = await self.buscar_campanha(campanha_id, organization_id)
        if campanha.status not in origens:
            raise ValidationError(
                f"Campanha com status '{campanha.status.value}' não permite a ação '{acao}'. "
                f"Status permitidos: {sorted(s.value for s in origens)}",
                details={"status_atual": campanha.status.value, "acao": acao},
            )

        atualizada = await self._repository.atualizar_status(
            campanha_id, destino, organization_id, scheduled_at=scheduled_at
        )
        if not atualizada:
            raise DatabaseError("Erro ao atualizar o status da campanha.")

        return {
            "campanha_id": campanha_id,
            "status_anterior": campanha.status.value,
            "status_novo": destino.value,
        }

    async def agendar(self, campanha_id: str, organization_id: str, scheduled_at: str):
        return await self.executar_acao(campanha_id, organization_id, "agendar", scheduled_at)

    async def iniciar(self, campanha_id: str, organization_id: str):
        return await self.executar_acao(campanha_id, organization_id, "iniciar")

    async def pausar(self, campanha_id: str, organization_id: str):
        return await self.executar_acao(campanha_id, organization_id, "pausar")

    async def retomar(self, campanha_id: str, organization_id: str):
        return await self.executar_acao(campanha_id, organization_id, "retomar")

    async def cancelar(self, campanha_id: str, organization_id: str):
        return await self.executar_acao(campanha_id, organization_id, "cancelar")

    async def concluir(self, campanha_id: str, organization_id: str):
        return await self.executar_acao(campanha_id, organization_id, "concluir")

    async def analise_campanha(
        self, campanha_id: str, organization_id: str, data: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Caso de Uso: Métricas e gráficos de uma campanha.

        Args:
            data: Dia (AAAA-MM-DD, horário de Brasília) para filtrar; None = tudo
        """
        janela = _janela(data)
        campanha = await self.buscar_campanha(campanha_id, organization_id)

        metricas, status = await self._status_derivado(campanha, janela)
        mensagens = await self._mensagens.listar_log(campanha.id, janela)
        analise = montar_analise(metricas, mensagens)

        return {
            "campanha_id": campanha.id,
            "data": data,
            "computed_status": status.value,
            "badge": badge_status_campanha(status).to_dict(),
            "analytics": analise.to_dict(),
        }

    async def status_publico(self, campanha_id: str) -> Dict[str, Any]:
        """
        Caso de Uso: Página pública de status da campanha (sem autenticação).

        Raises:
            NotFoundError: Se a campanha não existir.
        """
        campanha = await self._repository.buscar_publica(campanha_id)
        if not campanha:
            raise NotFoundError("Campanha", campanha_id)

        metricas, status = await self._status_derivado(campanha)
        taxas = calcular_taxas(metricas)

        return {
            **campanha.to_dict(),
            "analytics": {
                **metricas.to_dict(),
                "taxa_progresso": taxas.progresso,
                "taxa_resposta": taxas.resposta,
            },
            "computed_status": status.value,
            "badge": badge_status_campanha(status).to_dict(),
        }


# Factory function usada como dependência das rotas
def get_campanhas_service() -> CampanhasApplicationService:
    """
    Retorna instância do CampanhasApplicationService.

    Para testes, crie com dependências mockadas:
        service = CampanhasApplicationService(
            repository=mock_repo,
            mensagens=mock_mensagens,
        )
    """
    return CampanhasApplicationService()
