"""
Testes do Application Service de Campanhas.

Valida que o CampanhasApplicationService orquestra corretamente
os casos de uso, delegando aos repositórios e lançando
exceções de domínio (não HTTPException).
"""

import pytest
from unittest.mock import AsyncMock

from app.contexts.campanhas.application import CampanhasApplicationService
from app.contexts.campanhas.domain import CampanhaData
from app.core.exceptions import DatabaseError, NotFoundError, ValidationError
from app.services.analytics import MetricasMensagens
from app.services.status import StatusBaseCampanha


@pytest.fixture
def mock_repository():
    """Repositório de campanhas mockado."""
    return AsyncMock()


@pytest.fixture
def mock_mensagens():
    """Repositório de mensagens mockado (sem mensagens)."""
    mensagens = AsyncMock()
    mensagens.contar_log = AsyncMock(return_value=MetricasMensagens())
    mensagens.listar_log = AsyncMock(return_value=[])
    return mensagens


@pytest.fixture
def service(mock_repository, mock_mensagens):
    """Application Service com dependências injetadas."""
    return CampanhasApplicationService(repository=mock_repository, mensagens=mock_mensagens)


@pytest.fixture
def campanha_fixture(linha_campanha):
    """Campanha de teste (rascunho)."""
    return CampanhaData.from_db_row(linha_campanha)


# --- criar_campanha ---


class TestCriarCampanha:

    @pytest.mark.asyncio
    async def test_cria_rascunho(self, service, mock_repository, campanha_fixture):
        mock_repository.criar.return_value = campanha_fixture

        result = await service.criar_campanha("org-1", name="  Black Friday ")

        assert result.id == "camp-1"
        dados = mock_repository.criar.await_args[0][0]
        assert dados["status"] == "draft"
        assert dados["name"] == "Black Friday"
        assert dados["organization_id"] == "org-1"

    @pytest.mark.asyncio
    async def test_com_data_nasce_agendada(self, service, mock_repository, campanha_fixture):
        mock_repository.criar.return_value = campanha_fixture

        await service.criar_campanha("org-1", name="BF", scheduled_at="2025-11-28T12:00:00Z")

        assert mock_repository.criar.await_args[0][0]["status"] == "scheduled"

    @pytest.mark.asyncio
    async def test_nome_vazio(self, service):
        with pytest.raises(ValidationError, match="obrigatório"):
            await service.criar_campanha("org-1", name="  ")

    @pytest.mark.asyncio
    async def test_data_invalida(self, service):
        with pytest.raises(ValidationError, match="Data inválida"):
            await service.criar_campanha("org-1", name="BF", scheduled_at="amanhã")


# --- buscar / listar ---


class TestBuscarListar:

    @pytest.mark.asyncio
    async def test_buscar_nao_encontrada(self, service, mock_repository):
        mock_repository.buscar_por_id.return_value = None

        with pytest.raises(NotFoundError):
            await service.buscar_campanha("camp-x", "org-1")

    @pytest.mark.asyncio
    async def test_detalhar_com_status_derivado(
        self, service, mock_repository, mock_mensagens, campanha_fixture
    ):
        campanha_fixture.status = StatusBaseCampanha.EM_EXECUCAO
        mock_repository.buscar_por_id.return_value = campanha_fixture
        mock_mensagens.contar_log.return_value = MetricasMensagens(total=10, na_fila=4, entregues=6)

        result = await service.detalhar_campanha("camp-1", "org-1")

        assert result["computed_status"] == "sending"
        assert result["badge"]["label"] == "Enviando"
        assert result["contadores"]["total_mensagens"] == 10
        mock_repository.buscar_por_id.assert_awaited_once_with("camp-1", "org-1")

    @pytest.mark.asyncio
    async def test_listar_filtra_pelo_status_derivado(
        self, service, mock_repository, mock_mensagens, linha_campanha
    ):
        concluida = CampanhaData.from_db_row({**linha_campanha, "id": "c1", "status": "running"})
        rascunho = CampanhaData.from_db_row({**linha_campanha, "id": "c2"})
        mock_repository.listar_todos.return_value = [concluida, rascunho]
        mock_mensagens.contar_log.side_effect = [
            MetricasMensagens(total=5, entregues=4, com_erro=1),
            MetricasMensagens(),
        ]

        result = await service.listar_campanhas("org-1", status="completed")

        assert result["total"] == 1
        assert result["campanhas"][0]["id"] == "c1"
        assert result["campanhas"][0]["computed_status"] == "completed"
        mock_repository.listar_todos.assert_awaited_once_with("org-1")
        mock_repository.listar.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_listar_filtro_pagina_sobre_conjunto_filtrado(
        self, service, mock_repository, mock_mensagens, linha_campanha
    ):
        campanhas = [
            CampanhaData.from_db_row({**linha_campanha, "id": f"c{i}", "status": "running"})
            for i in range(4)
        ]
        mock_repository.listar_todos.return_value = campanhas
        # c0 e c2 ainda enviando; c1 e c3 concluidas
        mock_mensagens.contar_log.side_effect = [
            MetricasMensagens(total=5, na_fila=3, entregues=2),
            MetricasMensagens(total=5, entregues=5),
            MetricasMensagens(total=5, na_fila=1, entregues=4),
            MetricasMensagens(total=5, entregues=5),
        ]

        result = await service.listar_campanhas("org-1", status="completed", limit=1, offset=1)

        assert result["total"] == 2
        assert [c["id"] for c in result["campanhas"]] == ["c3"]

    @pytest.mark.asyncio
    async def test_listar_sem_filtro_usa_total_da_organizacao(
        self, service, mock_repository, campanha_fixture
    ):
        mock_repository.listar.return_value = [campanha_fixture]
        mock_repository.contar.return_value = 7

        result = await service.listar_campanhas("org-1", limit=1, offset=3)

        assert result["total"] == 7
        assert len(result["campanhas"]) == 1
        mock_repository.listar.assert_awaited_once_with("org-1", limit=1, offset=3)
        mock_repository.contar.assert_awaited_once_with("org-1")

    @pytest.mark.asyncio
    async def test_listar_status_invalido(self, service):
        with pytest.raises(ValidationError, match="Status inválido"):
            await service.listar_campanhas("org-1", status="arquivada")


# --- atualizar / excluir ---


class TestAtualizarExcluir:

    @pytest.mark.asyncio
    async def test_atualizar_rejeita_status(self, service):
        with pytest.raises(ValidationError, match="ações"):
            await service.atualizar_campanha("camp-1", "org-1", {"status": "running"})

    @pytest.mark.asyncio
    async def test_atualizar_rejeita_campo_desconhecido(self, service):
        with pytest.raises(ValidationError, match="não editáveis"):
            await service.atualizar_campanha("camp-1", "org-1", {"metrics": {}})

    @pytest.mark.asyncio
    async def test_atualizar_nao_encontrada(self, service, mock_repository):
        mock_repository.atualizar.return_value = None

        with pytest.raises(NotFoundError):
            await service.atualizar_campanha("camp-1", "org-1", {"name": "Novo"})

    @pytest.mark.asyncio
    async def test_excluir(self, service, mock_repository):
        mock_repository.deletar.return_value = True

        await service.excluir_campanha("camp-1", "org-1")

        mock_repository.deletar.assert_awaited_once_with("camp-1", "org-1")

    @pytest.mark.asyncio
    async def test_excluir_nao_encontrada(self, service, mock_repository):
        mock_repository.deletar.return_value = False

        with pytest.raises(NotFoundError):
            await service.excluir_campanha("camp-1", "org-1")


# --- ações de status ---


class TestAcoes:

    @pytest.mark.asyncio
    async def test_iniciar_rascunho(self, service, mock_repository, campanha_fixture):
        mock_repository.buscar_por_id.return_value = campanha_fixture
        mock_repository.atualizar_status.return_value = campanha_fixture

        result = await service.iniciar("camp-1", "org-1")

        assert result == {
            "campanha_id": "camp-1",
            "status_anterior": "draft",
            "status_novo": "running",
        }
        mock_repository.atualizar_status.assert_awaited_once_with(
            "camp-1", StatusBaseCampanha.EM_EXECUCAO, "org-1", scheduled_at=None
        )

    @pytest.mark.asyncio
    async def test_agendar_exige_data(self, service):
        with pytest.raises(ValidationError, match="agendamento"):
            await service.executar_acao("camp-1", "org-1", "agendar")

    @pytest.mark.asyncio
    async def test_agendar(self, service, mock_repository, campanha_fixture):
        mock_repository.buscar_por_id.return_value = campanha_fixture
        mock_repository.atualizar_status.return_value = campanha_fixture

        result = await service.agendar("camp-1", "org-1", "2025-07-01T12:00:00Z")

        assert result["status_novo"] == "scheduled"

    @pytest.mark.asyncio
    async def test_pausar_rascunho_invalido(self, service, mock_repository, campanha_fixture):
        mock_repository.buscar_por_id.return_value = campanha_fixture

        with pytest.raises(ValidationError, match="não permite a ação 'pausar'"):
            await service.pausar("camp-1", "org-1")
        mock_repository.atualizar_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retomar_pausada(self, service, mock_repository, campanha_fixture):
        campanha_fixture.status = StatusBaseCampanha.PAUSADA
        mock_repository.buscar_por_id.return_value = campanha_fixture
        mock_repository.atualizar_status.return_value = campanha_fixture

        result = await service.retomar("camp-1", "org-1")

        assert result["status_novo"] == "running"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [StatusBaseCampanha.CONCLUIDA, StatusBaseCampanha.CANCELADA])
    async def test_cancelar_estado_final(self, service, mock_repository, campanha_fixture, status):
        campanha_fixture.status = status
        mock_repository.buscar_por_id.return_value = campanha_fixture

        with pytest.raises(ValidationError):
            await service.cancelar("camp-1", "org-1")

    @pytest.mark.asyncio
    async def test_concluir_em_execucao(self, service, mock_repository, campanha_fixture):
        campanha_fixture.status = StatusBaseCampanha.EM_EXECUCAO
        mock_repository.buscar_por_id.return_value = campanha_fixture
        mock_repository.atualizar_status.return_value = campanha_fixture

        assert (await service.concluir("camp-1", "org-1"))["status_novo"] == "completed"

    @pytest.mark.asyncio
    async def test_acao_desconhecida(self, service):
        with pytest.raises(ValidationError, match="Ação inválida"):
            await service.executar_acao("camp-1", "org-1", "arquivar")

    @pytest.mark.asyncio
    async def test_falha_ao_gravar(self, service, mock_repository, campanha_fixture):
        mock_repository.buscar_por_id.return_value = campanha_fixture
        mock_repository.atualizar_status.return_value = None

        with pytest.raises(DatabaseError):
            await service.iniciar("camp-1", "org-1")


# --- analytics / público ---


class TestAnalise:

    @pytest.mark.asyncio
    async def test_analise_com_dia(self, service, mock_repository, mock_mensagens, campanha_fixture):
        mock_repository.buscar_por_id.return_value = campanha_fixture
        mock_mensagens.contar_log.return_value = MetricasMensagens(total=2, entregues=2)
        mock_mensagens.listar_log.return_value = [
            {"status": "enviado", "data_envio": "2025-06-01T15:00:00Z"},
            {"status": "enviado", "data_envio": "2025-06-01T15:10:00Z"},
        ]

        result = await service.analise_campanha("camp-1", "org-1", "2025-06-01")

        janela = ("2025-06-01T03:00:00+00:00", "2025-06-02T03:00:00+00:00")
        mock_mensagens.contar_log.assert_awaited_once_with("camp-1", janela)
        mock_mensagens.listar_log.assert_awaited_once_with("camp-1", janela)
        assert result["computed_status"] == "completed"
        horas = {h["hora"]: h for h in result["analytics"]["atividade_por_hora"]}
        assert horas["12:00"]["enviados"] == 2

    @pytest.mark.asyncio
    async def test_dia_invalido(self, service):
        with pytest.raises(ValidationError, match="AAAA-MM-DD"):
            await service.analise_campanha("camp-1", "org-1", "ontem")

    @pytest.mark.asyncio
    async def test_status_publico(self, service, mock_repository, mock_mensagens, campanha_fixture):
        mock_repository.buscar_publica.return_value = campanha_fixture
        mock_mensagens.contar_log.return_value = MetricasMensagens(
            total=10, na_fila=5, entregues=4, com_erro=1, respondidas=2
        )

        result = await service.status_publico("camp-1")

        assert result["name"] == "Black Friday"
        assert result["computed_status"] == "sending"
        assert result["analytics"]["taxa_progresso"] == 50.0
        assert result["analytics"]["mensagens_enviadas"] == 5

    @pytest.mark.asyncio
    async def test_status_publico_nao_encontrada(self, service, mock_repository):
        mock_repository.buscar_publica.return_value = None

        with pytest.raises(NotFoundError):
            await service.status_publico("camp-x")
