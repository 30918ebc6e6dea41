"""
Testes para CampanhaRepository (e a base comum de repositories).

Demonstra como testar repositories injetando o cliente de banco.
"""
import pytest
from unittest.mock import MagicMock

from app.contexts.campanhas.domain import CampanhaData
from app.core.exceptions import DatabaseError
from app.repositories.campanhas import CampanhaRepository
from app.services.status import StatusBaseCampanha


class TestCampanhaDataFromRow:

    def test_normaliza_status_e_metricas(self, linha_campanha):
        linha_campanha["status"] = "active"
        campanha = CampanhaData.from_db_row(linha_campanha)

        assert campanha.status == StatusBaseCampanha.EM_EXECUCAO
        assert campanha.metrics == {"sent": 1, "delivered": 0, "read": 0, "failed": 0}

    def test_to_dict_usa_valor_do_status(self, linha_campanha):
        assert CampanhaData.from_db_row(linha_campanha).to_dict()["status"] == "draft"


class TestBuscarPorId:

    @pytest.mark.asyncio
    async def test_encontrada(self, mock_supabase_factory, linha_campanha, organization_id):
        db = mock_supabase_factory([linha_campanha])
        repo = CampanhaRepository(db)

        campanha = await repo.buscar_por_id("camp-1", organization_id)

        assert campanha.id == "camp-1"
        db.table.assert_called_with("campaigns")
        db.eq.assert_any_call("organization_id", organization_id)
        db.limit.assert_called_with(1)

    @pytest.mark.asyncio
    async def test_nao_encontrada(self, mock_supabase_factory):
        repo = CampanhaRepository(mock_supabase_factory([]))
        assert await repo.buscar_por_id("x") is None

    @pytest.mark.asyncio
    async def test_erro_banco(self, mock_supabase_factory):
        db = mock_supabase_factory([])
        db.execute.side_effect = Exception("connection refused")
        repo = CampanhaRepository(db)

        with pytest.raises(DatabaseError) as exc:
            await repo.buscar_por_id("camp-1")
        assert exc.value.details == {"id": "camp-1"}


class TestListarCriarAtualizarDeletar:

    @pytest.mark.asyncio
    async def test_listar_ordena_e_pagina(self, mock_supabase_factory, linha_campanha):
        db = mock_supabase_factory([linha_campanha])
        repo = CampanhaRepository(db)

        campanhas = await repo.listar("org-1", limit=10, offset=20, status=None)

        assert len(campanhas) == 1
        db.order.assert_called_with("created_at", desc=True)
        db.range.assert_called_with(20, 29)

    @pytest.mark.asyncio
    async def test_listar_todos_percorre_paginas(self, supabase_fake, resposta, linha_campanha):
        linhas = [{**linha_campanha, "id": f"c{i}"} for i in range(5)]

        def responder(consulta):
            _, (inicio, fim), _ = next(c for c in consulta.chamadas if c[0] == "range")
            return resposta(data=linhas[inicio:fim + 1])

        db = supabase_fake(responder)
        repo = CampanhaRepository(db)

        campanhas = await repo.listar_todos("org-1", tamanho_pagina=2)

        assert [c.id for c in campanhas] == ["c0", "c1", "c2", "c3", "c4"]
        assert len(db.consultas) == 3
        assert all(c.tem("eq", "organization_id", "org-1") for c in db.consultas)

    @pytest.mark.asyncio
    async def test_contar_usa_count_exato(self, supabase_fake, resposta):
        db = supabase_fake(lambda c: resposta(count=12))
        repo = CampanhaRepository(db)

        assert await repo.contar("org-1") == 12
        consulta = db.consultas[0]
        assert consulta.tem("eq", "organization_id", "org-1")
        assert ("select", ("id",), {"count": "exact", "head": True}) in consulta.chamadas

    @pytest.mark.asyncio
    async def test_criar_sem_retorno(self, mock_supabase_factory):
        repo = CampanhaRepository(mock_supabase_factory([]))

        with pytest.raises(DatabaseError, match="nao retornou dados"):
            await repo.criar({"name": "x"})

    @pytest.mark.asyncio
    async def test_atualizar_inclui_updated_at(self, mock_supabase_factory, linha_campanha):
        db = mock_supabase_factory([linha_campanha])
        repo = CampanhaRepository(db)

        await repo.atualizar("camp-1", {"name": "Novo"}, "org-1")

        dados = db.update.call_args[0][0]
        assert dados["name"] == "Novo"
        assert "updated_at" in dados

    @pytest.mark.asyncio
    async def test_deletar_inexistente(self, mock_supabase_factory):
        repo = CampanhaRepository(mock_supabase_factory([]))
        assert await repo.deletar("camp-1", "org-1") is False


class TestAtualizarStatus:

    @pytest.mark.asyncio
    async def test_iniciar_grava_started_at(self, mock_supabase_factory, linha_campanha):
        db = mock_supabase_factory([linha_campanha])
        repo = CampanhaRepository(db)

        await repo.atualizar_status("camp-1", StatusBaseCampanha.EM_EXECUCAO, "org-1")

        dados = db.update.call_args[0][0]
        assert dados["status"] == "running"
        assert "started_at" in dados

    @pytest.mark.asyncio
    async def test_agendar_grava_scheduled_at(self, mock_supabase_factory, linha_campanha):
        db = mock_supabase_factory([linha_campanha])
        repo = CampanhaRepository(db)

        await repo.atualizar_status(
            "camp-1", StatusBaseCampanha.AGENDADA, scheduled_at="2025-07-01T12:00:00Z"
        )

        assert db.update.call_args[0][0]["scheduled_at"] == "2025-07-01T12:00:00Z"

    @pytest.mark.asyncio
    async def test_concluir_grava_completed_at(self, mock_supabase_factory, linha_campanha):
        db = mock_supabase_factory([linha_campanha])
        repo = CampanhaRepository(db)

        await repo.atualizar_status("camp-1", StatusBaseCampanha.CONCLUIDA)

        assert "completed_at" in db.update.call_args[0][0]


class TestIncrementarMetrica:

    @pytest.mark.asyncio
    async def test_incrementa_chave(self, mock_supabase_factory):
        db = mock_supabase_factory([{"metrics": {"sent": 2, "read": None}}])
        repo = CampanhaRepository(db)

        assert await repo.incrementar_metrica("camp-1", "delivered") is True

        assert db.update.call_args[0][0] == {
            "metrics": {"sent": 2, "delivered": 1, "read": 0, "failed": 0}
        }

    @pytest.mark.asyncio
    async def test_chave_desconhecida(self, mock_supabase_factory):
        db = mock_supabase_factory([{"metrics": {}}])
        repo = CampanhaRepository(db)

        assert await repo.incrementar_metrica("camp-1", "clicked") is False
        db.table.assert_not_called()

    @pytest.mark.asyncio
    async def test_campanha_inexistente(self, mock_supabase_factory):
        db = mock_supabase_factory([])
        repo = CampanhaRepository(db)

        assert await repo.incrementar_metrica("camp-x", "sent") is False
        db.update.assert_not_called()


class TestBuscarPublica:

    @pytest.mark.asyncio
    async def test_id_invalido_retorna_none(self):
        db = MagicMock()
        db.table.side_effect = Exception("invalid input syntax for type uuid")
        repo = CampanhaRepository(db)

        assert await repo.buscar_publica("nao-uuid") is None
