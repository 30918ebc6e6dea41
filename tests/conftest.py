"""
Configuração global de testes - Fixtures compartilhadas.

Este arquivo contém fixtures reutilizáveis em todos os testes do projeto.
Evita duplicação de código de mock em módulos individuais.

Usage:
    Fixtures aqui definidas são automaticamente disponíveis em todos os testes.
    Para fixtures específicas de módulo, use conftest.py local.
"""

import pytest
from typing import Any, Callable
from unittest.mock import MagicMock

from app.core.auth import PapelUsuario, UsuarioPainel


# =============================================================================
# MOCK FACTORIES - Funções para criar mocks configuráveis
# =============================================================================


def criar_mock_supabase(dados_retorno: list[dict[str, Any]] | None = None) -> MagicMock:
    """
    Cria mock do cliente Supabase com chain de métodos configurado.

    Args:
        dados_retorno: Lista de dicts que será retornada em .execute().data

    Returns:
        MagicMock configurado para suportar chain: .table().select().eq().execute()

    Example:
        mock = criar_mock_supabase([{"id": "123", "name": "Teste"}])
        mock.table("campaigns").select("*").execute().data  # retorna os dados
    """
    mock = MagicMock()
    mock.table.return_value = mock
    mock.select.return_value = mock
    mock.insert.return_value = mock
    mock.update.return_value = mock
    mock.delete.return_value = mock
    mock.eq.return_value = mock
    mock.gte.return_value = mock
    mock.lt.return_value = mock
    mock.is_.return_value = mock
    mock.in_.return_value = mock
    mock.not_ = mock
    mock.order.return_value = mock
    mock.limit.return_value = mock
    mock.range.return_value = mock

    # Configurar response
    response = MagicMock()
    response.data = dados_retorno if dados_retorno is not None else []
    response.count = len(response.data) if response.data else 0
    mock.execute.return_value = response

    return mock


def criar_resposta(data: list | None = None, count: int | None = None) -> MagicMock:
    """Resposta do PostgREST (.data / .count)."""
    response = MagicMock()
    response.data = data if data is not None else []
    response.count = count
    return response


class ConsultaFake:
    """
    Query builder que grava cada chamada da chain.

    O `responder` recebe a própria consulta no .execute() e decide a
    resposta olhando tabela e filtros gravados.
    """

    def __init__(self, tabela: str, responder: Callable[["ConsultaFake"], Any]):
        self.tabela = tabela
        self.chamadas: list[tuple] = []
        self._responder = responder

    def __getattr__(self, nome):
        if nome.startswith("_"):
            raise AttributeError(nome)

        def metodo(*args, **kwargs):
            self.chamadas.append((nome, args, kwargs))
            return self

        return metodo

    @property
    def not_(self):
        self.chamadas.append(("not_", (), {}))
        return self

    def tem(self, nome: str, *args) -> bool:
        """True se a chain chamou `nome` com esses argumentos posicionais."""
        return any(c[0] == nome and c[1] == args for c in self.chamadas)

    def execute(self):
        return self._responder(self)


class SupabaseFake:
    """Cliente Supabase mínimo: .table() devolve ConsultaFake gravadora."""

    def __init__(self, responder: Callable[[ConsultaFake], Any]):
        self.responder = responder
        self.consultas: list[ConsultaFake] = []

    def table(self, nome: str) -> ConsultaFake:
        consulta = ConsultaFake(nome, self.responder)
        self.consultas.append(consulta)
        return consulta


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def mock_supabase_factory():
    """
    Factory para criar mocks de Supabase com dados específicos.

    Uso:
        def test_algo(mock_supabase_factory):
            mock = mock_supabase_factory([{"id": "123"}])
    """
    return criar_mock_supabase


@pytest.fixture
def organization_id():
    return "org-1"


@pytest.fixture
def usuario(organization_id):
    """Usuário autenticado com papel de edição."""
    return UsuarioPainel(
        id="user-1",
        email="ana@example.com",
        organization_id=organization_id,
        role=PapelUsuario.CLIENT,
    )


@pytest.fixture
def usuario_leitura(organization_id):
    """Usuário viewer (somente leitura)."""
    return UsuarioPainel(
        id="user-2",
        email="leitor@example.com",
        organization_id=organization_id,
        role=PapelUsuario.VIEWER,
    )


@pytest.fixture
def linha_campanha(organization_id):
    """Linha da tabela campaigns."""
    return {
        "id": "camp-1",
        "organization_id": organization_id,
        "name": "Black Friday",
        "status": "draft",
        "description": None,
        "template_id": "tpl-1",
        "target_contacts": None,
        "scheduled_at": None,
        "started_at": None,
        "completed_at": None,
        "metrics": {"sent": 1},
        "created_by": "user-1",
        "created_at": "2025-06-01T12:00:00+00:00",
        "updated_at": None,
    }


@pytest.fixture
def linha_evento(organization_id):
    """Linha da tabela events."""
    return {
        "id": "evt-1",
        "organization_id": organization_id,
        "event_id": "festa-junina",
        "name": "Festa Junina",
        "message_text": "Venha!",
        "status": "active",
        "event_date": "2025-06-24",
        "location": "Praça Central",
        "created_at": "2025-06-01T12:00:00+00:00",
    }


@pytest.fixture
def supabase_fake():
    """
    Factory de SupabaseFake.

    Uso:
        def test_algo(supabase_fake):
            db = supabase_fake(lambda consulta: criar_resposta(count=3))
    """
    return SupabaseFake


@pytest.fixture
def resposta():
    """Factory de respostas do PostgREST."""
    return criar_resposta
