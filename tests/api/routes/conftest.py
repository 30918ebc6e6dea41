"""
Fixtures das rotas: TestClient com dependências substituídas.
"""
import pytest
from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from app.contexts.campanhas.application import get_campanhas_service
from app.contexts.eventos.application import get_eventos_service
from app.contexts.webhooks.application import get_webhook_service
from app.core.auth import get_current_user
from app.main import app


@pytest.fixture
def mock_service():
    """Application Service mockado (campanhas, eventos ou webhook)."""
    return AsyncMock()


@pytest.fixture
def api_client(mock_service):
    """
    Factory de TestClient.

    Uso:
        client = api_client(usuario)        # autenticado
        client = api_client()               # sem override de autenticação
    """
    def criar(usuario=None):
        if usuario is not None:
            app.dependency_overrides[get_current_user] = lambda: usuario
        for dependencia in (get_campanhas_service, get_eventos_service, get_webhook_service):
            app.dependency_overrides[dependencia] = lambda: mock_service
        return TestClient(app, raise_server_exceptions=False)

    yield criar
    app.dependency_overrides.clear()
