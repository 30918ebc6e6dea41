"""
Repositories - Camada de acesso a dados.

Implementa o padrao Repository para desacoplar os casos de uso do
Supabase. Cada repository recebe o cliente de banco no construtor;
sem cliente injetado usa o global.

Uso em testes:
    from app.repositories import CampanhaRepository

    def test_buscar_campanha(mock_supabase_factory):
        repo = CampanhaRepository(mock_supabase_factory([...]))
        # Testar sem patches!

Entidades disponiveis:
- Campanha: tabela campaigns
- Evento: tabela events
- Mensagem: log mensagens_enviadas, event_messages e messages
"""

from .base import BaseRepository, SupabaseRepository
from .campanhas import CampanhaRepository
from .eventos import EventoRepository
from .mensagens import MensagemRepository

__all__ = [
    # Base
    "BaseRepository",
    "SupabaseRepository",
    # Tabelas
    "CampanhaRepository",
    "EventoRepository",
    "MensagemRepository",
]
