"""
Base Repository - Interface comum para todos os repositories.

Este modulo define a base que os repositories de tabelas do painel
herdam, garantindo escopo por organizacao e tratamento de erro uniforme.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar

from app.core.exceptions import DatabaseError
from app.core.timezone import iso_utc

logger = logging.getLogger(__name__)

# Type variable para entidades
T = TypeVar('T')


class SupabaseRepository:
    """Guarda o cliente de banco; sem cliente injetado usa o global."""

    def __init__(self, db_client: Any = None):
        """
        Inicializa o repository.

        Args:
            db_client: Cliente de banco de dados. None = cliente Supabase
                global, resolvido no primeiro uso.
        """
        self._db = db_client

    @property
    def db(self) -> Any:
        if self._db is None:
            from app.services.supabase import get_supabase_client

            self._db = get_supabase_client()
        return self._db

    def _falha(self, mensagem: str, e: Exception, **details) -> DatabaseError:
        logger.error(f"{mensagem}: {e}")
        return DatabaseError(mensagem, details=details, original_error=e)


class BaseRepository(SupabaseRepository, ABC, Generic[T]):
    """
    Base para repositories de uma tabela com coluna organization_id.

    Attributes:
        db: Cliente de banco de dados (Supabase, Mock, etc.)
        table_name: Nome da tabela no banco de dados

    Example:
        class EventoRepository(BaseRepository[EventoData]):
            @property
            def table_name(self) -> str:
                return "events"

            def _para_entidade(self, row: dict) -> EventoData:
                return EventoData.from_db_row(row)
    """

    @property
    @abstractmethod
    def table_name(self) -> str:
        """Nome da tabela no banco."""
        pass

    @abstractmethod
    def _para_entidade(self, row: dict) -> T:
        """Converte linha do banco em entidade."""
        pass

    def _erro(self, operacao: str, e: Exception, **details) -> DatabaseError:
        return self._falha(f"Erro ao {operacao} em {self.table_name}", e, **details)

    async def buscar_por_id(
        self, id: str, organization_id: Optional[str] = None
    ) -> Optional[T]:
        """
        Busca entidade por ID.

        Args:
            id: UUID da entidade
            organization_id: Restringe a busca a organizacao (None = sem escopo)

        Returns:
            Entidade ou None se nao encontrada
        """
        try:
            query = self.db.table(self.table_name).select("*").eq("id", id)
            if organization_id:
                query = query.eq("organization_id", organization_id)
            response = query.limit(1).execute()
        except Exception as e:
            raise self._erro("buscar", e, id=id)

        if not response.data:
            return None
        return self._para_entidade(response.data[0])

    async def listar(
        self,
        organization_id: str,
        limit: int = 100,
        offset: int = 0,
        **filters
    ) -> List[T]:
        """
        Lista entidades da organizacao, mais recentes primeiro.

        Args:
            organization_id: Organizacao dona dos registros
            limit: Maximo de resultados
            offset: Pular N primeiros resultados
            **filters: Filtros de igualdade (ex: status="draft")
        """
        try:
            query = (
                self.db.table(self.table_name)
                .select("*")
                .eq("organization_id", organization_id)
            )
            for campo, valor in filters.items():
                if valor is not None:
                    query = query.eq(campo, valor)
            response = (
                query.order("created_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as e:
            raise self._erro("listar", e, organization_id=organization_id)

        return [self._para_entidade(row) for row in (response.data or [])]

    async def listar_todos(self, organization_id: str, tamanho_pagina: int = 1000) -> List[T]:
        """Todas as entidades da organizacao, paginando ate a ultima pagina."""
        entidades: List[T] = []
        offset = 0
        while True:
            pagina = await self.listar(organization_id, limit=tamanho_pagina, offset=offset)
            entidades.extend(pagina)
            if len(pagina) < tamanho_pagina:
                return entidades
            offset += tamanho_pagina

    async def contar(self, organization_id: str) -> int:
        """Total de registros da organizacao (count exato)."""
        try:
            response = (
                self.db.table(self.table_name)
                .select("id", count="exact", head=True)
                .eq("organization_id", organization_id)
                .execute()
            )
        except Exception as e:
            raise self._erro("contar", e, organization_id=organization_id)
        return response.count or 0

    async def criar(self, data: dict) -> T:
        """Cria nova entidade e retorna a linha gravada."""
        try:
            response = self.db.table(self.table_name).insert(data).execute()
        except Exception as e:
            raise self._erro("criar", e)

        if not response.data:
            raise DatabaseError(f"Insert em {self.table_name} nao retornou dados")

        logger.info(f"Registro criado em {self.table_name}: {response.data[0].get('id')}")
        return self._para_entidade(response.data[0])

    async def atualizar(
        self, id: str, data: dict, organization_id: Optional[str] = None
    ) -> Optional[T]:
        """
        Atualiza entidade existente.

        Returns:
            Entidade atualizada ou None se nao encontrada
        """
        data = {**data, "updated_at": iso_utc()}
        try:
            query = self.db.table(self.table_name).update(data).eq("id", id)
            if organization_id:
                query = query.eq("organization_id", organization_id)
            response = query.execute()
        except Exception as e:
            raise self._erro("atualizar", e, id=id)

        if not response.data:
            return None
        return self._para_entidade(response.data[0])

    async def deletar(self, id: str, organization_id: Optional[str] = None) -> bool:
        """
        Deleta entidade.

        Returns:
            True se deletou, False se nao encontrada
        """
        try:
            query = self.db.table(self.table_name).delete().eq("id", id)
            if organization_id:
                query = query.eq("organization_id", organization_id)
            response = query.execute()
        except Exception as e:
            raise self._erro("deletar", e, id=id)

        if response.data:
            logger.info(f"Registro deletado em {self.table_name}: {id}")
            return True
        return False
