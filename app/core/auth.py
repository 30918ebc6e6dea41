"""
Autenticação do painel.

Valida o JWT do Supabase Auth e carrega o perfil (organização e papel)
do usuário. Toda operação de gestão é escopada pela organização do perfil.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.services.supabase import get_supabase_client

logger = logging.getLogger(__name__)

security = HTTPBearer()


class PapelUsuario(str, Enum):
    """Papéis gravados em profiles.role."""
    SAAS_ADMIN = "saas_admin"
    CLIENT = "client"
    MANAGER = "manager"
    AGENT = "agent"
    VIEWER = "viewer"
    GUEST = "guest"


# Papéis que apenas consultam
PAPEIS_SOMENTE_LEITURA = frozenset({PapelUsuario.VIEWER, PapelUsuario.GUEST})


@dataclass
class UsuarioPainel:
    """Usuário autenticado do painel."""
    id: str
    email: Optional[str]
    organization_id: str
    role: PapelUsuario

    @property
    def pode_editar(self) -> bool:
        return self.role not in PAPEIS_SOMENTE_LEITURA


def _papel(valor: Optional[str]) -> PapelUsuario:
    try:
        return PapelUsuario(valor)
    except ValueError:
        logger.warning(f"Papel desconhecido no perfil: {valor}")
        return PapelUsuario.GUEST


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> UsuarioPainel:
    """
    Valida o JWT do Supabase e retorna o usuário do painel.

    Raises:
        HTTPException: 401 para token inválido, 403 sem organização.
    """
    token = credentials.credentials
    supabase = get_supabase_client()

    try:
        user_response = supabase.auth.get_user(token)
        if not user_response or not user_response.user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token invalido"
            )

        auth_user = user_response.user

        result = (
            supabase.table("profiles")
            .select("organization_id, role")
            .eq("id", auth_user.id)
            .limit(1)
            .execute()
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.warning(f"Falha de autenticacao: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Erro de autenticacao: {str(e)}"
        )

    perfil = result.data[0] if result.data else {}
    if not perfil.get("organization_id"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuario sem organizacao"
        )

    return UsuarioPainel(
        id=auth_user.id,
        email=getattr(auth_user, "email", None),
        organization_id=perfil["organization_id"],
        role=_papel(perfil.get("role")),
    )


async def require_editor(user: UsuarioPainel = Depends(get_current_user)) -> UsuarioPainel:
    """Qualquer papel exceto viewer/guest."""
    if not user.pode_editar:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Papel {user.role.value} nao pode alterar dados"
        )
    return user
