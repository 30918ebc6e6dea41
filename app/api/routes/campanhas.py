"""
Rotas de Campanhas.

A rota só conhece HTTP: recebe requests, chama o
CampanhasApplicationService e retorna responses. Erros de domínio viram
HTTP em app.api.error_handlers.
"""
from typing import Any, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from app.contexts.campanhas.application import (
    CampanhasApplicationService,
    get_campanhas_service,
)
from app.core.auth import UsuarioPainel, get_current_user, require_editor

router = APIRouter(prefix="/campanhas", tags=["Campanhas"])


# ---------------------------------------------------------------------------
# Schemas de Request
# ---------------------------------------------------------------------------

class CriarCampanhaRequest(BaseModel):
    """Schema para criação de campanha."""

    name: str = Field(..., description="Nome da campanha")
    description: Optional[str] = None
    template_id: Optional[str] = Field(None, description="Template de mensagem")
    target_contacts: Optional[Any] = Field(None, description="Seleção de contatos")
    scheduled_at: Optional[str] = Field(
        None, description="Data/hora ISO 8601; quando presente a campanha nasce agendada"
    )


class AtualizarCampanhaRequest(BaseModel):
    """Campos editáveis; apenas os enviados são alterados."""

    name: Optional[str] = None
    description: Optional[str] = None
    template_id: Optional[str] = None
    target_contacts: Optional[Any] = None
    scheduled_at: Optional[str] = None


class AcaoCampanhaRequest(BaseModel):
    scheduled_at: Optional[str] = Field(None, description="Obrigatório para 'agendar'")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("")
async def listar_campanhas(
    status: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    user: UsuarioPainel = Depends(get_current_user),
    service: CampanhasApplicationService = Depends(get_campanhas_service),
):
    """Lista campanhas da organização com status derivado dos contadores."""
    return await service.listar_campanhas(
        user.organization_id, status=status, limit=limit, offset=offset
    )


@router.post("", status_code=201)
async def criar_campanha(
    dados: CriarCampanhaRequest,
    user: UsuarioPainel = Depends(require_editor),
    service: CampanhasApplicationService = Depends(get_campanhas_service),
):
    """Cria campanha (rascunho, ou agendada com scheduled_at)."""
    campanha = await service.criar_campanha(
        organization_id=user.organization_id,
        name=dados.name,
        description=dados.description,
        template_id=dados.template_id,
        target_contacts=dados.target_contacts,
        scheduled_at=dados.scheduled_at,
        created_by=user.id,
    )
    return campanha.to_dict()


@router.get("/{campanha_id}")
async def buscar_campanha(
    campanha_id: str,
    user: UsuarioPainel = Depends(get_current_user),
    service: CampanhasApplicationService = Depends(get_campanhas_service),
):
    """Campanha com contadores, status derivado e badge."""
    return await service.detalhar_campanha(campanha_id, user.organization_id)


@router.patch("/{campanha_id}")
async def atualizar_campanha(
    campanha_id: str,
    dados: AtualizarCampanhaRequest,
    user: UsuarioPainel = Depends(require_editor),
    service: CampanhasApplicationService = Depends(get_campanhas_service),
):
    campanha = await service.atualizar_campanha(
        campanha_id, user.organization_id, dados.model_dump(exclude_unset=True)
    )
    return campanha.to_dict()


@router.delete("/{campanha_id}", status_code=204)
async def excluir_campanha(
    campanha_id: str,
    user: UsuarioPainel = Depends(require_editor),
    service: CampanhasApplicationService = Depends(get_campanhas_service),
):
    await service.excluir_campanha(campanha_id, user.organization_id)
    return Response(status_code=204)


@router.post("/{campanha_id}/acoes/{acao}")
async def executar_acao(
    campanha_id: str,
    acao: str,
    dados: Optional[AcaoCampanhaRequest] = None,
    user: UsuarioPainel = Depends(require_editor),
    service: CampanhasApplicationService = Depends(get_campanhas_service),
):
    """
    Transição de status: agendar, iniciar, pausar, retomar, cancelar, concluir.
    """
    return await service.executar_acao(
        campanha_id,
        user.organization_id,
        acao,
        scheduled_at=dados.scheduled_at if dados else None,
    )


@router.get("/{campanha_id}/analytics")
async def analise_campanha(
    campanha_id: str,
    data: Optional[str] = None,
    user: UsuarioPainel = Depends(get_current_user),
    service: CampanhasApplicationService = Depends(get_campanhas_service),
):
    """
    Métricas e gráficos da campanha.

    `data` (AAAA-MM-DD) filtra pelo dia no horário de Brasília.
    """
    return await service.analise_campanha(campanha_id, user.organization_id, data)
