"""
Rotas de Eventos.

Delegam ao EventosApplicationService; nenhuma lógica de negócio aqui.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from app.contexts.eventos.application import EventosApplicationService, get_eventos_service
from app.core.auth import UsuarioPainel, get_current_user, require_editor

router = APIRouter(prefix="/eventos", tags=["Eventos"])


class CriarEventoRequest(BaseModel):
    """Schema para criação de evento."""

    name: str = Field(..., description="Nome do evento")
    message_text: str = Field("", description="Texto do convite")
    event_id: Optional[str] = Field(None, description="Slug público; gerado do nome se omitido")
    status: Optional[str] = None
    event_date: Optional[str] = None
    location: Optional[str] = None
    message_image: Optional[str] = None
    image_filename: Optional[str] = None
    instance_id: Optional[str] = None


class AtualizarEventoRequest(BaseModel):
    """Campos editáveis; apenas os enviados são alterados."""

    name: Optional[str] = None
    message_text: Optional[str] = None
    status: Optional[str] = None
    event_date: Optional[str] = None
    location: Optional[str] = None
    message_image: Optional[str] = None
    image_filename: Optional[str] = None
    instance_id: Optional[str] = None


@router.get("")
async def listar_eventos(
    limit: int = 50,
    offset: int = 0,
    user: UsuarioPainel = Depends(get_current_user),
    service: EventosApplicationService = Depends(get_eventos_service),
):
    """Lista eventos da organização com status exibido."""
    return await service.listar_eventos(user.organization_id, limit=limit, offset=offset)


@router.post("", status_code=201)
async def criar_evento(
    dados: CriarEventoRequest,
    user: UsuarioPainel = Depends(require_editor),
    service: EventosApplicationService = Depends(get_eventos_service),
):
    evento = await service.criar_evento(user.organization_id, **dados.model_dump())
    return evento.to_dict()


@router.get("/{evento_id}")
async def buscar_evento(
    evento_id: str,
    user: UsuarioPainel = Depends(get_current_user),
    service: EventosApplicationService = Depends(get_eventos_service),
):
    evento = await service.buscar_evento(evento_id, user.organization_id)
    return evento.to_dict()


@router.patch("/{evento_id}")
async def atualizar_evento(
    evento_id: str,
    dados: AtualizarEventoRequest,
    user: UsuarioPainel = Depends(require_editor),
    service: EventosApplicationService = Depends(get_eventos_service),
):
    evento = await service.atualizar_evento(
        evento_id, user.organization_id, dados.model_dump(exclude_unset=True)
    )
    return evento.to_dict()


@router.delete("/{evento_id}", status_code=204)
async def excluir_evento(
    evento_id: str,
    user: UsuarioPainel = Depends(require_editor),
    service: EventosApplicationService = Depends(get_eventos_service),
):
    await service.excluir_evento(evento_id, user.organization_id)
    return Response(status_code=204)


@router.get("/{evento_id}/analytics")
async def analise_evento(
    evento_id: str,
    data: Optional[str] = None,
    user: UsuarioPainel = Depends(get_current_user),
    service: EventosApplicationService = Depends(get_eventos_service),
):
    """
    Métricas, gráficos e status exibido.

    `data` (AAAA-MM-DD) filtra pelo dia no horário de Brasília.
    """
    return await service.analise_evento(evento_id, user.organization_id, data)
