"""
Rotas públicas de status (sem autenticação).

Alimentam as páginas compartilháveis de acompanhamento de campanhas e
eventos. Aceitam GET e POST.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.contexts.campanhas.application import (
    CampanhasApplicationService,
    get_campanhas_service,
)
from app.contexts.eventos.application import EventosApplicationService, get_eventos_service

router = APIRouter(prefix="/public", tags=["Publico"])


class FiltroDataRequest(BaseModel):
    data: Optional[str] = None


@router.api_route("/campanhas/{campanha_id}/status", methods=["GET", "POST"])
async def status_campanha(
    campanha_id: str,
    service: CampanhasApplicationService = Depends(get_campanhas_service),
):
    """Campanha + contadores + status derivado."""
    return await service.status_publico(campanha_id)


@router.api_route("/eventos/{evento_id}/status", methods=["GET", "POST"])
async def status_evento(
    evento_id: str,
    data: Optional[str] = None,
    corpo: Optional[FiltroDataRequest] = None,
    service: EventosApplicationService = Depends(get_eventos_service),
):
    """
    Evento + métricas + gráficos + status exibido.

    `data` (AAAA-MM-DD, query ou corpo JSON) filtra pelo dia em Brasília.
    """
    if corpo and corpo.data:
        data = corpo.data
    return await service.status_publico(evento_id, data)
