"""
Rotas de health check.

- /health: Liveness básico (sempre 200 se app rodando)
- /health/ready: Readiness (Supabase acessível)
"""
from fastapi import APIRouter
import logging

from app.core.config import settings
from app.core.timezone import iso_utc
from app.services.supabase import get_supabase_client

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check():
    """
    Verifica se a API está funcionando.
    Usado para monitoramento e load balancers.
    """
    return {
        "status": "healthy",
        "timestamp": iso_utc(),
        "service": settings.APP_NAME,
    }


@router.get("/health/ready")
async def readiness_check():
    """
    Verifica se a API está pronta para receber requests.
    """
    try:
        get_supabase_client().table("campaigns").select("id").limit(1).execute()
        database = "ok"
    except Exception as e:
        logger.error(f"Readiness: Supabase indisponivel: {e}")
        database = "error"

    return {
        "status": "ready" if database == "ok" else "degraded",
        "checks": {"database": database},
        "timestamp": iso_utc(),
    }
