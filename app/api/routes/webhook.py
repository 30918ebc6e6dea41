"""
Webhook de status de entrega do provedor WhatsApp.
"""

from fastapi import APIRouter, Depends, Request

from app.contexts.webhooks.application import WebhookApplicationService, get_webhook_service

router = APIRouter(prefix="/webhook", tags=["Webhook"])


@router.post("/status")
async def webhook_status(
    request: Request,
    service: WebhookApplicationService = Depends(get_webhook_service),
):
    """
    Recebe atualizações de status (sent, delivered, read, failed).

    O corpo bruto é lido antes do parse para validar X-Webhook-Signature.
    """
    body = await request.body()
    return await service.processar_status(
        body, request.headers.get("X-Webhook-Signature")
    )
