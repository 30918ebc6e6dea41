"""
Application Service: webhook de status de mensagens.

Recebe atualizações de entrega do provedor WhatsApp, atualiza a mensagem,
incrementa as métricas da campanha e registra o evento no log.
"""

import hashlib
import hmac
import json
import logging
from typing import Literal, Optional

from pydantic import BaseModel, ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import AuthenticationError, DatabaseError, ValidationError
from app.repositories.campanhas import CampanhaRepository
from app.repositories.mensagens import MensagemRepository

logger = logging.getLogger(__name__)


class StatusWebhookPayload(BaseModel):
    """Payload enviado pelo provedor a cada mudança de status."""

    message_id: str
    status: Literal["sent", "delivered", "read", "failed"]
    phone: str
    timestamp: Optional[str] = None
    error_message: Optional[str] = None
    campaign_id: Optional[str] = None
    contact_id: Optional[str] = None


def assinar(corpo: bytes, segredo: str) -> str:
    """HMAC-SHA256 hexadecimal do corpo bruto."""
    return hmac.new(segredo.encode("utf-8"), corpo, hashlib.sha256).hexdigest()


class WebhookApplicationService:
    """
    Processa webhooks de status.

    Exceções lançadas:
        - AuthenticationError: assinatura ausente ou inválida
        - ValidationError: payload malformado ou incompleto
        - DatabaseError: falha ao atualizar a mensagem ou gravar o log
    """

    def __init__(self, mensagens=None, campanhas=None, segredo: Optional[str] = None):
        """
        Args:
            mensagens: Repositório de mensagens (default: MensagemRepository)
            campanhas: Repositório de campanhas (default: CampanhaRepository)
            segredo: Segredo HMAC (default: settings.WEBHOOK_SECRET)
        """
        self._mensagens = mensagens or MensagemRepository()
        self._campanhas = campanhas or CampanhaRepository()
        self._segredo = settings.WEBHOOK_SECRET if segredo is None else segredo

    def verificar_assinatura(self, corpo: bytes, assinatura: Optional[str]) -> None:
        """
        Valida X-Webhook-Signature.

        Sem segredo configurado a validação fica desabilitada (desenvolvimento).
        """
        if not self._segredo:
            if not assinatura:
                logger.warning("[Webhook] Recebido sem assinatura")
            return

        # bytes: compare_digest recusa str com caracteres fora do ASCII
        if not assinatura or not hmac.compare_digest(
            assinar(corpo, self._segredo).encode(),
            assinatura.strip().lower().encode("utf-8"),
        ):
            logger.warning("[Webhook] Assinatura inválida")
            raise AuthenticationError("Assinatura do webhook inválida")

    @staticmethod
    def _parse(corpo: bytes) -> StatusWebhookPayload:
        try:
            dados = json.loads(corpo or b"{}")
        except ValueError as e:
            raise ValidationError("JSON inválido", original_error=e)

        if not isinstance(dados, dict):
            raise ValidationError("Payload deve ser um objeto JSON")

        faltando = [c for c in ("message_id", "status", "phone") if not dados.get(c)]
        if faltando:
            raise ValidationError(
                "Missing required fields",
                details={"campos": faltando},
            )

        try:
            return StatusWebhookPayload(**dados)
        except PydanticValidationError as e:
            raise ValidationError(
                "Payload inválido",
                details={"erros": [err["msg"] for err in e.errors()]},
                original_error=e,
            )

    async def _incrementar_metrica(self, campanha_id: str, status: str) -> None:
        try:
            await self._campanhas.incrementar_metrica(campanha_id, status)
        except DatabaseError as e:
            # Métrica agregada não invalida o webhook
            logger.error(
                f"[Webhook] Falha ao atualizar métricas da campanha {campanha_id}: {e}",
                extra={"campanha_id": campanha_id},
            )

    async def processar_status(
        self, corpo: bytes, assinatura: Optional[str] = None
    ) -> dict:
        """
        Caso de Uso: Processar webhook de status.

        Args:
            corpo: Corpo bruto da requisição (usado na assinatura)
            assinatura: Valor do header X-Webhook-Signature

        Returns:
            {"success": True, "message": "Webhook processed"}
        """
        self.verificar_assinatura(corpo, assinatura)
        payload = self._parse(corpo)
        logger.info(
            f"[Webhook] Status {payload.status} para mensagem {payload.message_id}"
        )

        mensagem = await self._mensagens.atualizar_status_whatsapp(
            payload.message_id, payload.status, payload.error_message
        )

        if mensagem and mensagem.get("campaign_id"):
            await self._incrementar_metrica(mensagem["campaign_id"], payload.status)
        elif not mensagem:
            logger.debug(f"[Webhook] Mensagem {payload.message_id} não encontrada")

        await self._mensagens.registrar_webhook(
            payload.phone, payload.status, payload.campaign_id
        )

        return {"success": True, "message": "Webhook processed"}


def get_webhook_service() -> WebhookApplicationService:
    """Retorna instância do WebhookApplicationService."""
    return WebhookApplicationService()
