"""
Bounded Context: Webhooks

Responsabilidade: Atualizações de status de entrega vindas do provedor
WhatsApp.
"""
