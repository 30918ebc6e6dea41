"""
Bounded Context: Eventos

Responsabilidade: Eventos com convite por WhatsApp, slug público e
status exibido derivado das mensagens enviadas.

Camadas:
- domain.py: EventoData, geração de slug
- application.py: Application Service (casos de uso)
"""
