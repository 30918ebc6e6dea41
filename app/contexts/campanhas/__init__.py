"""
Bounded Context: Campanhas

Responsabilidade: Gestão de campanhas de mensagens WhatsApp de uma
organização e cálculo do status exibido a partir dos contadores.

Camadas:
- domain.py: Modelos de domínio (CampanhaData, ações de status)
- application.py: Application Service (orquestração dos casos de uso)
- Persistência: app.repositories.campanhas / app.repositories.mensagens
"""
