"""
Pacote de Bounded Contexts do painel.

Cada subpacote representa um contexto de domínio:

- application.py: Application Services (orquestração de casos de uso)
- domain.py: tipos de domínio do contexto
- Repositórios: app/repositories/

As rotas chamam apenas os Application Services; nenhum SQL nas rotas.
"""
