"""
Modulo de metricas.

Estrutura:
- normalizacao: Vocabulario canonico de status e sentimento
- agregacao: Contagens, taxas e distribuicoes (funcoes puras)
- types: Dataclasses de resultado
"""
from app.services.analytics.agregacao import (
    analisar_sentimento,
    atividade_por_hora,
    calcular_taxas,
    contar_mensagens,
    distribuicao_perfil,
    distribuicao_status,
    normalizar_linhas,
)
from app.services.analytics.normalizacao import (
    normalizar_sentimento,
    normalizar_status_mensagem,
)
from app.services.analytics.types import AnaliseCompleta, MetricasMensagens, TaxasEnvio


def montar_analise(metricas: MetricasMensagens, mensagens: list) -> AnaliseCompleta:
    """Combina contagens exatas com os graficos calculados sobre as linhas."""
    linhas = normalizar_linhas(mensagens)
    return AnaliseCompleta(
        metricas=metricas,
        taxas=calcular_taxas(metricas),
        atividade_por_hora=atividade_por_hora(linhas),
        distribuicao_status=distribuicao_status(linhas),
        sentimento=analisar_sentimento(linhas),
        distribuicao_perfil=distribuicao_perfil(linhas),
    )


__all__ = [
    "AnaliseCompleta",
    "MetricasMensagens",
    "TaxasEnvio",
    "analisar_sentimento",
    "atividade_por_hora",
    "calcular_taxas",
    "contar_mensagens",
    "distribuicao_perfil",
    "distribuicao_status",
    "montar_analise",
    "normalizar_linhas",
    "normalizar_sentimento",
    "normalizar_status_mensagem",
]
