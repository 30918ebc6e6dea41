"""
Agregacoes puras sobre linhas do log de mensagens.

Cada linha e um dict com as colunas de mensagens_enviadas:
status, data_envio, data_leitura, data_resposta, sentimento, perfil_contato.
Nenhuma funcao aqui faz I/O.
"""
from collections import Counter
from typing import Dict, Iterable, List

from app.core.timezone import para_brasilia, parse_datetime
from app.services.analytics.normalizacao import (
    Sentimento,
    StatusMensagem,
    normalizar_sentimento,
    normalizar_status_mensagem,
)
from app.services.analytics.types import (
    AnaliseSentimento,
    AtividadeHora,
    ItemDistribuicaoPerfil,
    ItemDistribuicaoSentimento,
    ItemDistribuicaoStatus,
    MetricasMensagens,
    TaxasEnvio,
)

COR_STATUS_PADRAO = "#9CA3AF"

CORES_STATUS = {
    "fila": "#6B7280",
    "enviado": "#3B82F6",
    "lido": "#8B5CF6",
    "respondido": "#10B981",
    "erro": "#EF4444",
    "pendente": "#F59E0B",
    # Legados
    "enviada": "#3B82F6",
    "entregue": "#10B981",
    "respondida": "#10B981",
    "inexistente": "#EF4444",
    "error": "#EF4444",
}

SEM_CLASSIFICACAO = "Sem classificação"

# (chave, label, cor, emoji) na ordem exibida nos graficos
_FAIXAS_SENTIMENTO = (
    (Sentimento.SUPER_ENGAJADO, "Super Engajado", "#FF6B35", "🔥"),
    (Sentimento.POSITIVO, "Positivo", "#10B981", "😊"),
    (Sentimento.NEUTRO, "Neutro", "#6B7280", "😐"),
    (Sentimento.NEGATIVO, "Negativo", "#EF4444", "😞"),
    (None, "Sem Classificação", "#D1D5DB", "⚪"),
)


def _percentual(parte: int, todo: int) -> float:
    if todo <= 0:
        return 0.0
    return round(parte / todo * 100, 2)


def normalizar_linhas(mensagens: Iterable[dict]) -> List[dict]:
    """Copia as linhas com status e sentimento normalizados."""
    return [
        {
            **m,
            "status": normalizar_status_mensagem(m.get("status")),
            "sentimento": normalizar_sentimento(m.get("sentimento")),
        }
        for m in mensagens
    ]


def contar_mensagens(mensagens: Iterable[dict]) -> MetricasMensagens:
    """
    Conta mensagens no cliente a partir de linhas ja normalizadas.

    Usado quando as contagens exatas no banco nao estao disponiveis.
    Respondida = status respondido ou data_resposta preenchida.
    """
    metricas = MetricasMensagens()
    for m in mensagens:
        status = m.get("status")
        metricas.total += 1
        if status == StatusMensagem.FILA:
            metricas.na_fila += 1
        elif status == StatusMensagem.ENVIADO:
            metricas.entregues += 1
        elif status == StatusMensagem.LIDO:
            metricas.lidas += 1
        elif status == StatusMensagem.ERRO:
            metricas.com_erro += 1

        if status == StatusMensagem.RESPONDIDO or m.get("data_resposta") is not None:
            metricas.respondidas += 1
    return metricas


def calcular_taxas(metricas: MetricasMensagens) -> TaxasEnvio:
    """
    Calcula taxas de entrega, leitura, resposta e progresso.

    Resposta usa lidas como base; sem leituras, cai para o total.
    """
    if metricas.lidas > 0:
        resposta = _percentual(metricas.respondidas, metricas.lidas)
    else:
        resposta = _percentual(metricas.respondidas, metricas.total)

    return TaxasEnvio(
        entrega=_percentual(metricas.entregues, metricas.total),
        leitura=_percentual(metricas.lidas, metricas.entregues),
        resposta=resposta,
        progresso=_percentual(metricas.processadas, metricas.total),
    )


def atividade_por_hora(mensagens: Iterable[dict]) -> List[AtividadeHora]:
    """
    Agrupa envios e respostas nas 24 horas do dia (Brasilia).

    A hora considerada e a do envio. Enviados conta toda mensagem com
    tentativa (status fora da fila); respondidos conta quem tem
    data_resposta.
    """
    horas: Dict[str, AtividadeHora] = {
        f"{h:02d}:00": AtividadeHora(hora=f"{h:02d}:00") for h in range(24)
    }

    for m in mensagens:
        data_envio = parse_datetime(m.get("data_envio"))
        if data_envio is None:
            continue

        chave = f"{para_brasilia(data_envio).hour:02d}:00"
        if normalizar_status_mensagem(m.get("status")) != StatusMensagem.FILA:
            horas[chave].enviados += 1
        if m.get("data_resposta"):
            horas[chave].respondidos += 1

    return list(horas.values())


def distribuicao_status(mensagens: Iterable[dict]) -> List[ItemDistribuicaoStatus]:
    """Contagem por status normalizado, na ordem de primeira ocorrencia."""
    contagem = Counter(normalizar_status_mensagem(m.get("status")) for m in mensagens)
    return [
        ItemDistribuicaoStatus(
            status=status,
            count=count,
            color=CORES_STATUS.get(status, COR_STATUS_PADRAO),
        )
        for status, count in contagem.items()
    ]


def analisar_sentimento(mensagens: Iterable[dict]) -> AnaliseSentimento:
    """
    Distribuicao de sentimento.

    Nulos e valores nao reconhecidos contam como sem classificacao.
    """
    contagem: Dict = {chave: 0 for chave, *_ in _FAIXAS_SENTIMENTO}
    for m in mensagens:
        sentimento = normalizar_sentimento(m.get("sentimento"))
        if sentimento in Sentimento.TODOS:
            contagem[sentimento] += 1
        else:
            contagem[None] += 1

    total = sum(contagem.values())
    distribuicao = [
        ItemDistribuicaoSentimento(
            sentiment=label,
            count=contagem[chave],
            percentage=_percentual(contagem[chave], total),
            color=cor,
            emoji=emoji,
        )
        for chave, label, cor, emoji in _FAIXAS_SENTIMENTO
    ]

    return AnaliseSentimento(
        super_engajado=contagem[Sentimento.SUPER_ENGAJADO],
        positivo=contagem[Sentimento.POSITIVO],
        neutro=contagem[Sentimento.NEUTRO],
        negativo=contagem[Sentimento.NEGATIVO],
        sem_classificacao=contagem[None],
        distribution=distribuicao,
    )


def cor_deterministica(indice: int, total: int) -> str:
    """Cor HSL estavel para o i-esimo item de uma lista de tamanho total."""
    matiz = round(indice * 360 / total) if total else 0
    saturacao = 65 + (indice % 3) * 10
    luminosidade = 50 + (indice % 2) * 10
    return f"hsl({matiz}, {saturacao}%, {luminosidade}%)"


def distribuicao_perfil(mensagens: Iterable[dict]) -> List[ItemDistribuicaoPerfil]:
    """Contagem por perfil de contato com cores deterministicas."""
    contagem = Counter(m.get("perfil_contato") or SEM_CLASSIFICACAO for m in mensagens)
    total = sum(contagem.values())
    return [
        ItemDistribuicaoPerfil(
            profile=perfil,
            count=count,
            percentage=_percentual(count, total),
            color=cor_deterministica(indice, len(contagem)),
        )
        for indice, (perfil, count) in enumerate(contagem.items())
    ]
