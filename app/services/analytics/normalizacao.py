"""
Normalizacao de status de mensagem e sentimento.

O log de mensagens acumula valores de varias origens (disparador em
portugues, webhooks em ingles, booleanos legados). Tudo e reduzido ao
vocabulario fila/enviado/lido/respondido/erro antes de contar.
"""
from typing import Optional


class StatusMensagem:
    """Vocabulario canonico de status de mensagem."""

    FILA = "fila"
    ENVIADO = "enviado"
    LIDO = "lido"
    RESPONDIDO = "respondido"
    ERRO = "erro"


class Sentimento:
    """Valores canonicos de sentimento gravados no banco."""

    SUPER_ENGAJADO = "super engajado"
    POSITIVO = "positivo"
    NEUTRO = "neutro"
    NEGATIVO = "negativo"

    TODOS = (SUPER_ENGAJADO, POSITIVO, NEUTRO, NEGATIVO)


_MAPA_STATUS = {
    "fila": StatusMensagem.FILA,
    "queued": StatusMensagem.FILA,
    "pendente": StatusMensagem.FILA,
    "processando": StatusMensagem.FILA,
    "pending": StatusMensagem.FILA,
    "processing": StatusMensagem.FILA,
    "true": StatusMensagem.ENVIADO,
    "sent": StatusMensagem.ENVIADO,
    "delivered": StatusMensagem.ENVIADO,
    "READ": StatusMensagem.LIDO,
    "read": StatusMensagem.LIDO,
    "responded": StatusMensagem.RESPONDIDO,
    "failed": StatusMensagem.ERRO,
}

_MAPA_SENTIMENTO = {
    "super engajado": Sentimento.SUPER_ENGAJADO,
    "super_engajado": Sentimento.SUPER_ENGAJADO,
    "superengajado": Sentimento.SUPER_ENGAJADO,
    "positivo": Sentimento.POSITIVO,
    "neutro": Sentimento.NEUTRO,
    "negativo": Sentimento.NEGATIVO,
}


def normalizar_status_mensagem(status) -> str:
    """
    Reduz um status bruto ao vocabulario canonico.

    None/vazio conta como fila. Valores desconhecidos sao retornados em
    minusculas.
    """
    if status is None or status == "":
        return StatusMensagem.FILA

    texto = str(status).lower() if isinstance(status, bool) else str(status)
    if texto in _MAPA_STATUS:
        return _MAPA_STATUS[texto]
    return texto.lower()


def normalizar_sentimento(sentimento: Optional[str]) -> Optional[str]:
    """
    Normaliza o sentimento classificado.

    Vazio vira None; valores desconhecidos sao retornados sem alteracao.
    """
    if not sentimento:
        return None

    chave = sentimento.lower().strip()
    return _MAPA_SENTIMENTO.get(chave, sentimento)
