"""
Tipos das metricas agregadas de campanhas e eventos.
"""
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from app.services.status.types import ContadoresCampanha, ContadoresEvento


@dataclass
class MetricasMensagens:
    """
    Contagens de mensagens de uma campanha ou evento.

    Os campos sao contados de forma independente; nao ha relacao de soma
    garantida entre eles.
    """

    total: int = 0
    na_fila: int = 0
    entregues: int = 0
    lidas: int = 0
    respondidas: int = 0
    com_erro: int = 0

    @property
    def enviadas(self) -> int:
        """Tentativas de envio finalizadas (entregues + erro)."""
        return self.entregues + self.com_erro

    @property
    def processadas(self) -> int:
        return self.total - self.na_fila

    def contadores_campanha(self) -> ContadoresCampanha:
        return ContadoresCampanha(
            total_mensagens=self.total,
            mensagens_na_fila=self.na_fila,
            mensagens_enviadas=self.enviadas,
        )

    def contadores_evento(self) -> ContadoresEvento:
        return ContadoresEvento(
            total_mensagens=self.total,
            mensagens_entregues=self.entregues,
            mensagens_lidas=self.lidas,
            mensagens_respondidas=self.respondidas,
            mensagens_com_erro=self.com_erro,
            mensagens_na_fila=self.na_fila,
        )

    def to_dict(self) -> dict:
        """Converte para dicionario."""
        return {
            "total_mensagens": self.total,
            "mensagens_na_fila": self.na_fila,
            "mensagens_enviadas": self.enviadas,
            "mensagens_entregues": self.entregues,
            "mensagens_lidas": self.lidas,
            "mensagens_respondidas": self.respondidas,
            "mensagens_com_erro": self.com_erro,
        }


@dataclass
class TaxasEnvio:
    """Taxas percentuais (0-100)."""

    entrega: float = 0.0
    leitura: float = 0.0
    resposta: float = 0.0
    progresso: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AtividadeHora:
    """Atividade de uma hora do dia (HH:00, horario de Brasilia)."""

    hora: str
    enviados: int = 0
    respondidos: int = 0


@dataclass
class ItemDistribuicaoStatus:
    status: str
    count: int
    color: str


@dataclass
class ItemDistribuicaoSentimento:
    sentiment: str
    count: int
    percentage: float
    color: str
    emoji: str


@dataclass
class AnaliseSentimento:
    """Contagem por sentimento + distribuicao para graficos."""

    super_engajado: int = 0
    positivo: int = 0
    neutro: int = 0
    negativo: int = 0
    sem_classificacao: int = 0
    distribution: List[ItemDistribuicaoSentimento] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ItemDistribuicaoPerfil:
    profile: str
    count: int
    percentage: float
    color: str


@dataclass
class AnaliseCompleta:
    """Metricas + graficos de uma campanha ou evento."""

    metricas: MetricasMensagens
    taxas: TaxasEnvio
    atividade_por_hora: List[AtividadeHora] = field(default_factory=list)
    distribuicao_status: List[ItemDistribuicaoStatus] = field(default_factory=list)
    sentimento: Optional[AnaliseSentimento] = None
    distribuicao_perfil: List[ItemDistribuicaoPerfil] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Converte para dicionario (payload de API)."""
        return {
            **self.metricas.to_dict(),
            "taxas": self.taxas.to_dict(),
            "atividade_por_hora": [asdict(a) for a in self.atividade_por_hora],
            "distribuicao_status": [asdict(d) for d in self.distribuicao_status],
            "sentimento": self.sentimento.to_dict() if self.sentimento else None,
            "distribuicao_perfil": [asdict(p) for p in self.distribuicao_perfil],
        }
