"""
Módulo centralizado para tratamento de timezone.

O projeto usa:
- UTC para armazenamento no banco de dados
- America/Sao_Paulo para filtros por dia e atividade por hora

Convenções:
- `agora_utc()`: Para armazenar no banco
- `para_brasilia(dt)`: Converter datetime para Brasília
- `janela_do_dia(data)`: Intervalo UTC de um dia local de Brasília
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo


# Constantes de timezone
TZ_BRASILIA = ZoneInfo("America/Sao_Paulo")
TZ_UTC = timezone.utc


def agora_utc() -> datetime:
    """
    Retorna datetime atual em UTC (timezone-aware).

    Use para armazenar no banco de dados e comparar com dados do banco.
    """
    return datetime.now(TZ_UTC)


def para_brasilia(dt: datetime) -> datetime:
    """
    Converte datetime para horário de Brasília.

    Args:
        dt: datetime a converter (pode ser naive ou aware)

    Returns:
        datetime em America/Sao_Paulo
    """
    if dt.tzinfo is None:
        # Assume que datetime naive está em UTC
        dt = dt.replace(tzinfo=TZ_UTC)
    return dt.astimezone(TZ_BRASILIA)


def iso_utc(dt: Optional[datetime] = None) -> str:
    """
    Retorna datetime em formato ISO 8601 UTC.

    Conveniente para inserir no banco de dados.
    """
    if dt is None:
        dt = agora_utc()
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=TZ_UTC)
    return dt.astimezone(TZ_UTC).isoformat()


def parse_datetime(valor: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Converte timestamp vindo do PostgREST para datetime aware.

    Aceita sufixo "Z". Valores vazios ou invalidos retornam None.
    """
    if valor is None or valor == "":
        return None
    if isinstance(valor, datetime):
        return valor if valor.tzinfo else valor.replace(tzinfo=TZ_UTC)

    texto = str(valor).strip()
    if texto.endswith("Z"):
        texto = texto[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(texto)
    except ValueError:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=TZ_UTC)


def janela_do_dia(dia: Union[str, date]) -> Tuple[str, str]:
    """
    Retorna o intervalo [inicio, fim) em UTC de um dia de Brasília.

    Args:
        dia: date ou string "YYYY-MM-DD"

    Returns:
        Tupla (inicio_iso, fim_iso) para filtros gte/lt

    Raises:
        ValueError: Se a string nao for uma data valida
    """
    if isinstance(dia, str):
        dia = date.fromisoformat(dia[:10])

    inicio = datetime.combine(dia, time.min, tzinfo=TZ_BRASILIA)
    fim = inicio + timedelta(days=1)
    return iso_utc(inicio), iso_utc(fim)
