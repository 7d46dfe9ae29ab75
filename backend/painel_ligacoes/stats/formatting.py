from datetime import datetime
from zoneinfo import ZoneInfo


def formatar_duracao(segundos: float) -> str:
    """65 -> '1:05'"""
    minutos = int(segundos // 60)
    segs = int(segundos % 60)
    return f"{minutos}:{segs:02d}"


def formatar_data_hora(momento: datetime, timezone: str) -> str:
    """Horário curto usado na lista de transcrições: '15/01 às 11:30'."""
    local = momento.astimezone(ZoneInfo(timezone))
    return local.strftime("%d/%m às %H:%M")


def formatar_data_br(momento: datetime, timezone: str) -> str:
    """Data completa dos metadados do relatório: '15/01/2024, 11:30:00'."""
    local = momento.astimezone(ZoneInfo(timezone))
    return local.strftime("%d/%m/%Y, %H:%M:%S")
