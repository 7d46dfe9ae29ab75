# backend/painel_ligacoes/reports/schemas.py
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from painel_ligacoes.core.constants import TranscriptionConstants
from painel_ligacoes.stats.schemas import ProcessedSession, ResultadoVenda, StatusLigacao


class GenerateReportRequest(BaseModel):
    inicio: date


class FilterReportRequest(BaseModel):
    inicio: date
    fim: date


class DeletionResult(BaseModel):
    success: bool
    message: str
    report_updated: bool = False
    warning: Optional[str] = None


class TranscriptionFilters(BaseModel):
    status: Optional[StatusLigacao] = None
    # 'recusado' também traz as sessões sem resultado
    resultado_venda: Optional[ResultadoVenda] = None
    duracao_minima: int = 0
    limit: int = Field(default=TranscriptionConstants.PAGE_SIZE, ge=1, le=TranscriptionConstants.MAX_PAGE_SIZE)
    offset: int = Field(default=0, ge=0)


class TranscriptionItem(ProcessedSession):
    duracao_formatada: str
    horario_formatado: str


class TranscriptionPage(BaseModel):
    total: int
    limit: int
    offset: int
    possui_todas_sessoes: bool
    itens: List[TranscriptionItem]


class ReportStatus(BaseModel):
    success: Literal[True] = True
    message: str
