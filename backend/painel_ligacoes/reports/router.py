from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from painel_ligacoes.core.constants import TranscriptionConstants
from painel_ligacoes.core.dependencies import get_report_service, get_report_store
from painel_ligacoes.reports.schemas import (
    FilterReportRequest,
    GenerateReportRequest,
    ReportStatus,
    TranscriptionFilters,
    TranscriptionPage,
)
from painel_ligacoes.reports.service import ReportService
from painel_ligacoes.reports.store import ReportStore
from painel_ligacoes.stats.schemas import LegacyReportSnapshot, ReportSnapshot, ResultadoVenda, StatusLigacao, StoredReport

router = APIRouter()
SnapshotResponse = Union[ReportSnapshot, LegacyReportSnapshot]


@router.get("/report", response_model=SnapshotResponse, summary="Get the stored report")
def get_report(store: ReportStore = Depends(get_report_store)):
    return store.load()


@router.post("/report", response_model=ReportStatus, summary="Replace the stored report")
def save_report(payload: dict, store: ReportStore = Depends(get_report_store)):
    # Mesmo resolvedor de variantes usado na leitura do arquivo
    try:
        snapshot = StoredReport.validate_python(payload)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False))
    store.save(snapshot)
    return ReportStatus(message="Relatório salvo com sucesso")


@router.delete("/report", response_model=ReportStatus, summary="Reset the stored report")
def delete_report(store: ReportStore = Depends(get_report_store)):
    if store.delete():
        return ReportStatus(message="Relatório removido com sucesso")
    return ReportStatus(message="Nenhum relatório para remover")


@router.post("/report/generate", response_model=ReportSnapshot, summary="Generate a new report from the provider")
def generate_report(payload: GenerateReportRequest, service: ReportService = Depends(get_report_service)):
    return service.generate(payload.inicio)


@router.post("/report/filter", response_model=ReportSnapshot, summary="Recompute the stored report for a date range")
def filter_report(payload: FilterReportRequest, service: ReportService = Depends(get_report_service)):
    return service.filter_by_period(payload.inicio, payload.fim)


@router.get("/report/transcriptions", response_model=TranscriptionPage, summary="List transcriptions of the stored report")
def list_transcriptions(
    status: Optional[StatusLigacao] = None,
    resultado_venda: Optional[ResultadoVenda] = None,
    duracao_minima: int = 0,
    limit: int = Query(default=TranscriptionConstants.PAGE_SIZE, ge=1, le=TranscriptionConstants.MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    service: ReportService = Depends(get_report_service),
):
    filtros = TranscriptionFilters(
        status=status,
        resultado_venda=resultado_venda,
        duracao_minima=duracao_minima,
        limit=limit,
        offset=offset,
    )
    return service.list_transcriptions(filtros)
