"""
Orquestração do relatório: geração a partir do provedor, filtro por período,
remoção de uma conversa e listagem de transcrições.
"""

from datetime import date, datetime, time, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo

from painel_ligacoes.core.analytics import operation_timer
from painel_ligacoes.core.exceptions import (
    InvalidPeriodError,
    NoConversationsFoundError,
    ReportError,
    ReportNotFoundError,
)
from painel_ligacoes.core.logging import get_logger
from painel_ligacoes.core.settings import Settings
from painel_ligacoes.provider.client import ElevenLabsClient
from painel_ligacoes.provider.detail_fetcher import fetch_details
from painel_ligacoes.reports.schemas import (
    DeletionResult,
    TranscriptionFilters,
    TranscriptionItem,
    TranscriptionPage,
)
from painel_ligacoes.reports.store import AnySnapshot, ReportStore
from painel_ligacoes.stats.adjuster import remove_session
from painel_ligacoes.stats.aggregator import aggregate_from_raw, aggregate_from_sessions
from painel_ligacoes.stats.formatting import formatar_data_br, formatar_data_hora, formatar_duracao
from painel_ligacoes.stats.schemas import ProcessedSession, ReportSnapshot, ResultadoVenda

FIM_DO_DIA = time(23, 59, 59)


class ReportService:
    def __init__(self, store: ReportStore, client: ElevenLabsClient, settings: Settings):
        self.store = store
        self.client = client
        self.settings = settings
        self.tz = ZoneInfo(settings.TIMEZONE)
        self.logger = get_logger("reports.service")

    def _inicio_do_dia(self, dia: date) -> datetime:
        return datetime.combine(dia, time.min, tzinfo=self.tz)

    # =====================================================
    # GERAÇÃO
    # =====================================================

    def generate(self, inicio: date) -> ReportSnapshot:
        """Busca as conversas desde ``inicio``, agrega e salva como relatório atual."""
        momento_inicio = self._inicio_do_dia(inicio)
        start_unix = int(momento_inicio.timestamp())

        with operation_timer("generate_report", inicio=inicio.isoformat()):
            conversations = self.client.list_conversations(start_unix)
            if not conversations:
                raise NoConversationsFoundError(inicio.isoformat())

            ids = [c.get("conversation_id") for c in conversations if c.get("conversation_id")]
            details = fetch_details(
                self.client,
                ids,
                concurrency=self.settings.CONCURRENT_LIMIT,
                max_retries=self.settings.DETAIL_MAX_RETRIES,
            )

            snapshot = aggregate_from_raw(conversations, details)
            snapshot = snapshot.model_copy(update={
                "periodo_inicio": formatar_data_br(momento_inicio, self.settings.TIMEZONE),
                "gerado_em": formatar_data_br(datetime.now(timezone.utc), self.settings.TIMEZONE),
            })
            self.store.save(snapshot)

        self.logger.info(
            "Report generated",
            total=snapshot.total,
            with_details=len(details),
            taxa_atendimento=round(snapshot.taxa_atendimento, 2),
        )
        return snapshot

    # =====================================================
    # FILTRO POR PERÍODO
    # =====================================================

    def filter_by_period(self, inicio: date, fim: date) -> ReportSnapshot:
        """Recalcula as estatísticas só com as sessões do período; nada é salvo."""
        if fim < inicio:
            raise InvalidPeriodError(inicio.isoformat(), fim.isoformat())

        stored = self.store.load()
        limite_inicio = self._inicio_do_dia(inicio)
        limite_fim = datetime.combine(fim, FIM_DO_DIA, tzinfo=self.tz)

        subset = [
            sessao for sessao in stored.sessoes_para_filtro()
            if limite_inicio <= sessao.horario <= limite_fim
        ]
        self.logger.info(
            "Report filtered",
            inicio=inicio.isoformat(),
            fim=fim.isoformat(),
            sessions=len(subset),
            legacy=not stored.possui_todas_sessoes,
        )

        return aggregate_from_sessions(subset).model_copy(update={
            "periodo_inicio": stored.periodo_inicio,
            "periodo_fim": stored.periodo_fim,
            "gerado_em": stored.gerado_em,
        })

    # =====================================================
    # REMOÇÃO DE CONVERSA
    # =====================================================

    def remove_conversation(self, conversation_id: str) -> DeletionResult:
        # Erros do provedor propagam: sem exclusão remota, nada muda localmente
        self.client.delete_conversation(conversation_id)

        try:
            snapshot = self.store.load()
        except ReportNotFoundError:
            return DeletionResult(success=True, message="Conversa deletada com sucesso")
        except ReportError as e:
            return self._deletion_with_warning(conversation_id, e)

        removida = self._find_session(snapshot, conversation_id)
        if removida is None:
            self.logger.info("Deleted conversation not in stored report", conversation_id=conversation_id)
            return DeletionResult(success=True, message="Conversa deletada com sucesso")

        try:
            self.store.save(remove_session(snapshot, removida))
        except ReportError as e:
            return self._deletion_with_warning(conversation_id, e)

        self.logger.info("Stored report adjusted", conversation_id=conversation_id)
        return DeletionResult(
            success=True,
            message="Conversa deletada e relatório atualizado",
            report_updated=True,
        )

    @staticmethod
    def _find_session(snapshot: AnySnapshot, conversation_id: str) -> Optional[ProcessedSession]:
        fonte = snapshot.sessoes if snapshot.possui_todas_sessoes else snapshot.sessoes_sucesso
        return next((s for s in fonte if s.conversation_id == conversation_id), None)

    def _deletion_with_warning(self, conversation_id: str, error: ReportError) -> DeletionResult:
        self.logger.warning(
            "Conversation deleted but report not updated",
            conversation_id=conversation_id,
            error_code=error.error_code,
        )
        return DeletionResult(
            success=True,
            message="Conversa deletada com sucesso",
            warning=f"O relatório não pôde ser atualizado: {error.message}",
        )

    # =====================================================
    # TRANSCRIÇÕES
    # =====================================================

    def list_transcriptions(self, filtros: TranscriptionFilters) -> TranscriptionPage:
        snapshot = self.store.load()
        sessoes: List[ProcessedSession] = sorted(
            (s for s in snapshot.sessoes_para_filtro() if s.conversation_id),
            key=lambda s: s.horario,
            reverse=True,
        )

        if filtros.status is not None:
            sessoes = [s for s in sessoes if s.status == filtros.status]
        if filtros.resultado_venda == ResultadoVenda.RECUSADO:
            sessoes = [s for s in sessoes if s.resultado_venda in (ResultadoVenda.RECUSADO, None)]
        elif filtros.resultado_venda is not None:
            sessoes = [s for s in sessoes if s.resultado_venda == filtros.resultado_venda]
        if filtros.duracao_minima > 0:
            sessoes = [s for s in sessoes if s.duracao >= filtros.duracao_minima]

        pagina = sessoes[filtros.offset:filtros.offset + filtros.limit]
        return TranscriptionPage(
            total=len(sessoes),
            limit=filtros.limit,
            offset=filtros.offset,
            possui_todas_sessoes=snapshot.possui_todas_sessoes,
            itens=[
                TranscriptionItem(
                    **s.model_dump(),
                    duracao_formatada=formatar_duracao(s.duracao),
                    horario_formatado=formatar_data_hora(s.horario, self.settings.TIMEZONE),
                )
                for s in pagina
            ],
        )
