"""
Modelos das estatísticas de ligações.

Dois grupos convivem aqui:

- os registros crus do provedor de conversas (item da listagem e detalhe da
  conversa), validados com tolerância: campos desconhecidos são ignorados e
  quase tudo é opcional, porque o detalhe pode simplesmente não existir;
- os modelos do painel: ``ProcessedSession`` (uma ligação normalizada) e
  ``ReportSnapshot`` (o relatório agregado), que também é o formato do
  relatório persistido.

Relatórios antigos só guardavam ``sessoes_sucesso``. Ao carregar, o payload
é resolvido para uma de duas variantes (``completo`` ou ``legado``) por
``StoredReport``.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, TypeAdapter, model_validator

from painel_ligacoes.core.constants import StatsConstants


class StatusLigacao(str, Enum):
    BEM_SUCEDIDO = "bem-sucedido"
    NAO_ATENDIDA = "nao-atendida"


class ResultadoVenda(str, Enum):
    ACEITO = "aceito"
    RECUSADO = "recusado"


# =====================================================
# REGISTROS CRUS DO PROVEDOR
# =====================================================

class _ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ConversationSummary(_ProviderModel):
    """Item da listagem paginada de conversas."""
    conversation_id: Optional[str] = None
    status: Optional[str] = None
    call_successful: Optional[str] = None
    start_time_unix_secs: int
    end_time_unix_secs: Optional[int] = None
    call_duration_secs: Optional[float] = None


class PhoneCall(_ProviderModel):
    external_number: Optional[str] = None
    to_number: Optional[str] = None
    from_number: Optional[str] = None


class DetailMetadata(_ProviderModel):
    call_duration_secs: Optional[float] = None
    phone_call: Optional[PhoneCall] = None


class DataCollectionResult(_ProviderModel):
    value: Union[bool, int, float, str, None] = None
    rationale: Optional[str] = None


class Analysis(_ProviderModel):
    transcript_summary: Optional[str] = None
    call_successful: Optional[str] = None
    data_collection_results: Optional[Dict[str, DataCollectionResult]] = None


class ClientData(_ProviderModel):
    dynamic_variables: Optional[Dict[str, Any]] = None


class ConversationDetails(_ProviderModel):
    """Detalhe de uma conversa (transcrição, metadados e anotações)."""
    conversation_id: Optional[str] = None
    transcript: Optional[List[Dict[str, Any]]] = None
    metadata: Optional[DetailMetadata] = None
    analysis: Optional[Analysis] = None
    conversation_initiation_client_data: Optional[ClientData] = None
    status: Optional[str] = None
    call_successful: Optional[str] = None


# =====================================================
# MODELOS DO PAINEL
# =====================================================

class ProcessedSession(BaseModel):
    """Uma ligação normalizada."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    conversation_id: Optional[str] = None
    horario: datetime
    duracao: float = Field(default=0, ge=0)
    mensagens: int = Field(default=0, ge=0)
    status: StatusLigacao
    resultado_venda: Optional[ResultadoVenda] = None
    telefone_cliente: Optional[str] = None
    nome_cliente: Optional[str] = None


def _dist_vazia() -> Dict[str, int]:
    return {rotulo: 0 for rotulo, _, _ in StatsConstants.FAIXAS_MENSAGENS}


class ReportSnapshot(BaseModel):
    """Relatório agregado sobre um conjunto de sessões (variante completa)."""
    model_config = ConfigDict(extra="ignore")

    versao: Literal["completo"] = "completo"

    total: int = 0
    status_count: Dict[str, int] = Field(default_factory=dict)
    duracoes: List[float] = Field(default_factory=list)
    mensagens: List[int] = Field(default_factory=list)
    sessoes: List[ProcessedSession] = Field(default_factory=list)
    sessoes_sucesso: List[ProcessedSession] = Field(default_factory=list)

    ligacoes_atendidas: int = 0
    ligacoes_nao_atendidas: int = 0
    ligacoes_mais_30s: int = 0
    taxa_atendimento: float = 0
    taxa_mais_30s: float = 0
    duracao_total: float = 0
    duracao_media: float = 0
    maior_duracao: float = 0
    sessoes_zero: int = 0
    total_mensagens: int = 0
    media_msgs: float = 0
    max_msgs: int = 0

    dist_msgs: Dict[str, int] = Field(default_factory=_dist_vazia)
    picos: List[ProcessedSession] = Field(default_factory=list)

    periodo_inicio: Optional[str] = None
    periodo_fim: Optional[str] = None
    gerado_em: Optional[str] = None

    @property
    def possui_todas_sessoes(self) -> bool:
        return True

    def sessoes_para_filtro(self) -> List[ProcessedSession]:
        return list(self.sessoes)


class LegacyReportSnapshot(ReportSnapshot):
    """Relatório salvo antes de ``sessoes`` existir: só há as bem-sucedidas."""
    versao: Literal["legado"] = "legado"

    @model_validator(mode="before")
    @classmethod
    def _status_padrao(cls, data: Any) -> Any:
        # Sessões antigas não tinham status; todas eram bem-sucedidas
        if isinstance(data, dict) and isinstance(data.get("sessoes_sucesso"), list):
            data = dict(data)
            data["sessoes_sucesso"] = [
                {**sessao, "status": sessao.get("status") or StatusLigacao.BEM_SUCEDIDO.value}
                if isinstance(sessao, dict) else sessao
                for sessao in data["sessoes_sucesso"]
            ]
        return data

    @property
    def possui_todas_sessoes(self) -> bool:
        return False

    def sessoes_para_filtro(self) -> List[ProcessedSession]:
        return [
            sessao.model_copy(update={"status": StatusLigacao.BEM_SUCEDIDO})
            for sessao in self.sessoes_sucesso
        ]


def _versao_do_relatorio(value: Any) -> str:
    if isinstance(value, dict):
        versao = value.get("versao")
        if versao in ("completo", "legado"):
            return versao
        return "completo" if value.get("sessoes") else "legado"
    return getattr(value, "versao", "completo")


StoredReport = TypeAdapter(
    Annotated[
        Union[
            Annotated[ReportSnapshot, Tag("completo")],
            Annotated[LegacyReportSnapshot, Tag("legado")],
        ],
        Discriminator(_versao_do_relatorio),
    ]
)
