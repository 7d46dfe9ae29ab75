"""
Agregação das sessões normalizadas em um ``ReportSnapshot``.

``aggregate_from_raw`` normaliza os registros do provedor e delega para
``aggregate_from_sessions``; as duas entradas compartilham exatamente a
mesma aritmética. Nada aqui lança exceção por falta de dados: denominadores
zerados resultam em 0.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Union

from pydantic import ValidationError

from painel_ligacoes.core.constants import StatsConstants
from painel_ligacoes.core.logging import get_logger
from painel_ligacoes.stats.normalizer import normalize_session
from painel_ligacoes.stats.schemas import (
    ConversationDetails,
    ConversationSummary,
    ProcessedSession,
    ReportSnapshot,
    StatusLigacao,
)

logger = get_logger("stats.aggregator")

RawConversation = Union[ConversationSummary, Mapping]
RawDetails = Union[ConversationDetails, Mapping]


def faixa_mensagens(mensagens: int) -> str:
    for rotulo, minimo, maximo in StatsConstants.FAIXAS_MENSAGENS:
        if mensagens >= minimo and (maximo is None or mensagens <= maximo):
            return rotulo
    raise ValueError(f"Número de mensagens inválido: {mensagens}")


def _percentual(parte: float, todo: float) -> float:
    return parte / todo * 100 if todo > 0 else 0


def _media(valores: List[float]) -> float:
    return sum(valores) / len(valores) if valores else 0


def aggregate_from_sessions(sessoes: Iterable[ProcessedSession]) -> ReportSnapshot:
    """Calcula todas as estatísticas do relatório a partir de sessões já normalizadas."""
    sessoes = list(sessoes)
    total = len(sessoes)

    status_count: Dict[str, int] = {}
    duracoes: List[float] = []
    mensagens: List[int] = []
    sessoes_sucesso: List[ProcessedSession] = []
    dist_msgs = {rotulo: 0 for rotulo, _, _ in StatsConstants.FAIXAS_MENSAGENS}
    ligacoes_mais_30s = 0
    sessoes_zero = 0

    for sessao in sessoes:
        status_count[sessao.status.value] = status_count.get(sessao.status.value, 0) + 1
        duracoes.append(sessao.duracao)
        mensagens.append(sessao.mensagens)

        if sessao.duracao > StatsConstants.LIMITE_LIGACAO_LONGA_SEGUNDOS:
            ligacoes_mais_30s += 1
        if sessao.duracao == 0:
            sessoes_zero += 1

        if sessao.status == StatusLigacao.BEM_SUCEDIDO:
            sessoes_sucesso.append(sessao)
            dist_msgs[faixa_mensagens(sessao.mensagens)] += 1

    ligacoes_atendidas = status_count.get(StatusLigacao.BEM_SUCEDIDO.value, 0)
    ligacoes_nao_atendidas = status_count.get(StatusLigacao.NAO_ATENDIDA.value, 0)
    duracao_total = sum(duracoes)

    # sorted é estável: empates mantêm a ordem original
    picos = sorted(sessoes_sucesso, key=lambda s: s.mensagens, reverse=True)[:StatsConstants.TOP_PICOS]

    return ReportSnapshot(
        total=total,
        status_count=status_count,
        duracoes=duracoes,
        mensagens=mensagens,
        sessoes=sessoes,
        sessoes_sucesso=sessoes_sucesso,
        ligacoes_atendidas=ligacoes_atendidas,
        ligacoes_nao_atendidas=ligacoes_nao_atendidas,
        ligacoes_mais_30s=ligacoes_mais_30s,
        taxa_atendimento=_percentual(ligacoes_atendidas, total),
        taxa_mais_30s=_percentual(ligacoes_mais_30s, total),
        duracao_total=duracao_total,
        duracao_media=duracao_total / total if total > 0 else 0,
        maior_duracao=max(duracoes, default=0),
        sessoes_zero=sessoes_zero,
        total_mensagens=sum(mensagens),
        media_msgs=_media([s.mensagens for s in sessoes_sucesso if s.mensagens > 0]),
        max_msgs=max(mensagens, default=0),
        dist_msgs=dist_msgs,
        picos=picos,
    )


def _parse_details(conversation_id: str, raw: Optional[RawDetails]) -> Optional[ConversationDetails]:
    if raw is None or isinstance(raw, ConversationDetails):
        return raw
    try:
        return ConversationDetails.model_validate(raw)
    except ValidationError as e:
        # Detalhe malformado equivale a detalhe ausente
        logger.warning(
            "Ignoring malformed conversation details",
            conversation_id=conversation_id,
            error_count=e.error_count(),
        )
        return None


def aggregate_from_raw(
    conversations: Iterable[RawConversation],
    details_by_id: Mapping[str, RawDetails],
) -> ReportSnapshot:
    """Normaliza cada item da listagem com seu detalhe e agrega o resultado."""
    sessoes = []
    for raw in conversations:
        conversation = raw if isinstance(raw, ConversationSummary) else ConversationSummary.model_validate(raw)
        details = _parse_details(
            conversation.conversation_id,
            details_by_id.get(conversation.conversation_id) if conversation.conversation_id else None,
        )
        sessoes.append(normalize_session(conversation, details))

    logger.debug(
        "Sessions normalized",
        total=len(sessoes),
        with_messages=sum(1 for s in sessoes if s.mensagens > 0),
    )
    return aggregate_from_sessions(sessoes)
