from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from painel_ligacoes.stats.schemas import (
    ConversationDetails,
    ConversationSummary,
    DataCollectionResult,
    ProcessedSession,
    ResultadoVenda,
    StatusLigacao,
)

# Ordem de busca nas anotações do provedor: o primeiro campo encontrado vence
CAMPOS_NOME_CLIENTE = ('customer_name', 'nome', 'nome_cliente', 'name', 'client_name')
CAMPOS_RESULTADO_VENDA = ('sale_accepted', 'venda_aceita', 'result', 'accepted', 'aceitou')
CAMPOS_NOME_DINAMICO = ('nome', 'customer_name', 'name')

VALORES_ACEITO = frozenset({'true', 'sim', 'yes', 'aceito'})
VALORES_RECUSADO = frozenset({'false', 'não', 'nao', 'no', 'recusado'})

SUCESSO = "success"
STATUS_CONCLUIDA = "done"


def valor_presente(resultado: DataCollectionResult) -> bool:
    """O campo ``value`` veio no payload, mesmo que ``null``."""
    return "value" in resultado.model_fields_set


def primeiro_valor(
    anotacoes: Mapping[str, DataCollectionResult],
    campos: Sequence[str],
    aceita=valor_presente,
) -> Optional[Any]:
    """Retorna o valor do primeiro campo de ``campos`` cuja anotação é aceita por ``aceita``."""
    for campo in campos:
        resultado = anotacoes.get(campo)
        if resultado is not None and aceita(resultado):
            return resultado.value
    return None


def interpretar_resultado_venda(valor: Any) -> Optional[ResultadoVenda]:
    if isinstance(valor, bool):
        return ResultadoVenda.ACEITO if valor else ResultadoVenda.RECUSADO
    if isinstance(valor, str):
        normalizado = valor.lower()
        if normalizado in VALORES_ACEITO:
            return ResultadoVenda.ACEITO
        if normalizado in VALORES_RECUSADO:
            return ResultadoVenda.RECUSADO
    return None


def resolver_status(
    conversation: ConversationSummary, details: Optional[ConversationDetails]
) -> StatusLigacao:
    status = StatusLigacao.NAO_ATENDIDA
    if conversation.call_successful == SUCESSO or conversation.status == STATUS_CONCLUIDA:
        status = StatusLigacao.BEM_SUCEDIDO
    # O detalhe só promove, nunca rebaixa; vale o topo ou a análise
    if details is not None:
        analise_sucesso = details.analysis.call_successful if details.analysis else None
        if SUCESSO in (details.call_successful, analise_sucesso):
            status = StatusLigacao.BEM_SUCEDIDO
    return status


def resolver_duracao(
    conversation: ConversationSummary, details: Optional[ConversationDetails]
) -> float:
    # Zero é tratado como ausente e cai para a próxima fonte
    if details is not None and details.metadata and details.metadata.call_duration_secs:
        return details.metadata.call_duration_secs
    if conversation.call_duration_secs:
        return conversation.call_duration_secs
    if conversation.start_time_unix_secs and conversation.end_time_unix_secs:
        return max(conversation.end_time_unix_secs - conversation.start_time_unix_secs, 0)
    return 0


def _dados_cliente(details: ConversationDetails):
    telefone = None
    nome = None
    resultado = None

    phone_call = details.metadata.phone_call if details.metadata else None
    if phone_call is not None:
        telefone = phone_call.external_number or phone_call.from_number or None

    anotacoes = details.analysis.data_collection_results if details.analysis else None
    if anotacoes:
        nome = primeiro_valor(
            anotacoes, CAMPOS_NOME_CLIENTE,
            aceita=lambda resultado: isinstance(resultado.value, str) and resultado.value != "",
        )
        # O primeiro campo presente decide, mesmo com valor null ou não reconhecido
        resultado = interpretar_resultado_venda(primeiro_valor(anotacoes, CAMPOS_RESULTADO_VENDA))

    client_data = details.conversation_initiation_client_data
    variaveis = client_data.dynamic_variables if client_data else None
    if variaveis and not nome:
        for chave in CAMPOS_NOME_DINAMICO:
            if variaveis.get(chave):
                nome = str(variaveis[chave])
                break

    return telefone, nome, resultado


def normalize_session(
    conversation: ConversationSummary, details: Optional[ConversationDetails] = None
) -> ProcessedSession:
    """Converte um item da listagem (e seu detalhe, se houver) em ``ProcessedSession``.

    A ausência de detalhe nunca é erro: a sessão fica com 0 mensagens, sem
    dados de cliente e com o status da listagem.
    """
    telefone = nome = resultado = None
    if details is not None:
        telefone, nome, resultado = _dados_cliente(details)

    mensagens = len(details.transcript or []) if details is not None else 0

    return ProcessedSession(
        conversation_id=conversation.conversation_id,
        horario=datetime.fromtimestamp(conversation.start_time_unix_secs, tz=timezone.utc),
        duracao=resolver_duracao(conversation, details),
        mensagens=mensagens,
        status=resolver_status(conversation, details),
        resultado_venda=resultado,
        telefone_cliente=telefone,
        nome_cliente=nome,
    )
