"""
Ajuste incremental do relatório ao deletar uma única sessão.

Em vez de reagregar todas as sessões, decrementa os contadores afetados pela
sessão removida e recalcula as taxas derivadas a partir deles. As taxas deste
caminho são arredondadas para inteiros e usam denominadores próprios:

- ``duracao_media`` = duracao_total / ligacoes_atendidas
- ``taxa_mais_30s`` = ligacoes_mais_30s / ligacoes_atendidas * 100
- ``media_msgs``    = total_mensagens / total

Os três diferem das fórmulas de ``aggregate_from_sessions``. O atendimento
aqui é decidido pela duração (> 0), não pelo status da sessão.
"""

import math
from typing import Dict, List, TypeVar

from painel_ligacoes.core.constants import StatsConstants
from painel_ligacoes.stats.aggregator import faixa_mensagens
from painel_ligacoes.stats.schemas import ProcessedSession, ReportSnapshot, StatusLigacao

Snapshot = TypeVar("Snapshot", bound=ReportSnapshot)


def arredondar(valor: float) -> int:
    """Arredonda meio para cima (2.5 -> 3), ao contrário de ``round``."""
    return math.floor(valor + 0.5)


def _decrementar(valor: float, quantidade: float = 1) -> float:
    return max(valor - quantidade, 0)


def _remover_um(valores: List, valor) -> List:
    # Remove só a primeira ocorrência do valor, não a posição da sessão
    restantes = list(valores)
    if valor in restantes:
        restantes.remove(valor)
    return restantes


def _sem_sessao(sessoes: List[ProcessedSession], removida: ProcessedSession) -> List[ProcessedSession]:
    if removida.conversation_id is None:
        return _remover_um(sessoes, removida)
    return [s for s in sessoes if s.conversation_id != removida.conversation_id]


def remove_session(snapshot: Snapshot, removida: ProcessedSession) -> Snapshot:
    """Retorna uma cópia de ``snapshot`` sem ``removida``, sem reprocessar as demais sessões."""
    duracao = removida.duracao
    num_msgs = removida.mensagens

    total = int(_decrementar(snapshot.total))

    status_count: Dict[str, int] = dict(snapshot.status_count)
    chave_status = removida.status.value
    status_count[chave_status] = int(_decrementar(status_count.get(chave_status, 0)))

    duracoes = _remover_um(snapshot.duracoes, duracao)
    mensagens = _remover_um(snapshot.mensagens, num_msgs)

    ligacoes_atendidas = snapshot.ligacoes_atendidas
    ligacoes_nao_atendidas = snapshot.ligacoes_nao_atendidas
    ligacoes_mais_30s = snapshot.ligacoes_mais_30s
    sessoes_zero = snapshot.sessoes_zero
    if duracao > 0:
        ligacoes_atendidas = int(_decrementar(ligacoes_atendidas))
        if duracao > StatsConstants.LIMITE_LIGACAO_LONGA_SEGUNDOS:
            ligacoes_mais_30s = int(_decrementar(ligacoes_mais_30s))
    else:
        ligacoes_nao_atendidas = int(_decrementar(ligacoes_nao_atendidas))
        sessoes_zero = int(_decrementar(sessoes_zero))

    duracao_total = _decrementar(snapshot.duracao_total, duracao)
    total_mensagens = int(_decrementar(snapshot.total_mensagens, num_msgs))

    if total == 0:
        duracao_media = taxa_atendimento = taxa_mais_30s = media_msgs = 0
    else:
        duracao_media = arredondar(duracao_total / ligacoes_atendidas) if ligacoes_atendidas else 0
        taxa_atendimento = arredondar(ligacoes_atendidas / total * 100)
        taxa_mais_30s = arredondar(ligacoes_mais_30s / ligacoes_atendidas * 100) if ligacoes_atendidas else 0
        media_msgs = arredondar(total_mensagens / total)

    dist_msgs = dict(snapshot.dist_msgs)
    if removida.status == StatusLigacao.BEM_SUCEDIDO:
        faixa = faixa_mensagens(num_msgs)
        dist_msgs[faixa] = int(_decrementar(dist_msgs.get(faixa, 0)))

    return snapshot.model_copy(update={
        "total": total,
        "status_count": status_count,
        "duracoes": duracoes,
        "mensagens": mensagens,
        "sessoes": _sem_sessao(snapshot.sessoes, removida),
        "sessoes_sucesso": _sem_sessao(snapshot.sessoes_sucesso, removida),
        # picos não é recomposto; volta a ter 5 itens no próximo relatório
        "picos": _sem_sessao(snapshot.picos, removida),
        "ligacoes_atendidas": ligacoes_atendidas,
        "ligacoes_nao_atendidas": ligacoes_nao_atendidas,
        "ligacoes_mais_30s": ligacoes_mais_30s,
        "sessoes_zero": sessoes_zero,
        "duracao_total": duracao_total,
        "total_mensagens": total_mensagens,
        "duracao_media": duracao_media,
        "taxa_atendimento": taxa_atendimento,
        "taxa_mais_30s": taxa_mais_30s,
        "media_msgs": media_msgs,
        "maior_duracao": max(duracoes, default=0),
        "max_msgs": max(mensagens, default=0),
        "dist_msgs": dist_msgs,
    })
