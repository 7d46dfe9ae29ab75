"""
Busca dos detalhes de várias conversas com concorrência limitada.

Os IDs são processados em lotes de ``concurrency``; um lote só começa quando
o anterior termina. Limite de requisições do provedor gera nova tentativa
com espera crescente; qualquer outro erro deixa a conversa sem detalhe.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence

from painel_ligacoes.core.analytics import operation_timer
from painel_ligacoes.core.constants import ProviderConstants
from painel_ligacoes.core.exceptions import ProviderError, ProviderRateLimitError
from painel_ligacoes.core.logging import get_logger
from painel_ligacoes.provider.client import ElevenLabsClient

logger = get_logger("provider.detail_fetcher")


def fetch_one(
    client: ElevenLabsClient,
    conversation_id: str,
    max_retries: int = 3,
    sleep: Callable[[float], None] = time.sleep,
) -> Optional[dict]:
    """Detalhe de uma conversa, ou None se não puder ser obtido."""
    restantes = max_retries
    while True:
        try:
            return client.get_conversation(conversation_id)
        except ProviderRateLimitError:
            if restantes <= 0:
                logger.warning("Rate limit retries exhausted", conversation_id=conversation_id)
                return None
            espera = (max_retries + 1 - restantes) * ProviderConstants.RATE_LIMIT_WAIT_STEP_SECONDS
            logger.info("Rate limited, retrying", conversation_id=conversation_id, wait_seconds=espera)
            sleep(espera)
            restantes -= 1
        except ProviderError as e:
            logger.warning(
                "Skipping conversation details",
                conversation_id=conversation_id,
                error_code=e.error_code,
            )
            return None


def fetch_details(
    client: ElevenLabsClient,
    conversation_ids: Sequence[str],
    concurrency: int = 8,
    max_retries: int = 3,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, dict]:
    """Mapa ``{conversation_id: detalhe}`` só com os detalhes obtidos."""
    ids: List[str] = [conversation_id for conversation_id in conversation_ids if conversation_id]
    concurrency = max(concurrency, 1)
    details: Dict[str, dict] = {}

    with operation_timer("fetch_details", total=len(ids), concurrency=concurrency):
        with ThreadPoolExecutor(max_workers=concurrency) as executor:
            for inicio in range(0, len(ids), concurrency):
                lote = ids[inicio:inicio + concurrency]
                resultados = executor.map(lambda cid: fetch_one(client, cid, max_retries, sleep), lote)
                for conversation_id, detalhe in zip(lote, resultados):
                    if detalhe is not None:
                        details[conversation_id] = detalhe

    logger.info("Conversation details fetched", requested=len(ids), fetched=len(details))
    return details
