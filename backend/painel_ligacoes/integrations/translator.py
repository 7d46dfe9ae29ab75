"""Tradução inglês -> português do resumo das conversas (API pública MyMemory)."""

from typing import Optional

import requests

from painel_ligacoes.core.constants import IntegrationConstants
from painel_ligacoes.core.logging import get_logger

logger = get_logger("integrations.translator")


def translate_to_portuguese(
    text: Optional[str],
    email: str = "",
    timeout: int = 30,
    session: Optional[requests.Session] = None,
) -> Optional[str]:
    """Traduz ``text``; qualquer falha devolve o texto original."""
    if not text or not text.strip():
        return text

    params = {"q": text, "langpair": IntegrationConstants.MYMEMORY_LANGPAIR}
    if email:
        params["de"] = email

    http = session or requests
    try:
        response = http.get(IntegrationConstants.MYMEMORY_URL, params=params, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error("Translation error", error=str(e))
        return text

    translated = (data.get("responseData") or {}).get("translatedText")
    if data.get("responseStatus") == IntegrationConstants.MYMEMORY_OK_STATUS and translated:
        return translated

    logger.warning("Translation unavailable", response_status=data.get("responseStatus"))
    return text
