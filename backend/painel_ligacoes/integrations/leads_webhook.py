"""Contagem de leads que ainda faltam ligar, obtida de um webhook externo."""

from typing import Any, Dict, Optional

import requests

from painel_ligacoes.core.logging import get_logger

logger = get_logger("integrations.leads_webhook")

ERRO_SEM_DADOS = "Dados não disponíveis"
ERRO_CONEXAO = "Falha ao conectar com o servidor"
ERRO_NAO_CONFIGURADO = "Webhook não configurado"


def _indisponivel(error: str) -> Dict[str, Any]:
    return {"faltam_ligar": None, "error": error}


def fetch_faltam_ligar(
    url: str, timeout: int = 30, session: Optional[requests.Session] = None
) -> Dict[str, Any]:
    """Nunca lança: falhas viram ``{"faltam_ligar": None, "error": ...}``."""
    if not url:
        return _indisponivel(ERRO_NAO_CONFIGURADO)

    http = session or requests
    try:
        response = http.post(url, json={}, timeout=timeout)
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error("Error fetching faltam_ligar", error=str(e))
        return _indisponivel(ERRO_CONEXAO)

    if not isinstance(data, dict) or "code" in data or "faltam_ligar" not in data:
        logger.warning("Webhook returned error or no data", status_code=response.status_code)
        message = data.get("message") if isinstance(data, dict) else None
        return _indisponivel(message or ERRO_SEM_DADOS)

    return {"faltam_ligar": data["faltam_ligar"]}
