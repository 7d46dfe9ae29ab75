# backend/painel_ligacoes/core/security.py

from __future__ import annotations
import hmac
import re

from starlette.requests import Request

CONVERSATION_ID_RE = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class InputValidator:
    @staticmethod
    def validate_conversation_id(conversation_id: str) -> bool:
        return bool(CONVERSATION_ID_RE.match(conversation_id or ""))

    @staticmethod
    def only_digits(phone: str) -> str:
        return re.sub(r"\D", "", phone or "")

    @staticmethod
    def check_password(candidate: str | None, expected: str) -> bool:
        # Comparação em tempo constante; senha vazia nunca é aceita
        if not candidate or not expected:
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def get_client_ip(request: Request) -> str:
    """Extrai o IP do cliente considerando proxies."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        # Pega o primeiro IP da lista (cliente real)
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"
