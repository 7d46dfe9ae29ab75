"""
Logging estruturado do painel (structlog sobre o logging da stdlib).

Em desenvolvimento os eventos saem coloridos no console; em produção, JSON
um por linha. Todo evento emitido durante uma requisição carrega o
``request_id`` e o IP do cliente. Antes da renderização:

- chaves de credenciais (senha do painel, senha de admin, chave da API de
  conversas) viram ``[REDACTED]``;
- telefones de clientes ficam só com os 4 últimos dígitos.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, Optional

import structlog

request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
client_ip_var: ContextVar[Optional[str]] = ContextVar('client_ip', default=None)

SENSITIVE_FIELDS = ('password', 'senha', 'token', 'api_key', 'api-key', 'secret')
PHONE_FIELDS = ('telefone', 'phone', 'external_number', 'to_number', 'from_number')

SEVERITY = {
    'debug': 'DEBUG',
    'info': 'INFO',
    'warn': 'WARNING',
    'warning': 'WARNING',
    'error': 'ERROR',
    'exception': 'ERROR',
    'critical': 'CRITICAL',
}

# Bibliotecas barulhentas: requests/urllib3 a cada página do provedor
QUIET_LOGGERS = ("uvicorn.access", "urllib3", "requests")


def set_request_context(request_id: str, client_ip: Optional[str] = None) -> None:
    request_id_var.set(request_id)
    client_ip_var.set(client_ip)


def clear_request_context() -> None:
    request_id_var.set(None)
    client_ip_var.set(None)


def generate_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:8]}"


def add_request_context(logger, method_name, event_dict):
    """Processor: anexa request_id e client_ip da requisição em andamento."""
    if not isinstance(event_dict, dict):
        return event_dict

    for key, var in (('request_id', request_id_var), ('client_ip', client_ip_var)):
        value = var.get()
        if value:
            event_dict[key] = value
    return event_dict


def add_severity_level(logger, method_name, event_dict):
    if isinstance(event_dict, dict) and event_dict.get('level'):
        level = event_dict['level'].lower()
        event_dict['severity'] = SEVERITY.get(level, level.upper())
    return event_dict


def mask_phone(value: Any) -> Any:
    """'5511999990000' -> '*********0000'"""
    if not isinstance(value, str):
        return value
    digits = [ch for ch in value if ch.isdigit()]
    if len(digits) <= 4:
        return value
    return '*' * (len(digits) - 4) + ''.join(digits[-4:])


def _mascarar(data):
    if isinstance(data, dict):
        limpo = {}
        for key, value in data.items():
            nome = str(key).lower()
            if any(sens in nome for sens in SENSITIVE_FIELDS):
                limpo[key] = '[REDACTED]'
            elif any(campo in nome for campo in PHONE_FIELDS):
                limpo[key] = mask_phone(value)
            else:
                limpo[key] = _mascarar(value)
        return limpo
    if isinstance(data, list):
        return [_mascarar(item) for item in data]
    if isinstance(data, tuple):
        # positional_args do structlog precisa continuar tupla
        return tuple(_mascarar(item) for item in data)
    return data


def filter_sensitive_data(logger, method_name, event_dict):
    """Processor: mascara credenciais e telefones em qualquer nível do evento."""
    if not isinstance(event_dict, dict):
        return event_dict
    return _mascarar(event_dict)


def _renderers(is_development: bool) -> list:
    if is_development:
        return [structlog.processors.StackInfoRenderer(), structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]


def setup_logging(log_level: str = "INFO", is_development: bool = True) -> None:
    """Configura structlog e o logging da stdlib para toda a aplicação.

    Args:
        log_level: Nível mínimo (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        is_development: Console colorido em vez de JSON
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            add_request_context,
            structlog.stdlib.add_log_level,
            add_severity_level,
            filter_sensitive_data,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            *_renderers(is_development),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
