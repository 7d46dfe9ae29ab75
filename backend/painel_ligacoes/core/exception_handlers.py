# backend/painel_ligacoes/core/exception_handlers.py

import logging
from datetime import datetime, timezone
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from .exceptions import (
    PainelException,
    AuthenticationError,
    ValidationError as DomainValidationError,
    BusinessLogicError,
    ReportNotFoundError,
    CorruptReportError,
    ReportError,
    ProviderConfigurationError,
    ConversationNotFoundError,
    ProviderRateLimitError,
    ProviderError,
)

logger = logging.getLogger(__name__)

# Ordem importa: subclasses antes das famílias
STATUS_BY_EXCEPTION = (
    (AuthenticationError, 401),
    (DomainValidationError, 400),
    (BusinessLogicError, 422),
    (ReportNotFoundError, 404),
    (CorruptReportError, 404),  # o painel trata como "gere um novo relatório"
    (ReportError, 500),
    (ConversationNotFoundError, 404),
    (ProviderRateLimitError, 429),
    (ProviderConfigurationError, 500),
    (ProviderError, 502),
)

VALIDATION_MESSAGES = {
    "missing": "Campo obrigatório ausente",
    "string_too_short": "Tamanho de texto inválido",
    "string_too_long": "Tamanho de texto inválido",
    "int_parsing": "Número inteiro inválido",
    "int_type": "Número inteiro inválido",
    "float_parsing": "Número decimal inválido",
    "float_type": "Número decimal inválido",
    "bool_parsing": "Valor booleano inválido",
    "greater_than_equal": "Valor abaixo do mínimo permitido",
    "less_than_equal": "Valor acima do máximo permitido",
    "enum": "Opção inválida",
    "literal_error": "Opção inválida",
    "union_tag_invalid": "Formato de relatório desconhecido",
}


def get_status_code_for_exception(exc: PainelException) -> int:
    for exc_type, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def _error_body(code: str, message: str, details: dict, request: Request) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": str(request.url.path),
        }
    }


async def painel_exception_handler(request: Request, exc: PainelException):
    """Renderiza qualquer PainelException no formato de erro do painel."""
    status_code = get_status_code_for_exception(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Painel Exception",
        extra={
            "error_code": exc.error_code,
            "error_message": exc.message,
            "details": exc.details,
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.error_code, exc.message, exc.details, request),
    )


def get_user_friendly_validation_message(error: dict) -> str:
    """Traduz o ``type`` de um erro do pydantic para uma mensagem em português."""
    error_type = error.get("type", "")
    if error_type in VALIDATION_MESSAGES:
        return VALIDATION_MESSAGES[error_type]
    if error_type.startswith(("date", "datetime")):
        return "Data inválida"
    return error.get("msg", "Valor inválido")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning(
        "Request validation failed",
        extra={"error_count": len(errors), "path": request.url.path, "method": request.method},
    )

    field_errors = [
        {
            "field": " > ".join(str(loc) for loc in error["loc"]),
            "message": get_user_friendly_validation_message(error),
            "invalid_value": error.get("input"),
        }
        for error in errors
    ]

    return JSONResponse(
        status_code=422,
        content=_error_body(
            "VALIDATION_ERROR",
            "Dados enviados contêm erros",
            {"field_errors": field_errors},
            request,
        ),
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    """429 do slowapi no mesmo formato dos demais erros."""
    logger.warning(
        "Rate limit exceeded",
        extra={"path": request.url.path, "limit": str(exc.detail)},
    )
    return JSONResponse(
        status_code=429,
        content=_error_body(
            "RATE_LIMIT_EXCEEDED",
            "Muitas tentativas. Aguarde antes de tentar novamente",
            {"limit": str(exc.detail)},
            request,
        ),
    )
