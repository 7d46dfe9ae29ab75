from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from painel_ligacoes.auth.router import router as auth_router
from painel_ligacoes.provider.router import router as provider_router
from painel_ligacoes.reports.router import router as reports_router
from painel_ligacoes.integrations.router import router as integrations_router
from painel_ligacoes.core.exceptions import PainelException
from painel_ligacoes.core.exception_handlers import (
    painel_exception_handler,
    rate_limit_exception_handler,
    validation_exception_handler,
)
from painel_ligacoes.core.middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from painel_ligacoes.core.rate_limit import limiter
from painel_ligacoes.core.settings import settings
from painel_ligacoes.core.logging import setup_logging, get_logger

API_PREFIX = "/api/v1"

setup_logging(
    log_level=settings.LOG_LEVEL,
    is_development=(settings.ENVIRONMENT == "development"),
)
logger = get_logger("main")

app = FastAPI(
    title="Painel de Ligações API",
    description="Estatísticas das ligações do agente de voz: relatório, transcrições e áudios.",
    version="0.1.0",
)
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Admin-Password"],
    # o frontend lê o nome do arquivo de áudio e o id para suporte
    expose_headers=["Content-Disposition", "X-Request-ID"],
)
# A última adicionada é a mais externa
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)

app.add_exception_handler(PainelException, painel_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)

for router, tag in (
    (auth_router, "Auth"),
    (provider_router, "Conversations"),
    (reports_router, "Report"),
    (integrations_router, "Integrations"),
):
    app.include_router(router, prefix=API_PREFIX, tags=[tag])


@app.get("/health")
def health_check():
    return {"status": "ok"}


logger.info(
    "Painel API initialized",
    environment=settings.ENVIRONMENT,
    cors_origins=settings.cors_origins,
    agents_configured=len(settings.agent_ids),
    login_rate_limit=settings.LOGIN_RATE_LIMIT,
)
