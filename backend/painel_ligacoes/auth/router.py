from typing import List

from fastapi import APIRouter, Depends, Request

from painel_ligacoes.auth.login_logs import LoginLogStore
from painel_ligacoes.auth.schemas import LoginLog, LoginRequest, LoginResponse
from painel_ligacoes.core.dependencies import get_login_log_store
from painel_ligacoes.core.exceptions import InvalidPasswordError
from painel_ligacoes.core.logging import get_logger
from painel_ligacoes.core.rate_limit import limiter
from painel_ligacoes.core.security import InputValidator, get_client_ip
from painel_ligacoes.core.settings import Settings, get_settings, settings as app_settings

router = APIRouter()
logger = get_logger("auth.router")


@router.post("/login", response_model=LoginResponse, summary="Check the dashboard access password")
@limiter.limit(app_settings.LOGIN_RATE_LIMIT)
def login(
    request: Request,
    payload: LoginRequest,
    settings: Settings = Depends(get_settings),
    logs: LoginLogStore = Depends(get_login_log_store),
):
    client_ip = get_client_ip(request)
    if not InputValidator.check_password(payload.senha, settings.ACCESS_PASSWORD):
        logger.warning("Login failed", client_ip=client_ip)
        raise InvalidPasswordError()

    try:
        logs.append(client_ip)
    except OSError as e:
        # Falha no registro não impede o acesso
        logger.error("Could not record login", client_ip=client_ip, error=str(e))

    logger.info("Login succeeded", client_ip=client_ip)
    return LoginResponse(success=True)


@router.get("/login-logs", response_model=List[LoginLog], summary="List recent dashboard logins")
def list_login_logs(logs: LoginLogStore = Depends(get_login_log_store)):
    return logs.list()
