from typing import Annotated, Iterator, Optional

from fastapi import Depends, Header

from painel_ligacoes.auth.login_logs import LoginLogStore
from painel_ligacoes.core.exceptions import InvalidPasswordError
from painel_ligacoes.core.security import InputValidator
from painel_ligacoes.core.settings import Settings, get_settings
from painel_ligacoes.provider.client import ElevenLabsClient
from painel_ligacoes.reports.service import ReportService
from painel_ligacoes.reports.store import ReportStore


def get_provider_client(settings: Settings = Depends(get_settings)) -> Iterator[ElevenLabsClient]:
    client = ElevenLabsClient.from_settings(settings)
    try:
        yield client
    finally:
        client.close()


def get_report_store(settings: Settings = Depends(get_settings)) -> ReportStore:
    return ReportStore(settings.report_file)


def get_login_log_store(settings: Settings = Depends(get_settings)) -> LoginLogStore:
    return LoginLogStore(settings.login_logs_file)


def get_report_service(
    store: ReportStore = Depends(get_report_store),
    client: ElevenLabsClient = Depends(get_provider_client),
    settings: Settings = Depends(get_settings),
) -> ReportService:
    return ReportService(store, client, settings)


def require_admin_password(
    x_admin_password: Annotated[Optional[str], Header()] = None,
    settings: Settings = Depends(get_settings),
) -> None:
    """Operações destrutivas exigem o header X-Admin-Password."""
    if not InputValidator.check_password(x_admin_password, settings.admin_password):
        raise InvalidPasswordError(admin=True)
