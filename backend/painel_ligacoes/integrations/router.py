from fastapi import APIRouter, Depends

from painel_ligacoes.core.settings import Settings, get_settings
from painel_ligacoes.integrations.leads_webhook import fetch_faltam_ligar
from painel_ligacoes.integrations.schemas import FaltamLigarResponse, WhitelistResponse

router = APIRouter()


@router.get("/faltam-ligar", response_model=FaltamLigarResponse, summary="Leads still waiting for a call")
def get_faltam_ligar(settings: Settings = Depends(get_settings)):
    return fetch_faltam_ligar(settings.FALTAM_LIGAR_WEBHOOK_URL, timeout=settings.HTTP_TIMEOUT_SECONDS)


@router.get("/whitelist", response_model=WhitelistResponse, summary="Test phone numbers hidden from the dashboard")
def get_whitelist(settings: Settings = Depends(get_settings)):
    return WhitelistResponse(phones=settings.whitelist_phones)
