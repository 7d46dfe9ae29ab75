from fastapi import APIRouter, Depends, Query, Response

from painel_ligacoes.core.dependencies import (
    get_provider_client,
    get_report_service,
    require_admin_password,
)
from painel_ligacoes.core.exceptions import InvalidConversationIdError
from painel_ligacoes.core.security import InputValidator
from painel_ligacoes.core.settings import Settings, get_settings
from painel_ligacoes.integrations.translator import translate_to_portuguese
from painel_ligacoes.provider.client import ElevenLabsClient
from painel_ligacoes.reports.schemas import DeletionResult
from painel_ligacoes.reports.service import ReportService

router = APIRouter()


def valid_conversation_id(conversation_id: str) -> str:
    if not InputValidator.validate_conversation_id(conversation_id):
        raise InvalidConversationIdError(conversation_id)
    return conversation_id


@router.get("/conversations", summary="List provider conversations started after a unix timestamp")
def list_conversations(
    start: int = Query(..., ge=0),
    client: ElevenLabsClient = Depends(get_provider_client),
):
    return {"conversations": client.list_conversations(start)}


@router.get("/conversations/{conversation_id}", summary="Get a conversation's details")
def get_conversation(
    conversation_id: str = Depends(valid_conversation_id),
    translate: bool = False,
    client: ElevenLabsClient = Depends(get_provider_client),
    settings: Settings = Depends(get_settings),
):
    details = client.get_conversation(conversation_id)

    analysis = details.get("analysis")
    if translate and isinstance(analysis, dict) and analysis.get("transcript_summary"):
        analysis["transcript_summary"] = translate_to_portuguese(
            analysis["transcript_summary"],
            email=settings.MYMEMORY_EMAIL,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )
    return details


@router.get("/conversations/{conversation_id}/audio", summary="Download a conversation's audio")
def get_conversation_audio(
    conversation_id: str = Depends(valid_conversation_id),
    client: ElevenLabsClient = Depends(get_provider_client),
):
    return Response(
        content=client.get_audio(conversation_id),
        media_type="audio/mpeg",
        headers={"Content-Disposition": f'attachment; filename="{conversation_id}.mp3"'},
    )


@router.delete(
    "/conversations/{conversation_id}",
    response_model=DeletionResult,
    dependencies=[Depends(require_admin_password)],
    summary="Delete a conversation and adjust the stored report",
)
def delete_conversation(
    conversation_id: str = Depends(valid_conversation_id),
    service: ReportService = Depends(get_report_service),
):
    return service.remove_conversation(conversation_id)
