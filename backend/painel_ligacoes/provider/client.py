"""
Cliente HTTP da API de conversas (ElevenLabs Conversational AI).

Listagem paginada por cursor, detalhe, áudio e exclusão de conversas. Os
erros HTTP são traduzidos para as exceções de ``ProviderError``.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterator, List, Optional

import requests

from painel_ligacoes.core.constants import ProviderConstants
from painel_ligacoes.core.exceptions import (
    ConversationNotFoundError,
    ProviderAPIError,
    ProviderConfigurationError,
    ProviderError,
    ProviderRateLimitError,
)
from painel_ligacoes.core.logging import get_logger
from painel_ligacoes.core.settings import Settings


class ElevenLabsClient:
    def __init__(
        self,
        api_key: str,
        conversations_url: str,
        agents_url: str,
        agent_ids: Optional[List[str]] = None,
        timeout: int = 30,
        max_workers: int = 8,
        session: Optional[requests.Session] = None,
    ):
        self.logger = get_logger("provider.client")
        self.api_key = api_key
        self.conversations_url = conversations_url.rstrip("/")
        self.agents_url = agents_url.rstrip("/")
        self.agent_ids = list(agent_ids or [])
        self.timeout = timeout
        self.max_workers = max_workers
        self.session = session or requests.Session()
        self.session.headers.update({ProviderConstants.API_KEY_HEADER: api_key})

    @classmethod
    def from_settings(cls, settings: Settings) -> "ElevenLabsClient":
        return cls(
            api_key=settings.ELEVENLABS_API_KEY,
            conversations_url=settings.ELEVENLABS_API_URL,
            agents_url=settings.ELEVENLABS_AGENTS_URL,
            agent_ids=settings.agent_ids,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            max_workers=settings.CONCURRENT_LIMIT,
        )

    def close(self) -> None:
        self.session.close()

    # =====================================================
    # HELPERS INTERNOS
    # =====================================================

    def _request(
        self, method: str, url: str, conversation_id: Optional[str] = None, **kwargs
    ) -> requests.Response:
        if not self.api_key:
            raise ProviderConfigurationError("ELEVENLABS_API_KEY ausente")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            self.logger.error("Provider request failed", method=method, url=url, error=str(e))
            raise ProviderAPIError(None, str(e)) from e

        if response.status_code == 404 and conversation_id:
            raise ConversationNotFoundError(conversation_id)
        if response.status_code == 429:
            self.logger.warning("Provider rate limit hit", url=url, conversation_id=conversation_id)
            raise ProviderRateLimitError(conversation_id)
        if not response.ok:
            self.logger.error("Provider API error", method=method, url=url, status_code=response.status_code)
            raise ProviderAPIError(response.status_code, response.text[:200])
        return response

    def _pages(self, url: str, params: Dict[str, Any], items_key: str, max_pages: int) -> Iterator[List[dict]]:
        """Percorre a paginação por cursor, uma página por iteração."""
        cursor = None
        for _ in range(max_pages):
            page_params = dict(params, page_size=ProviderConstants.PAGE_SIZE)
            if cursor:
                page_params["cursor"] = cursor
            data = self._request("GET", url, params=page_params).json()
            yield data.get(items_key) or []
            cursor = data.get("next_cursor")
            if not cursor:
                break

    # =====================================================
    # LISTAGEM
    # =====================================================

    def list_agent_ids(self) -> List[str]:
        """Todos os agentes da conta; falhas resultam em lista parcial ou vazia."""
        agents: List[dict] = []
        try:
            for page in self._pages(self.agents_url, {}, "agents", ProviderConstants.MAX_PAGES_AGENTS):
                agents.extend(page)
        except ProviderConfigurationError:
            raise
        except ProviderError as e:
            self.logger.error("Error fetching agents list", error_code=e.error_code, details=e.details)
        return [agent["agent_id"] for agent in agents if agent.get("agent_id")]

    def _list_agent_conversations(self, agent_id: str, start_unix: int) -> List[dict]:
        conversations: List[dict] = []
        params = {"agent_id": agent_id, "call_start_after_unix": start_unix}
        try:
            for page in self._pages(
                self.conversations_url, params, "conversations", ProviderConstants.MAX_PAGES_CONVERSATIONS
            ):
                conversations.extend(page)
        except ProviderConfigurationError:
            raise
        except ProviderError as e:
            # Um agente com erro não derruba os demais; fica o que já foi lido
            self.logger.error(
                "Error fetching conversations for agent",
                agent_id=agent_id,
                error_code=e.error_code,
                fetched=len(conversations),
            )
        return conversations

    def list_conversations(self, start_unix: int) -> List[dict]:
        """Conversas iniciadas após ``start_unix`` de todos os agentes, mais recentes primeiro."""
        agent_ids = self.agent_ids
        if not agent_ids:
            self.logger.info("No agent IDs configured, fetching all agents from account")
            agent_ids = self.list_agent_ids()
            self.logger.info("Agents found in account", count=len(agent_ids))
        if not agent_ids:
            raise ProviderConfigurationError("Nenhum agente encontrado")

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(agent_ids))) as executor:
            results = list(executor.map(lambda agent_id: self._list_agent_conversations(agent_id, start_unix), agent_ids))

        conversations = [conversation for result in results for conversation in result]
        conversations.sort(key=lambda c: c.get("start_time_unix_secs") or 0, reverse=True)

        self.logger.info("Conversations listed", agents=len(agent_ids), total=len(conversations))
        return conversations

    # =====================================================
    # CONVERSA INDIVIDUAL
    # =====================================================

    def get_conversation(self, conversation_id: str) -> dict:
        url = f"{self.conversations_url}/{conversation_id}"
        return self._request("GET", url, conversation_id=conversation_id).json()

    def get_audio(self, conversation_id: str) -> bytes:
        url = f"{self.conversations_url}/{conversation_id}/audio"
        return self._request("GET", url, conversation_id=conversation_id).content

    def delete_conversation(self, conversation_id: str) -> None:
        url = f"{self.conversations_url}/{conversation_id}"
        self._request("DELETE", url, conversation_id=conversation_id)
        self.logger.info("Conversation deleted at provider", conversation_id=conversation_id)
