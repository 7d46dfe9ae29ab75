# backend/tests/unit/test_core/test_dependencies.py

import pytest

from painel_ligacoes.core.dependencies import get_provider_client
from painel_ligacoes.core.settings import Settings
from painel_ligacoes.provider.client import ElevenLabsClient


def test_provider_client_session_is_closed_after_request(mocker):
    settings = Settings(_env_file=None, ELEVENLABS_API_KEY="sk_test")

    dependency = get_provider_client(settings)
    client = next(dependency)
    close = mocker.spy(client.session, "close")

    assert isinstance(client, ElevenLabsClient)
    assert client.session.headers["xi-api-key"] == "sk_test"
    close.assert_not_called()

    dependency.close()
    close.assert_called_once()


def test_provider_client_closed_when_route_fails(mocker):
    settings = Settings(_env_file=None, ELEVENLABS_API_KEY="sk_test")

    dependency = get_provider_client(settings)
    client = next(dependency)
    close = mocker.spy(client.session, "close")

    with pytest.raises(RuntimeError):
        dependency.throw(RuntimeError("falha na rota"))
    close.assert_called_once()
