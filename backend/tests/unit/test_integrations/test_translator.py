from unittest.mock import MagicMock

import requests

from painel_ligacoes.integrations.translator import translate_to_portuguese


def _session(payload=None, error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        response = MagicMock()
        response.json.return_value = payload
        session.get.return_value = response
    return session


class TestTranslator:

    def test_translates(self):
        session = _session({"responseStatus": 200, "responseData": {"translatedText": "Olá"}})
        assert translate_to_portuguese("Hello", email="ops@example.com", session=session) == "Olá"

        params = session.get.call_args.kwargs["params"]
        assert params == {"q": "Hello", "langpair": "en|pt-br", "de": "ops@example.com"}

    def test_no_email_param_when_unset(self):
        session = _session({"responseStatus": 200, "responseData": {"translatedText": "Olá"}})
        translate_to_portuguese("Hello", session=session)
        assert "de" not in session.get.call_args.kwargs["params"]

    def test_empty_text_is_returned_as_is(self):
        session = _session()
        assert translate_to_portuguese("   ", session=session) == "   "
        assert translate_to_portuguese(None, session=session) is None
        session.get.assert_not_called()

    def test_quota_error_keeps_original(self):
        session = _session({"responseStatus": 429, "responseData": {"translatedText": "MYMEMORY WARNING"}})
        assert translate_to_portuguese("Hello", session=session) == "Hello"

    def test_connection_error_keeps_original(self):
        session = _session(error=requests.ConnectionError("down"))
        assert translate_to_portuguese("Hello", session=session) == "Hello"
