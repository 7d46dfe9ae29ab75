from unittest.mock import MagicMock

from painel_ligacoes.core.exceptions import ConversationNotFoundError, ProviderAPIError, ProviderRateLimitError
from painel_ligacoes.provider.detail_fetcher import fetch_details, fetch_one


def _client(behaviour):
    """behaviour: conversation_id -> lista de resultados/exceções, consumidos em ordem"""
    pending = {cid: list(results) for cid, results in behaviour.items()}
    client = MagicMock()

    def get_conversation(conversation_id):
        result = pending[conversation_id].pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    client.get_conversation.side_effect = get_conversation
    return client


class TestFetchOne:

    def test_retries_rate_limit_with_growing_wait(self):
        client = _client({"a": [ProviderRateLimitError("a"), ProviderRateLimitError("a"), {"transcript": []}]})
        sleep = MagicMock()

        assert fetch_one(client, "a", max_retries=3, sleep=sleep) == {"transcript": []}
        assert [c.args[0] for c in sleep.call_args_list] == [1, 2]

    def test_gives_up_after_max_retries(self):
        client = _client({"a": [ProviderRateLimitError("a")] * 4})
        sleep = MagicMock()

        assert fetch_one(client, "a", max_retries=3, sleep=sleep) is None
        assert [c.args[0] for c in sleep.call_args_list] == [1, 2, 3]
        assert client.get_conversation.call_count == 4

    def test_other_errors_are_not_retried(self):
        client = _client({"a": [ProviderAPIError(500, "boom")]})
        sleep = MagicMock()

        assert fetch_one(client, "a", sleep=sleep) is None
        sleep.assert_not_called()


class TestFetchDetails:

    def test_missing_details_are_left_out(self):
        client = _client({
            "a": [{"transcript": [{}]}],
            "b": [ConversationNotFoundError("b")],
            "c": [ProviderRateLimitError("c"), {"transcript": [{}, {}]}],
        })
        details = fetch_details(client, ["a", "b", "c"], concurrency=2, max_retries=3, sleep=lambda _: None)

        assert details == {"a": {"transcript": [{}]}, "c": {"transcript": [{}, {}]}}

    def test_empty_ids_are_skipped(self):
        client = _client({"a": [{"transcript": []}]})
        details = fetch_details(client, ["a", "", None], concurrency=8, sleep=lambda _: None)

        assert list(details) == ["a"]
        assert client.get_conversation.call_count == 1

    def test_no_ids(self):
        client = _client({})
        assert fetch_details(client, [], sleep=lambda _: None) == {}
        client.get_conversation.assert_not_called()
