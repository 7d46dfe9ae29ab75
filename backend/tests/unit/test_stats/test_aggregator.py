# backend/tests/unit/test_stats/test_aggregator.py

from datetime import datetime, timedelta, timezone

import pytest

from painel_ligacoes.stats.aggregator import aggregate_from_raw, aggregate_from_sessions, faixa_mensagens
from painel_ligacoes.stats.normalizer import normalize_session
from painel_ligacoes.stats.schemas import (
    ConversationDetails,
    ConversationSummary,
    ProcessedSession,
    StatusLigacao,
)

BASE = datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc)
SUCESSO = StatusLigacao.BEM_SUCEDIDO
NAO_ATENDIDA = StatusLigacao.NAO_ATENDIDA


def _sessao(duracao, mensagens, status, idx=0):
    return ProcessedSession(
        conversation_id=f"conv_{idx}",
        horario=BASE + timedelta(minutes=idx),
        duracao=duracao,
        mensagens=mensagens,
        status=status,
    )


def _sessoes(*specs):
    return [_sessao(duracao, mensagens, status, idx) for idx, (duracao, mensagens, status) in enumerate(specs)]


def _raw_fixture():
    conversations = [
        {"conversation_id": "a", "start_time_unix_secs": 1_700_000_000, "call_successful": "success", "call_duration_secs": 45},
        {"conversation_id": "b", "start_time_unix_secs": 1_700_000_100, "status": "failed", "end_time_unix_secs": 1_700_000_100},
        {"conversation_id": "c", "start_time_unix_secs": 1_700_000_200, "status": "done", "end_time_unix_secs": 1_700_000_220},
        {"conversation_id": "d", "start_time_unix_secs": 1_700_000_300, "status": "failed", "call_duration_secs": 12},
    ]
    details = {
        "a": {"transcript": [{}] * 5, "metadata": {"call_duration_secs": 47}},
        "c": {"transcript": [{}] * 2},
        "d": {"transcript": [{}] * 9, "analysis": {"call_successful": "success"}},
    }
    return conversations, details


SCALAR_FIELDS = (
    "total", "ligacoes_atendidas", "ligacoes_nao_atendidas", "ligacoes_mais_30s", "sessoes_zero",
    "total_mensagens", "max_msgs", "maior_duracao", "duracao_total",
    "taxa_atendimento", "taxa_mais_30s", "duracao_media", "media_msgs",
)


class TestAggregateExamples:

    def test_three_session_example(self):
        snapshot = aggregate_from_sessions(_sessoes(
            (0, 0, NAO_ATENDIDA),
            (45, 5, SUCESSO),
            (20, 2, SUCESSO),
        ))
        assert snapshot.total == 3
        assert snapshot.ligacoes_atendidas == 2
        assert snapshot.ligacoes_mais_30s == 1
        assert snapshot.taxa_atendimento == pytest.approx(66.67, abs=0.01)
        assert snapshot.sessoes_zero == 1
        assert snapshot.dist_msgs == {"0": 0, "1-2": 1, "3-4": 0, "5-6": 1, "7-8": 0, "9+": 0}

    def test_empty_session_list(self):
        snapshot = aggregate_from_sessions([])
        assert snapshot.total == 0
        assert snapshot.taxa_atendimento == 0
        assert snapshot.taxa_mais_30s == 0
        assert snapshot.duracao_media == 0
        assert snapshot.media_msgs == 0
        assert snapshot.maior_duracao == 0
        assert snapshot.max_msgs == 0
        assert snapshot.picos == []
        assert set(snapshot.dist_msgs.values()) == {0}

    def test_rates_use_total_as_denominator(self):
        snapshot = aggregate_from_sessions(_sessoes(
            (40, 3, SUCESSO),
            (10, 1, SUCESSO),
            (0, 0, NAO_ATENDIDA),
            (0, 0, NAO_ATENDIDA),
        ))
        assert snapshot.taxa_mais_30s == 25
        assert snapshot.duracao_media == pytest.approx(12.5)

    def test_media_msgs_only_successful_with_messages(self):
        snapshot = aggregate_from_sessions(_sessoes(
            (10, 4, SUCESSO),
            (10, 0, SUCESSO),
            (10, 8, SUCESSO),
            (0, 20, NAO_ATENDIDA),
        ))
        assert snapshot.media_msgs == 6

    def test_exactly_thirty_seconds_is_not_long(self):
        snapshot = aggregate_from_sessions(_sessoes((30, 1, SUCESSO), (30.5, 1, SUCESSO)))
        assert snapshot.ligacoes_mais_30s == 1


class TestAggregateProperties:

    @pytest.mark.parametrize("specs", [
        [(0, 0, NAO_ATENDIDA)],
        [(12, 3, SUCESSO), (0, 0, NAO_ATENDIDA), (31, 9, SUCESSO)],
        [(5, 1, NAO_ATENDIDA), (0, 2, SUCESSO), (60, 12, SUCESSO), (0, 0, NAO_ATENDIDA)],
    ])
    def test_invariants(self, specs):
        sessoes = _sessoes(*specs)
        snapshot = aggregate_from_sessions(sessoes)
        assert snapshot.ligacoes_atendidas + snapshot.ligacoes_nao_atendidas == snapshot.total
        assert snapshot.duracao_total == sum(snapshot.duracoes)
        assert snapshot.sessoes_zero == sum(1 for d in snapshot.duracoes if d == 0)
        assert 0 <= snapshot.taxa_atendimento <= 100
        assert 0 <= snapshot.taxa_mais_30s <= 100

    def test_idempotent(self):
        sessoes = _sessoes((12, 3, SUCESSO), (0, 0, NAO_ATENDIDA), (31, 9, SUCESSO))
        assert aggregate_from_sessions(sessoes) == aggregate_from_sessions(sessoes)

    @pytest.mark.parametrize("mensagens,faixa", [
        (0, "0"), (1, "1-2"), (2, "1-2"), (3, "3-4"), (4, "3-4"), (6, "5-6"), (8, "7-8"), (9, "9+"), (40, "9+"),
    ])
    def test_bucket_boundaries(self, mensagens, faixa):
        assert faixa_mensagens(mensagens) == faixa
        snapshot = aggregate_from_sessions(_sessoes((10, mensagens, SUCESSO)))
        assert snapshot.dist_msgs[faixa] == 1
        assert sum(snapshot.dist_msgs.values()) == 1

    def test_distribution_ignores_unsuccessful(self):
        snapshot = aggregate_from_sessions(_sessoes((10, 3, NAO_ATENDIDA)))
        assert sum(snapshot.dist_msgs.values()) == 0

    def test_picos_top_five_stable(self):
        sessoes = _sessoes(
            (10, 3, SUCESSO),   # conv_0
            (10, 7, SUCESSO),   # conv_1
            (10, 3, SUCESSO),   # conv_2
            (10, 50, NAO_ATENDIDA),
            (10, 7, SUCESSO),   # conv_4
            (10, 1, SUCESSO),
            (10, 3, SUCESSO),   # conv_6
        )
        picos = aggregate_from_sessions(sessoes).picos
        assert len(picos) == 5
        assert [p.conversation_id for p in picos] == ["conv_1", "conv_4", "conv_0", "conv_2", "conv_6"]
        contagens = [p.mensagens for p in picos]
        assert contagens == sorted(contagens, reverse=True)

    def test_picos_fewer_than_five(self):
        picos = aggregate_from_sessions(_sessoes((10, 2, SUCESSO), (0, 0, NAO_ATENDIDA))).picos
        assert [p.conversation_id for p in picos] == ["conv_0"]

    def test_retains_raw_arrays(self):
        sessoes = _sessoes((10, 2, SUCESSO), (0, 0, NAO_ATENDIDA))
        snapshot = aggregate_from_sessions(sessoes)
        assert snapshot.sessoes == sessoes
        assert snapshot.sessoes_sucesso == sessoes[:1]
        assert snapshot.status_count == {"bem-sucedido": 1, "nao-atendida": 1}


class TestAggregateFromRaw:

    def test_matches_normalize_then_aggregate(self):
        conversations, details = _raw_fixture()
        from_raw = aggregate_from_raw(conversations, details)

        sessoes = [
            normalize_session(
                ConversationSummary.model_validate(c),
                ConversationDetails.model_validate(details[c["conversation_id"]]) if c["conversation_id"] in details else None,
            )
            for c in conversations
        ]
        from_sessions = aggregate_from_sessions(sessoes)

        for field in SCALAR_FIELDS:
            assert getattr(from_raw, field) == getattr(from_sessions, field), field
        assert from_raw.dist_msgs == from_sessions.dist_msgs
        assert from_raw.status_count == from_sessions.status_count

    def test_raw_values(self):
        conversations, details = _raw_fixture()
        snapshot = aggregate_from_raw(conversations, details)

        assert snapshot.total == 4
        # 'd' é promovida pelo detalhe
        assert snapshot.ligacoes_atendidas == 3
        assert snapshot.duracoes == [47, 0, 20, 12]
        assert snapshot.mensagens == [5, 0, 2, 9]
        assert snapshot.sessoes_zero == 1

    def test_filtering_after_raw_equals_filtering_sessions(self):
        conversations, details = _raw_fixture()
        full = aggregate_from_raw(conversations, details)
        subset = [s for s in full.sessoes if s.conversation_id in {"a", "b"}]

        expected = aggregate_from_raw(
            [c for c in conversations if c["conversation_id"] in {"a", "b"}], details
        )
        filtered = aggregate_from_sessions(subset)
        for field in SCALAR_FIELDS:
            assert getattr(filtered, field) == getattr(expected, field), field
        assert filtered.dist_msgs == expected.dist_msgs

    def test_malformed_detail_is_ignored(self):
        conversations = [{"conversation_id": "a", "start_time_unix_secs": 1_700_000_000, "call_duration_secs": 8}]
        snapshot = aggregate_from_raw(conversations, {"a": {"transcript": "not-a-list"}})
        assert snapshot.mensagens == [0]
        assert snapshot.duracoes == [8]
