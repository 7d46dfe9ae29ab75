# backend/tests/unit/test_stats/test_normalizer.py

from datetime import datetime, timezone

import pytest

from painel_ligacoes.stats.normalizer import (
    interpretar_resultado_venda,
    normalize_session,
    resolver_duracao,
    resolver_status,
)
from painel_ligacoes.stats.schemas import (
    ConversationDetails,
    ConversationSummary,
    ResultadoVenda,
    StatusLigacao,
)

START = 1_700_000_000


def _conversation(**overrides):
    data = {"conversation_id": "conv_1", "start_time_unix_secs": START}
    data.update(overrides)
    return ConversationSummary.model_validate(data)


def _details(annotations=None, **overrides):
    data = {"transcript": []}
    if annotations is not None:
        data["analysis"] = {
            "data_collection_results": {key: {"value": value} for key, value in annotations.items()}
        }
    data.update(overrides)
    return ConversationDetails.model_validate(data)


class TestStatusResolution:
    """Status: começa não atendida; listagem ou detalhe promovem"""

    def test_default_is_not_answered(self):
        assert resolver_status(_conversation(), None) == StatusLigacao.NAO_ATENDIDA

    def test_list_success_flag(self):
        assert resolver_status(_conversation(call_successful="success"), None) == StatusLigacao.BEM_SUCEDIDO

    def test_list_done_status(self):
        assert resolver_status(_conversation(status="done"), None) == StatusLigacao.BEM_SUCEDIDO

    def test_detail_promotes(self):
        details = _details(call_successful="success")
        assert resolver_status(_conversation(status="failed"), details) == StatusLigacao.BEM_SUCEDIDO

    def test_detail_analysis_promotes(self):
        details = ConversationDetails.model_validate({"analysis": {"call_successful": "success"}})
        assert resolver_status(_conversation(), details) == StatusLigacao.BEM_SUCEDIDO

    def test_detail_never_downgrades(self):
        details = _details(call_successful="failure")
        assert resolver_status(_conversation(status="done"), details) == StatusLigacao.BEM_SUCEDIDO

    def test_analysis_success_promotes_despite_top_level_failure(self):
        details = ConversationDetails.model_validate({
            "call_successful": "failure",
            "analysis": {"call_successful": "success"},
        })
        assert resolver_status(_conversation(), details) == StatusLigacao.BEM_SUCEDIDO


class TestDurationCascade:

    def test_detail_duration_wins(self):
        details = _details(metadata={"call_duration_secs": 42})
        conversation = _conversation(call_duration_secs=10, end_time_unix_secs=START + 99)
        assert resolver_duracao(conversation, details) == 42

    def test_zero_detail_duration_falls_through(self):
        details = _details(metadata={"call_duration_secs": 0})
        assert resolver_duracao(_conversation(call_duration_secs=10), details) == 10

    def test_end_minus_start(self):
        conversation = _conversation(call_duration_secs=0, end_time_unix_secs=START + 25)
        assert resolver_duracao(conversation, None) == 25

    def test_negative_interval_is_clamped(self):
        assert resolver_duracao(_conversation(end_time_unix_secs=START - 5), None) == 0

    def test_nothing_available(self):
        assert resolver_duracao(_conversation(), None) == 0


class TestSaleResultInterpretation:

    @pytest.mark.parametrize("valor", [True, "true", "SIM", "Yes", "aceito"])
    def test_affirmative(self, valor):
        assert interpretar_resultado_venda(valor) == ResultadoVenda.ACEITO

    @pytest.mark.parametrize("valor", [False, "false", "Não", "nao", "NO", "recusado"])
    def test_negative(self, valor):
        assert interpretar_resultado_venda(valor) == ResultadoVenda.RECUSADO

    @pytest.mark.parametrize("valor", ["talvez", "", 1, None])
    def test_unrecognised(self, valor):
        assert interpretar_resultado_venda(valor) is None


class TestNormalizeSession:

    def test_without_details_degrades_gracefully(self):
        sessao = normalize_session(_conversation(call_duration_secs=12))
        assert sessao.mensagens == 0
        assert sessao.status == StatusLigacao.NAO_ATENDIDA
        assert sessao.nome_cliente is None
        assert sessao.telefone_cliente is None
        assert sessao.resultado_venda is None
        assert sessao.duracao == 12
        assert sessao.horario == datetime.fromtimestamp(START, tz=timezone.utc)

    def test_message_count_is_transcript_length(self):
        details = _details(transcript=[{"role": "agent"}, {"role": "user"}, {"role": "agent"}])
        assert normalize_session(_conversation(), details).mensagens == 3

    def test_name_lookup_order(self):
        details = _details({"name": "Segundo", "nome": "Primeiro"})
        assert normalize_session(_conversation(), details).nome_cliente == "Primeiro"

    def test_empty_name_is_skipped(self):
        details = _details({"customer_name": "", "nome_cliente": "Maria"})
        assert normalize_session(_conversation(), details).nome_cliente == "Maria"

    def test_first_present_sale_field_decides(self):
        # 'venda_aceita' vem antes de 'result' e não é reconhecido: resultado fica nulo
        details = _details({"venda_aceita": "talvez", "result": "sim"})
        assert normalize_session(_conversation(), details).resultado_venda is None

    def test_null_sale_field_stops_lookup(self):
        # 'sale_accepted' presente com null decide antes de 'result'
        details = _details({"sale_accepted": None, "result": "sim"})
        assert normalize_session(_conversation(), details).resultado_venda is None

    def test_annotation_without_value_is_skipped(self):
        details = ConversationDetails.model_validate({
            "analysis": {"data_collection_results": {
                "sale_accepted": {"rationale": "não perguntado"},
                "result": {"value": "sim"},
            }},
        })
        assert normalize_session(_conversation(), details).resultado_venda == ResultadoVenda.ACEITO

    def test_sale_field_independent_of_name(self):
        details = _details({"aceitou": False})
        assert normalize_session(_conversation(), details).resultado_venda == ResultadoVenda.RECUSADO

    def test_dynamic_variables_name_fallback(self):
        details = _details(
            {"sale_accepted": True},
            conversation_initiation_client_data={"dynamic_variables": {"customer_name": 123}},
        )
        sessao = normalize_session(_conversation(), details)
        assert sessao.nome_cliente == "123"
        assert sessao.resultado_venda == ResultadoVenda.ACEITO

    def test_phone_from_external_number(self):
        details = _details(metadata={"phone_call": {"external_number": "+5511999990000", "from_number": "+1"}})
        assert normalize_session(_conversation(), details).telefone_cliente == "+5511999990000"

    def test_phone_falls_back_to_from_number(self):
        details = _details(metadata={"phone_call": {"from_number": "+5511888887777"}})
        assert normalize_session(_conversation(), details).telefone_cliente == "+5511888887777"
