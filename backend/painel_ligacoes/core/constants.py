# backend/painel_ligacoes/core/constants.py

"""
Constantes centralizadas para eliminar magic numbers no projeto.
"""


class StatsConstants:
    """Constantes das estatísticas de ligações"""
    LIMITE_LIGACAO_LONGA_SEGUNDOS = 30  # ligacoes_mais_30s conta duração estritamente maior
    TOP_PICOS = 5  # Top engajamentos por número de mensagens

    # Faixas da distribuição de mensagens: (rótulo, mínimo, máximo inclusivo)
    FAIXAS_MENSAGENS = (
        ("0", 0, 0),
        ("1-2", 1, 2),
        ("3-4", 3, 4),
        ("5-6", 5, 6),
        ("7-8", 7, 8),
        ("9+", 9, None),
    )


class ProviderConstants:
    """Constantes da API de conversas"""
    PAGE_SIZE = 100
    MAX_PAGES_CONVERSATIONS = 1000  # até 100k conversas por agente
    MAX_PAGES_AGENTS = 100
    RATE_LIMIT_WAIT_STEP_SECONDS = 1  # espera cresce 1s a cada nova tentativa
    API_KEY_HEADER = "xi-api-key"


class LoginLogConstants:
    """Constantes dos logs de acesso ao painel"""
    MAX_LOGS = 100


class TranscriptionConstants:
    """Constantes da listagem de transcrições"""
    PAGE_SIZE = 20
    MAX_PAGE_SIZE = 200


class IntegrationConstants:
    """Constantes das integrações auxiliares"""
    MYMEMORY_URL = "https://api.mymemory.translated.net/get"
    MYMEMORY_LANGPAIR = "en|pt-br"
    MYMEMORY_OK_STATUS = 200


class HttpConstants:
    """Constantes da camada HTTP"""
    SLOW_REQUEST_MS = 5000
    # Geração de relatório busca centenas de detalhes no provedor
    SLOW_REPORT_REQUEST_MS = 120_000
    UNLOGGED_PATHS = frozenset({"/health", "/favicon.ico"})
