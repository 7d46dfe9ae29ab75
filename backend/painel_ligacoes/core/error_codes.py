# backend/painel_ligacoes/core/error_codes.py

"""
Catálogo de códigos de erro para integração com o frontend do painel.
Este arquivo documenta todos os error_code disponíveis no sistema.
"""

ERROR_CODES = {
    # Genéricos
    "GENERIC_ERROR": "Erro genérico",

    # Autenticação
    "INVALID_PASSWORD": "Senha incorreta",

    # Validação
    "INVALID_CONVERSATION_ID": "ID de conversa inválido",
    "INVALID_PERIOD": "Período de filtro inválido",
    "VALIDATION_ERROR": "Erros de validação de dados",

    # Regras de Negócio
    "NO_CONVERSATIONS_FOUND": "Sem conversas no período",

    # Relatório persistido
    "REPORT_NOT_FOUND": "Relatório inexistente",
    "REPORT_CORRUPTED": "Relatório corrompido, precisa ser gerado novamente",
    "REPORT_STORAGE_ERROR": "Falha de leitura/escrita do relatório",

    # Provedor de conversas
    "PROVIDER_API_ERROR": "Erro na API do provedor",
    "PROVIDER_NOT_CONFIGURED": "Provedor não configurado",
    "CONVERSATION_NOT_FOUND": "Conversa inexistente no provedor",
    "PROVIDER_RATE_LIMITED": "Limite de requisições do provedor excedido",

    # Rate limiting local
    "RATE_LIMIT_EXCEEDED": "Muitas tentativas, aguarde",
}
