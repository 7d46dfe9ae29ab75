# backend/painel_ligacoes/core/exceptions.py

class PainelException(Exception):
    """Base exception para todas as exceções customizadas do painel"""
    def __init__(self, message: str, error_code: str = None, details: dict = None):
        self.message = message
        self.error_code = error_code or "GENERIC_ERROR"
        self.details = details or {}
        super().__init__(self.message)

# === EXCEÇÕES DE AUTENTICAÇÃO ===
class AuthenticationError(PainelException):
    """Erros relacionados à senha de acesso"""
    pass

class InvalidPasswordError(AuthenticationError):
    def __init__(self, admin: bool = False):
        super().__init__(
            message="Senha de administrador incorreta" if admin else "Senha incorreta",
            error_code="INVALID_PASSWORD",
            details={"admin": admin}
        )

# === EXCEÇÕES DE VALIDAÇÃO ===
class ValidationError(PainelException):
    """Erros de validação de dados de entrada"""
    pass

class InvalidConversationIdError(ValidationError):
    def __init__(self, conversation_id: str):
        super().__init__(
            message="ID de conversa inválido",
            error_code="INVALID_CONVERSATION_ID",
            details={"conversation_id": conversation_id}
        )

class InvalidPeriodError(ValidationError):
    def __init__(self, inicio: str, fim: str):
        super().__init__(
            message=f"Período inválido: {inicio} é posterior a {fim}",
            error_code="INVALID_PERIOD",
            details={"inicio": inicio, "fim": fim}
        )

# === EXCEÇÕES DE BUSINESS LOGIC ===
class BusinessLogicError(PainelException):
    """Erros de regras de negócio"""
    pass

class NoConversationsFoundError(BusinessLogicError):
    def __init__(self, inicio: str):
        super().__init__(
            message="Nenhuma conversa encontrada a partir dessa data.",
            error_code="NO_CONVERSATIONS_FOUND",
            details={"inicio": inicio}
        )

# === EXCEÇÕES DO RELATÓRIO PERSISTIDO ===
class ReportError(PainelException):
    """Erros de leitura/escrita do relatório atual"""
    pass

class ReportNotFoundError(ReportError):
    def __init__(self):
        super().__init__(
            message="Nenhum relatório gerado ainda",
            error_code="REPORT_NOT_FOUND",
            details={"exists": False}
        )

class CorruptReportError(ReportError):
    def __init__(self, reason: str):
        super().__init__(
            message="O relatório salvo está corrompido. Gere um novo relatório",
            error_code="REPORT_CORRUPTED",
            details={"exists": False, "reason": reason}
        )

class ReportStorageError(ReportError):
    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"Falha ao {operation} o relatório",
            error_code="REPORT_STORAGE_ERROR",
            details={"operation": operation, "reason": reason}
        )

# === EXCEÇÕES DO PROVEDOR DE CONVERSAS ===
class ProviderError(PainelException):
    """Erros na comunicação com a API de conversas"""
    pass

class ProviderAPIError(ProviderError):
    def __init__(self, status_code: int | None, reason: str):
        super().__init__(
            message="Erro ao comunicar com o provedor de conversas",
            error_code="PROVIDER_API_ERROR",
            details={"status_code": status_code, "reason": reason}
        )

class ProviderConfigurationError(ProviderError):
    def __init__(self, reason: str):
        super().__init__(
            message="Integração com o provedor de conversas não configurada",
            error_code="PROVIDER_NOT_CONFIGURED",
            details={"reason": reason}
        )

class ConversationNotFoundError(ProviderError):
    def __init__(self, conversation_id: str):
        super().__init__(
            message="Conversa não encontrada",
            error_code="CONVERSATION_NOT_FOUND",
            details={"conversation_id": conversation_id}
        )

class ProviderRateLimitError(ProviderError):
    def __init__(self, conversation_id: str | None = None):
        super().__init__(
            message="Limite de requisições do provedor excedido. Tente novamente em instantes",
            error_code="PROVIDER_RATE_LIMITED",
            details={"conversation_id": conversation_id}
        )
