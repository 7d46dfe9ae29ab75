from __future__ import annotations
import os
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from painel_ligacoes.core.security import InputValidator

_ENV = os.getenv("ENVIRONMENT", "development")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Provedor de conversas (ElevenLabs Conversational AI)
    ELEVENLABS_API_KEY: str = ""
    # Lista separada por vírgula; ELEVENLABS_AGENT_ID é aceito por compatibilidade
    ELEVENLABS_AGENT_IDS: str = ""
    ELEVENLABS_AGENT_ID: str = ""
    ELEVENLABS_API_URL: str = "https://api.elevenlabs.io/v1/convai/conversations"
    ELEVENLABS_AGENTS_URL: str = "https://api.elevenlabs.io/v1/convai/agents"
    HTTP_TIMEOUT_SECONDS: int = Field(default=30, ge=1)

    # Busca de detalhes em paralelo
    CONCURRENT_LIMIT: int = Field(default=8, ge=1)
    DETAIL_MAX_RETRIES: int = Field(default=3, ge=0)

    # Acesso ao painel
    ACCESS_PASSWORD: str = "admin123"
    ADMIN_PASSWORD: Optional[str] = None
    LOGIN_RATE_LIMIT: str = "100/hour" if _ENV != "production" else "10/hour"

    # Persistência local (relatório atual e logs de login)
    DATA_DIR: str = "data"

    # Integrações auxiliares
    WHITELIST_PHONES: str = ""
    FALTAM_LIGAR_WEBHOOK_URL: str = ""
    MYMEMORY_EMAIL: str = ""

    TIMEZONE: str = "America/Sao_Paulo"
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    @property
    def agent_ids(self) -> List[str]:
        raw = self.ELEVENLABS_AGENT_IDS or self.ELEVENLABS_AGENT_ID
        return [agent_id.strip() for agent_id in raw.split(",") if agent_id.strip()]

    @property
    def whitelist_phones(self) -> List[str]:
        phones = (InputValidator.only_digits(phone) for phone in self.WHITELIST_PHONES.split(","))
        return [phone for phone in phones if phone]

    @property
    def admin_password(self) -> str:
        return self.ADMIN_PASSWORD or self.ACCESS_PASSWORD

    @property
    def report_file(self) -> Path:
        return Path(self.DATA_DIR) / "latest-report.json"

    @property
    def login_logs_file(self) -> Path:
        return Path(self.DATA_DIR) / "login-logs.json"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


_settings_singleton: Settings | None = None

def get_settings() -> Settings:
    global _settings_singleton
    if _settings_singleton is None:
        _settings_singleton = Settings()
    return _settings_singleton

settings = get_settings()
