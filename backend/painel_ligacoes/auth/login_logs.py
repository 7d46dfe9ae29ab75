import json
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union

from pydantic import TypeAdapter, ValidationError

from painel_ligacoes.auth.schemas import LoginLog
from painel_ligacoes.core.constants import LoginLogConstants
from painel_ligacoes.core.logging import get_logger

_LOGS = TypeAdapter(List[LoginLog])


class LoginLogStore:
    """Registro dos acessos ao painel, mais recente primeiro."""

    def __init__(self, path: Union[str, Path], max_logs: int = LoginLogConstants.MAX_LOGS):
        self.path = Path(path)
        self.max_logs = max_logs
        self.logger = get_logger("auth.login_logs")

    def list(self) -> List[LoginLog]:
        # Arquivo ausente ou ilegível vale como histórico vazio
        try:
            return _LOGS.validate_python(json.loads(self.path.read_text(encoding="utf-8")))
        except FileNotFoundError:
            return []
        except (OSError, ValueError, ValidationError) as e:
            self.logger.warning("Ignoring unreadable login logs", path=str(self.path), error=str(e))
            return []

    def append(self, ip: str) -> LoginLog:
        entry = LoginLog(date=datetime.now(timezone.utc), ip=ip)
        logs = [entry, *self.list()][:self.max_logs]

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_bytes(_LOGS.dump_json(logs, indent=2))
        return entry
