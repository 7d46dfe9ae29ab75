"""
Persistência do relatório atual em um único arquivo JSON.

Só existe um relatório por vez: salvar sobrescreve o anterior.
"""

import json
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from painel_ligacoes.core.exceptions import CorruptReportError, ReportNotFoundError, ReportStorageError
from painel_ligacoes.core.logging import get_logger
from painel_ligacoes.stats.schemas import LegacyReportSnapshot, ReportSnapshot, StoredReport

AnySnapshot = Union[ReportSnapshot, LegacyReportSnapshot]


class ReportStore:
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = get_logger("reports.store")

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> AnySnapshot:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ReportNotFoundError()
        except UnicodeDecodeError as e:
            raise CorruptReportError("arquivo não está em UTF-8") from e
        except OSError as e:
            self.logger.error("Error reading report", path=str(self.path), error=str(e))
            raise ReportStorageError("ler", str(e)) from e

        try:
            return StoredReport.validate_python(json.loads(raw))
        except json.JSONDecodeError as e:
            self.logger.warning("Stored report is not valid JSON", path=str(self.path), error=str(e))
            raise CorruptReportError(f"JSON inválido: {e.msg}") from e
        except ValidationError as e:
            self.logger.warning("Stored report does not match schema", path=str(self.path), error_count=e.error_count())
            raise CorruptReportError(f"{e.error_count()} campo(s) inválido(s)") from e

    def save(self, snapshot: AnySnapshot) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            self.logger.error("Error saving report", path=str(self.path), error=str(e))
            raise ReportStorageError("salvar", str(e)) from e
        self.logger.info("Report saved", path=str(self.path), total=snapshot.total, versao=snapshot.versao)

    def delete(self) -> bool:
        """Remove o relatório; False quando não havia nada para remover."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            self.logger.error("Error deleting report", path=str(self.path), error=str(e))
            raise ReportStorageError("remover", str(e)) from e
        self.logger.info("Report deleted", path=str(self.path))
        return True
