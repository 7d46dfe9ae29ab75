from __future__ import annotations
from typing import Any
import time
from contextlib import contextmanager
from painel_ligacoes.core.logging import get_logger

logger = get_logger("analytics")

@contextmanager
def operation_timer(operation: str, **context: Any):
    """Loga a duração de operações longas (geração de relatório, busca de detalhes)."""
    start = time.time()
    try:
        yield
    finally:
        duration_ms = round((time.time() - start) * 1000, 2)
        logger.info("operation_completed", operation=operation, duration_ms=duration_ms, **context)
