"""
Ejecución de herramientas externas con timeout y cancelación
"""
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

POLL_INTERVAL = 0.5


@dataclass
class CommandResult:
    """Resultado de un proceso externo"""
    returncode: Optional[int]
    output: str
    timed_out: bool = False
    cancelled: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out and not self.cancelled

    def describe_failure(self, timeout: Optional[float] = None) -> str:
        """Texto corto que explica por qué falló el proceso"""
        if self.cancelled:
            return "cancelado"
        if self.timed_out:
            return f"timeout tras {timeout:.0f}s" if timeout else "timeout"
        return f"código de salida {self.returncode}"


CommandRunner = Callable[..., CommandResult]


def run_command(cmd: List[str], cwd: Optional[Path] = None, timeout: Optional[float] = None,
                cancel_event: Optional[threading.Event] = None,
                poll_interval: float = POLL_INTERVAL) -> CommandResult:
    """
    Ejecuta un comando y captura stdout y stderr combinados

    El proceso se termina si supera el timeout o si se activa cancel_event.

    Args:
        cmd: Comando y argumentos
        cwd: Directorio de trabajo
        timeout: Segundos máximos (None = sin límite)
        cancel_event: Evento que solicita cancelar la ejecución
        poll_interval: Cada cuántos segundos revisar timeout y cancelación

    Returns:
        Resultado del proceso

    Raises:
        OSError: Si el ejecutable no existe o no se puede lanzar
    """
    deadline = None if timeout is None else time.monotonic() + timeout

    process = subprocess.Popen(
        cmd,
        cwd=str(cwd) if cwd else None,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        encoding='utf-8',
        errors='replace',
    )

    while True:
        try:
            output, _ = process.communicate(timeout=poll_interval)
            return CommandResult(returncode=process.returncode, output=output or '')
        except subprocess.TimeoutExpired:
            cancelled = cancel_event is not None and cancel_event.is_set()
            timed_out = deadline is not None and time.monotonic() >= deadline
            if not (cancelled or timed_out):
                continue

            process.kill()
            output, _ = process.communicate()
            return CommandResult(
                returncode=process.returncode,
                output=output or '',
                timed_out=timed_out and not cancelled,
                cancelled=cancelled,
            )
