#!/usr/bin/env python3
"""
Backup por tabla de servidores MySQL/MariaDB
Punto de entrada principal

Uso:
    python main.py      # Ejecuta un backup completo y termina

La configuración se lee de variables de entorno o de un archivo .env
(ver .env.example).
"""
import signal
import sys
import threading

from mysql_backup.logger import LoggerService
from mysql_backup.models import BackupReport
from mysql_backup.repositories.settings_repository import SettingsRepository
from mysql_backup.services.backup_service import BackupService


def install_signal_handlers(cancel_event: threading.Event):
    """
    SIGINT/SIGTERM cancelan la ejecución en curso de forma ordenada

    Args:
        cancel_event: Evento que reciben todos los procesos externos
    """
    logger = LoggerService.get_logger("Main")

    def _signal_handler(signum, frame):
        try:
            signal_name = signal.Signals(signum).name
        except ValueError:
            signal_name = str(signum)
        logger.warning(f"Señal recibida: {signal_name}, cancelando backup...")
        cancel_event.set()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)


def print_report(report: BackupReport):
    """Imprime el banner de resultado seguido del log de la ejecución"""
    if report.success:
        print("OK (sin errores). Log:\n")
    else:
        print("==========")
        print("= ERROR: =")
        print(report.error)
        print("==========")
    print(report.log_text)


def main() -> int:
    """Función principal"""
    try:
        settings = SettingsRepository().load()
    except ValueError as e:
        print(f"Error de configuración: {e}")
        print("Revisa las variables de entorno o el archivo .env (ver .env.example)")
        return 2

    LoggerService.configure(settings.log_dir, settings.log_level)

    cancel_event = threading.Event()
    install_signal_handlers(cancel_event)

    report = BackupService(settings).run(cancel_event)
    print_report(report)
    return 0 if report.success else 1


if __name__ == "__main__":
    try:
        sys.exit(main())
    except Exception as e:
        print(f"Error crítico: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
