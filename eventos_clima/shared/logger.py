"""
Configuração centralizada de logging para a aplicação.
"""
import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Optional, Union

from .env import get_setting

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class DailyLogHandler(logging.FileHandler):
    """Grava em logs_dir/YYYY_MM_DD.log e troca de arquivo quando o dia muda"""

    def __init__(self, logs_dir: Path, level=logging.NOTSET):
        self.logs_dir = Path(logs_dir)
        self.logs_dir.mkdir(parents=True, exist_ok=True)
        self.current_date = datetime.now().date()
        super().__init__(self.path_for(self.current_date), mode='a', encoding='utf-8', delay=True)
        self.setLevel(level)

    def path_for(self, day: date) -> Path:
        return self.logs_dir / day.strftime('%Y_%m_%d.log')

    def emit(self, record):
        today = datetime.now().date()
        if today != self.current_date:
            self.acquire()
            try:
                if self.stream:
                    self.stream.close()
                    self.stream = None
                self.current_date = today
                self.baseFilename = os.path.abspath(self.path_for(today))
            finally:
                self.release()
        super().emit(record)


def configure_logging(level: Optional[str] = None, logs_dir: Optional[Union[str, Path]] = None) -> None:
    """
    Configura o logging raiz com o arquivo diário e a saída padrão.

    Args:
        level: Nível de log (padrão: LOG_LEVEL do ambiente)
        logs_dir: Pasta dos arquivos de log (padrão: LOG_DIR do ambiente)
    """
    log_level = getattr(logging, (level or get_setting('LOG_LEVEL')).upper())
    formatter = logging.Formatter(LOG_FORMAT)

    daily_handler = DailyLogHandler(Path(logs_dir or get_setting('LOG_DIR')))
    daily_handler.setLevel(log_level)
    daily_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(formatter)

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        handlers=[
            daily_handler,
            stream_handler
        ],
        force=True
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Obtém um logger configurado para a aplicação.

    Args:
        name: Nome do logger (normalmente o __name__ do módulo)

    Returns:
        Logger com o nível definido pelas variáveis de ambiente
    """
    return logging.getLogger(name)
