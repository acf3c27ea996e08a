import os
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values


def load_env(path: str = '.env') -> Dict[str, str]:
    """
    Carrega as variáveis do arquivo .env e sobrepõe as do ambiente do processo.
    """
    values = {key: value for key, value in dotenv_values(path).items() if value is not None}
    values.update(os.environ)
    return values


env = load_env()

required_vars = [
    'DB_USER',
    'DB_PASSWORD',
    'DB_HOST',
    'DB_NAME'
]

numeric_vars = [
    'DB_PORT',
    'PORT'
]

defaults = {
    'DB_PORT': '5432',
    'DB_SSLMODE': 'prefer',
    'HOST': '0.0.0.0',
    'PORT': '3000',
    'LOG_LEVEL': 'INFO',
    'LOG_DIR': 'logs',
    'CORS_ORIGINS': '*'
}

valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def get_setting(name: str, values: Optional[Mapping[str, str]] = None) -> str:
    """Retorna o valor configurado ou o padrão da variável"""
    source = env if values is None else values
    value = source.get(name)
    if value is None or not value.strip():
        return defaults.get(name, '')
    return value.strip()


def validate_env(values: Optional[Mapping[str, str]] = None) -> None:
    """
    Valida as variáveis necessárias para conectar ao banco de dados.

    Args:
        values: Variáveis a validar (padrão: as carregadas do ambiente)

    Raises:
        ValueError: Se faltar uma variável obrigatória ou algum valor for inválido
    """
    source = env if values is None else values

    log_level = get_setting('LOG_LEVEL', source)
    if log_level.upper() not in valid_log_levels:
        log_levels = ', '.join(valid_log_levels)
        raise ValueError(f'LOG_LEVEL deve ser um de {log_levels}, recebido: {log_level}')

    # DATABASE_URL substitui as peças DB_* individuais
    if not get_setting('DATABASE_URL', source):
        for var in required_vars:
            if var not in source:
                raise ValueError(f'Falta a variável de ambiente obrigatória: {var}')
            if not source[var].strip():
                raise ValueError(f'A variável de ambiente não pode estar vazia: {var}')

    for var in numeric_vars:
        try:
            int(get_setting(var, source))
        except ValueError:
            raise ValueError(f'{var} não é um número válido: {source.get(var)}')
