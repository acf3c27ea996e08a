"""
Utilitários de conexão com o banco de dados usando SQLAlchemy.
"""
from contextlib import contextmanager
from typing import Generator, Mapping, Optional

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import URL
from sqlalchemy.orm import Session, sessionmaker

from .env import get_setting, validate_env
from .logger import get_logger

logger = get_logger(__name__)


class Database:
    """
    Gerencia o pool de conexões com o PostgreSQL.
    Uma instância por processo, entregue às rotas via app.state.
    """

    def __init__(self, url, **engine_kwargs):
        """Inicializa o engine e a fábrica de sessões"""
        self._db_url = url
        self._engine = create_engine(url, **engine_kwargs)
        self._session_local = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)

        logger.info(f"Database engine initialized: {self._engine.url.render_as_string(hide_password=True)}")

    @classmethod
    def from_env(cls, values: Optional[Mapping[str, str]] = None) -> 'Database':
        """
        Cria o banco a partir das variáveis de ambiente.

        Args:
            values: Variáveis de configuração (padrão: as carregadas do ambiente)

        Returns:
            Instância de Database com pool_pre_ping habilitado

        Raises:
            ValueError: Se a configuração for inválida
        """
        validate_env(values)
        return cls(build_connection_url(values), pool_pre_ping=True)

    @property
    def engine(self) -> Engine:
        """Retorna o engine do SQLAlchemy"""
        return self._engine

    @property
    def session_local(self) -> sessionmaker:
        """Retorna o sessionmaker configurado"""
        return self._session_local

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Context manager que obtém uma sessão e sempre a fecha ao final,
        devolvendo a conexão ao pool. Não faz commit automático.

        Example:
            with database.session() as db:
                tipos = db.query(TipoEvento).all()
        """
        session = self._session_local()
        try:
            yield session
        finally:
            session.close()

    def close(self):
        """
        Fecha todas as conexões do pool.
        Usado no desligamento da aplicação.
        """
        self._engine.dispose()
        logger.info("Database connections closed")


def build_connection_url(values: Optional[Mapping[str, str]] = None):
    """
    Monta a URL de conexão a partir de DATABASE_URL ou das variáveis DB_*.

    Returns:
        URL de conexão no formato PostgreSQL (psycopg2)
    """
    database_url = get_setting('DATABASE_URL', values)
    if database_url:
        return database_url

    return URL.create(
        'postgresql+psycopg2',
        username=get_setting('DB_USER', values),
        password=get_setting('DB_PASSWORD', values),
        host=get_setting('DB_HOST', values),
        port=int(get_setting('DB_PORT', values)),
        database=get_setting('DB_NAME', values),
        query={'sslmode': get_setting('DB_SSLMODE', values)},
    )


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Dependency do FastAPI que fornece uma sessão por requisição.

    Yields:
        Sessão do SQLAlchemy, fechada ao término da requisição
    """
    database: Database = request.app.state.database
    with database.session() as session:
        yield session
