"""
Criação idempotente das tabelas e carga inicial dos tipos de evento.
"""
from sqlalchemy import func, insert, select

from .database import Database
from .logger import get_logger
from .models import Base, TipoEvento

logger = get_logger(__name__)

TIPOS_EVENTO_PADRAO = [
    'Sem Chuva',
    'Chuva Fraca',
    'Chuva Forte',
    'Granizo',
    'Raios',
    'Deslizamento',
    'Alagamento',
    'Queda de Árvore',
    'Rio Transbordando',
    'Neblina/Nevoeiro',
    'Queimada',
    'Tornado',
]


def provision_database(database: Database) -> int:
    """
    Cria as tabelas que ainda não existem e popula tipo_evento se estiver vazia.
    Nunca remove nem altera tabelas existentes.

    Args:
        database: Banco de dados da aplicação

    Returns:
        Quantidade de tipos inseridos (0 quando o vocabulário já existia)
    """
    Base.metadata.create_all(bind=database.engine)

    with database.session() as db:
        total = db.execute(select(func.count()).select_from(TipoEvento)).scalar_one()
        if total > 0:
            logger.info("Database tables ready, event types already seeded")
            return 0

        # Uma única instrução INSERT com todas as linhas
        db.execute(
            insert(TipoEvento.__table__).values([{'descricao': descricao} for descricao in TIPOS_EVENTO_PADRAO])
        )
        db.commit()

    logger.info(f"Database tables ready, seeded {len(TIPOS_EVENTO_PADRAO)} event types")
    return len(TIPOS_EVENTO_PADRAO)
