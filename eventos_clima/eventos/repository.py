"""
Gravação e leitura de eventos e tipos de evento.
"""
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from ..shared.logger import get_logger
from ..shared.models import Evento, EventoTipo, TipoEvento
from .validation import EventoEntrada

logger = get_logger(__name__)


def buscar_tipo_ativo(db: Session, descricao: str) -> Optional[TipoEvento]:
    """Busca um tipo de evento ativo pela descrição exata"""
    return db.query(TipoEvento).filter(
        TipoEvento.descricao == descricao,
        TipoEvento.ativo.is_(True)
    ).order_by(TipoEvento.id).first()


def criar_evento(db: Session, entrada: EventoEntrada) -> int:
    """
    Grava o evento e suas associações de tipo em uma única transação.

    Tipos desconhecidos ou inativos são ignorados com um aviso no log.
    Um rótulo repetido na entrada viola a unicidade de eventos_tipos
    e desfaz tudo, inclusive o próprio evento.

    Args:
        db: Sessão do SQLAlchemy
        entrada: Evento já validado

    Returns:
        ID do evento criado

    Raises:
        Exception: Se qualquer instrução falhar (após o rollback)
    """
    try:
        evento = Evento(
            nome=entrada.nome,
            data=entrada.data,
            latitude=entrada.latitude,
            longitude=entrada.longitude
        )
        db.add(evento)
        db.flush()

        for descricao in entrada.eventos:
            tipo = buscar_tipo_ativo(db, descricao)

            if tipo is None:
                logger.warning(f"Event type not found: {descricao}")
                continue

            db.add(EventoTipo(evento_id=evento.id, tipo_evento_id=tipo.id))
            db.flush()

        evento_id = evento.id
        db.commit()
        return evento_id
    except Exception:
        db.rollback()
        raise


def listar_eventos(db: Session) -> List[Evento]:
    """Retorna todos os eventos, do mais recente para o mais antigo"""
    return db.query(Evento).options(
        selectinload(Evento.tipos)
    ).order_by(
        Evento.timestamp.desc(),
        Evento.id.desc()
    ).all()


def obter_evento(db: Session, evento_id: int) -> Optional[Evento]:
    """Retorna um evento pelo ID, ou None se não existir"""
    return db.query(Evento).options(
        selectinload(Evento.tipos)
    ).filter(Evento.id == evento_id).first()


def listar_tipos_ativos(db: Session) -> List[TipoEvento]:
    """Retorna os tipos de evento ativos em ordem alfabética"""
    return db.query(TipoEvento).filter(
        TipoEvento.ativo.is_(True)
    ).order_by(TipoEvento.descricao).all()
