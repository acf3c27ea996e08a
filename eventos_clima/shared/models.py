"""
Modelos do banco de dados usando SQLAlchemy.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utcnow() -> datetime:
    """Hora atual em UTC, sem tzinfo (colunas timestamp sem fuso)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_isoformat(value: Optional[datetime]) -> Optional[str]:
    """Formata um datetime ingênuo (UTC) em ISO-8601 com sufixo Z"""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec='milliseconds') + 'Z'


class Evento(Base):
    """Relato de um evento climático"""
    __tablename__ = 'eventos'

    id = Column(Integer, primary_key=True, autoincrement=True)
    nome = Column(String(255), nullable=False)
    data = Column(DateTime, nullable=False)
    latitude = Column(Numeric(10, 7), nullable=False)
    longitude = Column(Numeric(10, 7), nullable=False)
    timestamp = Column(DateTime, default=utcnow)

    # Leitura: não filtra por tipos ativos
    tipos = relationship(
        "TipoEvento",
        secondary="eventos_tipos",
        viewonly=True,
        order_by="TipoEvento.descricao",
    )

    def to_dict(self):
        """Converte o modelo em dicionário"""
        return {
            'id': self.id,
            'nome': self.nome,
            'data': utc_isoformat(self.data),
            'coordenadas': {
                'latitude': float(self.latitude),
                'longitude': float(self.longitude),
            },
            'eventos': [tipo.descricao for tipo in self.tipos],
            'timestamp': utc_isoformat(self.timestamp),
        }


class TipoEvento(Base):
    """Tipo de evento do vocabulário fixo"""
    __tablename__ = 'tipo_evento'

    id = Column(Integer, primary_key=True, autoincrement=True)
    descricao = Column(String(255), nullable=False)
    ativo = Column(Boolean, default=True, server_default=text('true'))
    criado_em = Column(DateTime, default=utcnow)

    def to_dict(self):
        """Converte o modelo em dicionário"""
        return {
            'id': self.id,
            'descricao': self.descricao,
        }


class EventoTipo(Base):
    """Associação entre um evento e um tipo de evento"""
    __tablename__ = 'eventos_tipos'
    __table_args__ = (
        UniqueConstraint('evento_id', 'tipo_evento_id'),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    evento_id = Column(Integer, ForeignKey('eventos.id', ondelete='CASCADE'))
    tipo_evento_id = Column(Integer, ForeignKey('tipo_evento.id'))
