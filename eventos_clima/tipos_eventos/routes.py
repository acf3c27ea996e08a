"""
Endpoint de consulta do vocabulário de tipos de evento.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..eventos.repository import listar_tipos_ativos
from ..shared.database import get_db
from ..shared.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix='/api/tipos-eventos', tags=['tipos-eventos'])


class TipoEventoResponseModel(BaseModel):
    id: int
    descricao: str


@router.get('', response_model=List[TipoEventoResponseModel])
def get_tipos_eventos(db: Session = Depends(get_db)):
    """
    Obtém os tipos de evento ativos, em ordem alfabética.
    """
    try:
        return [tipo.to_dict() for tipo in listar_tipos_ativos(db)]
    except Exception as e:
        logger.error(f"Error getting tipos de eventos: {e}")
        raise HTTPException(status_code=500, detail="Erro ao buscar tipos de eventos do banco de dados")
