"""
Endpoints para registro e consulta de eventos climáticos.
"""
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from ..shared.database import get_db
from ..shared.logger import get_logger
from .repository import criar_evento, listar_eventos, obter_evento
from .validation import validar_evento

logger = get_logger(__name__)

router = APIRouter(prefix='/api/eventos', tags=['eventos'])

MAX_SERIAL_ID = 2147483647


class CoordenadasModel(BaseModel):
    latitude: float
    longitude: float


class EventoResponseModel(BaseModel):
    id: int
    nome: str
    data: str
    coordenadas: CoordenadasModel
    eventos: List[str]
    timestamp: Optional[str]


class EventoCriadoResponse(BaseModel):
    sucesso: bool
    mensagem: str
    id: int


@router.post('', status_code=201, response_model=EventoCriadoResponse)
def create_evento(payload: Any = Body(None), db: Session = Depends(get_db)):
    """
    Registra um novo evento com seus tipos.
    Tipos desconhecidos são ignorados; a gravação é atômica.
    """
    validacao = validar_evento(payload)

    if not validacao.valido:
        raise HTTPException(status_code=400, detail=validacao.mensagem)

    try:
        evento_id = criar_evento(db, validacao.evento)
    except Exception as e:
        logger.error(f"Error in database transaction: {e}")
        raise HTTPException(status_code=500, detail="Erro ao salvar os dados no banco de dados")

    return {
        'sucesso': True,
        'mensagem': 'Evento recebido com sucesso',
        'id': evento_id
    }


@router.get('', response_model=List[EventoResponseModel])
def get_eventos(db: Session = Depends(get_db)):
    """
    Obtém todos os eventos com seus tipos, do mais recente ao mais antigo.
    """
    try:
        return [evento.to_dict() for evento in listar_eventos(db)]
    except Exception as e:
        logger.error(f"Error getting eventos: {e}")
        raise HTTPException(status_code=500, detail="Erro ao buscar eventos do banco de dados")


@router.get('/{evento_id}', response_model=EventoResponseModel)
def get_evento(evento_id: str, db: Session = Depends(get_db)):
    """
    Obtém um evento pelo seu ID.
    """
    try:
        parsed_id = int(evento_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="ID inválido")

    try:
        # Fora do intervalo de SERIAL (int4) não há como existir
        evento = obter_evento(db, parsed_id) if abs(parsed_id) <= MAX_SERIAL_ID else None

        if not evento:
            raise HTTPException(status_code=404, detail="Evento não encontrado")

        return evento.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting evento {parsed_id}: {e}")
        raise HTTPException(status_code=500, detail="Erro ao buscar evento do banco de dados")
