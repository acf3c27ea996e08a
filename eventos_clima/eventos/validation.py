"""
Validação do payload de um relato de evento antes de qualquer acesso ao banco.
"""
import math
import re
from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

_datetime_adapter = TypeAdapter(datetime)

# Sem este prefixo o parser aceitaria números como timestamp Unix
ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")

MENSAGEM_CORPO_INVALIDO = 'Corpo da requisição deve ser um objeto JSON'
MENSAGEM_EVENTOS_INVALIDOS = 'Eventos deve ser um array'
MENSAGEM_NOME_INVALIDO = 'Nome é obrigatório e deve ser uma string'
MENSAGEM_DATA_INVALIDA = 'Data deve ser um ISO8601 string válido'
MENSAGEM_COORDENADAS_AUSENTES = 'Coordenadas devem conter latitude e longitude'
MENSAGEM_COORDENADAS_INVALIDAS = 'Latitude e longitude devem ser numéricas'


class EventoEntrada(BaseModel):
    """Relato já validado, pronto para ser gravado"""
    eventos: List[str]
    nome: str
    data: datetime
    latitude: float
    longitude: float


class ResultadoValidacao(BaseModel):
    """Resultado da validação: sucesso com o evento ou falha com o motivo"""
    valido: bool
    mensagem: Optional[str] = None
    evento: Optional[EventoEntrada] = None

    @classmethod
    def ok(cls, evento: EventoEntrada) -> 'ResultadoValidacao':
        return cls(valido=True, evento=evento)

    @classmethod
    def falha(cls, mensagem: str) -> 'ResultadoValidacao':
        return cls(valido=False, mensagem=mensagem)


def parse_data(value: Any) -> Optional[datetime]:
    """
    Interpreta a data de ocorrência.

    Returns:
        Datetime ingênuo em UTC, ou None se o valor não for uma data válida
    """
    if not isinstance(value, str) or not ISO_DATE_PREFIX.match(value.strip()):
        return None
    try:
        parsed = _datetime_adapter.validate_python(value.strip())
    except ValidationError:
        return None
    if parsed.tzinfo is not None:
        try:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        except (OverflowError, ValueError):
            return None
    return parsed


def parse_coordenada(value: Any) -> Optional[float]:
    """Converte latitude/longitude em float; não verifica limites"""
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def validar_evento(payload: Any) -> ResultadoValidacao:
    """
    Valida o payload recebido em POST /api/eventos.
    As verificações seguem a ordem eventos, nome, data, coordenadas
    e param na primeira falha.

    Args:
        payload: Corpo JSON já decodificado

    Returns:
        ResultadoValidacao com o EventoEntrada ou a mensagem de erro
    """
    if not isinstance(payload, dict):
        return ResultadoValidacao.falha(MENSAGEM_CORPO_INVALIDO)

    eventos = payload.get('eventos')
    if not isinstance(eventos, list) or not all(isinstance(item, str) for item in eventos):
        return ResultadoValidacao.falha(MENSAGEM_EVENTOS_INVALIDOS)

    nome = payload.get('nome')
    if not isinstance(nome, str) or not nome:
        return ResultadoValidacao.falha(MENSAGEM_NOME_INVALIDO)

    data = parse_data(payload.get('data'))
    if data is None:
        return ResultadoValidacao.falha(MENSAGEM_DATA_INVALIDA)

    coordenadas = payload.get('coordenadas')
    if not isinstance(coordenadas, dict) or 'latitude' not in coordenadas or 'longitude' not in coordenadas:
        return ResultadoValidacao.falha(MENSAGEM_COORDENADAS_AUSENTES)

    latitude = parse_coordenada(coordenadas['latitude'])
    longitude = parse_coordenada(coordenadas['longitude'])
    if latitude is None or longitude is None:
        return ResultadoValidacao.falha(MENSAGEM_COORDENADAS_INVALIDAS)

    return ResultadoValidacao.ok(
        EventoEntrada(
            eventos=eventos,
            nome=nome,
            data=data,
            latitude=latitude,
            longitude=longitude,
        )
    )
