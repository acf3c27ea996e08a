"""Tests for provisioning, the transactional writer and the readers."""
import logging
from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from eventos_clima.eventos.repository import (
    criar_evento,
    listar_eventos,
    listar_tipos_ativos,
    obter_evento,
)
from eventos_clima.eventos.validation import EventoEntrada
from eventos_clima.shared.models import Evento, EventoTipo, TipoEvento
from eventos_clima.shared.provisioning import TIPOS_EVENTO_PADRAO, provision_database


def make_entrada(**overrides):
    values = {
        "eventos": ["Chuva Forte", "Raios"],
        "nome": "Teste",
        "data": datetime(2025, 11, 13, 10, 0, 0),
        "latitude": -23.5505,
        "longitude": -46.6333,
    }
    values.update(overrides)
    return EventoEntrada(**values)


def count(db, model):
    return db.execute(select(func.count()).select_from(model)).scalar_one()


class TestProvisioning:

    def test_seeds_vocabulary_once(self, test_database):
        assert provision_database(test_database) == 12
        assert provision_database(test_database) == 0

        with test_database.session() as db:
            descricoes = [tipo.descricao for tipo in db.query(TipoEvento).order_by(TipoEvento.id)]
        assert descricoes == TIPOS_EVENTO_PADRAO

    def test_seeded_types_are_active(self, db):
        assert all(tipo.ativo for tipo in db.query(TipoEvento).all())

    def test_does_not_reseed_non_empty_vocabulary(self, test_database):
        provision_database(test_database)
        with test_database.session() as db:
            db.query(TipoEvento).filter(TipoEvento.descricao != "Granizo").delete()
            db.commit()

        assert provision_database(test_database) == 0
        with test_database.session() as db:
            assert count(db, TipoEvento) == 1


class TestCriarEvento:

    def test_creates_report_and_links(self, db):
        evento_id = criar_evento(db, make_entrada())

        evento = obter_evento(db, evento_id)
        assert evento.nome == "Teste"
        assert sorted(tipo.descricao for tipo in evento.tipos) == ["Chuva Forte", "Raios"]
        assert count(db, EventoTipo) == 2

    def test_ids_increase(self, db):
        first = criar_evento(db, make_entrada())
        second = criar_evento(db, make_entrada())
        assert second > first

    def test_unknown_type_is_skipped_with_warning(self, db, caplog):
        with caplog.at_level(logging.WARNING):
            evento_id = criar_evento(db, make_entrada(eventos=["Chuva Forte", "Meteoro"]))

        evento = obter_evento(db, evento_id)
        assert [tipo.descricao for tipo in evento.tipos] == ["Chuva Forte"]
        assert "Event type not found: Meteoro" in caplog.text

    def test_match_is_case_sensitive(self, db):
        evento_id = criar_evento(db, make_entrada(eventos=["chuva forte"]))
        assert obter_evento(db, evento_id).tipos == []

    def test_inactive_type_is_not_linked(self, db):
        db.query(TipoEvento).filter(TipoEvento.descricao == "Raios").update({"ativo": False})
        db.commit()

        evento_id = criar_evento(db, make_entrada())
        assert [tipo.descricao for tipo in obter_evento(db, evento_id).tipos] == ["Chuva Forte"]

    def test_duplicate_label_rolls_back_everything(self, db):
        with pytest.raises(IntegrityError):
            criar_evento(db, make_entrada(eventos=["Raios", "Chuva Forte", "Raios"]))

        assert count(db, Evento) == 0
        assert count(db, EventoTipo) == 0

    def test_driver_error_rolls_back_report(self, db, monkeypatch):
        def fail(db, descricao):
            raise ValueError("A string literal cannot contain NUL (0x00) characters.")

        monkeypatch.setattr("eventos_clima.eventos.repository.buscar_tipo_ativo", fail)
        with pytest.raises(ValueError):
            criar_evento(db, make_entrada())

        assert count(db, Evento) == 0

    def test_timestamp_is_utc(self, db):
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        evento_id = criar_evento(db, make_entrada())
        after = datetime.now(timezone.utc).replace(tzinfo=None)

        assert before <= obter_evento(db, evento_id).timestamp <= after

    def test_session_usable_after_rollback(self, db):
        with pytest.raises(IntegrityError):
            criar_evento(db, make_entrada(eventos=["Raios", "Raios"]))

        evento_id = criar_evento(db, make_entrada(eventos=["Raios"]))
        assert obter_evento(db, evento_id) is not None
        assert count(db, Evento) == 1


class TestLeitura:

    def test_listar_eventos_newest_first(self, db):
        for nome, criado in [
            ("antigo", datetime(2025, 1, 1, 8, 0)),
            ("novo", datetime(2025, 3, 1, 8, 0)),
            ("meio", datetime(2025, 2, 1, 8, 0)),
        ]:
            db.add(Evento(nome=nome, data=criado, latitude=0, longitude=0, timestamp=criado))
        db.commit()

        assert [evento.nome for evento in listar_eventos(db)] == ["novo", "meio", "antigo"]

    def test_deactivated_type_still_shown_on_existing_report(self, db):
        evento_id = criar_evento(db, make_entrada(eventos=["Granizo"]))
        db.query(TipoEvento).filter(TipoEvento.descricao == "Granizo").update({"ativo": False})
        db.commit()
        db.expire_all()

        assert [tipo.descricao for tipo in obter_evento(db, evento_id).tipos] == ["Granizo"]
        assert "Granizo" not in [tipo.descricao for tipo in listar_tipos_ativos(db)]

    def test_obter_evento_missing(self, db):
        assert obter_evento(db, 999) is None

    def test_to_dict_shape(self, db):
        evento_id = criar_evento(db, make_entrada(eventos=[]))
        data = obter_evento(db, evento_id).to_dict()

        assert data["id"] == evento_id
        assert data["data"] == "2025-11-13T10:00:00.000Z"
        assert data["coordenadas"] == {"latitude": -23.5505, "longitude": -46.6333}
        assert data["eventos"] == []
        assert data["timestamp"].endswith("Z")

    def test_listar_tipos_ativos_sorted(self, db):
        descricoes = [tipo.descricao for tipo in listar_tipos_ativos(db)]
        assert descricoes == sorted(TIPOS_EVENTO_PADRAO)
