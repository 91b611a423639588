"""Two writers creating the same key: the one that loses must still succeed."""
from datetime import datetime

import pytest
from sqlalchemy import delete, func, select

from careers.core import errors
from careers.crud.common import atomic
from careers.crud.economic_regions import upsert_economic_region
from careers.crud.outlooks import record_outlook
from careers.crud.programs import upsert_program, upsert_program_area
from careers.crud.unit_groups import upsert_unit_group
from careers.db.base import create_all
from careers.db.session import make_engine, make_session_factory
from careers.models.economic_region import EconomicRegion
from careers.models.program import Credential, Program, ProgramArea
from careers.models.unit_group import UnitGroup


@pytest.fixture
def factory(tmp_path):
    # a file database so each session holds its own connection
    eng = make_engine(f"sqlite:///{tmp_path / 'race.sqlite3'}", echo=False)
    create_all(eng)
    yield make_session_factory(eng)
    eng.dispose()


def _other_writer_first(monkeypatch, db, method, write):
    """Let `write` commit from another session right after db's first lookup."""
    real = getattr(db, method)
    done = []

    def racing(*args, **kwargs):
        result = real(*args, **kwargs)
        if done:
            return result
        done.append(True)
        if method == "execute":
            # read everything now so no open cursor holds a lock
            frozen = result.freeze()
            write()
            return frozen()
        write()
        return result

    monkeypatch.setattr(db, method, racing)
    return done


def test_unit_group_upsert_after_lost_insert(factory, monkeypatch):
    def write():
        with factory() as other:
            other.add(UnitGroup(noc="1234", occupation="Other writer"))
            other.commit()

    with factory() as db:
        done = _other_writer_first(monkeypatch, db, "get", write)
        row = upsert_unit_group(db, "1234", "Software engineers")
        assert done
        assert row.occupation == "Software engineers"
        assert db.execute(select(func.count()).select_from(UnitGroup)).scalar_one() == 1


def test_economic_region_upsert_after_lost_insert(factory, monkeypatch):
    def write():
        with factory() as other:
            other.add(EconomicRegion(economic_region_code="5920", economic_region_name="Old name"))
            other.commit()

    with factory() as db:
        _other_writer_first(monkeypatch, db, "get", write)
        row = upsert_economic_region(db, "5920", "Toronto")
        assert row.economic_region_name == "Toronto"


def test_program_area_upsert_returns_id_of_concurrent_insert(factory, monkeypatch):
    winner = {}

    def write():
        with factory() as other:
            area = ProgramArea(title="Health")
            other.add(area)
            other.commit()
            winner["id"] = area.id

    with factory() as db:
        _other_writer_first(monkeypatch, db, "execute", write)
        assert upsert_program_area(db, "Health") == winner["id"]
        assert db.execute(select(func.count()).select_from(ProgramArea)).scalar_one() == 1


def test_program_upsert_after_lost_insert(factory, monkeypatch):
    with factory() as setup:
        area_id = upsert_program_area(setup, "Information Technology")

    def write():
        with factory() as other:
            other.add(Program(nid=42, title="Old", credential=Credential.DIPLOMA, program_area_id=area_id))
            other.commit()

    with factory() as db:
        real_get = db.get
        done = []

        def racing(model, key, **kwargs):
            result = real_get(model, key, **kwargs)
            if model is Program and not done:
                done.append(True)
                write()
            return result

        monkeypatch.setattr(db, "get", racing)
        row = upsert_program(db, 42, "Computer Science", "Degree", area_id)
        assert done
        assert row.title == "Computer Science"
        assert row.credential is Credential.DEGREE


def test_own_conflicts_are_not_retried(factory, monkeypatch):
    with factory() as db:
        upsert_program_area(db, "Trades", 7)
        calls = []
        real = db.execute
        monkeypatch.setattr(db, "execute", lambda *a, **kw: calls.append(1) or real(*a, **kw))
        with pytest.raises(errors.ConflictError):
            upsert_program_area(db, "Trades", 8)
        assert len(calls) == 1


def test_delete_racing_a_new_dependent_is_a_conflict(factory):
    with factory() as db:
        upsert_unit_group(db, "1234", "Software engineers")
        upsert_economic_region(db, "5920", "Toronto")
        record_outlook(db, "1234", "5920", "T", "Good", "x", datetime(2024, 1, 1), "ON")
        # skip the dependent check, as a delete that raced the insert would
        with pytest.raises(errors.ConflictError):
            with atomic(db, entity="unit_group", key="1234", restrict=True):
                db.execute(delete(UnitGroup).where(UnitGroup.noc == "1234"))
        assert db.get(UnitGroup, "1234") is not None