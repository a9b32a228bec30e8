import csv

import pytest

from db import get_session, init_db
from tests import factories


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    return init_db("sqlite://")


@pytest.fixture
def db_session(engine):
    """A session bound to the test database, shared with the factories."""
    session = get_session()
    for factory_cls in factories.ALL_FACTORIES:
        factory_cls._meta.sqlalchemy_session = session
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def write_csv(tmp_path):
    """Write rows to a CSV file and return its path."""
    counter = {"n": 0}

    def _write(header, rows, delimiter=",", bom=False):
        counter["n"] += 1
        path = tmp_path / f"import_{counter['n']}.csv"
        with open(path, "w", newline="", encoding="utf-8-sig" if bom else "utf-8") as fh:
            writer = csv.writer(fh, delimiter=delimiter)
            writer.writerow(header)
            writer.writerows(rows)
        return path

    return _write


@pytest.fixture
def import_csv(db_session):
    """
    Run the importer against the test database.

    The in-memory database lives on a single shared connection, so the
    test session has to end its own transaction before the import opens
    another one.
    """
    from import_engine import run_import

    def _run(path):
        db_session.commit()
        result = run_import(path)
        db_session.expire_all()
        return result

    return _run
