from sqlalchemy.exc import OperationalError

from arthavidhi.check_db import check_database, main
from arthavidhi.core.db import Database


def test_reachable_database():
    assert check_database("sqlite://") is True
    assert main(["--url", "sqlite://"]) == 0


def test_unreachable_database(monkeypatch):
    def refuse(self):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(Database, "ping", refuse)

    assert check_database("sqlite://") is False
    assert main(["--url", "sqlite://"]) == 1
