"""Unit tests for the ORM table definitions."""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Dialect
from sqlalchemy.schema import CreateTable

from infrastructure.database.models import ProfileModel


def _ddl(dialect: Dialect) -> str:
    return str(CreateTable(ProfileModel.__table__).compile(dialect=dialect))


class TestProfileModel:
    def test_name_compares_by_byte_order_on_postgres(self):
        assert 'name VARCHAR(120) COLLATE "C" NOT NULL' in _ddl(postgresql.dialect())

    def test_sqlite_name_keeps_binary_default(self):
        ddl = _ddl(sqlite.dialect())

        assert "name VARCHAR(120) NOT NULL" in ddl
        assert "COLLATE" not in ddl

