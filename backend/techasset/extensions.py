# Overview: Flask extension instances for database and migrations.

from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from sqlalchemy import event

# Rows stay readable after commit; services shape responses after the unit of work closes
db = SQLAlchemy(session_options={"expire_on_commit": False})
migrate = Migrate()


def install_connection_guards(engine, statement_timeout_seconds: int) -> None:
    """
    Apply per-connection settings every time the pool opens a new connection.

    - SQLite: enforce foreign keys, wait on locks instead of failing fast, and
      let SQLAlchemy own BEGIN so SAVEPOINTs nest inside a real transaction.
      BEGIN IMMEDIATE takes the write lock up front, which avoids lock
      upgrade deadlocks between concurrent writers.
    - PostgreSQL / MySQL: cap statement runtime so a stalled transaction
      cannot pin a pooled connection indefinitely.
    """
    dialect = engine.dialect.name
    timeout_ms = int(statement_timeout_seconds * 1000)

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        if dialect == "sqlite":
            dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            if dialect == "sqlite":
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.execute(f"PRAGMA busy_timeout={timeout_ms}")
            elif dialect == "postgresql":
                cursor.execute(f"SET statement_timeout = {timeout_ms}")
            elif dialect in ("mysql", "mariadb"):
                cursor.execute(f"SET SESSION max_execution_time = {timeout_ms}")
        finally:
            cursor.close()

    if dialect == "sqlite":
        @event.listens_for(engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
