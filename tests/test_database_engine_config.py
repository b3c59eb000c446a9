def test_get_engine_kwargs_sqlite_has_check_same_thread(monkeypatch):
    # Import lazily so monkeypatch can affect env usage deterministically.
    from dayblocks.database import database as db

    kwargs = db.get_engine_kwargs("sqlite:///./dayblocks.db")
    assert "connect_args" in kwargs
    assert kwargs["connect_args"]["check_same_thread"] is False
    # SQLite should not require pool sizing knobs.
    assert "pool_size" not in kwargs
    assert "max_overflow" not in kwargs
    assert kwargs["pool_pre_ping"] is True


def test_get_engine_kwargs_postgres_reads_pool_settings(monkeypatch):
    from dayblocks.database import database as db

    monkeypatch.setenv("DB_POOL_SIZE", "7")
    monkeypatch.setenv("DB_MAX_OVERFLOW", "3")
    monkeypatch.setenv("DB_POOL_TIMEOUT_SEC", "12")

    kwargs = db.get_engine_kwargs("postgresql+psycopg://u:p@localhost:5432/db")
    assert "connect_args" not in kwargs
    assert kwargs["pool_pre_ping"] is True
    assert kwargs["pool_size"] == 7
    assert kwargs["max_overflow"] == 3
    assert kwargs["pool_timeout"] == 12


def test_debug_flag_enables_echo(monkeypatch):
    from dayblocks.database import database as db

    monkeypatch.setenv("DEBUG", "true")
    assert db.get_engine_kwargs("sqlite://")["echo"] is True
    monkeypatch.setenv("DEBUG", "false")
    assert db.get_engine_kwargs("sqlite://")["echo"] is False


def test_is_sqlite_url():
    from dayblocks.database import database as db

    assert db._is_sqlite_url("sqlite:///./dayblocks.db") is True
    assert db._is_sqlite_url("postgresql+psycopg://u:p@localhost/db") is False


def test_init_db_creates_schedule_blocks_table(tmp_path):
    from sqlalchemy import create_engine, inspect
    from dayblocks.database import database as db

    engine = create_engine(f"sqlite:///{tmp_path / 'blocks.db'}")
    db.init_db(bind=engine)

    inspector = inspect(engine)
    assert "schedule_blocks" in inspector.get_table_names()
    columns = {c["name"] for c in inspector.get_columns("schedule_blocks")}
    assert {"date", "start_time", "end_time", "status", "task_id", "category_id"} <= columns
