from sqlalchemy import event

from library_api.extensions import db

BEGIN_MODE_OPTION = "sqlite_begin_mode"


def _install_sqlite_hooks(engine):
    """
    SQLite: FK'ler açık (cascade için). Okuma transaction'ları normal (DEFERRED) BEGIN ile,
    begin_write() ile açılan yazma scope'ları BEGIN IMMEDIATE ile başlar; böylece yazarlar
    kilit yükseltirken deadlock'a düşmez, busy timeout ile sıraya girer ve okurlar yazarları beklemez.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # pysqlite'ın kendi BEGIN'ini kapat; BEGIN'i aşağıda biz veriyoruz
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        mode = conn.get_execution_options().get(BEGIN_MODE_OPTION, "DEFERRED")
        conn.exec_driver_sql(f"BEGIN {mode}")


def begin_write(session):
    """
    Yazma scope'unu başlatır (SQLite'ta BEGIN IMMEDIATE; diğer DB'lerde etkisiz).
    Session'da transaction zaten açıksa olduğu gibi kullanılır.
    """
    if not session.in_transaction():
        session.connection(execution_options={BEGIN_MODE_OPTION: "IMMEDIATE"})


def ensure_db_objects(app):
    # modeller metadata'ya kayıtlı olsun
    from library_api.models.book import Book  # noqa: F401
    from library_api.models.borrow_record import BorrowRecord  # noqa: F401

    with app.app_context():
        engine = db.engine
        if engine.dialect.name == "sqlite":
            _install_sqlite_hooks(engine)
            app.logger.info("[db_objects] SQLite hooks installed (foreign_keys, IMMEDIATE write scopes).")

        try:
            db.create_all()
            app.logger.info("[db_objects] Tables ensured (books, borrow_logs).")
        except Exception as e:
            app.logger.error(f"[db_objects] HATA: {e}")
            raise


def sync_tables(app, force=False):
    with app.app_context():
        if force:
            app.logger.warning("[db_objects] Force sync: dropping all tables.")
            db.drop_all()
        db.create_all()
        return sorted(db.metadata.tables)
