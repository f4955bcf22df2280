from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from review_api.core.config import Settings

def _is_memory_sqlite(url: str) -> bool:
	return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url

def build_engine(settings: Settings) -> Engine:
	url = settings.DATABASE_URL
	timeout = settings.DB_TIMEOUT_SEC
	if url.startswith("sqlite"):
		kwargs = {"connect_args": {"check_same_thread": False, "timeout": timeout}}
		if _is_memory_sqlite(url):
			# one shared connection, otherwise every checkout sees an empty database
			kwargs["poolclass"] = StaticPool
		engine = create_engine(url, **kwargs)
		event.listen(engine, "connect", _enable_sqlite_foreign_keys)
		return engine

	connect_args = {}
	if url.startswith("postgresql"):
		connect_args["options"] = f"-c statement_timeout={int(timeout * 1000)}"
	return create_engine(
		url,
		connect_args=connect_args,
		pool_pre_ping=True,
		pool_timeout=timeout,
	)

def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
	cursor = dbapi_connection.cursor()
	cursor.execute("PRAGMA foreign_keys=ON")
	cursor.close()

def build_session_factory(engine: Engine) -> sessionmaker:
	return sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db(request: Request):
	db = request.app.state.session_factory()
	try:
		yield db
	finally:
		db.close()
