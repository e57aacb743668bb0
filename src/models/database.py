"""
SQLAlchemy engine and sessions for the local estimator database
Holds the key-value table behind accounts and saved projects
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import os

from utils import ensure_user_data_directory, is_bundled_executable, log_environment_info
from utils.debug_logger import debug_logger

Base = declarative_base()

engine = None
SessionLocal = None

DATABASE_FILENAME = "blueprint_estimator.db"
MEMORY_DATABASE = ":memory:"


def default_database_path():
	"""Location from Settings > Database Location, else the user data directory"""
	from utils.settings_manager import get_settings_manager

	custom_path = get_settings_manager().get_database_path()
	if custom_path:
		debug_logger.info("Database", f"Using database location from settings: {custom_path}")
		return custom_path
	return os.path.join(ensure_user_data_directory(), DATABASE_FILENAME)


def _make_engine(db_path):
	if db_path == MEMORY_DATABASE:
		# Every session must share the one connection or it sees an empty database
		return create_engine(
			"sqlite://",
			connect_args={'check_same_thread': False},
			poolclass=StaticPool,
		)
	return create_engine(f"sqlite:///{db_path}")


def initialize_database(db_path=None):
	"""Open (creating if needed) the estimator database

	Args:
		db_path: SQLite file path, ":memory:", or None for the default location

	Returns:
		str: The path that was opened
	"""
	global engine, SessionLocal

	if os.environ.get('BFE_DEBUG'):
		log_environment_info()

	if db_path is None:
		db_path = default_database_path()

	if engine is not None:
		if db_path != MEMORY_DATABASE and engine.url.database == db_path:
			debug_logger.debug("Database", f"Already open: {db_path}")
			return db_path
		engine.dispose()

	mode = 'bundled' if is_bundled_executable() else 'development'
	debug_logger.info("Database", f"Opening database ({mode}): {db_path}")

	engine = _make_engine(db_path)
	# Values read in a closed session stay readable
	SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

	from . import key_value_store  # noqa: F401  registers the table
	Base.metadata.create_all(bind=engine)
	return db_path


def get_session():
	"""New session on the open database"""
	if SessionLocal is None:
		raise RuntimeError("Database not initialized. Call initialize_database() first.")
	return SessionLocal()


def close_database():
	"""Dispose of the engine; initialize_database() must be called again before use"""
	global engine, SessionLocal
	if engine is not None:
		engine.dispose()
	engine = None
	SessionLocal = None
