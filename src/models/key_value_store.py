"""
Key-value store model - small JSON documents persisted in SQLite
"""

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime

from .database import Base, get_session
from utils.debug_logger import debug_logger


class StorageError(Exception):
	"""Raised when the local store cannot be written"""


class KeyValueEntry(Base):
	"""One stored value"""
	__tablename__ = 'key_value_entries'

	key = Column(String(255), primary_key=True)
	value = Column(Text, nullable=False)
	modified_date = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

	def __repr__(self):
		return f"<KeyValueEntry(key='{self.key}')>"


class KeyValueStore:
	"""get/set/remove over string values, one row per key"""

	def __init__(self, session_factory=None):
		self.get_session = session_factory or get_session

	def get(self, key):
		"""Stored string for key, or None"""
		session = self.get_session()
		try:
			entry = session.get(KeyValueEntry, key)
			return entry.value if entry is not None else None
		except SQLAlchemyError as e:
			debug_logger.error("Storage", f"Could not read '{key}'", e)
			return None
		finally:
			session.close()

	def set(self, key, value):
		session = self.get_session()
		try:
			entry = session.get(KeyValueEntry, key)
			if entry is None:
				session.add(KeyValueEntry(key=key, value=value))
			else:
				entry.value = value
			session.commit()
		except SQLAlchemyError as e:
			session.rollback()
			debug_logger.error("Storage", f"Could not write '{key}'", e)
			raise StorageError(f"Could not save data: {e}")
		finally:
			session.close()

	def remove(self, key):
		session = self.get_session()
		try:
			session.query(KeyValueEntry).filter(KeyValueEntry.key == key).delete()
			session.commit()
		except SQLAlchemyError as e:
			session.rollback()
			debug_logger.error("Storage", f"Could not remove '{key}'", e)
			raise StorageError(f"Could not remove data: {e}")
		finally:
			session.close()


class MemoryKeyValueStore:
	"""Dictionary-backed store with the same interface, for previews and tests"""

	def __init__(self):
		self._data = {}

	def get(self, key):
		return self._data.get(key)

	def set(self, key, value):
		self._data[key] = str(value)

	def remove(self, key):
		self._data.pop(key, None)
