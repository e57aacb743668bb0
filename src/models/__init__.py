"""
Data models for the Blueprint Flooring Estimator
"""

from .database import Base, initialize_database, get_session, close_database
from .key_value_store import KeyValueEntry, KeyValueStore, MemoryKeyValueStore, StorageError
from .selection_ledger import Selection, SelectionLedger, InvalidProjectStateError
from .user_accounts import UserAccounts, AuthenticationError, normalize_username
from .project_store import ProjectStore

__all__ = [
	'Base',
	'initialize_database',
	'get_session',
	'close_database',
	'KeyValueEntry',
	'KeyValueStore',
	'MemoryKeyValueStore',
	'StorageError',
	'Selection',
	'SelectionLedger',
	'InvalidProjectStateError',
	'UserAccounts',
	'AuthenticationError',
	'normalize_username',
	'ProjectStore',
]
