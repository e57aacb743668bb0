"""
Local user accounts - hashed credentials and the signed-in user

Accounts only exist on this machine; there is no server side.
"""

import json
import time

from werkzeug.security import generate_password_hash, check_password_hash

from utils.debug_logger import debug_logger


USERS_KEY = 'bfe_users_v1'
SESSION_KEY = 'bfe_session_v1'

# PBKDF2-SHA256, 120000 iterations, 16 character salt
PASSWORD_HASH_METHOD = 'pbkdf2:sha256:120000'
PASSWORD_SALT_LENGTH = 16


class AuthenticationError(Exception):
    """Raised with a message suitable for showing to the user"""


def normalize_username(username):
    return (username or "").strip().lower()


def _now_ms():
    return int(time.time() * 1000)


class UserAccounts:
    """Register, log in and track the current user in a key-value store"""

    def __init__(self, store):
        self.store = store

    def _load_users(self):
        raw = self.store.get(USERS_KEY)
        if not raw:
            return {}
        try:
            users = json.loads(raw)
        except ValueError:
            debug_logger.warning("Accounts", "Stored user records are corrupt; treating as empty")
            return {}
        return users if isinstance(users, dict) else {}

    def _save_users(self, users):
        self.store.set(USERS_KEY, json.dumps(users))

    def _set_session(self, username):
        self.store.set(SESSION_KEY, json.dumps({'username': username, 'at': _now_ms()}))

    @staticmethod
    def _credentials(username, password):
        username = normalize_username(username)
        password = (password or "").strip()
        if not username or not password:
            raise AuthenticationError("Enter a username and password.")
        return username, password

    def register(self, username, password):
        """Create an account and sign it in; returns the normalized username"""
        username, password = self._credentials(username, password)
        users = self._load_users()
        if username in users:
            raise AuthenticationError("That username already exists on this device.")

        users[username] = {
            'hash': generate_password_hash(password, method=PASSWORD_HASH_METHOD,
                                           salt_length=PASSWORD_SALT_LENGTH),
            'createdAt': _now_ms(),
        }
        self._save_users(users)
        self._set_session(username)
        debug_logger.info("Accounts", f"Registered '{username}'")
        return username

    def login(self, username, password):
        username, password = self._credentials(username, password)
        record = self._load_users().get(username)
        if not isinstance(record, dict) or not record.get('hash'):
            raise AuthenticationError("No account found for that username on this device.")
        if not check_password_hash(record['hash'], password):
            debug_logger.info("Accounts", f"Wrong password for '{username}'")
            raise AuthenticationError("Incorrect password.")
        self._set_session(username)
        debug_logger.info("Accounts", f"Logged in '{username}'")
        return username

    def logout(self):
        self.store.remove(SESSION_KEY)
        debug_logger.info("Accounts", "Logged out")

    def current_user(self):
        """Signed-in username, or None (a corrupt session counts as signed out)"""
        raw = self.store.get(SESSION_KEY)
        if not raw:
            return None
        try:
            session = json.loads(raw)
        except ValueError:
            return None
        if not isinstance(session, dict) or not session.get('username'):
            return None
        return session['username']
