"""Identity store: register, login, logout and current session over a key-value backend."""
import hashlib
import hmac
import json
import logging
import os
import secrets
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Optional
from supabase import create_client, Client

from config import IDENTITY_BACKEND, IDENTITY_STORE_PATH, IDENTITY_TABLE, SUPABASE_URL, SUPABASE_KEY
from models.identity import Credential

logger = logging.getLogger(__name__)

USERS_KEY = "sinko_users_db"
SESSION_KEY = "sinko_current_session"

PBKDF2_ITERATIONS = 200_000


class IdentityError(Exception):
    """Base class for identity failures shown inline on the auth form."""


class AlreadyExists(IdentityError):
    def __init__(self, email: str):
        self.email = email
        super().__init__("User already exists")


class InvalidCredentials(IdentityError):
    def __init__(self):
        super().__init__("Invalid credentials")


class IdentityStorageError(IdentityError):
    """The backing record exists but cannot be read."""


class MemoryKeyValueStore:
    """Process-local backend, used in tests and for throwaway sessions."""

    def __init__(self):
        self._data: Dict[str, Any] = {}

    def get(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        return json.loads(value) if value is not None else None

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """Durable backend keeping all keys in one JSON document on disk."""

    def __init__(self, path: str = IDENTITY_STORE_PATH):
        self.path = Path(path)

    def get(self, key: str) -> Optional[Any]:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Identity store {self.path} is corrupt: {e}", exc_info=True)
            raise IdentityStorageError(f"Identity store {self.path} is unreadable; fix or remove the file")
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.error(f"Identity store {self.path} does not hold a JSON object")
            raise IdentityStorageError(f"Identity store {self.path} is unreadable; fix or remove the file")
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f)
        os.replace(tmp_path, self.path)


class SupabaseKeyValueStore:
    """Backend storing keys in a Supabase table ``(key text primary key, value jsonb)``."""

    def __init__(self, client: Optional[Client] = None, table: str = IDENTITY_TABLE):
        if client is None:
            if not SUPABASE_URL or not SUPABASE_KEY:
                raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables")
            client = create_client(SUPABASE_URL, SUPABASE_KEY)

        self.client = client
        self.table = table
        logger.info(f"SupabaseKeyValueStore initialized on table {table}")

    def get(self, key: str) -> Optional[Any]:
        result = self.client.table(self.table).select("value").eq("key", key).execute()
        if result.data:
            return result.data[0]["value"]
        return None

    def set(self, key: str, value: Any) -> None:
        self.client.table(self.table).upsert({"key": key, "value": value}).execute()

    def delete(self, key: str) -> None:
        self.client.table(self.table).delete().eq("key", key).execute()


def create_backend(kind: Optional[str] = None):
    """Build the key-value backend named by IDENTITY_BACKEND."""
    kind = (kind or IDENTITY_BACKEND).lower()
    if kind == "memory":
        return MemoryKeyValueStore()
    if kind == "file":
        return JsonFileKeyValueStore()
    if kind == "supabase":
        return SupabaseKeyValueStore()
    raise ValueError(f"Unknown identity backend: {kind}")


def hash_password(password: str, salt: Optional[str] = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), PBKDF2_ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt, _, expected = stored.partition("$")
    if not salt or not expected:
        return False
    return hmac.compare_digest(hash_password(password, salt), stored)


class IdentityStore:
    """Credential registry plus a single active-session pointer."""

    def __init__(self, backend=None):
        self.backend = backend if backend is not None else create_backend()

    def register(self, email: str, password: str) -> Credential:
        """
        Create a user and make it the active session.

        Args:
            email: Login email, also the registry key
            password: Plain password; only its salted hash is stored

        Returns:
            Credential of the new user

        Raises:
            AlreadyExists: If the email is already registered
        """
        users = self._users()
        if email in users:
            logger.info(f"Registration rejected, user exists: {email}")
            raise AlreadyExists(email)

        credential = Credential(
            id=str(uuid.uuid4()),
            email=email,
            name=email.split("@")[0],
            created_at=int(time.time() * 1000),
        )
        users[email] = {**credential.to_dict(), "password_hash": hash_password(password)}
        self.backend.set(USERS_KEY, users)
        self.backend.set(SESSION_KEY, credential.to_dict())

        logger.info(f"Registered user {credential.id}")
        return credential

    def login(self, email: str, password: str) -> Credential:
        """
        Check a password and make the user the active session.

        Raises:
            InvalidCredentials: Unknown email or wrong password
        """
        record = self._users().get(email)
        if not record or not verify_password(password, record.get("password_hash", "")):
            logger.info("Login rejected: invalid credentials")
            raise InvalidCredentials()

        credential = Credential.from_dict(record)
        self.backend.set(SESSION_KEY, credential.to_dict())
        logger.info(f"User {credential.id} logged in")
        return credential

    def logout(self) -> None:
        self.backend.delete(SESSION_KEY)
        logger.info("Session cleared")

    def get_current_session(self) -> Optional[Credential]:
        data = self.backend.get(SESSION_KEY)
        return Credential.from_dict(data) if data else None

    def _users(self) -> Dict[str, Dict[str, Any]]:
        return self.backend.get(USERS_KEY) or {}
