"""GitHub token and last-push settings persisted in a key-value store."""

import base64
import binascii
import json
from dataclasses import asdict, dataclass

from ..config import settings
from ..utils.logging import get_logger
from .store import KeyValueStore

logger = get_logger(__name__)

TOKEN_KEY = "github_pat"
LAST_PUSH_KEY = "github_last_push"

# Obfuscation only, so the token is not stored as plain text
_XOR_KEY = 42


def _obfuscate(token: str) -> str:
    raw = bytes(b ^ _XOR_KEY for b in token.encode("utf-8"))
    return base64.b64encode(raw).decode("ascii")


def _deobfuscate(value: str) -> str:
    raw = base64.b64decode(value.encode("ascii"), validate=True)
    return bytes(b ^ _XOR_KEY for b in raw).decode("utf-8")


def save_token(store: KeyValueStore, token: str) -> None:
    store.set(TOKEN_KEY, _obfuscate(token))


def load_token(store: KeyValueStore) -> str | None:
    """Return the saved token, or None when absent or unreadable."""
    value = store.get(TOKEN_KEY)
    if not value:
        return None
    try:
        return _deobfuscate(value)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.warning("Stored GitHub token is unreadable: %s", e)
        return None


def remove_token(store: KeyValueStore) -> None:
    """Forget the token and every saved push setting."""
    store.remove(TOKEN_KEY)
    store.remove(LAST_PUSH_KEY)


def has_token(store: KeyValueStore) -> bool:
    return bool(load_token(store))


def resolve_token(store: KeyValueStore | None) -> str | None:
    """Token from the environment first, then from the store."""
    if settings.github_token:
        return settings.github_token
    if store is None:
        return None
    return load_token(store)


@dataclass
class LastPushSettings:
    """Where a project was last published, for quick re-push."""

    project_id: str
    owner: str
    repo: str
    branch: str
    base_path: str
    last_push_at: str


def _load_all(store: KeyValueStore) -> dict[str, dict]:
    raw = store.get(LAST_PUSH_KEY)
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Saved push settings are unreadable: %s", e)
        return {}
    return data if isinstance(data, dict) else {}


def save_last_push_settings(store: KeyValueStore, push: LastPushSettings) -> None:
    all_settings = _load_all(store)
    all_settings[push.project_id] = asdict(push)
    store.set(LAST_PUSH_KEY, json.dumps(all_settings))


def get_last_push_settings(store: KeyValueStore, project_id: str) -> LastPushSettings | None:
    entry = _load_all(store).get(project_id)
    if not isinstance(entry, dict):
        return None
    try:
        return LastPushSettings(**entry)
    except TypeError as e:
        logger.warning("Saved push settings for %s are malformed: %s", project_id, e)
        return None
