"""Persistence adapters for :class:`app.services.cart_store.CartStore`.

Each adapter stores one cart document (a list of line-item dicts) per user
id. Adapters do not commit database transactions; callers do.
"""
import json
import logging
import os
import threading
from typing import Dict, List, Optional

from models import db
from models.cart import CartSnapshot

logger = logging.getLogger(__name__)


class CartStorage:
    """Interface every cart persistence adapter implements."""

    def load(self, user_id: str) -> Optional[List[dict]]:
        raise NotImplementedError

    def save(self, user_id: str, items: List[dict]) -> None:
        raise NotImplementedError

    def delete(self, user_id: str) -> None:
        raise NotImplementedError


class MemoryCartStorage(CartStorage):
    def __init__(self):
        self._carts: Dict[str, str] = {}
        self._lock = threading.Lock()

    def load(self, user_id):
        with self._lock:
            raw = self._carts.get(user_id)
        return json.loads(raw) if raw is not None else None

    def save(self, user_id, items):
        encoded = json.dumps(items)
        with self._lock:
            self._carts[user_id] = encoded

    def delete(self, user_id):
        with self._lock:
            self._carts.pop(user_id, None)


class FileCartStorage(CartStorage):
    """One ``styleswap_cart_<user id>.json`` document per user."""

    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, user_id: str) -> str:
        safe = "".join(ch for ch in str(user_id) if ch.isalnum() or ch in "-_")
        return os.path.join(self.directory, f"styleswap_cart_{safe}.json")

    def load(self, user_id):
        path = self._path(user_id)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as fh:
            return json.load(fh)

    def save(self, user_id, items):
        path = self._path(user_id)
        tmp = f"{path}.tmp"
        with open(tmp, "w", encoding="utf-8") as fh:
            json.dump(items, fh)
        os.replace(tmp, path)

    def delete(self, user_id):
        try:
            os.remove(self._path(user_id))
        except FileNotFoundError:
            pass


class DatabaseCartStorage(CartStorage):
    """Stores the cart document in the ``cart_snapshot`` table."""

    def load(self, user_id):
        snapshot = db.session.get(CartSnapshot, user_id)
        if snapshot is None:
            return None
        return snapshot.items

    def save(self, user_id, items):
        snapshot = db.session.get(CartSnapshot, user_id)
        if snapshot is None:
            snapshot = CartSnapshot(user_id=user_id, items=list(items))
            db.session.add(snapshot)
        else:
            # reassign so SQLAlchemy sees the JSON change
            snapshot.items = list(items)
        db.session.flush()

    def delete(self, user_id):
        CartSnapshot.query.filter_by(user_id=user_id).delete()


def storage_from_config(config) -> CartStorage:
    backend = (config.get("CART_STORAGE") or "database").lower()
    if backend == "memory":
        return MemoryCartStorage()
    if backend == "file":
        return FileCartStorage(config.get("CART_STORAGE_DIR") or "var/carts")
    if backend == "database":
        return DatabaseCartStorage()
    raise RuntimeError(f"Unknown CART_STORAGE backend: {backend}")


__all__ = [
    "CartStorage",
    "MemoryCartStorage",
    "FileCartStorage",
    "DatabaseCartStorage",
    "storage_from_config",
]
