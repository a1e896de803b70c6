"""Record store: asynchronous CRUD over JSON collection files (meals, shopping items, session slot).

Every collection is one JSON file in the data directory. Reads and writes run in
a worker thread; each collection serializes its own read-modify-write cycle with
an asyncio.Lock so concurrent batch operations never lose an update. Writes go
through a temporary file that replaces the target, so a crash mid-write leaves
the previous content intact.
"""
import asyncio
import json
import logging
import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from planifia.domain.Meal import Meal
from planifia.domain.ShoppingItem import ShoppingItem
from planifia.domain.User import User
from planifia.infra.paths import DATA_DIR, data_files
from planifia.utilities.exceptions import RecordStoreError

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid4().hex


def _now_ms() -> int:
    return int(time.time() * 1000)


def _read_json(path: Path, default):
    if not path.exists():
        return default
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error("Invalid JSON in %s: %s", path, e)
        raise RecordStoreError(f"Corrupt data file: {path.name}", {"path": str(path)}) from e
    except OSError as e:
        logger.error("Failed to read %s: %s", path, e)
        raise RecordStoreError(f"Cannot read data file: {path.name}", {"path": str(path)}) from e
    return data if data is not None else default


def _atomic_write(path: Path, data) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.stem}_", suffix=".json")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as tmp:
                json.dump(data, tmp, indent=2, ensure_ascii=False)
            shutil.move(tmp_path, str(path))
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
    except OSError as e:
        logger.error("Failed to write %s: %s", path, e)
        raise RecordStoreError(f"Cannot write data file: {path.name}", {"path": str(path)}) from e


class JsonCollection:
    """A list of records persisted in one JSON file, filtered by owner on read."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def _load(self) -> List[Dict[str, Any]]:
        data = await asyncio.to_thread(_read_json, self.path, [])
        if not isinstance(data, list):
            raise RecordStoreError(f"Unexpected content in {self.path.name}", {"path": str(self.path)})
        return data

    async def _save(self, records: List[Dict[str, Any]]) -> None:
        await asyncio.to_thread(_atomic_write, self.path, records)

    async def list_records(self, user_id: str) -> List[Dict[str, Any]]:
        records = await self._load()
        return [r for r in records if r.get('user_id') == user_id]

    async def add_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            records = await self._load()
            new_record = {**record, 'id': _new_id()}
            records.append(new_record)
            await self._save(records)
        return new_record

    async def update_record(self, record_id: str, changes: Dict[str, Any]) -> bool:
        """Merge changes into the record. Returns False (and writes nothing) if the id is absent."""
        changes = {k: v for k, v in changes.items() if k != 'id'}
        async with self._lock:
            records = await self._load()
            for i, r in enumerate(records):
                if r.get('id') == record_id:
                    records[i] = {**r, **changes}
                    await self._save(records)
                    return True
        return False

    async def remove_where(self, predicate: Callable[[Dict[str, Any]], bool]) -> int:
        """Delete every record matching predicate; returns how many were removed."""
        async with self._lock:
            records = await self._load()
            remaining = [r for r in records if not predicate(r)]
            removed = len(records) - len(remaining)
            if removed:
                await self._save(remaining)
        return removed


class MealRepository(JsonCollection):
    async def list(self, user_id: str) -> List[Meal]:
        return [Meal.from_dict(r) for r in await self.list_records(user_id)]

    async def add(self, meal: Meal) -> Meal:
        '''Persists a meal (its id is ignored) and returns it with the generated id.'''
        record = meal.to_dict()
        record.pop('id', None)
        return Meal.from_dict(await self.add_record(record))

    async def delete(self, meal_id: str) -> None:
        removed = await self.remove_where(lambda r: r.get('id') == meal_id)
        if not removed:
            logger.debug("Meal %s already absent; delete is a no-op", meal_id)


class ShoppingItemRepository(JsonCollection):
    async def list(self, user_id: str) -> List[ShoppingItem]:
        return [ShoppingItem.from_dict(r) for r in await self.list_records(user_id)]

    async def add(self, item: ShoppingItem) -> ShoppingItem:
        '''Persists an item and returns it with a generated id and created_at (epoch ms).'''
        record = item.to_dict()
        record.pop('id', None)
        record['created_at'] = _now_ms()
        return ShoppingItem.from_dict(await self.add_record(record))

    async def update(self, item_id: str, **changes) -> None:
        if not await self.update_record(item_id, changes):
            logger.debug("Shopping item %s absent; update is a no-op", item_id)

    async def delete(self, item_id: str) -> None:
        await self.remove_where(lambda r: r.get('id') == item_id)

    async def delete_by_meal_id(self, meal_id: str) -> int:
        '''Retracts every item owned by meal_id. Unowned (manual) items never match.'''
        if not meal_id:
            return 0
        return await self.remove_where(lambda r: r.get('meal_id') == meal_id)


class SessionRepository:
    """Single durable slot holding the signed-in user."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def sign_in(self, email: str) -> User:
        user = User.for_email(email)
        async with self._lock:
            await asyncio.to_thread(_atomic_write, self.path, user.to_dict())
        logger.info("Signed in %s", user.email)
        return user

    async def sign_out(self) -> None:
        async with self._lock:
            await asyncio.to_thread(self._remove)

    def _remove(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise RecordStoreError("Cannot clear session slot", {"path": str(self.path)}) from e

    async def get_current_session(self) -> Optional[User]:
        data = await asyncio.to_thread(_read_json, self.path, None)
        if not isinstance(data, dict) or not data.get('id'):
            return None
        return User.from_dict(data)


class RecordStore:
    """The three collections rooted in one data directory."""

    def __init__(self, data_dir: Path = DATA_DIR):
        self.data_dir = Path(data_dir)
        files = data_files(self.data_dir)
        self.meals = MealRepository(files['meals'])
        self.items = ShoppingItemRepository(files['items'])
        self.session = SessionRepository(files['user'])

    def __repr__(self) -> str:
        return f"RecordStore({self.data_dir})"
