from __future__ import annotations

import hashlib
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from threading import RLock

from services.models import LoadedCourse


def sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


@dataclass(frozen=True)
class StoredCourse:
    id: str
    filename: str
    loaded: LoadedCourse
    created_at: datetime
    file_hash: str


class InMemoryCourseStore:
    """Parcours charges pour la session d'edition (LRU borne, pas de persistance disque)."""

    def __init__(self, max_items: int = 32):
        self._max_items = int(max_items)
        self._lock = RLock()
        self._data: OrderedDict[str, StoredCourse] = OrderedDict()

    def store(self, loaded: LoadedCourse, filename: str, raw_bytes: bytes) -> str:
        course_id = str(uuid.uuid4())
        entry = StoredCourse(
            id=course_id,
            filename=filename,
            loaded=loaded,
            created_at=datetime.now(),
            file_hash=sha256_bytes(raw_bytes),
        )
        with self._lock:
            self._data[course_id] = entry
            while len(self._data) > self._max_items:
                self._data.popitem(last=False)
        return course_id

    def get(self, course_id: str) -> StoredCourse:
        with self._lock:
            entry = self._data.get(course_id)
            if entry is None:
                raise KeyError(f"Course {course_id} not found")
            self._data.move_to_end(course_id)
            return entry

    def list_courses(self) -> list[StoredCourse]:
        with self._lock:
            return list(self._data.values())

    def delete(self, course_id: str) -> bool:
        with self._lock:
            return self._data.pop(course_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
