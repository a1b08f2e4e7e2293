from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Deque, Iterator, List, Optional

HISTORY_CAPACITY = 5


@dataclass(frozen=True)
class DownloadRecord:
    id: str
    title: str
    platform: str
    downloaded_at: str
    format: str

    @classmethod
    def create(cls, title: str, platform: str, format: str, now: Optional[datetime] = None) -> "DownloadRecord":
        now = now or datetime.now()
        return cls(
            id=now.isoformat(),
            title=title,
            platform=platform,
            downloaded_at=now.strftime("%Y-%m-%d %H:%M:%S"),
            format=format,
        )


class DownloadHistory:
    """Recent downloads, newest first; the oldest entry falls off past capacity"""

    def __init__(self, capacity: int = HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._records: Deque[DownloadRecord] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._records.maxlen

    def push(self, record: DownloadRecord) -> None:
        self._records.appendleft(record)

    def to_list(self) -> List[DownloadRecord]:
        return list(self._records)

    def __iter__(self) -> Iterator[DownloadRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
