from __future__ import annotations

import stat
from dataclasses import dataclass
from datetime import datetime

from asyncssh import SFTPAttrs


@dataclass(frozen=True, slots=True)
class RemoteEntry:
    name: str
    size_bytes: int | None
    mode: int | None
    modified_at: datetime | None

    @property
    def is_file(self) -> bool:
        return self.mode is not None and stat.S_ISREG(self.mode)

    @property
    def is_dir(self) -> bool:
        return self.mode is not None and stat.S_ISDIR(self.mode)

    @classmethod
    def from_attrs(cls, name: str, attrs: SFTPAttrs) -> RemoteEntry:
        size_bytes = int(attrs.size) if attrs.size is not None else None
        mode = int(attrs.permissions) if attrs.permissions is not None else None
        modified_at = datetime.fromtimestamp(attrs.mtime) if attrs.mtime is not None else None
        return cls(name=name, size_bytes=size_bytes, mode=mode, modified_at=modified_at)
