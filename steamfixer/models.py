from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

class GameStatus(str, Enum):
    READY = "ready"

@dataclass
class GameRecord:
    name: str
    app_id: str
    path: str                       # relative to <steamapps>/common
    status: GameStatus = GameStatus.READY

    def to_dict(self) -> dict:
        return {"name": self.name, "app_id": self.app_id,
                "path": self.path, "status": self.status.value}

@dataclass
class ShortcutFixResult:
    name: str
    game_id: str
    icon_url: str
    location: str
    success: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

@dataclass
class Ok(Generic[T]):
    value: T

@dataclass
class Err:
    source: Path
    reason: Exception
