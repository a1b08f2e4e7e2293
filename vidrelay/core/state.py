from dataclasses import dataclass
from typing import Optional


@dataclass
class RuntimeState:
    """Centralized runtime state"""
    ytdlp_version: str = "unknown"
    scratch_dir: Optional[str] = None


state = RuntimeState()
