# XENZ v1.0
from pathlib import Path
from typing import Optional


class ProjectStore:
    '''Holds the name of the one project XENZ manages.'''

    def get(self) -> Optional[str]:
        raise NotImplementedError

    def set(self, name: str):
        raise NotImplementedError


class FileProjectStore(ProjectStore):
    '''Pointer file backed store: a single line holding the project name.'''

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self) -> Optional[str]:
        if not self.path.exists():
            return None
        name = self.path.read_text(encoding='utf-8').strip()
        return name or None

    def set(self, name: str):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(f"{name}\n", encoding='utf-8')


class MemoryProjectStore(ProjectStore):
    def __init__(self, name: Optional[str] = None):
        self.name = name

    def get(self) -> Optional[str]:
        return self.name

    def set(self, name: str):
        self.name = name
