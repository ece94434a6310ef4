import os
import logging
import tempfile
from pathlib import Path
from typing import Optional

from .models import RegistrySnapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Keeps the registry's map and id counter in a JSON file on disk."""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Optional[RegistrySnapshot]:
        if not self.path.exists():
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            snap = RegistrySnapshot.model_validate_json(f.read())
        logger.info("Loaded %d products from %s", len(snap.products), self.path)
        return snap

    def save(self, snapshot: RegistrySnapshot) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(snapshot.model_dump_json())
            os.replace(tmp, self.path)
        except BaseException:
            os.unlink(tmp)
            raise
