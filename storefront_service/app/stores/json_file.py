import json
import logging
import os
import threading
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)

BOM = "\ufeff"


class JsonFileCollection:
    """A JSON array of documents kept in a single file.

    The file is created on first access, filled by ``seed_factory`` when one
    is given. Callers doing read-modify-write hold ``lock``.
    """

    def __init__(self, path: str, seed_factory: Optional[Callable[[], List[dict]]] = None):
        self.path = path
        self.seed_factory = seed_factory
        self.lock = threading.RLock()

    def ensure(self) -> None:
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        if os.path.exists(self.path):
            return

        documents = self.seed_factory() if self.seed_factory else []
        logger.info("Creating %s with %d documents",
                    self.path, len(documents))
        self.write(documents)

    def read(self) -> List[Any]:
        self.ensure()
        with open(self.path, "r", encoding="utf-8") as f:
            raw = f.read()

        clean = raw.lstrip(BOM).strip()
        return json.loads(clean or "[]")

    def write(self, documents: List[Any]) -> None:
        # write-then-rename so a crash never leaves a half written file
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(documents, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)
