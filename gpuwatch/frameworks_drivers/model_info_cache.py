from collections import OrderedDict
from typing import Optional

from gpuwatch.entities.model_architecture import ModelArchitecture


class ModelInfoCache:
    """
    Architecture metadata memoized by model name, evicting the least recently used entry.

    Only successful lookups are stored; a failed fetch is simply retried on the
    next poll. Accessed from the Ollama poll task only, so no locking.
    """

    def __init__(self, max_entries: int = 256):
        self.max_entries = max_entries
        self.entries: OrderedDict[str, ModelArchitecture] = OrderedDict()

    def get(self, name: str) -> Optional[ModelArchitecture]:
        architecture = self.entries.get(name)
        if architecture is not None:
            self.entries.move_to_end(name)
        return architecture

    def put(self, name: str, architecture: ModelArchitecture) -> None:
        self.entries[name] = architecture
        self.entries.move_to_end(name)
        while len(self.entries) > self.max_entries:
            self.entries.popitem(last=False)

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def __len__(self) -> int:
        return len(self.entries)
