import itertools

from ..core.ports import IdGenerator


class CounterId(IdGenerator):
    def __init__(self, prefix: str = "blk", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def new_id(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"
