from datetime import datetime
from time import time
from domain.ports import Clock

# epoch seconds (float) + datetime local com offset explícito
class SystemClock(Clock):
    def now_epoch(self) -> float:
        return time()

    def now(self) -> datetime:
        return datetime.now().astimezone()
