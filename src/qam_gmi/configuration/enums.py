from enum import Enum


class WorkerBackend(str, Enum):
    SERIAL = "SERIAL"
    THREAD = "THREAD"
    PROCESS = "PROCESS"

    def __str__(self):
        return self.value
