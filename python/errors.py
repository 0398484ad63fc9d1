class EstimationError(Exception):
    """Base class for every failure raised while estimating pi."""


class InvalidConfiguration(EstimationError, ValueError):
    pass


class UnresolvedWorker(EstimationError):
    def __init__(self, worker_index, reason=None):
        self.worker_index = worker_index
        msg = f"Worker {worker_index} did not produce a result"
        if reason is not None:
            msg += f": {reason!r}"
        super().__init__(msg)


class BrokenSlot(EstimationError):
    """The producer side of a result slot was closed without a value."""


class SlotAlreadyWritten(EstimationError):
    pass


class SlotAlreadyRead(EstimationError):
    pass
