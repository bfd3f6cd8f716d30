"""Generator state and the pure transitions between display states.

The controller never mutates state in place: every transition takes a
``GeneratorState`` and returns a new one, so the whole workflow can be
exercised without a display attached.
"""

from dataclasses import dataclass, replace
from enum import Enum

from qr_tech.qr_generator import QRArtifact


class Status(Enum):
    """Display state of the result region."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


LOADING_MESSAGE = "Generating QR Code..."


@dataclass(frozen=True)
class GeneratorState:
    status: Status = Status.IDLE
    artifact: QRArtifact | None = None  # Session State slot
    message: str = ""
    request_seq: int = 0

    @property
    def can_export(self) -> bool:
        return self.status is Status.READY and self.artifact is not None


def start_loading(state: GeneratorState) -> GeneratorState:
    """Enter Loading and issue a new request id."""
    return replace(
        state,
        status=Status.LOADING,
        message=LOADING_MESSAGE,
        request_seq=state.request_seq + 1,
    )


def finish_ready(state: GeneratorState, artifact: QRArtifact) -> GeneratorState:
    return replace(state, status=Status.READY, artifact=artifact, message="")


def finish_error(state: GeneratorState, message: str) -> GeneratorState:
    """Enter Error. The previous artifact is kept but no longer exportable."""
    return replace(state, status=Status.ERROR, message=message)


def is_stale(state: GeneratorState, request_id: int) -> bool:
    """True if a newer generate call was issued after ``request_id``."""
    return request_id != state.request_seq
