"""Contracts shared by the extraction pipeline stages."""

from abc import ABC, abstractmethod
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class TextGenerator(ABC):
    """Per-user text generation service (the model invoker).

    Implementations must raise:
        - CredentialMissingError when the user has no API key configured
        - ContentBlockedError when the model refuses the prompt
        - ModelInvocationError for transport/API failures
    """

    @abstractmethod
    async def generate(self, user_id: str, prompt: str) -> str:
        """Run ``prompt`` with ``user_id``'s credentials and return the reply text."""

    async def aclose(self) -> None:
        """Release any clients held by the generator."""


class Stage(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    REDUCING = "reducing"
    PROMPTING = "prompting"
    INVOKING = "invoking"
    PARSING = "parsing"
    VALIDATING = "validating"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_ORDER = list(Stage)
_TERMINAL = {Stage.SUCCEEDED, Stage.FAILED}


class StageTracker:
    """Forward-only record of where one extraction run is.

    Stages may be skipped (pasted text never fetches) but never revisited.
    """

    def __init__(self, label: str) -> None:
        self.label = label
        self.stage = Stage.IDLE
        self.history: list[Stage] = [Stage.IDLE]
        self.failure_reason: str | None = None

    def advance(self, stage: Stage) -> None:
        if self.stage in _TERMINAL:
            raise RuntimeError(f"{self.label}: already finished as {self.stage.value}")
        if stage is not Stage.FAILED and _ORDER.index(stage) <= _ORDER.index(self.stage):
            raise RuntimeError(
                f"{self.label}: cannot move from {self.stage.value} back to {stage.value}"
            )
        logger.debug("%s: %s -> %s", self.label, self.stage.value, stage.value)
        self.stage = stage
        self.history.append(stage)

    def fail(self, reason: str) -> None:
        self.failure_reason = reason
        self.advance(Stage.FAILED)

    @property
    def finished(self) -> bool:
        return self.stage in _TERMINAL
