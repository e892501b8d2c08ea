from __future__ import annotations

from typing import Callable

from src.domain.errors import InvalidProgressTransitionError
from src.domain.models import (
    Complete,
    Error,
    Idle,
    Loading,
    MergeProgress,
    Processing,
    ProgressStatus,
)

ProgressListener = Callable[[MergeProgress], None]

ALLOWED_TRANSITIONS: dict[ProgressStatus, frozenset[ProgressStatus]] = {
    ProgressStatus.IDLE: frozenset({ProgressStatus.LOADING, ProgressStatus.PROCESSING}),
    ProgressStatus.LOADING: frozenset(
        {ProgressStatus.LOADING, ProgressStatus.IDLE, ProgressStatus.ERROR}
    ),
    ProgressStatus.PROCESSING: frozenset(
        {ProgressStatus.PROCESSING, ProgressStatus.COMPLETE, ProgressStatus.ERROR}
    ),
    ProgressStatus.COMPLETE: frozenset(
        {ProgressStatus.IDLE, ProgressStatus.LOADING, ProgressStatus.PROCESSING}
    ),
    ProgressStatus.ERROR: frozenset(
        {ProgressStatus.IDLE, ProgressStatus.LOADING, ProgressStatus.PROCESSING}
    ),
}


def _clamp_percent(percent: float) -> int:
    return int(max(0, min(100, round(percent))))


class MergeProgressTracker:
    def __init__(self) -> None:
        self._state: MergeProgress = Idle()
        self._listeners: list[ProgressListener] = []

    @property
    def state(self) -> MergeProgress:
        return self._state

    def subscribe(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ProgressListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _transition(self, new_state: MergeProgress) -> MergeProgress:
        current = self._state.status
        if new_state.status not in ALLOWED_TRANSITIONS[current]:
            raise InvalidProgressTransitionError(
                f"Cannot move progress from {current.value} to {new_state.status.value}"
            )
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def start_loading(self, message: str, percent: float = 0) -> MergeProgress:
        return self._transition(Loading(message=message, percent=_clamp_percent(percent)))

    def start_processing(self, message: str, percent: float = 0) -> MergeProgress:
        return self._transition(Processing(message=message, percent=_clamp_percent(percent)))

    def complete(self, message: str) -> MergeProgress:
        return self._transition(Complete(message=message))

    def fail(self, message: str) -> MergeProgress:
        return self._transition(Error(message=message))

    def reset(self) -> MergeProgress:
        if self._state.status == ProgressStatus.IDLE:
            return self._state
        return self._transition(Idle())
