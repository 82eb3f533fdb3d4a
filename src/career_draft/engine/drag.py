"""Drag-and-drop session for reordering questions.

The whole session is one immutable ``DragState`` value. Transitions:

    idle --arm--> armed --start--> dragging --drop/end--> idle

A drag only starts for the item that was armed by a pointer-down, and both
``drop`` and ``end`` always return to idle, so no transient id survives a
finished or cancelled gesture.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Literal

logger = logging.getLogger(__name__)

PRE_SCREEN_LIST = "pre-screen"

# A drag scope is the pre-screen list or an interview group id.
DragScope = str | int
ReorderCallback = Callable[[DragScope, str, str | None], Any]


@dataclass(frozen=True)
class DragState:
    phase: Literal["idle", "armed", "dragging"] = "idle"
    scope: DragScope | None = None
    question_id: str | None = None
    hover_id: str | None = None
    tail_hover: bool = False


IDLE = DragState()


class DragSession:
    """One active drag at a time, committed through a reorder callback."""

    def __init__(self, reorder: ReorderCallback):
        self._reorder = reorder
        self.state: DragState = IDLE

    @property
    def is_dragging(self) -> bool:
        return self.state.phase == "dragging"

    @property
    def dragging_id(self) -> str | None:
        return self.state.question_id if self.is_dragging else None

    def _in_drag(self, scope: DragScope) -> bool:
        return self.is_dragging and self.state.scope == scope

    def arm(self, question_id: str, scope: DragScope = PRE_SCREEN_LIST) -> bool:
        """Pointer-down on a drag handle."""
        if self.is_dragging:
            return False
        self.state = DragState(phase="armed", scope=scope, question_id=question_id)
        return True

    def disarm(self) -> None:
        """Pointer released without dragging."""
        if self.state.phase == "armed":
            self.state = IDLE

    def start(self, question_id: str, scope: DragScope = PRE_SCREEN_LIST) -> bool:
        """Drag-start event. Refused unless it targets the armed item."""
        armed = self.state
        if armed.phase != "armed" or armed.question_id != question_id or armed.scope != scope:
            logger.debug("Ignoring drag start for unarmed item %s", question_id)
            return False
        self.state = replace(armed, phase="dragging", hover_id=None, tail_hover=False)
        return True

    def hover(self, target_id: str, scope: DragScope = PRE_SCREEN_LIST) -> None:
        if not self._in_drag(scope) or target_id == self.state.question_id:
            return
        if self.state.hover_id != target_id or self.state.tail_hover:
            self.state = replace(self.state, hover_id=target_id, tail_hover=False)

    def leave(self, target_id: str) -> None:
        if self.is_dragging and self.state.hover_id == target_id:
            self.state = replace(self.state, hover_id=None)

    def hover_tail(self, scope: DragScope = PRE_SCREEN_LIST) -> None:
        if not self._in_drag(scope):
            return
        if not self.state.tail_hover or self.state.hover_id is not None:
            self.state = replace(self.state, hover_id=None, tail_hover=True)

    def leave_tail(self) -> None:
        if self.is_dragging and self.state.tail_hover:
            self.state = replace(self.state, tail_hover=False)

    def drop(self, target_id: str | None, scope: DragScope = PRE_SCREEN_LIST) -> bool:
        """Commit the move onto ``target_id`` (None drops on the tail zone).

        The session returns to idle whether or not anything was committed,
        and also when the reorder callback raises.
        """
        state = self.state
        try:
            if not self._in_drag(scope) or target_id == state.question_id:
                return False
            self._reorder(scope, state.question_id, target_id)
            return True
        finally:
            self.state = IDLE

    def drop_on_tail(self, scope: DragScope = PRE_SCREEN_LIST) -> bool:
        return self.drop(None, scope)

    def end(self) -> None:
        """Drag-end, fired for completed and cancelled drags alike."""
        self.state = IDLE
