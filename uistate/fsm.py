from __future__ import annotations

from enum import IntEnum

from statemachine import State, StateMachine

from uistate.errors import ReplyStateError


class ReplyState(IntEnum):
    unsent = 0
    deferred = 1
    sent = 2
    modal_opened = 3


class ReplyFSM(StateMachine):
    """Tracks whether an interaction already received its initial response.

    - unsent -> deferred: acknowledge/defer
    - unsent|deferred|sent -> sent: reply/edit
    - unsent -> modal_opened: open a form; nothing may follow it
    """

    # Only a form is terminal; deferred and sent keep accepting edits.
    validate_final_reachability = False

    unsent = State(ReplyState.unsent.name, value=ReplyState.unsent, initial=True)
    deferred = State(ReplyState.deferred.name, value=ReplyState.deferred)
    sent = State(ReplyState.sent.name, value=ReplyState.sent)
    modal_opened = State(ReplyState.modal_opened.name, value=ReplyState.modal_opened, final=True)

    defer = unsent.to(deferred)
    respond = unsent.to(sent) | deferred.to(sent) | sent.to.itself()
    open_modal = unsent.to(modal_opened)


class ReplyTracker:
    """Claims reply transitions for one interaction.

    Every `claim_*` method updates the state synchronously and returns before
    the caller awaits the platform call. Under a single event loop that makes
    check-and-set atomic: two handlers racing on the same interaction can never
    both observe `unsent`.
    """

    def __init__(self) -> None:
        self._fsm = ReplyFSM()

    @property
    def state(self) -> ReplyState:
        return ReplyState(self._fsm.current_state_value)

    def claim_defer(self) -> bool:
        """Move to `deferred` if nothing was sent yet; report whether it happened."""

        if self.state != ReplyState.unsent:
            return False
        self._fsm.defer()
        return True

    def claim_send(self) -> ReplyState:
        """Move to `sent` and return the state it was claimed from."""

        prev = self.state
        if prev == ReplyState.modal_opened:
            raise ReplyStateError("cannot reply after a form was opened")
        self._fsm.respond()
        return prev

    def claim_modal(self) -> None:
        if self.state != ReplyState.unsent:
            raise ReplyStateError("cannot send modals after initial response")
        self._fsm.open_modal()
