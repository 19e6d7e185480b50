import heapq
import itertools
import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

import config
from intent_matcher import find_best_match

logger = logging.getLogger(__name__)

# ============================================================
# TYPES
# ============================================================

class Sender(str, Enum):
    USER = "user"
    BOT = "bot"


class ReplyState(Enum):
    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"


class HintState(Enum):
    PENDING = "pending"
    DISMISSED = "dismissed"


class PanelState(Enum):
    CLOSED = "closed"
    ORNAMENTS_PENDING = "ornaments_pending"
    ORNAMENTS_VISIBLE = "ornaments_visible"


class TimerLineage(Enum):
    REPLY = "reply"
    ORNAMENT = "ornament"
    HINT = "hint"


class ConversationEvent(Enum):
    MOUNT = "mount"
    HINT_EXPIRED = "hint_expired"
    INPUT_CHANGED = "input_changed"
    SUBMIT = "submit"
    REPLY_DUE = "reply_due"
    OPEN_PANEL = "open_panel"
    ORNAMENTS_DUE = "ornaments_due"
    CLOSE_PANEL = "close_panel"
    RESET = "reset"
    DISPOSE = "dispose"


@dataclass(frozen=True)
class Message:
    id: str
    text: str
    sender: Sender
    timestamp: datetime

    def to_dict(self):
        return {
            "id": self.id,
            "text": self.text,
            "sender": self.sender.value,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class ConversationView:
    """Read-only projection of the conversation handed to the UI."""
    messages: tuple
    is_typing: bool
    pending_input: str
    hint_visible: bool
    ornaments_visible: bool
    panel_open: bool

    def to_dict(self):
        return {
            "messages": [m.to_dict() for m in self.messages],
            "is_typing": self.is_typing,
            "pending_input": self.pending_input,
            "hint_visible": self.hint_visible,
            "ornaments_visible": self.ornaments_visible,
            "panel_open": self.panel_open,
        }


def greeting_text(owner_name=None):
    name = owner_name or config.DEFAULT_ASSISTANT_OWNER
    return (
        f"Hi! 👋 I'm {name}'s AI assistant. Ask me anything about skills, "
        "experience, projects, or contact details."
    )

# ============================================================
# TIMER QUEUE
# ============================================================

@dataclass(order=True)
class TimerHandle:
    due: float
    seq: int
    callback: object = field(compare=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)
    queue: object = field(default=None, compare=False, repr=False)

    def cancel(self):
        if self.active and self.queue is not None:
            self.queue._live -= 1
        self.cancelled = True

    @property
    def active(self):
        return not (self.cancelled or self.fired)


class TimerQueue:
    """
    Cooperative single-threaded scheduler over virtual milliseconds.

    Nothing runs on its own: the owner moves time forward with `advance` or
    `advance_to`, and every callback that has come due runs in order of due
    time, ties broken by scheduling order. Callbacks may schedule further
    callbacks; those run within the same advance if they are already due.
    """

    def __init__(self, start=0.0):
        self._now = float(start)
        self._heap = []
        self._seq = itertools.count()
        self._live = 0

    @property
    def now(self):
        return self._now

    @property
    def pending(self):
        return self._live

    @property
    def next_due(self):
        self._drop_cancelled()
        return self._heap[0].due if self._heap else None

    def call_later(self, delay_ms, callback) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError(f"delay must be non-negative, got {delay_ms}")
        self._compact()
        handle = TimerHandle(self._now + delay_ms, next(self._seq), callback, queue=self)
        self._live += 1
        heapq.heappush(self._heap, handle)
        return handle

    def advance(self, ms):
        if ms < 0:
            raise ValueError(f"cannot advance by a negative amount ({ms})")
        self.advance_to(self._now + ms)

    def advance_to(self, when):
        """Run every callback due at or before `when`. Time never moves back."""
        while self._heap and self._heap[0].due <= when:
            handle = heapq.heappop(self._heap)
            if handle.cancelled:
                continue
            self._now = max(self._now, handle.due)
            handle.fired = True
            self._live -= 1
            handle.callback()
        self._now = max(self._now, when)

    def cancel_all(self):
        for handle in self._heap:
            handle.cancelled = True
        self._heap.clear()
        self._live = 0

    def _drop_cancelled(self):
        while self._heap and self._heap[0].cancelled:
            heapq.heappop(self._heap)

    def _compact(self):
        # Cancelled handles linger until popped; rebuild once they outnumber live ones
        self._drop_cancelled()
        if len(self._heap) > 2 * self._live:
            self._heap = [h for h in self._heap if not h.cancelled]
            heapq.heapify(self._heap)

    @property
    def heap_size(self):
        return len(self._heap)

# ============================================================
# CONVERSATION CONTROLLER
# ============================================================

class ConversationController:
    """
    State machine behind the chat widget.

    Owns the message log and three tagged states (reply, hint, panel). Every
    change goes through `_transition`; timers live in one slot per lineage so
    a new schedule always replaces the previous one. Pending replies are kept
    in a FIFO so answers land in submission order.
    """

    def __init__(self, knowledge_base, timers=None, owner_name=None, clock=None,
                 reply_delay_ms=config.REPLY_DELAY_MS,
                 ornament_delay_ms=config.ORNAMENT_DELAY_MS,
                 hint_duration_ms=config.HINT_DURATION_MS,
                 history=None, hint_dismissed=False):
        self.knowledge_base = knowledge_base
        self.timers = timers if timers is not None else TimerQueue()
        self.owner_name = owner_name
        self._clock = clock or datetime.now
        self.reply_delay_ms = reply_delay_ms
        self.ornament_delay_ms = ornament_delay_ms
        self.hint_duration_ms = hint_duration_ms

        self._messages = []
        self._reply_queue = deque()
        self._reply_state = ReplyState.IDLE
        self._hint_state = HintState.DISMISSED if hint_dismissed else HintState.PENDING
        self._panel_state = PanelState.CLOSED
        self._pending_input = ""
        # Set once the hint has been seen out or the panel opened; mount never revives it
        self._hint_spent = hint_dismissed
        self._disposed = False
        self._handles = {}
        self._listeners = []

        if history:
            self._messages = list(history)
        else:
            self._append(greeting_text(owner_name), Sender.BOT)

    # ------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------

    @property
    def view(self) -> ConversationView:
        return ConversationView(
            messages=tuple(self._messages),
            is_typing=self._reply_state is ReplyState.AWAITING_REPLY,
            pending_input=self._pending_input,
            hint_visible=self._hint_state is HintState.PENDING,
            ornaments_visible=self._panel_state is PanelState.ORNAMENTS_VISIBLE,
            panel_open=self._panel_state is not PanelState.CLOSED,
        )

    @property
    def reply_state(self):
        return self._reply_state

    @property
    def hint_state(self):
        return self._hint_state

    @property
    def panel_state(self):
        return self._panel_state

    @property
    def disposed(self):
        return self._disposed

    @property
    def has_pending_timers(self):
        return any(h.active for h in self._handles.values())

    def subscribe(self, listener):
        """Call `listener(view)` after every mutation. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    # ------------------------------------------------------------
    # UI events
    # ------------------------------------------------------------

    def mount(self):
        self._transition(ConversationEvent.MOUNT)

    def update_input(self, text):
        self._transition(ConversationEvent.INPUT_CHANGED, text=text or "")

    def submit(self, text=None):
        if text is None:
            text = self._pending_input
        self._transition(ConversationEvent.SUBMIT, text=text or "")

    def open_panel(self):
        self._transition(ConversationEvent.OPEN_PANEL)

    def close_panel(self):
        self._transition(ConversationEvent.CLOSE_PANEL)

    def reset(self):
        self._transition(ConversationEvent.RESET)

    def dispose(self):
        self._transition(ConversationEvent.DISPOSE)

    # ------------------------------------------------------------
    # Transition function
    # ------------------------------------------------------------

    def _transition(self, event, text=""):
        if self._disposed:
            logger.debug("Ignoring %s on disposed conversation", event.value)
            return

        if event is ConversationEvent.MOUNT:
            if self._hint_spent:
                return
            self._hint_state = HintState.PENDING
            self._schedule(TimerLineage.HINT, self.hint_duration_ms, ConversationEvent.HINT_EXPIRED)

        elif event is ConversationEvent.HINT_EXPIRED:
            self._hint_state = HintState.DISMISSED
            self._hint_spent = True

        elif event is ConversationEvent.INPUT_CHANGED:
            self._pending_input = text

        elif event is ConversationEvent.SUBMIT:
            query = text.strip()
            if not query:
                return
            self._append(query, Sender.USER)
            self._pending_input = ""
            self._reply_queue.append((query, self.timers.now))
            self._reply_state = ReplyState.AWAITING_REPLY
            if not self._lineage_active(TimerLineage.REPLY):
                self._schedule(TimerLineage.REPLY, self.reply_delay_ms, ConversationEvent.REPLY_DUE)

        elif event is ConversationEvent.REPLY_DUE:
            query, _ = self._reply_queue.popleft()
            self._append(find_best_match(query, self.knowledge_base), Sender.BOT)
            if self._reply_queue:
                _, submitted_at = self._reply_queue[0]
                delay = max(0.0, submitted_at + self.reply_delay_ms - self.timers.now)
                self._schedule(TimerLineage.REPLY, delay, ConversationEvent.REPLY_DUE)
            else:
                self._reply_state = ReplyState.IDLE

        elif event is ConversationEvent.OPEN_PANEL:
            self._hint_spent = True
            if self._hint_state is HintState.PENDING:
                self._hint_state = HintState.DISMISSED
                self._cancel(TimerLineage.HINT)
            self._panel_state = PanelState.ORNAMENTS_PENDING
            self._schedule(TimerLineage.ORNAMENT, self.ornament_delay_ms, ConversationEvent.ORNAMENTS_DUE)

        elif event is ConversationEvent.ORNAMENTS_DUE:
            if self._panel_state is PanelState.ORNAMENTS_PENDING:
                self._panel_state = PanelState.ORNAMENTS_VISIBLE

        elif event is ConversationEvent.CLOSE_PANEL:
            self._panel_state = PanelState.CLOSED
            self._cancel(TimerLineage.ORNAMENT)

        elif event is ConversationEvent.RESET:
            self._cancel(TimerLineage.REPLY)
            self._reply_queue.clear()
            self._reply_state = ReplyState.IDLE
            self._pending_input = ""
            self._messages = []
            self._append(greeting_text(self.owner_name), Sender.BOT)

        elif event is ConversationEvent.DISPOSE:
            for lineage in list(self._handles):
                self._cancel(lineage)
            self._reply_queue.clear()
            self._disposed = True
            return

        self._emit()

    # ------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------

    def _append(self, text, sender):
        self._messages.append(Message(
            id=uuid.uuid4().hex,
            text=text,
            sender=sender,
            timestamp=self._clock(),
        ))

    def _lineage_active(self, lineage):
        handle = self._handles.get(lineage)
        return handle is not None and handle.active

    def _schedule(self, lineage, delay_ms, event):
        self._cancel(lineage)

        def fire():
            self._handles.pop(lineage, None)
            self._transition(event)

        self._handles[lineage] = self.timers.call_later(delay_ms, fire)

    def _cancel(self, lineage):
        handle = self._handles.pop(lineage, None)
        if handle is not None:
            handle.cancel()

    def _emit(self):
        if not self._listeners:
            return
        view = self.view
        for listener in list(self._listeners):
            listener(view)
