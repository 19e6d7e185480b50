import logging
import threading
import time
import uuid
from collections import OrderedDict

import dash
from dash import dcc, html, Input, Output, State, no_update
import dash_bootstrap_components as dbc

import config
import data_loader as dl
from conversation_engine import ConversationController, Sender, TimerQueue
from knowledge_base import KnowledgeBaseHolder

logger = logging.getLogger(__name__)

# ============================================================
# SESSION REGISTRY
# ============================================================

# One controller per browser session. Dash serves callbacks from several
# threads, so each session carries a lock that serialises its events.
_SESSIONS = {}
_SESSIONS_LOCK = threading.Lock()
_KB_HOLDER = None

# Message logs of sessions pruned while idle, keyed by session id. An idle tab
# is still open in the browser, so its next event revives the conversation
# rather than starting over.
_TOMBSTONES = OrderedDict()


class ChatSession:
    def __init__(self, session_id, controller, started):
        self.session_id = session_id
        self.controller = controller
        self.started = started
        self.last_seen = started
        self.lock = threading.Lock()

    def elapsed_ms(self, now):
        return max(0.0, (now - self.started) * 1000.0)

    def sync_clock(self, now):
        """Run every timer that has come due in wall-clock time."""
        self.last_seen = now
        self.controller.timers.advance_to(self.elapsed_ms(now))


def current_knowledge_base():
    """Knowledge base for the current snapshot, rebuilt only when it changes."""
    global _KB_HOLDER
    snapshot = dl.get_portfolio_snapshot()
    if _KB_HOLDER is None:
        _KB_HOLDER = KnowledgeBaseHolder(snapshot)
    else:
        _KB_HOLDER.refresh(snapshot)
    return _KB_HOLDER.knowledge_base


def _owner_name():
    return dl.get_portfolio_snapshot()["hero"].get("name")


def get_session(session_id, now=None) -> ChatSession:
    """Fetch the session, creating and mounting a controller on first use."""
    now = time.monotonic() if now is None else now
    with _SESSIONS_LOCK:
        session = _SESSIONS.get(session_id)
        if session is None:
            _prune_locked(now)
            history = _TOMBSTONES.pop(session_id, None)
            controller = ConversationController(
                current_knowledge_base(),
                timers=TimerQueue(),
                owner_name=_owner_name(),
                history=history,
                hint_dismissed=history is not None,
            )
            if history is None:
                controller.mount()
                logger.info("Chat session %s started (%d active)", session_id, len(_SESSIONS) + 1)
            else:
                logger.info("Chat session %s revived with %d messages", session_id, len(history))
            session = ChatSession(session_id, controller, now)
            _SESSIONS[session_id] = session
        return session


def end_session(session_id):
    with _SESSIONS_LOCK:
        session = _SESSIONS.pop(session_id, None)
    if session is not None:
        with session.lock:
            session.controller.dispose()
        logger.info("Chat session %s ended", session_id)


def prune_idle_sessions(now=None):
    now = time.monotonic() if now is None else now
    with _SESSIONS_LOCK:
        return _prune_locked(now)


def _prune_locked(now):
    idle = [
        sid for sid, s in _SESSIONS.items()
        if now - s.last_seen > config.SESSION_IDLE_TIMEOUT_S
    ]
    for sid in idle:
        session = _SESSIONS.pop(sid)
        with session.lock:
            session.controller.dispose()
            _TOMBSTONES[sid] = session.controller.view.messages
        _TOMBSTONES.move_to_end(sid)
        while len(_TOMBSTONES) > config.SESSION_TOMBSTONE_LIMIT:
            _TOMBSTONES.popitem(last=False)
        logger.info("Chat session %s disposed after being idle", sid)
    return len(idle)


def active_session_count():
    with _SESSIONS_LOCK:
        return len(_SESSIONS)

# ============================================================
# RENDERING
# ============================================================

USER_BUBBLE = {
    "alignSelf": "flex-end",
    "backgroundColor": "#4C6A92",
}
BOT_BUBBLE = {
    "alignSelf": "flex-start",
    "backgroundColor": "#444",
}
BUBBLE_BASE = {
    "color": "white",
    "padding": "8px 12px",
    "borderRadius": "12px",
    "maxWidth": "85%",
    "whiteSpace": "pre-wrap",
    "boxShadow": "0 1px 2px rgba(0,0,0,0.2)",
}


def render_messages(view):
    """Chat bubbles for every message in the view, oldest first."""
    display = []
    for msg in view.messages:
        is_user = msg.sender is Sender.USER
        style = dict(BUBBLE_BASE, **(USER_BUBBLE if is_user else BOT_BUBBLE))
        display.append(html.Div(
            [
                html.I(className="bi bi-person-fill me-2" if is_user else "bi bi-robot me-2"),
                msg.text,
            ],
            style=style,
            className=f"chat-message chat-message-{msg.sender.value}",
        ))
    return display


def hint_text(owner_name=None):
    return f"Want to know about {owner_name or 'me'}? Click here."


def _hidden_unless(visible, display="block"):
    return {"display": display if visible else "none"}


def _ornament_class(view):
    return "chat-ornaments visible" if view.ornaments_visible else "chat-ornaments"

# ============================================================
# COMPONENT LAYOUT
# ============================================================

def build_layout():
    """Widget markup. Called per page load so each visitor gets a new session id."""
    owner = _owner_name()
    return html.Div([
        # Transient onboarding hint
        html.Div(
            html.Div(hint_text(owner), className="small"),
            id="chat-hint",
            className="chat-hint shadow",
            role="status",
            style=_hidden_unless(False),
        ),

        # Floating Toggle Button
        dbc.Button(
            html.I(className="bi bi-chat-dots-fill"),
            id="btn-chatbot-toggle",
            color="primary",
            className="chat-toggle",
            n_clicks=0,
        ),

        # Offcanvas Panel
        dbc.Offcanvas(
            html.Div([
                # Header ornaments (revealed shortly after opening)
                html.Div(
                    [html.Span(className="orb orb-left"), html.Span(className="orb orb-right")],
                    id="chat-ornaments",
                    className="chat-ornaments",
                ),
                html.P("AI-powered assistant", className="text-muted small mb-2"),

                # Chat History Area
                html.Div(id="chat-history-display", className="chat-history"),

                # Typing Indicator
                html.Div(
                    [html.Span(className="dot"), html.Span(className="dot"), html.Span(className="dot")],
                    id="chat-typing-indicator",
                    className="chat-typing",
                    style=_hidden_unless(False, "flex"),
                ),

                # Input Area
                html.Div([
                    dbc.Input(
                        id="chat-input",
                        placeholder="Ask me anything...",
                        type="text",
                        autoComplete="off",
                        n_submit=0,
                    ),
                    dbc.Row([
                        dbc.Col(dbc.Button("Send", id="btn-chat-send", color="primary", className="w-100", n_clicks=0)),
                        dbc.Col(dbc.Button("Clear", id="btn-chat-clear", color="secondary", outline=True, className="w-100", n_clicks=0), width=4),
                    ], className="mt-2 g-2"),
                ]),
            ], className="chat-panel"),
            id="chatbot-offcanvas",
            title="Ask About Me",
            placement="bottom",
            is_open=False,
            className="chat-offcanvas",
        ),

        # Session clock: ticks only while the session has pending timers
        dcc.Interval(id="chat-tick", interval=config.CHAT_TICK_INTERVAL_MS, disabled=False),
        dcc.Store(id="chat-session-id", data=uuid.uuid4().hex),
    ])

# ============================================================
# CALLBACKS
# ============================================================

def handle_chat_event(session, trigger, panel_is_open=None, input_value=None, now=None):
    """
    Routes one UI event into the session's controller and returns the view.
    Pending timers are brought up to date before the event is applied.
    """
    now = time.monotonic() if now is None else now
    controller = session.controller
    with session.lock:
        session.sync_clock(now)

        if input_value is not None and input_value != controller.view.pending_input:
            controller.update_input(input_value)

        if trigger == "btn-chatbot-toggle":
            if controller.view.panel_open:
                controller.close_panel()
            else:
                controller.open_panel()
        elif trigger == "chatbot-offcanvas":
            # Closed from the panel itself (backdrop click or close button)
            if not panel_is_open and controller.view.panel_open:
                controller.close_panel()
        elif trigger in ("btn-chat-send", "chat-input"):
            controller.submit()
        elif trigger == "btn-chat-clear":
            controller.reset()

        return controller.view, controller.has_pending_timers


CLEARS_INPUT = ("btn-chat-send", "chat-input", "btn-chat-clear")


def chat_outputs(view, trigger, timers_pending):
    """Maps a view onto the widget callback's seven outputs."""
    input_out = "" if trigger in CLEARS_INPUT else no_update
    return (
        render_messages(view),
        _hidden_unless(view.is_typing, "flex"),
        input_out,
        view.panel_open,
        _hidden_unless(view.hint_visible and not view.panel_open),
        _ornament_class(view),
        not timers_pending,
    )


def register_callbacks(app):

    @app.callback(
        [Output("chat-history-display", "children"),
         Output("chat-typing-indicator", "style"),
         Output("chat-input", "value"),
         Output("chatbot-offcanvas", "is_open"),
         Output("chat-hint", "style"),
         Output("chat-ornaments", "className"),
         Output("chat-tick", "disabled")],
        [Input("btn-chatbot-toggle", "n_clicks"),
         Input("chatbot-offcanvas", "is_open"),
         Input("btn-chat-send", "n_clicks"),
         Input("chat-input", "n_submit"),
         Input("btn-chat-clear", "n_clicks"),
         Input("chat-tick", "n_intervals")],
        [State("chat-input", "value"),
         State("chat-session-id", "data")]
    )
    def process_chat_event(toggle_clicks, is_open, send_clicks, n_submit, clear_clicks, n_intervals,
                           text, session_id):
        if not session_id:
            return (no_update,) * 7

        ctx = dash.callback_context
        trigger = ctx.triggered_id if ctx.triggered else None

        session = get_session(session_id)
        view, timers_pending = handle_chat_event(session, trigger, panel_is_open=is_open, input_value=text)

        return chat_outputs(view, trigger, timers_pending)
