import logging

import dash
from dash import html
import dash_bootstrap_components as dbc

import config
import data_loader as dl

# Import Components
from components import chatbot, sections

# Import Pages
from pages import home

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize App
app = dash.Dash(
    __name__,
    external_stylesheets=[dbc.themes.CYBORG, dbc.icons.BOOTSTRAP],
    suppress_callback_exceptions=True,
    title="Portfolio",
)
server = app.server

# Initialize Data Cache
dl.get_portfolio_snapshot()
logger.info("Initial data load complete.")

# ============================================================
# LAYOUT
# ============================================================

def serve_layout():
    """Built per page load so each visitor gets a fresh chat session."""
    current = dl.get_portfolio_snapshot()
    return html.Div(
        [
            home.layout(current),
            chatbot.build_layout(),
        ],
        id="main-container",
        **{"data-theme": "dark"}
    )


app.layout = serve_layout

# ============================================================
# CALLBACKS
# ============================================================

chatbot.register_callbacks(app)
sections.register_callbacks(app)

if __name__ == "__main__":
    app.run(debug=True)
