import logging
from datetime import datetime

from dash import dcc, html, Input, Output, State, no_update
import dash_bootstrap_components as dbc
import plotly.graph_objects as go

import config
import data_loader as dl

logger = logging.getLogger(__name__)

# ============================================================
# STATIC CONTENT
# ============================================================

INTERESTS = [
    ("bi bi-cup-hot", "Coffee Enthusiast", "Exploring different brewing methods and coffee cultures"),
    ("bi bi-camera", "Photography", "Capturing moments through landscape and street photography"),
    ("bi bi-music-note-beamed", "Music Production", "Creating electronic music in my spare time"),
    ("bi bi-airplane", "Travel", "Visited 25+ countries and counting"),
    ("bi bi-book", "Reading", "Tech books, sci-fi novels, and philosophy"),
    ("bi bi-bicycle", "Fitness", "Regular gym sessions and outdoor activities"),
    ("bi bi-palette", "Digital Art", "Creating illustrations and UI experiments"),
    ("bi bi-controller", "Gaming", "Strategy games and indie titles"),
]

NAV_SECTIONS = [
    ("Home", "home"),
    ("Skills", "skills"),
    ("Experience", "experience"),
    ("Projects", "projects"),
    ("Education", "education"),
    ("Blog", "blog"),
    ("Contact", "contact"),
]

LINK_ICONS = {
    "github": "bi bi-github",
    "linkedin": "bi bi-linkedin",
    "twitter": "bi bi-twitter-x",
    "website": "bi bi-globe",
}

SENT_TEXT = "I'll get back to you soon."
SENT_DURATION_MS = 3000

# ============================================================
# HELPERS
# ============================================================

def _section(section_id, title, children, subtitle=None):
    return html.Section(
        [
            html.H2(title, className="section-title"),
            html.P(subtitle, className="lead text-muted") if subtitle else None,
            html.Div(children),
        ],
        id=section_id,
        className="portfolio-section py-5",
    )


def _empty(message):
    return html.P(message, className="text-muted fst-italic")


def get_initials(name):
    parts = [p for p in (name or "").split() if p]
    return "".join(p[0].upper() for p in parts[:2]) or "?"

# ============================================================
# SECTIONS
# ============================================================

def build_navigation(snapshot):
    brand = snapshot["hero"].get("name") or "Portfolio"
    return dbc.NavbarSimple(
        children=[dbc.NavItem(dbc.NavLink(label, href=f"#{anchor}", external_link=True))
                  for label, anchor in NAV_SECTIONS],
        brand=brand,
        brand_href="#home",
        color="dark",
        dark=True,
        sticky="top",
    )


def build_hero(snapshot):
    hero = snapshot["hero"]
    name = hero.get("name") or "Your Name"

    links = []
    for key, url in (hero.get("links") or {}).items():
        if not url:
            continue
        links.append(html.A(
            html.I(className=LINK_ICONS.get(key.lower(), "bi bi-link-45deg")),
            href=url, target="_blank", className="hero-link me-3", title=key,
        ))

    highlights = hero.get("highlights") or []

    return html.Section([
        dbc.Row([
            dbc.Col(
                html.Img(src=hero["image"], className="hero-avatar") if hero.get("image")
                else html.Div(get_initials(name), className="hero-avatar hero-initials"),
                width="auto",
            ),
            dbc.Col([
                html.H1(name, className="display-4"),
                html.P(hero.get("title") or "", className="lead"),
                html.Ul([html.Li(h) for h in highlights], className="hero-highlights") if highlights else None,
                html.Div([
                    html.A([html.I(className="bi bi-envelope me-2"), hero["email"]],
                           href=f"mailto:{hero['email']}", className="me-4") if hero.get("email") else None,
                    html.Span([html.I(className="bi bi-geo-alt me-2"), hero["location"]])
                    if hero.get("location") else None,
                ], className="mb-3"),
                html.Div(links),
            ]),
        ], className="align-items-center"),
    ], id="home", className="hero-section py-5")


def get_skills_chart(snapshot, theme="dark"):
    """Horizontal bar chart of skill levels (0-100)."""
    df = dl.get_skills_df(snapshot)
    fig = go.Figure()
    if not df.empty:
        df = df.iloc[::-1]
        fig.add_trace(go.Bar(
            x=df["level"],
            y=df["name"],
            orientation="h",
            marker_color=[config.GLOBAL_PALETTE[i % len(config.GLOBAL_PALETTE)] for i in range(len(df))],
            text=[f"{v:.0f}%" for v in df["level"]],
            textposition="outside",
            hovertemplate="%{y}: %{x:.0f}%<extra></extra>",
        ))
    fig.update_layout(
        template="plotly_dark" if theme == "dark" else "plotly_white",
        xaxis=dict(range=[0, 110], showgrid=False, title=None),
        yaxis=dict(title=None),
        margin=dict(l=10, r=10, t=10, b=10),
        height=max(220, 40 * len(df) + 40),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
    )
    return fig


def build_skills(snapshot):
    if dl.get_skills_df(snapshot).empty:
        body = _empty("Skills coming soon.")
    else:
        body = dcc.Graph(figure=get_skills_chart(snapshot), config={"displayModeBar": False})
    return _section("skills", "Skills", body)


def build_experience(snapshot):
    items = []
    for exp in snapshot["experiences"]:
        items.append(dbc.ListGroupItem([
            html.H5(exp.get("role") or "", className="mb-1"),
            html.Div([
                html.Span(exp.get("company") or "", className="fw-bold me-2"),
                html.Span(exp.get("period") or "", className="text-muted small"),
            ]),
            html.P(exp.get("description"), className="mb-0 mt-2") if exp.get("description") else None,
        ]))
    body = dbc.ListGroup(items, flush=True) if items else _empty("No experience listed yet.")
    return _section("experience", "Experience", body)


def build_projects(snapshot):
    cards = []
    for project in snapshot["projects"]:
        tags = project.get("tags") or []
        cards.append(dbc.Col(dbc.Card([
            dbc.CardBody([
                html.H5(project.get("title") or "Untitled", className="card-title"),
                html.P(project.get("description") or "", className="card-text"),
                html.Div([dbc.Badge(t, color="secondary", className="me-1") for t in tags]),
            ]),
            dbc.CardFooter(html.A("View project", href=project["link"], target="_blank"))
            if project.get("link") else None,
        ], className="h-100 shadow-sm"), md=6, lg=4, className="mb-4"))
    body = dbc.Row(cards) if cards else _empty("Projects coming soon.")
    return _section("projects", "Projects", body)


def build_achievements(snapshot):
    cards = []
    for a in snapshot["achievements"]:
        cards.append(dbc.Col(dbc.Card(dbc.CardBody([
            html.Div([
                html.I(className="bi bi-trophy-fill achievement-icon me-3"),
                html.Span(a.get("stats") or "", className="achievement-stat fs-3 fw-semibold"),
            ], className="d-flex align-items-center mb-3"),
            html.H5(a.get("title") or "", className="card-title"),
            html.P(a.get("description") or "", className="card-text small text-muted"),
        ]), className="h-100 shadow-sm"), md=6, lg=4, className="mb-4"))
    if not cards:
        return html.Div()
    return _section("achievements", "Achievements & Milestones", dbc.Row(cards),
                    subtitle="Key accomplishments throughout my career")


def _certification_cards(certifications):
    return dbc.Row([
        dbc.Col(dbc.Card(dbc.CardBody([
            html.I(className="bi bi-award fs-3 mb-2 d-block"),
            html.H6(cert.get("name") or "", className="mb-1"),
            html.P(cert.get("issuer") or "", className="small text-muted mb-2"),
            dbc.Badge(str(cert["year"]), color="light", text_color="dark", pill=True) if cert.get("year") else None,
        ]), className="h-100 shadow-sm"), md=4, className="mb-4")
        for cert in certifications
    ])


def build_education(snapshot):
    items = [
        html.Li([
            html.Strong(ed.get("degree") or ""),
            f" — {ed.get('institution') or ''}",
            html.Span(f" ({ed['year']})", className="text-muted") if ed.get("year") else None,
        ], className="mb-2")
        for ed in snapshot["education"]
    ]
    body = [html.Ul(items, className="list-unstyled") if items else _empty("No education listed yet.")]
    if snapshot["certifications"]:
        body += [
            html.H4([html.I(className="bi bi-patch-check me-2"), "Certifications"], className="mt-4 mb-3"),
            _certification_cards(snapshot["certifications"]),
        ]
    return _section("education", "Education & Certifications", body, subtitle="Continuous learning journey")


def build_testimonials(snapshot):
    cards = []
    for t in snapshot["testimonials"]:
        byline = ", ".join(x for x in (t.get("role"), t.get("company")) if x)
        cards.append(dbc.Col(dbc.Card(dbc.CardBody([
            html.Blockquote(t.get("text") or "", className="blockquote"),
            html.Footer([t.get("name") or "Anonymous", html.Span(f" · {byline}" if byline else "", className="text-muted")],
                        className="blockquote-footer mt-2"),
        ]), className="h-100"), md=6, className="mb-4"))
    if not cards:
        return html.Div()
    return _section("testimonials", "Testimonials", dbc.Row(cards))


def build_blog(snapshot):
    cards = []
    for post in snapshot["blogPosts"]:
        cards.append(dbc.Col(dbc.Card(dbc.CardBody([
            html.Small(post.get("date") or "", className="text-muted"),
            html.H5(post.get("title") or "", className="card-title mt-1"),
            html.P(post.get("excerpt") or "", className="card-text"),
            html.A("Read more", href=post["link"], target="_blank") if post.get("link") else None,
        ]), className="h-100"), md=4, className="mb-4"))
    body = dbc.Row(cards) if cards else _empty("No posts yet.")
    return _section("blog", "Blog", body)


def build_interests(snapshot):
    cards = [
        dbc.Col(html.Div([
            html.I(className=f"{icon} fs-3"),
            html.H6(title, className="mt-2 mb-1"),
            html.Small(description, className="text-muted"),
        ], className="interest-card text-center p-3"), xs=6, md=3, className="mb-3")
        for icon, title, description in INTERESTS
    ]
    return _section("interests", "Beyond Code", dbc.Row(cards))


def build_contact(snapshot):
    contact = snapshot["contact"]
    hero = snapshot["hero"]
    rows = []
    if contact.get("email"):
        rows.append(html.P([html.I(className="bi bi-envelope me-2"),
                            html.A(contact["email"], href=f"mailto:{contact['email']}")]))
    if contact.get("phone"):
        rows.append(html.P([html.I(className="bi bi-telephone me-2"), contact["phone"]]))
    location = contact.get("location") or hero.get("location")
    if location:
        rows.append(html.P([html.I(className="bi bi-geo-alt me-2"), location]))
    details = dbc.Card(dbc.CardBody(rows), className="shadow-sm") if rows else _empty("Contact details coming soon.")
    body = dbc.Row([
        dbc.Col(details, md=5, className="mb-4"),
        dbc.Col(build_contact_form(), md=7),
    ])
    return _section("contact", "Get In Touch", body, subtitle="Open to interesting conversations and opportunities.")


def build_contact_form():
    return dbc.Card(dbc.CardBody([
        dbc.Alert(
            [html.H5("Message Sent!", className="alert-heading"), html.P(SENT_TEXT, className="mb-0")],
            id="contact-sent",
            color="success",
            is_open=False,
            duration=SENT_DURATION_MS,
        ),
        dbc.Form([
            html.Div([
                dbc.Label("Name", html_for="contact-name"),
                dbc.Input(id="contact-name", type="text", placeholder="Your name", value=""),
            ], className="mb-3"),
            html.Div([
                dbc.Label("Email", html_for="contact-email"),
                dbc.Input(id="contact-email", type="email", placeholder="you@example.com", value=""),
            ], className="mb-3"),
            html.Div([
                dbc.Label("Message", html_for="contact-message"),
                dbc.Textarea(id="contact-message", placeholder="Tell me about your project...", rows=5, value=""),
            ], className="mb-3"),
            dbc.Button([html.I(className="bi bi-send me-2"), "Send Message"],
                       id="contact-submit", color="primary", n_clicks=0),
        ]),
    ]), className="shadow-sm")


def contact_form_result(name, email, message):
    """
    Outcome of a contact form submission: (sent, name, email, message).

    Nothing leaves the page. A complete form flips the local "sent" alert on
    and clears the fields; an incomplete one keeps what the visitor typed.
    """
    fields = (name, email, message)
    if all((f or "").strip() for f in fields):
        return True, "", "", ""
    return (False,) + fields


def build_footer(snapshot, year=None):
    year = year or datetime.now().year
    name = snapshot["hero"].get("name") or "You"
    return html.Footer(
        html.P(["Made with ", html.I(className="bi bi-heart-fill text-danger"), f" by {name} © {year}"],
               className="mb-0"),
        className="portfolio-footer text-center py-4",
    )

# ============================================================
# CALLBACKS
# ============================================================

def register_callbacks(app):

    @app.callback(
        [Output("contact-sent", "is_open"),
         Output("contact-name", "value"),
         Output("contact-email", "value"),
         Output("contact-message", "value")],
        Input("contact-submit", "n_clicks"),
        [State("contact-name", "value"),
         State("contact-email", "value"),
         State("contact-message", "value")],
        prevent_initial_call=True,
    )
    def submit_contact_form(n_clicks, name, email, message):
        sent, *values = contact_form_result(name, email, message)
        if not sent:
            return (no_update,) * 4
        logger.info("Contact form submitted by %s", name.strip())
        return (True, *values)
