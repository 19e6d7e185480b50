import dash_bootstrap_components as dbc
from dash import html

from components import sections

# ============================================================
# LAYOUT
# ============================================================

def layout(snapshot):
    """Single-page portfolio: every section in reading order."""
    return html.Div([
        sections.build_navigation(snapshot),
        dbc.Container([
            sections.build_hero(snapshot),
            sections.build_skills(snapshot),
            sections.build_experience(snapshot),
            sections.build_projects(snapshot),
            sections.build_achievements(snapshot),
            sections.build_education(snapshot),
            sections.build_testimonials(snapshot),
            sections.build_blog(snapshot),
            sections.build_interests(snapshot),
            sections.build_contact(snapshot),
        ], className="py-4"),
        sections.build_footer(snapshot),
    ])
