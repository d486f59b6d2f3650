"""ui.ui_theme

Theme constants and CSS for the match explorer.
"""

ACCENT = "#2F6FEB"
REJECTED = "#9A9A9A"


def css() -> str:
    return f"""
    <style>
    .kbqa-header {{
        border-bottom: 1px solid #e6e6e6;
        padding: 8px 12px;
        display:flex;
        align-items:center;
        gap:12px;
    }}
    .kbqa-badge {{
        display:inline-block;
        padding: 2px 8px;
        border-radius: 999px;
        background: {ACCENT};
        color: white;
        font-size: 12px;
    }}
    .kbqa-muted {{
        color: {REJECTED};
        font-size: 13px;
    }}
    </style>
    """
