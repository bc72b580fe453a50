from nicegui import ui

BRAND_BLUE = '#2196F3'
ERROR_RED = '#d32f2f'
BG = '#f6f7fb'
CARD_BG = '#ffffff'
BORDER = '#e8edf3'


def change_colors():
    ui.colors(primary=BRAND_BLUE, negative=ERROR_RED)


def add_style():
    ui.add_head_html(f"""
        <style>
        html, body {{
        width: 100%;
        min-height: 100vh;
        font-family: Arial, sans-serif;
        background: {BG};
        color: #222;
        margin: 0;
        }}
        .container {{
        width: min(1100px, 96vw);
        margin: 24px auto;
        padding: 20px;
        background: {CARD_BG};
        border: 1px solid {BORDER};
        border-radius: 12px;
        box-shadow: 0 8px 20px rgba(15,23,42,.06);
        }}
        .search-container {{
        display: flex;
        gap: 10px;
        align-items: center;
        margin-bottom: 16px;
        }}
        .loading {{
        color: #555;
        font-style: italic;
        margin: 10px 0;
        }}
        .error {{
        color: {ERROR_RED};
        background: #fdecea;
        border-radius: 8px;
        padding: 10px 14px;
        margin: 10px 0;
        }}
        .header {{
        display: flex;
        flex-direction: column;
        gap: 6px;
        margin: 12px 0;
        }}
        .price-badge {{
        display: inline-block;
        background: {BRAND_BLUE};
        color: #fff;
        font-weight: 700;
        border-radius: 999px;
        padding: 4px 14px;
        width: fit-content;
        }}
        .suggestion {{
        color: #333;
        font-size: 1.05em;
        }}
        .chart-container {{
        width: 100%;
        min-height: 420px;
        }}
        </style>
    """)
