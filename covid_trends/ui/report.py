"""Export the run's figures as one self-contained HTML document."""

import logging
from datetime import datetime
from html import escape
from pathlib import Path
from typing import Mapping

import plotly.graph_objects as go


logger = logging.getLogger(__name__)


def export_report(
    figures: Mapping[str, go.Figure],
    output_path: Path | str,
    title: str = "COVID-19 Trends",
) -> Path:
    """
    Write every figure into a single HTML file.

    Args:
        figures: Section heading -> figure, rendered in mapping order
        output_path: Where to save the HTML file
        title: Document title

    Returns:
        Path to the generated file
    """
    sections = []
    # plotly.js is inlined once, in the first figure
    for i, (heading, fig) in enumerate(figures.items()):
        chart = fig.to_html(full_html=False, include_plotlyjs=(i == 0))
        sections.append(f"""
    <section>
        <h2>{escape(heading)}</h2>
        {chart}
    </section>""")

    html = f'''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <title>{escape(title)}</title>
    <style>
        body {{ font-family: -apple-system, "Segoe UI", sans-serif; max-width: 1100px; margin: 2rem auto; color: #0f172a; }}
        h1 {{ font-size: 1.6rem; margin-bottom: 0.25rem; }}
        h2 {{ font-size: 1.1rem; color: #334155; border-top: 1px solid #e2e8f0; padding-top: 1rem; }}
        .generated {{ color: #64748b; font-size: 0.8rem; }}
    </style>
</head>
<body>
    <h1>{escape(title)}</h1>
    <div class="generated">Generated {datetime.now().strftime("%Y-%m-%d %H:%M")}</div>
    {"".join(sections)}
</body>
</html>'''

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")

    logger.info(f"Report written to {output_path} ({output_path.stat().st_size / 1024:.1f} KB)")
    return output_path
