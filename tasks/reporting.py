# tasks/reporting.py

from collections import defaultdict
from datetime import datetime
from html import escape

from config import REPORT_DIR

REPORT_STYLE = """
        body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif; line-height: 1.6; margin: 0; background-color: #f9f9f9; color: #333; }
        .container { max-width: 900px; margin: 2em auto; background: white; padding: 2em; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
        .summary, .results-section { border: 1px solid #ddd; padding: 1.5em; margin-bottom: 2em; border-radius: 8px; }
        h1, h2, h3 { color: #333; } h2 { border-bottom: 1px solid #eee; padding-bottom: 0.5em;}
        code { background-color: #eee; padding: 0.2em 0.4em; border-radius: 3px; font-size: 0.9em; word-break: break-all; }
        .warning-item b { color: #9d2b28; }
        .footer { text-align: center; color: #777; font-size: 0.9em; margin-top: 2em; }
"""

def generate_html_report(report_title: str, summary_items: dict, sections: list, output_filename: str):
    """
    Writes a self-contained HTML report to REPORT_DIR.
    `sections` is a list of {'title': ..., 'content': <html>} dictionaries.
    """
    summary_html = "<h2>Summary</h2><ul>"
    for key, value in summary_items.items():
        style = ' style="color: #c0392b;"' if "Failed" in key or "Missing" in key else ""
        summary_html += f'<li class="summary-item"{style}>{escape(key)}: <strong>{value}</strong></li>'
    summary_html += "</ul>"

    sections_html = ""
    for section in sections:
        sections_html += f"<div class='results-section'><h2>{escape(section['title'])}</h2>"
        sections_html += section['content']
        sections_html += "</div>"

    final_html = f"""
    <!DOCTYPE html><html lang="en"><head><meta charset="UTF-8"><title>{escape(report_title)}</title>
    <style>{REPORT_STYLE}</style></head>
    <body><div class="container">
        <h1>{escape(report_title)}</h1>
        <div class="summary">{summary_html}</div>
        {sections_html}
        <div class="footer"><p>Report generated on {datetime.now().strftime("%Y-%m-%d %H:%M:%S")}</p></div>
    </div></body></html>"""

    REPORT_DIR.mkdir(parents=True, exist_ok=True)
    report_path = REPORT_DIR / output_filename
    with open(report_path, 'w', encoding='utf-8') as f:
        f.write(final_html)

    print(f"\n✅ Report successfully generated: {report_path.resolve()}")
    return report_path

def group_warnings_by_stage(warnings) -> dict:
    grouped = defaultdict(list)
    for warning in warnings:
        grouped[warning.stage].append(warning)
    return dict(sorted(grouped.items()))

def warning_sections(warnings) -> list:
    """One report section per stage listing every warning raised in it."""
    sections = []
    for stage, items in group_warnings_by_stage(warnings).items():
        rows = "".join(
            f"<li><b>{escape(w.identity)}:</b> {escape(w.cause)}</li>" for w in items
        )
        sections.append({'title': f"Warnings: {stage} ({len(items)})", 'content': f"<ul class='warning-item'>{rows}</ul>"})
    return sections
