"""Text and HTML fragments shown beside the map."""
import html
from typing import Iterable

from quiz_dataset import GeoEntity
from quiz_session import HistoryEntry
from quiz_translations import Language, Translator


def format_coordinates(entity: GeoEntity) -> str:
    lat, lng = entity.coordinates
    return f"{abs(lat):.2f}°{'N' if lat >= 0 else 'S'}, {abs(lng):.2f}°{'E' if lng >= 0 else 'W'}"


def format_number(value: float) -> str:
    return f"{int(value):,}" if value else "N/A"


def rolling_history_html(
    history: Iterable[HistoryEntry], total_answered: int, language: Language, translator: Translator
) -> str:
    """Small bar list of the recent answers, oldest first.

    Typed answers are user input and are escaped before they go into the markup.
    """
    history = list(history)
    first_number = total_answered - len(history) + 1
    rows = []
    for offset, entry in enumerate(history):
        color = "#22c55e" if entry.was_correct else "#ef4444"
        label = translator.ui(language, "right") if entry.was_correct else translator.ui(language, "wrong")
        detail = ""
        if not entry.was_correct and entry.submitted_text:
            submitted = html.escape(entry.submitted_text)
            expected = html.escape(entry.expected_text or "")
            detail = f" <span style='color:#94a3b8;'>({submitted} → {expected})</span>"
        rows.append(
            f"<div style='display:flex;align-items:center;gap:8px;margin:2px 0;'>"
            f"  <div style='font-size:11px;color:#94a3b8;width:24px;'>{first_number + offset}</div>"
            f"  <div style='width:14px;height:14px;border-radius:3px;background:{color};'></div>"
            f"  <div style='font-size:12px;color:#475569;'>{html.escape(label)}{detail}</div>"
            f"</div>"
        )
    return (
        "<div style='font-family:Inter, Segoe UI, Roboto, Helvetica, Arial, sans-serif;'>"
        + "".join(rows)
        + "</div>"
    )
