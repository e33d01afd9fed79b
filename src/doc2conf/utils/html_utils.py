"""HTML and storage-markup escaping helpers."""

from __future__ import annotations

from html import escape as _html_escape


def escape_html(text: str, *, enabled: bool = True) -> str:
    """Escape ``& < > " '`` when enabled."""
    if not enabled:
        return text
    return _html_escape(text, quote=True)


def format_attributes(attrs: dict[str, object]) -> str:
    """Render an attribute mapping as `` name="value"`` pairs.

    Attributes whose value is ``None`` are skipped. Values are escaped.

    Examples
    --------
    >>> format_attributes({"colspan": 2, "rowspan": None})
    ' colspan="2"'

    """
    parts = []
    for name, value in attrs.items():
        if value is None:
            continue
        parts.append(f' {name}="{escape_html(str(value))}"')
    return "".join(parts)
