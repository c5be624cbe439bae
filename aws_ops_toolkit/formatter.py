"""
Output formatting: text tables and structured JSON
"""

import json

EMPTY_TABLE = "(no records)"


def frame_records(frame):
    """DataFrame rows as plain JSON-compatible dicts"""
    return json.loads(frame.to_json(orient="records", date_format="iso"))


def render_table(frame, title=None, footer=None):
    """Render a DataFrame as a fixed-width table"""
    lines = []
    if title:
        lines += [title, "=" * 60]
    lines.append(EMPTY_TABLE if frame.empty else frame.to_string(index=False))
    if footer:
        lines += ["", footer]
    return "\n".join(lines)


def render_structured(frame, extra=None, key="records"):
    """
    Render a DataFrame as JSON

    Without `extra` the output is a list of records; with it, a single
    object holding `extra` plus the records under `key`.
    """
    records = frame_records(frame)
    if extra is None:
        payload = records
    else:
        payload = {**extra, key: records}
    return json.dumps(payload, indent=2)


def render(frame, output_format, title=None, footer=None, extra=None, key="records"):
    if output_format == "structured":
        return render_structured(frame, extra=extra, key=key)
    return render_table(frame, title=title, footer=footer)
