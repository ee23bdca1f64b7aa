"""User snippet composition around a G-code body.

Snippets are small G-code templates the user attaches to lifecycle hooks
(before everything, before the coating path, after it, ...). Templates
may reference job values with ``{{dotted.path}}`` placeholders:

    G21 ; units: {{unit}}
    G0 Z{{safeHeight}}
    ; bed {{workArea.width}} x {{workArea.height}}
"""

import re
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from pcbcoat.config.settings import GcodeSettings
from pcbcoat.core.emitter import format_number
from pcbcoat.domain import GCodeHook, GCodeSnippet

PLACEHOLDER = re.compile(r"\{\{\s*([a-zA-Z0-9_.]+)\s*}}")


def _lookup(variables: Mapping[str, Any], path: str) -> Any:
    value: Any = variables
    for key in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def render_template(template: str, variables: Mapping[str, Any]) -> str:
    """Substitute ``{{dotted.path}}`` placeholders.

    Args:
        template: Snippet text
        variables: Nested mapping of job values

    Returns:
        Rendered text; unresolvable placeholders become empty strings

    Examples:
        >>> render_template("G0 Z{{ safeHeight }}", {"safeHeight": 80})
        'G0 Z80'
        >>> render_template("{{workArea.depth}}", {"workArea": {"width": 200}})
        ''
    """
    if not template:
        return ""

    def substitute(match: re.Match[str]) -> str:
        value = _lookup(variables, match.group(1))
        return "" if value is None else _render_value(value)

    return PLACEHOLDER.sub(substitute, template)


def emit(
    snippets: Sequence[GCodeSnippet],
    hook: GCodeHook,
    variables: Mapping[str, Any],
) -> str:
    """Render the enabled snippets of one hook.

    Args:
        snippets: All user snippets
        hook: Hook to render
        variables: Template variables

    Returns:
        Rendered snippets in ascending ``order``, one per line, with a
        trailing newline; ``""`` when nothing renders
    """
    selected = sorted(
        (snippet for snippet in snippets if snippet.enabled and snippet.hook is hook),
        key=lambda snippet: snippet.order,
    )
    rendered = [render_template(snippet.template, variables).strip() for snippet in selected]
    rendered = [text for text in rendered if text]
    if not rendered:
        return ""
    return "\n".join(rendered) + "\n"


def iso_timestamp(now: datetime | None = None) -> str:
    """UTC timestamp in the ``2024-05-01T12:00:00.000Z`` form."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def build_variables(settings: GcodeSettings, now: datetime | None = None) -> dict[str, Any]:
    """Job-level template variables."""
    return {
        "unit": settings.unit.value,
        "workArea": {
            "width": settings.work_area.width,
            "height": settings.work_area.height,
        },
        "safeHeight": settings.safe_height,
        "time": iso_timestamp(now),
    }


def build_path_variables(base: Mapping[str, Any]) -> dict[str, Any]:
    """Path-level template variables; the whole body counts as one path."""
    return {
        **base,
        "pathIndex": 1,
        "pathCount": 1,
        "shapeName": "Coating",
        "shapeType": "coating",
    }


def compose(
    body: str,
    snippets: Sequence[GCodeSnippet],
    settings: GcodeSettings,
    now: datetime | None = None,
    *,
    job_hooks: bool = False,
) -> str:
    """Wrap a G-code body with the user's snippets.

    Hook order: beforeAll, beforeJob, beforePath, body, afterPath,
    afterJob, afterAll. The beforeJob and afterJob hooks are only emitted
    when ``job_hooks`` is set; the editor's own export skips them.

    Args:
        body: Generated G-code body
        snippets: User snippets
        settings: Coating settings supplying template variables
        now: Timestamp for the ``time`` variable
        job_hooks: Also emit beforeJob and afterJob snippets

    Returns:
        Final G-code ending with exactly one newline
    """
    job = build_variables(settings, now)
    path = build_path_variables(job)

    parts = [
        emit(snippets, GCodeHook.BEFORE_ALL, job),
        emit(snippets, GCodeHook.BEFORE_JOB, job) if job_hooks else "",
        emit(snippets, GCodeHook.BEFORE_PATH, path),
        body.strip() + "\n",
        emit(snippets, GCodeHook.AFTER_PATH, path),
        emit(snippets, GCodeHook.AFTER_JOB, job) if job_hooks else "",
        emit(snippets, GCodeHook.AFTER_ALL, job),
    ]
    return "".join(parts).rstrip() + "\n"
