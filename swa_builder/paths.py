"""Path-argument cleanup for values handed over by external build tools."""

from __future__ import annotations


def fix_quoted_path(raw: str | None) -> str:
    """Strip quoting artifacts from a path-like argument.

    MSBuild escapes the closing quote when a quoted directory ends with a
    backslash (``"C:\\out\\"``), so the value arrives with a stray ``"``.
    Quotes are never legitimate inside a path here, so all of them go.
    """
    if raw is None:
        return ""
    return raw.strip().replace('"', "").strip()
