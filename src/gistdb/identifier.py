from __future__ import annotations

from .constants import APP_NAME_PLACEHOLDER, MARKER_NOTICE, MARKER_PREFIX, MARKER_SUFFIX


def format_identifier(app_identifier: str) -> str:
    """Return the reserved marker filename for `app_identifier`.

    The same app name always maps to the same filename, so a later run finds
    the gist created by an earlier one.
    """
    return f"{MARKER_PREFIX}{app_identifier}{MARKER_SUFFIX}"


def marker_notice(app_identifier: str) -> str:
    return MARKER_NOTICE.replace(APP_NAME_PLACEHOLDER, app_identifier)
