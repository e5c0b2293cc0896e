from __future__ import annotations

from gistdb.identifier import format_identifier, marker_notice


def test_format_identifier_is_deterministic():
    assert format_identifier("my-app") == format_identifier("my-app")
    assert format_identifier("my-app") == "__my-app-db-from-github-gist-api.txt"


def test_format_identifier_distinguishes_apps():
    assert format_identifier("app-a") != format_identifier("app-b")


def test_marker_notice_substitutes_app_name():
    text = marker_notice("my-app")
    assert "my-app app" in text
    assert "<APP-NAME>" not in text
