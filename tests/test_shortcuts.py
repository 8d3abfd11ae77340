from pathlib import Path

import pytest

from browser_session_tool.shortcuts import ShortcutError, load_shortcut


def test_load_shortcut_from_search_directory(tmp_path: Path):
    shortcuts_dir = tmp_path / ".browser-session" / "shortcuts"
    shortcuts_dir.mkdir(parents=True)
    (shortcuts_dir / "login.yaml").write_text(
        "\n".join(
            [
                "commands:",
                "  - type: navigate",
                "    url: ${{HOST}}/login",
                "  - type: fill",
                "    selector: '#login_field'",
                "    value: ${{USER}}",
            ]
        )
    )

    commands = load_shortcut(Path("login.yaml"), [shortcuts_dir, tmp_path])

    assert commands == [
        {"type": "navigate", "url": "${{HOST}}/login"},
        {"type": "fill", "selector": "#login_field", "value": "${{USER}}"},
    ]


def test_load_shortcut_missing_file(tmp_path: Path):
    with pytest.raises(ShortcutError, match="not found"):
        load_shortcut(Path("absent.yaml"), [tmp_path])


def test_load_shortcut_requires_commands_list(tmp_path: Path):
    path = tmp_path / "broken.yaml"
    path.write_text("steps:\n  - type: navigate\n")

    with pytest.raises(ShortcutError, match='"commands" array'):
        load_shortcut(path)


def test_load_shortcut_rejects_invalid_yaml(tmp_path: Path):
    path = tmp_path / "invalid.yaml"
    path.write_text("commands: [unclosed\n")

    with pytest.raises(ShortcutError, match="Failed to parse"):
        load_shortcut(path)
