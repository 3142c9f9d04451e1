from roster_editor.config import EditorSettings


def test_defaults() -> None:
    settings = EditorSettings()

    assert settings.history_depth == 50
    assert (settings.preview_delay_ms, settings.history_delay_ms) == (300, 400)
    assert settings.message_timeout_ms == 3000
    assert settings.default_filename == "vehicles.json"


def test_environment_overrides_with_fallbacks() -> None:
    settings = EditorSettings.from_env(
        {
            "ROSTER_EDITOR_HISTORY_DEPTH": "5",
            "ROSTER_EDITOR_PREVIEW_DELAY_MS": "soon",
            "ROSTER_EDITOR_DEFAULT_FILENAME": "fleet.json",
        }
    )

    assert settings.history_depth == 5
    assert settings.preview_delay_ms == 300
    assert settings.default_filename == "fleet.json"


def test_history_depth_never_drops_below_one() -> None:
    assert EditorSettings.from_env({"ROSTER_EDITOR_HISTORY_DEPTH": "0"}).history_depth == 1
