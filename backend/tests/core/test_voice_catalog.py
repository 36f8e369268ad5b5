from adreel.core.voice_catalog import DEFAULT_VOICE, RECOMMENDED_VOICES, resolve_voice_id


def test_default_voice_is_sarah():
    assert DEFAULT_VOICE == "sarah"
    assert resolve_voice_id(None) == "EXAVITQu4vr4xnSDxMaL"
    assert resolve_voice_id("") == "EXAVITQu4vr4xnSDxMaL"


def test_short_names_are_case_insensitive():
    assert resolve_voice_id("George") == RECOMMENDED_VOICES["george"]["id"]


def test_unknown_value_is_treated_as_raw_id():
    assert resolve_voice_id(" customVoice123 ") == "customVoice123"


def test_catalog_shape():
    for entry in RECOMMENDED_VOICES.values():
        assert {"id", "name", "style"} <= entry.keys()
