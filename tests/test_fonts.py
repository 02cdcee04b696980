from app.services.fonts import FONT_FILES, FontConfig, find_emoji_font


def test_builtin_config_measures_text():
    fonts = FontConfig.builtin()
    for weight, style in FONT_FILES:
        font = fonts.font(weight, style, 24)
        assert font.getlength("Shop Now") > 0
    assert fonts.describe()["family"] == "builtin"


def test_bigger_size_measures_wider():
    fonts = FontConfig.builtin()
    assert fonts.font("bold", "normal", 40).getlength("Sale") > fonts.font("bold", "normal", 10).getlength("Sale")


def test_missing_font_dir_falls_back(tmp_path):
    fonts = FontConfig.load(str(tmp_path / "nope"), emoji_font_paths=[])
    assert fonts.fallback_used is True
    assert set(fonts.faces) == set(FONT_FILES)
    # every face still yields a usable font
    assert fonts.font("regular", "italic", 18).getlength("abc") > 0


def test_unusable_font_file_falls_back(tmp_path):
    for name in FONT_FILES.values():
        (tmp_path / name).write_bytes(b"not a font")
    fonts = FontConfig.load(str(tmp_path))
    assert fonts.fallback_used is True
    assert all(str(tmp_path) not in (face or "") for face in fonts.faces.values())


def test_unregistered_combination_uses_nearest_face():
    fonts = FontConfig.builtin()
    assert fonts.font("bold", "italic", 12).getlength("x") > 0


def test_find_emoji_font(tmp_path):
    emoji = tmp_path / "NotoColorEmoji.ttf"
    emoji.write_bytes(b"")
    assert find_emoji_font([str(tmp_path / "missing.ttf"), str(emoji)]) == str(emoji)
    assert find_emoji_font([str(tmp_path / "missing.ttf")]) is None
