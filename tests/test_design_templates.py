import pytest

from app.design_templates import STYLE_THEMES, AdStyle, available_style_ids, list_styles
from app.errors import InvalidStyleError


def test_wire_ids():
    assert AdStyle.from_id("Style1") is AdStyle.OVERLAY
    assert AdStyle.from_id("Style2") is AdStyle.WAVE
    assert AdStyle.from_id("Style3") is AdStyle.SIDE_PANEL


@pytest.mark.parametrize("alias,expected", [
    ("overlay", AdStyle.OVERLAY),
    ("Wave", AdStyle.WAVE),
    ("side-panel", AdStyle.SIDE_PANEL),
    ("SidePanel", AdStyle.SIDE_PANEL),
])
def test_name_aliases(alias, expected):
    assert AdStyle.from_id(alias) is expected


@pytest.mark.parametrize("bad", ["Style4", "style9", "", "../../etc/passwd"])
def test_unknown_style_raises(bad):
    with pytest.raises(InvalidStyleError) as exc:
        AdStyle.from_id(bad)
    assert exc.value.available == ["Style1", "Style2", "Style3"]


def test_every_style_has_a_theme():
    assert set(STYLE_THEMES) == set(AdStyle)
    assert available_style_ids() == ["Style1", "Style2", "Style3"]
    assert [s["id"] for s in list_styles()] == ["Style1", "Style2", "Style3"]


def test_emoji_policies():
    assert STYLE_THEMES[AdStyle.OVERLAY]["emoji_policy"] == "substitute"
    assert STYLE_THEMES[AdStyle.WAVE]["emoji_policy"] == "substitute"
    assert STYLE_THEMES[AdStyle.SIDE_PANEL]["emoji_policy"] == "strip"
