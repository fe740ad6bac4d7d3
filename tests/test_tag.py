import pytest

from releaser.tag import Tag


def test_value_returns_name():
    assert Tag("1.2.3").value() == "1.2.3"


@pytest.mark.parametrize(
    ("name", "expected"),
    [("v1.0.0", "1.0.0"), ("1.0.0", "1.0.0"), ("vv2", "v2"), ("", "")],
)
def test_strip_v_prefix(name, expected):
    assert Tag(name).strip_v_prefix() == expected


def test_default_tag_is_empty():
    assert Tag().value() == ""


def test_tags_compare_by_name():
    assert Tag("0.1.0") == Tag("0.1.0")
    assert Tag("0.1.0") != Tag("0.2.0")


def test_tag_is_immutable():
    tag = Tag("1.0.0")
    with pytest.raises(AttributeError):
        tag.name = "2.0.0"
    assert tag.value() == "1.0.0"