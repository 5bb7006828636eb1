import pytest

from vimscape.batch import aggregate, merge_deltas


@pytest.mark.parametrize(
    "keystrokes,expected",
    (
        ("", {}),
        ("q", {}),
        ("5jdd", {"VerticalNavigation": 5, "TextManipulation": 1}),
        ("jjjk", {"VerticalNavigation": 4}),
        ("3w<C-D>", {"HorizontalNavigation": 15, "VerticalNavigation": 5}),
        (":w|enter|:q|escape|", {"Saving": 1, "Finesse": 10}),
        ("/foo|enter|:help|space|gg|enter|", {"Search": 1, "Knowledge": 1}),
        ("xyz", {"TextManipulation": 1}),
        ("%<C-W>vzz", {"CodeFlow": 10, "WindowManagement": 10, "CameraMovement": 10}),
        ("yyp.u", {"Clipboard": 30, "Finesse": 10}),
        ("<C-W><C-W>", {"WindowManagement": 10}),
        ("g<C-U>", {}),
    ),
)
def test_aggregate(keystrokes, expected):
    assert aggregate(keystrokes) == expected


def test_merge_deltas():
    merged = merge_deltas({"Search": 1, "Saving": 10}, {}, {"Search": 4})
    assert merged == {"Search": 5, "Saving": 10}
    assert merge_deltas() == {}
