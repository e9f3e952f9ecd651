"""Sample menu tree shared by the tests."""

from typing import Any

# Roots A, B, C. B has three children; C has one child with a grandchild.
MENU_TREE: list[dict[str, Any]] = [
    {"id": "A", "position": 0, "label": "Home", "type": "link"},
    {
        "id": "B",
        "position": 1,
        "label": "Shop",
        "type": "category",
        "children": [
            {"id": "B1", "position": 0, "label": "Shoes"},
            {"id": "B2", "position": 1, "label": "Shirts"},
            {"id": "B3", "position": 2, "label": "Hats"},
        ],
    },
    {
        "id": "C",
        "position": 2,
        "label": "About",
        "children": [
            {
                "id": "C1",
                "position": 0,
                "label": "Team",
                "children": [{"id": "C1a", "position": 0, "label": "Founders"}],
            },
        ],
    },
]
