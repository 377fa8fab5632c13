"""
Built-in tile catalog.

Plain JSON-shaped data, parsed once by tiles.definitions(). Edges are
numbered 0-5 clockwise from the top edge of a flat-top hex; a one-element
path runs from that edge into the tile center.
"""

# Revenue bubble above-left of a two-slot city
_BIG_CITY_REVENUE = {"corner": 4, "scale": 0.62}

BUILTIN_TILES = {
    # === Yellow ===
    "3": {
        "color": "yellow",
        "paths": [[0, 1]],
        "stops": [{"position": {"corner": 5, "scale": 0.5}, "revenue": 10}],
    },
    "4": {
        "color": "yellow",
        "paths": [[0, 3]],
        "stops": [{"revenue": 10}],
    },
    "5": {
        "color": "yellow",
        "paths": [[0], [1]],
        "cities": [{"circles": 1, "revenue": 20}],
        "stops": [{"city": 0, "revenue": 20}],
    },
    "6": {
        "color": "yellow",
        "paths": [[0], [2]],
        "cities": [{"circles": 1, "revenue": 20}],
        "stops": [{"city": 0, "revenue": 20}],
    },
    "7": {"color": "yellow", "paths": [[0, 1]]},
    "8": {"color": "yellow", "paths": [[0, 2]]},
    "9": {"color": "yellow", "paths": [[0, 3]]},
    "57": {
        "color": "yellow",
        "paths": [[0], [3]],
        "cities": [{"circles": 1, "revenue": 20}],
        "stops": [{"city": 0, "revenue": 20}],
    },
    "58": {
        "color": "yellow",
        "paths": [[0, 2]],
        "stops": [{"position": {"edge": 1, "scale": 0.268}, "revenue": 10}],
    },

    # === Green ===
    "14": {
        "color": "green",
        "paths": [[0], [1], [3], [4]],
        "cities": [{"circles": 2, "revenue": 30}],
        "stops": [{"city": 0, "revenue": 30, "revenue_offset": _BIG_CITY_REVENUE}],
    },
    "15": {
        "color": "green",
        "paths": [[0], [3], [4], [5]],
        "cities": [{"circles": 2, "revenue": 30}],
        "stops": [{"city": 0, "revenue": 30, "revenue_offset": _BIG_CITY_REVENUE}],
    },
    "16": {"color": "green", "paths": [[0, 2], [1, 3]]},
    "18": {"color": "green", "paths": [[0, 3], [1, 2]]},
    "19": {"color": "green", "paths": [[0, 3], [2, 4]]},
    "20": {"color": "green", "paths": [[0, 3], [1, 4]]},
    "23": {"color": "green", "paths": [[0, 3], [0, 4]]},
    "24": {"color": "green", "paths": [[0, 3], [0, 2]]},
    "25": {"color": "green", "paths": [[0, 2], [0, 4]]},
    "26": {"color": "green", "paths": [[0, 3], [0, 5]]},
    "27": {"color": "green", "paths": [[0, 3], [0, 1]]},
    "28": {"color": "green", "paths": [[0, 4], [0, 5]]},
    "29": {"color": "green", "paths": [[0, 2], [0, 1]]},
    "80": {"color": "green", "paths": [[0], [1], [2]], "lawson": True},
    "81": {"color": "green", "paths": [[0], [2], [4]], "lawson": True},
    "82": {"color": "green", "paths": [[0], [1], [3]], "lawson": True},
    "83": {"color": "green", "paths": [[0], [3], [5]], "lawson": True},

    # === Brown ===
    "39": {"color": "brown", "paths": [[0, 2], [0, 1], [1, 2]]},
    "40": {"color": "brown", "paths": [[0, 2], [2, 4], [4, 0]]},
    "41": {"color": "brown", "paths": [[0, 3], [0, 1], [1, 3]]},
    "42": {"color": "brown", "paths": [[0, 3], [0, 5], [5, 3]]},
    "43": {"color": "brown", "paths": [[0, 3], [0, 2], [1, 3], [1, 2]]},
    "44": {"color": "brown", "paths": [[0, 3], [1, 4], [0, 1], [3, 4]]},
    "63": {
        "color": "brown",
        "paths": [[0], [1], [2], [3], [4], [5]],
        "cities": [{"circles": 2, "revenue": 40}],
        "stops": [{"city": 0, "revenue": 40, "revenue_offset": _BIG_CITY_REVENUE}],
    },
    "544": {"color": "brown", "paths": [[0], [1], [3], [4]], "lawson": True},
    "545": {"color": "brown", "paths": [[0], [2], [3], [5]], "lawson": True},
    "546": {"color": "brown", "paths": [[0], [1], [2], [3]], "lawson": True},

    # === Preprinted map hexes ===
    "river": {
        "color": "ground",
        "terrain": {"kind": "water", "cost": 80},
        "text_spec": [],
    },
    "mountain": {
        "color": "ground",
        "terrain": {"kind": "mountain", "cost": 120},
        "text_spec": [],
    },
    "offboard": {
        "color": "red",
        "paths": [[2], [3]],
        "arrows": [{"edge": 2}, {"edge": 3}],
        "revenue_track": {
            "position": {"edge": 0, "scale": 0.45},
            "values": [["yellow", 30], ["brown", 50]],
        },
        "text_spec": [{"id": "name", "anchor": "middle", "position": {"edge": 5, "scale": 0.3}, "size": "70%"}],
    },
}
