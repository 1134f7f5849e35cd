from __future__ import annotations


TABLE_TITLES: list[str] = [
    "Actors",
    "Vectors",
    "Stride+",
    "Assets",
    "Adversarial actions",
    "Local Objectives",
    "CIANA",
    "Strategic Objectives",
]

# Position in TABLE_TITLES is the table index used by links.
TABLE_ROLES: list[str] = [
    "actor",
    "vector",
    "stride",
    "asset",
    "adversarialAction",
    "localObjective",
    "ciana",
    "strategicObjective",
]

TABLE_PRESETS: dict[str, list[str]] = {
    "Actors": [
        "Nation State",
        "Organised Crime Group",
        "Malicious User",
        "Malicious Admin",
        "Accidental User",
        "Accidental Admin",
        "Hacker",
        "Terrorist",
        "Hactavist",
        "Force majeure",
    ],
    "Stride+": [
        "Spoofing",
        "Tampering",
        "Repudiation",
        "Information Disclosure",
        "Denial of Service",
        "Elevation of Privilege",
        "Bypass",
    ],
    "Local Objectives": [
        "Data Theft",
        "Tampering",
        "Denial Of Service",
        "Spoofing",
        "As a precursor",
    ],
    "CIANA": [
        "Confidentiality",
        "Integrity",
        "Availability",
        "Non-repudiation",
        "Authentication",
    ],
}

# Tables whose contents are fixed presets; users cannot add to them.
PRESET_ONLY_TABLES: frozenset[str] = frozenset({"Actors", "Stride+", "CIANA"})

# Stride+ item index -> CIANA item index, applied when a Stride+ item is picked.
STRIDE_TO_CIANA: dict[int, int] = {
    0: 4,  # Spoofing -> Authentication
    1: 1,  # Tampering -> Integrity
    2: 3,  # Repudiation -> Non-repudiation
    3: 0,  # Information Disclosure -> Confidentiality
    4: 2,  # Denial of Service -> Availability
}

STRIDE_TABLE_INDEX = 2
CIANA_TABLE_INDEX = 6


def table_title(table_index: int) -> str:
    if 0 <= int(table_index) < len(TABLE_TITLES):
        return TABLE_TITLES[int(table_index)]
    return ""


def table_role(table_index: int) -> str:
    if 0 <= int(table_index) < len(TABLE_ROLES):
        return TABLE_ROLES[int(table_index)]
    return ""
