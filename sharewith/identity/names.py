"""
Cosmetic display names ("Brave Otter") seeded by the peer id, so a returning
client keeps the same name across reconnects.
"""

ADJECTIVES = (
    "Amber", "Bold", "Brave", "Bright", "Calm", "Clever", "Cosy", "Crisp",
    "Curious", "Daring", "Eager", "Fancy", "Fierce", "Gentle", "Glad", "Golden",
    "Happy", "Honest", "Jolly", "Keen", "Kind", "Lively", "Lucky", "Merry",
    "Mighty", "Nimble", "Noble", "Patient", "Plucky", "Polite", "Proud", "Quick",
    "Quiet", "Rapid", "Silent", "Sleek", "Smart", "Snowy", "Steady", "Sunny",
    "Swift", "Tidy", "Vivid", "Warm", "Wise", "Witty", "Young", "Zesty",
)

ANIMALS = (
    "Albatross", "Badger", "Beaver", "Bison", "Camel", "Cheetah", "Cobra", "Crane",
    "Dolphin", "Eagle", "Falcon", "Ferret", "Fox", "Gazelle", "Gecko", "Heron",
    "Ibex", "Jaguar", "Koala", "Lemur", "Lynx", "Magpie", "Marmot", "Meerkat",
    "Narwhal", "Ocelot", "Orca", "Otter", "Owl", "Panda", "Panther", "Pelican",
    "Penguin", "Puffin", "Quail", "Raven", "Salmon", "Seal", "Sparrow", "Swan",
    "Tapir", "Tiger", "Toucan", "Walrus", "Weasel", "Whale", "Wolf", "Yak",
)


def hash_code(s: str) -> int:
    """32-bit signed string hash (h = 31*h + c), stable across processes."""
    h = 0
    for ch in s:
        h = (31 * h + ord(ch)) & 0xFFFFFFFF
    return h - 0x100000000 if h & 0x80000000 else h


def display_name(seed: str) -> str:
    h = hash_code(seed) & 0xFFFFFFFF
    adjective = ADJECTIVES[h % len(ADJECTIVES)]
    animal = ANIMALS[(h // len(ADJECTIVES)) % len(ANIMALS)]
    return f"{adjective} {animal}"
