"""Building and address names for generated cities."""

from __future__ import annotations

import random

from gridtown.sim.city_tiles import TileKind

WORKPLACE_PREFIXES = [
    "Apex", "Vertex", "Summit", "Pinnacle", "Core", "Nova", "Vanguard",
    "Pacific", "Atlas", "Meridian", "Sterling", "Crestwood", "Irongate",
    "Bridgeport", "Harmon", "Whitfield", "Graystone", "Blackwell",
    "Evergreen", "Northstar", "Redstone", "Blueridge", "Ashford",
]

WORKPLACE_SUFFIXES = [
    "Industries", "Solutions", "Corp", "Group", "Partners", "Logistics",
    "Dynamics", "Technologies", "Consulting", "Associates", "Holdings",
    "Ventures", "Systems", "Capital", "Global", "Labs", "Services",
    "Analytics", "Digital", "Networks",
]

LEISURE_PREFIXES = [
    "The Golden", "Blue", "Silver", "Green", "Sunset", "Moonlit",
    "Crystal", "Velvet", "Starlight", "Coral", "The Rustic", "The Cozy",
    "Emerald", "The Lazy", "Royal", "The Twilight", "Harbour",
    "Lakeside", "The Grand", "Wild",
]

LEISURE_SUFFIXES = [
    "Lounge", "Park", "Garden", "Spa", "Theater", "Bowling Alley",
    "Arcade", "Club", "Cinema", "Retreat", "Pool Hall", "Gallery",
    "Rec Center", "Arena", "Plaza", "Studio", "Pavilion", "Den",
    "Hideaway", "Gym",
]

EATERY_PREFIXES = [
    "The Hungry", "Golden", "Red", "Blue", "Silver", "Lucky", "Smoky",
    "Crispy", "Salty", "Tasty", "The Rusty", "The Jolly", "Wild",
    "Mama's", "Papa's", "Uncle's", "The Little", "Big", "The Old",
    "Sunny",
]

EATERY_SUFFIXES = [
    "Diner", "Grill", "Bistro", "Café", "Kitchen", "Tavern",
    "Eatery", "Noodle Bar", "Pizza", "BBQ", "Burger Joint",
    "Sushi Bar", "Taqueria", "Bakery", "Deli", "Creamery",
    "Steakhouse", "Wok", "Cantina", "Chophouse",
]

STREET_NAMES = [
    "Maple", "Oak", "Cedar", "Elm", "Pine", "Birch", "Willow", "Spruce",
    "Aspen", "Hazel", "Poplar", "Walnut", "Cherry", "Laurel", "Magnolia",
    "Sycamore", "Juniper", "Chestnut", "Alder", "Cypress", "Hemlock",
    "Linden", "Rowan", "Thistle", "Clover", "Briar", "Fern", "Sage",
    "Summit", "Ridge", "Valley", "Creek", "Meadow", "Brook", "Hill",
    "Lake", "River", "Stone", "Iron", "Amber", "Coral", "Frost",
    "Ivory", "Slate", "Cobalt", "Harbor", "Haven", "Glen", "Crest",
]

NAME_POOLS: dict[TileKind, tuple[list[str], list[str]]] = {
    TileKind.WORKPLACE: (WORKPLACE_PREFIXES, WORKPLACE_SUFFIXES),
    TileKind.LEISURE: (LEISURE_PREFIXES, LEISURE_SUFFIXES),
    TileKind.EATERY: (EATERY_PREFIXES, EATERY_SUFFIXES),
}

MAX_ADDRESS_TRIES = 200


class NameGenerator:
    """Names for one generated city.

    Address uniqueness is scoped to the instance; build a new generator for a
    new city instead of clearing this one.
    """

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng
        self._used_addresses: set[str] = set()

    def address(self) -> str:
        address = ""
        for _ in range(MAX_ADDRESS_TRIES):
            number = self._rng.randint(100, 999)
            address = f"{number} {self._rng.choice(STREET_NAMES)}"
            if address not in self._used_addresses:
                break
        self._used_addresses.add(address)
        return address

    def name_for(self, kind: TileKind) -> str:
        if kind == TileKind.RESIDENCE:
            return self.address()
        pools = NAME_POOLS.get(kind)
        if pools is None:
            return "Unknown"
        prefixes, suffixes = pools
        return f"{self._rng.choice(prefixes)} {self._rng.choice(suffixes)}"
