"""Local song title table keyed by concept."""

from __future__ import annotations

import random
from typing import Dict, List, Optional

from .models import Concept

SONG_TITLES: Dict[Concept, List[str]] = {
    Concept.CUTE: [
        "Cheer Up", "Gee", "Candy Pop", "Heart Shaker", "Very Very Very", "Me Gustas Tu", "Pop!",
        "Rolling", "Ice Cream", "Glass Bead", "Likey", "What is Love?", "Signal", "TT", "Mr. Chu",
        "Dumb Dumb", "Rookie", "Power Up", "Dalla Dalla", "Icy", "Wannabe", "Crush", "Butterfly",
    ],
    Concept.GIRL_CRUSH: [
        "Kill This Love", "Next Level", "Savage", "Baddie", "Ddu-Du Ddu-Du", "How You Like That",
        "Black Mamba", "Hobgoblin", "Hot Issue", "HuH", "Volume Up", "Red", "Nxde", "Queencard",
        "Latata", "Hwaa", "Tomboy", "Uh-Oh", "Senorita", "Zoom", "Spicy", "Sixth Sense",
    ],
    Concept.DARK: [
        "Monster", "Psycho", "Voodoo Doll", "Chase Me", "Scream", "Villain", "Lion", "Full Moon",
        "Witch", "Piri", "Deja Vu", "Bad Boy", "Peek-A-Boo", "Zimzalabim", "Chill Kill", "Crown",
        "Sugar Rush Ride", "Fatal Trouble", "Bite Me", "Antifragile", "Unforgiven", "Armageddon",
    ],
    Concept.FRESH: [
        "Hype Boy", "Attention", "Ditto", "Love Dive", "After Like", "View", "Island", "Alcohol-Free",
        "Red Flavor", "Dance The Night Away", "Nonstop", "Dolphin", "Rollin'", "Up!", "Taxi",
        "Loveade", "Super Shy", "ETA", "Cool With You", "Magnetic", "Sticky", "Bubble Gum",
    ],
    Concept.RETRO: [
        "Tell Me", "Roly Poly", "Nobody", "Mago", "When We Disco", "Dynamite", "Alien", "Reboot",
        "Bboom Bboom", "Lovey Dovey", "Shy Boy", "Ring Ring", "Disco", "Soul Lady", "Lilac",
        "Celebrity", "Weekend", "INVU", "Timeless", "Fine", "Gashina", "Heroine",
    ],
    Concept.HIPHOP: [
        "Mic Drop", "Dope", "Fire", "Boombayah", "Whistle", "God's Menu", "Back Door", "Maniac",
        "Shut Down", "Lalisa", "Money", "Jikjin", "Darari", "Case 143", "S-Class", "Thunderous",
        "Domino", "Sticker", "Lemonade", "Punch", "Superhuman", "Boss",
    ],
    Concept.BALLAD: [
        "Through the Night", "Ending Scene", "Stay", "Spring Day", "Missing You", "If You",
        "Eyes, Nose, Lips", "Breathe", "Universe", "Miracles in December", "Palette", "Eight",
        "Love Poem", "Twenty-Three", "Knees", "Autumn Morning", "Love wins all", "Memories",
        "Hero", "Sudden Shower", "Everyday with You", "Blue",
    ],
}

VERSION_SUFFIX_CHANCE = 0.1


def random_song_title(concept: Concept, rng: Optional[random.Random] = None) -> str:
    """Pick a title for a concept, occasionally tagged with a version year."""
    rng = rng or random.Random()
    titles = SONG_TITLES.get(concept) or SONG_TITLES[Concept.CUTE]
    title = rng.choice(titles)
    if rng.random() < VERSION_SUFFIX_CHANCE:
        return f"{title} (Ver. {rng.randrange(2024)})"
    return title
