"""Playful default names for new scans."""

import random
from datetime import date
from typing import Optional

TEMPLATES = [
    "Scan-tastic",
    "Paper Trail",
    "Doc & Roll",
    "Scan Master",
    "Sheet Storm",
    "Page Turner",
    "Pixel Perfect",
    "Quick Capture",
    "Paper Chase",
]

ADJECTIVES = [
    "Mighty", "Cosmic", "Turbo", "Supreme", "Ultra",
    "Epic", "Legendary", "Mystical", "Golden", "Royal",
    "Radical", "Awesome", "Stellar", "Fantastic", "Brilliant",
    "Magnificent", "Spectacular", "Phenomenal", "Incredible", "Marvelous",
]

NOUNS = [
    "Document", "Papers", "Files", "Pages", "Sheets",
    "Records", "Forms", "Notes", "Receipts", "Contracts",
    "Reports", "Letters", "Bills", "Tickets", "Certificates",
]

FUN_PHRASES = [
    "The Scanpocalypse",
    "Digitize This!",
    "Scan-o-Rama",
    "Paper Patrol",
    "Scan Squad",
    "Doc Block",
    "Sheet Happens",
    "Scan Solo",
    "The Document-ary",
    "Scan-demonium",
]

DATED_PREFIXES = ["Epic", "Super", "Mega", "Ultra"]

# Month abbreviations are fixed so names don't depend on the process locale
_MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _short_date(day: date) -> str:
    return f"{_MONTHS[day.month - 1]} {day.day:02d}"


def generate_random_name(
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> str:
    """Generate a random fun name for a new scan.

    One of four styles is picked uniformly: a template, an adjective + noun
    pair, a fun phrase, or a dated "<prefix> Scan - <Mon DD>" name.

    Args:
        rng: Random source (defaults to a freshly seeded generator)
        today: Date used by the dated style (defaults to today)

    Returns:
        The generated name. Names are not unique across scans.
    """
    rng = rng or random.Random()
    choice = rng.randint(0, 3)

    if choice == 0:
        return rng.choice(TEMPLATES)
    if choice == 1:
        return f"{rng.choice(ADJECTIVES)} {rng.choice(NOUNS)}"
    if choice == 2:
        return rng.choice(FUN_PHRASES)

    prefix = rng.choice(DATED_PREFIXES)
    return f"{prefix} Scan - {_short_date(today or date.today())}"


def generate_name_with_date(
    rng: Optional[random.Random] = None,
    today: Optional[date] = None,
) -> str:
    """Random name followed by the full date, e.g. ``"Scan Squad (Nov 05, 2025)"``."""
    today = today or date.today()
    base_name = generate_random_name(rng, today)
    return f"{base_name} ({_short_date(today)}, {today.year})"
