"""Tests for random scan names."""

import random
import re
from datetime import date

from scanix.core import names
from scanix.core.names import generate_name_with_date, generate_random_name


class FixedChoice(random.Random):
    """Random source that always picks one naming style."""

    def __init__(self, style: int):
        super().__init__(0)
        self.style = style

    def randint(self, a, b):
        return self.style


def test_template_style():
    assert generate_random_name(FixedChoice(0)) in names.TEMPLATES


def test_adjective_noun_style():
    adjective, noun = generate_random_name(FixedChoice(1)).split(" ")
    assert adjective in names.ADJECTIVES
    assert noun in names.NOUNS


def test_fun_phrase_style():
    assert generate_random_name(FixedChoice(2)) in names.FUN_PHRASES


def test_dated_style():
    name = generate_random_name(FixedChoice(3), today=date(2025, 11, 5))
    prefix, rest = name.split(" ", 1)
    assert prefix in names.DATED_PREFIXES
    assert rest == "Scan - Nov 05"


def test_all_styles_are_used(rng):
    generated = [generate_random_name(rng, today=date(2025, 3, 9)) for _ in range(400)]

    assert any(n in names.TEMPLATES for n in generated)
    assert any(n in names.FUN_PHRASES for n in generated)
    assert any(n.endswith("Scan - Mar 09") for n in generated)
    assert any(n.split(" ")[0] in names.ADJECTIVES and n.split(" ")[-1] in names.NOUNS for n in generated)


def test_same_seed_same_names():
    first = [generate_random_name(random.Random(7)) for _ in range(5)]
    second = [generate_random_name(random.Random(7)) for _ in range(5)]
    assert first == second


def test_default_rng_returns_non_empty_name():
    assert generate_random_name()


def test_catalog_sizes():
    assert len(names.TEMPLATES) == 9
    assert len(names.ADJECTIVES) == 20
    assert len(names.NOUNS) == 15
    assert len(names.FUN_PHRASES) == 10


def test_name_with_date():
    name = generate_name_with_date(FixedChoice(2), today=date(2025, 1, 31))
    assert re.fullmatch(r".+ \(Jan 31, 2025\)", name)
    assert name[: -len(" (Jan 31, 2025)")] in names.FUN_PHRASES
