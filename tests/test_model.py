"""Tests for the sorted in-memory INI model."""

from random import Random

import pytest

from pyinifile import (
    DEFAULT, IniDocument, IniOption, IniPair, IniSection, PairStore,
    SectionStore,
)


def _random_key(rng: Random) -> str:
    return "".join(rng.choice("abcdeXYZ019_.") for _ in range(rng.randint(1, 4)))


# -- PairStore --------------------------------------------------------------

@pytest.mark.parametrize("seed", range(10))
def test_pair_store_stays_sorted_and_unique(seed):
    """Random insert sequences keep keys strictly ascending."""
    rng = Random(seed)
    store = PairStore()
    expected = {}
    for _ in range(200):
        key, value = _random_key(rng), str(rng.randint(0, 99))
        store.insert(IniPair(key, value))
        expected[key] = value

    keys = list(store)
    assert all(a < b for a, b in zip(keys, keys[1:]))
    assert keys == sorted(expected)
    assert dict(store) == expected


def test_pair_insert_overwrites_whole_pair():
    store = PairStore()
    old = store.insert(IniPair("key", "old"))
    new = IniPair("key", None)
    assert store.insert(new) is new
    assert store.find("key") is new
    assert store.find("key") is not old
    assert store["key"] is None  # incoming value wins even if absent
    assert len(store) == 1


def test_pair_insert_returns_inserted_pair():
    store = PairStore()
    for key in ("m", "a", "z", "c"):
        pair = IniPair(key, key.upper())
        assert store.insert(pair) is pair
    assert list(store) == ["a", "c", "m", "z"]
    assert [p.value for p in store.pairs()] == ["A", "C", "M", "Z"]


def test_pair_insert_empty_key_rejected():
    store = PairStore()
    assert store.insert(IniPair("", "v")) is None
    assert len(store) == 0


def test_pair_store_lookup_miss():
    store = PairStore()
    store.insert(IniPair("a", "1"))
    assert store.find("b") is None
    assert store.find("") is None
    assert "b" not in store
    assert store.get("b") is None
    with pytest.raises(KeyError):
        store["b"]


def test_set_value_in_place():
    pair = IniPair("k", "v")
    assert pair.set_value("w") == "w"
    assert pair.value == "w"
    assert pair.set_value(None) is None
    assert pair.value is None


def test_pair_key_is_read_only():
    pair = IniPair("k", "v")
    with pytest.raises(AttributeError):
        pair.key = "other"


# -- SectionStore -----------------------------------------------------------

@pytest.mark.parametrize("seed", range(5))
def test_section_store_stays_sorted_and_unique(seed):
    rng = Random(seed)
    store = SectionStore()
    names = [_random_key(rng) for _ in range(100)]
    for name in names:
        store.insert(IniSection(name))
    resident = list(store)
    assert all(a < b for a, b in zip(resident, resident[1:]))
    assert resident == sorted(set(names))


def test_section_insert_keeps_existing():
    store = SectionStore()
    first = store.insert(IniSection("S"))
    first.insert(IniPair("kept", "1"))

    second = IniSection("S")
    second.insert(IniPair("lost", "2"))
    assert store.insert(second) is first
    assert store["S"] is first
    assert list(first.pairs) == ["kept"]
    assert len(store) == 1


def test_section_insert_rejects_default_and_empty():
    store = SectionStore()
    assert store.insert(IniSection(DEFAULT)) is None
    assert store.insert(IniSection(None)) is None
    assert store.insert(IniSection("")) is None
    assert len(store) == 0


def test_section_str_and_repr():
    sect = IniSection("Main")
    sect.insert(IniPair("a", "1"))
    assert str(sect) == "[Main]"
    assert repr(sect) == "[Main] { .cnt = 1 }"
    assert IniSection().is_default
    assert not sect.is_default


# -- IniDocument ------------------------------------------------------------

def test_new_document_is_empty():
    doc = IniDocument()
    assert doc.flags == IniOption.NONE
    assert len(doc.default_section) == 0
    assert len(doc.sections) == 0
    assert list(doc.walk()) == []


def test_get_section_default_and_named():
    doc = IniDocument()
    assert doc.get_section() is doc.default_section
    assert doc.get_section(None) is doc.default_section
    assert doc.get_section(DEFAULT) is doc.default_section
    assert doc.get_section("missing") is None
    doc.put("S", "k", "v")
    assert doc.get_section("S").name == "S"
    assert "S" in doc


def test_get_pair_misses_collapse_to_none():
    doc = IniDocument()
    doc.put("S", "k", "v")
    assert doc.get_pair("S", "k").value == "v"
    assert doc.get_pair("S", "nope") is None
    assert doc.get_pair("nope", "k") is None
    assert doc.get_value("nope", "k", "fallback") == "fallback"


def test_put_never_overwrites():
    doc = IniDocument()
    first = doc.put("s", "k", "v1")
    again = doc.put("s", "k", "v2")
    assert again is first
    assert doc.get_value("s", "k") == "v1"

    assert doc.set("s", "k", "v2") is first
    assert doc.get_value("s", "k") == "v2"


def test_put_into_default_section():
    doc = IniDocument()
    doc.put(None, "k", "v")
    assert doc.default_section.find("k").value == "v"
    assert doc.get_value(DEFAULT, "k") == "v"
    assert len(doc.sections) == 0


def test_put_invalid_arguments():
    doc = IniDocument()
    assert doc.put("s", "", "v") is None
    assert doc.put("", "k", "v") is None
    assert len(doc.sections) == 0


def test_set_missing_leaves_document_untouched():
    doc = IniDocument()
    doc.put("s", "k", "v")
    before = [(str(s), p.key, p.value) for s, p in doc]

    assert doc.set("missing", "k", "x") is None
    assert doc.set("s", "missing", "x") is None
    assert doc.set(None, "k", "x") is None

    assert [(str(s), p.key, p.value) for s, p in doc] == before
    assert "missing" not in doc


def test_set_clears_value():
    doc = IniDocument(IniOption.ALLOW_EMPTY_VALUES)
    pair = doc.put("s", "k", "v")
    assert doc.set("s", "k", None) is pair
    assert pair.value is None


def test_walk_order(sample_doc):
    visited = [(s.name, p.key, p.value) for s, p in sample_doc.walk()]
    assert visited == [
        (DEFAULT, "a", "1"),
        (DEFAULT, "b", "2"),
        ("Alpha", "x", "24"),
        ("Alpha", "y", "25"),
        ("Zeta", "z", "26"),
    ]


def test_walk_is_restartable(sample_doc):
    assert list(sample_doc) == list(sample_doc)
    assert len(list(sample_doc.walk())) == 5


def test_for_each_visits_every_pair_once(sample_doc):
    seen = []
    sample_doc.for_each(lambda section, pair: seen.append((section, pair.key)))
    assert [key for _, key in seen] == ["a", "b", "x", "y", "z"]
    assert seen[0][0] is sample_doc.default_section


def test_insert_section_returns_resident(sample_doc):
    resident = sample_doc.get_section("Alpha")
    assert sample_doc.insert_section(IniSection("Alpha")) is resident
    assert len(resident) == 2


def test_clear_releases_everything(sample_doc):
    sample_doc.clear()
    assert list(sample_doc) == []
    assert len(sample_doc.sections) == 0
    assert sample_doc.flags == IniOption.ALL


def test_option_flags_combine():
    assert IniOption.NONE == 0
    assert IniOption.ALLOW_SPACE_AROUND_DELIMITER in IniOption.ALL
    assert IniOption.ALLOW_EMPTY_VALUES in IniOption.ALL
    both = IniOption.ALLOW_SPACE_AROUND_DELIMITER | IniOption.ALLOW_EMPTY_VALUES
    assert IniDocument(both).flags == IniOption.ALL


def test_keys_starting_with_bracket_rejected():
    store = PairStore()
    assert store.insert(IniPair("[a]", "1")) is None
    assert len(store) == 0

    doc = IniDocument()
    assert doc.put("S", "[k", "v") is None
    assert doc.get_pair("S", "[k") is None
    assert doc.put("S", "k[", "v").key == "k["
