# -*- encoding: utf-8 -*-
# @File   : model.py
# @Time   : 2024/10/12 21:38:45
# @Author : Kariko Lin

"""
INI structure: a default (unnamed) section, plus named sections.

Both levels are kept sorted, section names and keys in ascending order,
so that a document always serializes the same way:

    ```ini
    key = val  ; the default section, see `IniDocument.default_section`.

    [A]
    key233 = val666
    [B]
    key114 = val514
    ```

Note the asymmetry on duplicates: inserting a pair *overwrites*
the resident one, while inserting a section *keeps* the resident one,
so pairs collected from earlier sources never get lost.
"""

from bisect import bisect_left
from collections.abc import Mapping
from typing import Callable, Iterator

from .consts import DEFAULT, DefaultSection, IniOption, SectionName


def _valid_key(key: str) -> bool:
    # a key written as `[...]=...` would read back as a section header.
    return bool(key) and not key.startswith('[')


class IniPair:
    """A key with an optional value.

    The key is fixed once created, since the owning store is sorted by it.
    Use `set_value()` (or simply assign `value`) to change the value.
    """
    __slots__ = ('__key', 'value')

    def __init__(self, key: str, value: str | None = None) -> None:
        self.__key = key
        self.value = value

    @property
    def key(self) -> str:
        return self.__key

    def set_value(self, value: str | None) -> str | None:
        """Replace the value in place. `None` clears it.

        No option check happens here. Values cleared without
        `ALLOW_EMPTY_VALUES` are simply skipped on writing.
        """
        self.value = value
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IniPair):
            return NotImplemented
        return (self.key, self.value) == (other.key, other.value)

    def __repr__(self) -> str:
        return f'IniPair({self.key!r}, {self.value!r})'


class PairStore(Mapping[str, str | None]):
    """Pairs of one section, ascending by key, without duplicates.

    Read access follows `Mapping` (key -> value).
    The only way to mutate the store is `insert()`.
    """
    def __init__(self) -> None:
        # parallel lists, keys kept for bisecting.
        self.__keys: list[str] = []
        self.__pairs: list[IniPair] = []

    def __locate(self, key: str) -> tuple[int, bool]:
        idx = bisect_left(self.__keys, key)
        return idx, idx < len(self.__keys) and self.__keys[idx] == key

    def insert(self, pair: IniPair) -> IniPair | None:
        """Insert `pair` in order, overwriting the pair with the same key.

        Returns `pair` itself, or `None` if its key is invalid.
        """
        if not _valid_key(pair.key):
            return None
        idx, found = self.__locate(pair.key)
        if found:
            # the old pair is dropped as a whole, value included.
            self.__pairs[idx] = pair
        else:
            self.__keys.insert(idx, pair.key)
            self.__pairs.insert(idx, pair)
        return pair

    def find(self, key: str) -> IniPair | None:
        if not key:
            return None
        idx, found = self.__locate(key)
        return self.__pairs[idx] if found else None

    def pairs(self) -> Iterator[IniPair]:
        return iter(self.__pairs)

    def clear(self) -> None:
        self.__keys.clear()
        self.__pairs.clear()

    def __getitem__(self, key: str) -> str | None:
        if (pair := self.find(key)) is None:
            raise KeyError(key)
        return pair.value

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.find(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.__keys)

    def __len__(self) -> int:
        return len(self.__keys)

    def __repr__(self) -> str:
        return repr(dict(self.items()))


class IniSection:
    """An INI section, named or the default one, owning its `PairStore`.

    Iterating a section yields its `IniPair`s in ascending key order.
    """
    def __init__(self, name: SectionName | None = DEFAULT) -> None:
        self._name: SectionName = DEFAULT if name is None else name
        self.__pairs = PairStore()

    @property
    def name(self) -> SectionName:
        return self._name

    @property
    def is_default(self) -> bool:
        return self._name is DEFAULT

    @property
    def pairs(self) -> PairStore:
        return self.__pairs

    def insert(self, pair: IniPair) -> IniPair | None:
        return self.__pairs.insert(pair)

    def find(self, key: str) -> IniPair | None:
        return self.__pairs.find(key)

    def __contains__(self, key: object) -> bool:
        return key in self.__pairs

    def __iter__(self) -> Iterator[IniPair]:
        return self.__pairs.pairs()

    def __len__(self) -> int:
        return len(self.__pairs)

    def __str__(self) -> str:
        return '<default>' if self.is_default else f'[{self._name}]'

    def __repr__(self) -> str:
        return '%s { .cnt = %d }' % (self, len(self.__pairs))


class SectionStore(Mapping[str, IniSection]):
    """Named sections, ascending by name, without duplicates."""

    def __init__(self) -> None:
        self.__names: list[str] = []
        self.__sections: list[IniSection] = []

    def __locate(self, name: str) -> tuple[int, bool]:
        idx = bisect_left(self.__names, name)
        return idx, idx < len(self.__names) and self.__names[idx] == name

    def insert(self, section: IniSection) -> IniSection | None:
        """Insert `section` in order, unless the name already exists.

        Returns the section now resident under that name: `section`
        itself, or the pre-existing one (then `section` is NOT stored,
        and its pairs are not merged). Returns `None` for the default
        section or an empty name, which never live in this store.
        """
        if section.is_default or not section.name:
            return None
        name = str(section.name)
        idx, found = self.__locate(name)
        if found:
            return self.__sections[idx]
        self.__names.insert(idx, name)
        self.__sections.insert(idx, section)
        return section

    def find(self, name: str) -> IniSection | None:
        if not isinstance(name, str) or not name:
            return None
        idx, found = self.__locate(name)
        return self.__sections[idx] if found else None

    def sections(self) -> Iterator[IniSection]:
        return iter(self.__sections)

    def clear(self) -> None:
        self.__names.clear()
        self.__sections.clear()

    def __getitem__(self, name: str) -> IniSection:
        if (section := self.find(name)) is None:
            raise KeyError(name)
        return section

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.find(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.__names)

    def __len__(self) -> int:
        return len(self.__names)

    def __repr__(self) -> str:
        return repr(self.__sections)


class IniDocument:
    """An INI file in memory.

    Section names given as `None` or `DEFAULT` refer to the default
    section, which always exists and is never part of `sections`.

    Options are fixed once the document is created. They only matter
    to `IniParser`, i.e. reading and writing.
    """
    def __init__(self, flags: IniOption = IniOption.NONE) -> None:
        self.__flags = IniOption(flags)
        self.__default = IniSection(DEFAULT)
        self.__sections = SectionStore()

    @property
    def flags(self) -> IniOption:
        return self.__flags

    @property
    def default_section(self) -> IniSection:
        """Pairs not belonging to any named section."""
        return self.__default

    @property
    def sections(self) -> SectionStore:
        return self.__sections

    def get_section(
        self, name: SectionName | None = DEFAULT
    ) -> IniSection | None:
        if name is None or name is DEFAULT:
            return self.__default
        return self.__sections.find(name)

    def insert_section(self, section: IniSection) -> IniSection | None:
        """Insert-or-get a named section, see `SectionStore.insert()`."""
        return self.__sections.insert(section)

    def get_pair(self, section: SectionName | None, key: str) -> IniPair | None:
        if (sect := self.get_section(section)) is None:
            return None
        return sect.find(key)

    def get_value(
        self, section: SectionName | None, key: str,
        default: str | None = None
    ) -> str | None:
        if (pair := self.get_pair(section, key)) is None:
            return default
        return pair.value

    def put(
        self, section: SectionName | None, key: str,
        value: str | None = None
    ) -> IniPair | None:
        """Create the section and the key if missing.

        An existing key keeps its value, `put()` never overwrites.
        Use `set()` for that.
        """
        if not _valid_key(key):
            return None
        if (sect := self.get_section(section)) is None:
            sect = self.__sections.insert(IniSection(section))
            if sect is None:
                return None
        if (pair := sect.find(key)) is None:
            pair = sect.insert(IniPair(key, value))
        return pair

    def set(
        self, section: SectionName | None, key: str, value: str | None
    ) -> IniPair | None:
        """Overwrite the value of an existing key.

        Nothing gets created: returns `None` and leaves the document
        unmodified if either the section or the key is missing.
        """
        if (pair := self.get_pair(section, key)) is None:
            return None
        pair.set_value(value)
        return pair

    def walk(self) -> Iterator[tuple[IniSection, IniPair]]:
        """Lazily visit every pair together with its section.

        Default section first, then named sections by name,
        and keys ascending within each section.
        Do not mutate the document while walking.
        """
        for pair in self.__default:
            yield self.__default, pair
        for section in self.__sections.sections():
            for pair in section:
                yield section, pair

    def for_each(self, callback: Callable[[IniSection, IniPair], object]) -> None:
        for section, pair in self.walk():
            callback(section, pair)

    def clear(self) -> None:
        """Release every section and pair. Options are kept."""
        self.__default.pairs.clear()
        self.__sections.clear()

    def __iter__(self) -> Iterator[tuple[IniSection, IniPair]]:
        return self.walk()

    def __contains__(self, name: object) -> bool:
        return name in self.__sections

    def __repr__(self) -> str:
        return '<IniDocument flags=%r sections=%d>' % (
            self.__flags, len(self.__sections))
