# -*- encoding: utf-8 -*-
# @File   : consts.py
# @Time   : 2024/10/12 21:40:17
# @Author : Kariko Lin

from enum import Enum, IntFlag


class IniOption(IntFlag):
    """Parsing and formatting options. Everything is off by default."""
    NONE = 0
    # `name = val` rather than `name=val`
    ALLOW_SPACE_AROUND_DELIMITER = 1 << 0
    # `name` or `name=` read as a key without value, written back as `name=`
    ALLOW_EMPTY_VALUES = 1 << 1
    ALL = ALLOW_SPACE_AROUND_DELIMITER | ALLOW_EMPTY_VALUES


class DefaultSection(Enum):
    """Tag of the unnamed section, i.e. pairs found before any `[section]`."""
    DEFAULT = 0

    def __repr__(self) -> str:
        return '<default section>'


DEFAULT = DefaultSection.DEFAULT

# section name as accepted by the API. `None` also means the default one.
SectionName = str | DefaultSection

MAX_FIELD_WIDTH = 256
