# -*- encoding: utf-8 -*-
# @File   : parser.py
# @Time   : 2024/10/12 22:21:09
# @Author : Kariko Lin

"""Line based INI reader and writer.

Each line is tried against the following, and the first match wins:

1. `[section]`, anything after the closing bracket is ignored;
2. `key=value` (or `key = value` with `ALLOW_SPACE_AROUND_DELIMITER`);
3. `key` or `key=` alone, only with `ALLOW_EMPTY_VALUES`.

Everything else is dropped *silently*, blank lines, comments and garbage
alike. Keys never contain `=`, `;` or whitespace, and never start with `[`.

Writing is a canonical re-serialization: comments and original layout
are lost, sections and keys come out sorted, and sections without any
pair are omitted.
"""

import logging
from io import StringIO, TextIOBase
from os import PathLike
from re import compile as regex
from typing import TextIO
from warnings import warn

import chardet

from .abstract import FileHandler
from .consts import MAX_FIELD_WIDTH, IniOption
from .errors import FieldTruncatedWarning, IniFileError
from .model import IniDocument, IniPair, IniSection

logger = logging.getLogger(__name__)

_KEY = r'[^=;\s\[][^=;\s]*'

SECTION = regex(r'\[([^\]]+)\]')
PAIR_SPACED = regex(rf'({_KEY})\s*=\s*(.+)')
PAIR_STRICT = regex(rf'({_KEY})=(\S.*)')
BARE_KEY_SPACED = regex(rf'({_KEY})(?:\s*=)?')
BARE_KEY_STRICT = regex(rf'({_KEY})=?')


def _clip(field: str, max_field: int, lineno: int, stacklevel: int) -> str:
    # stacklevel counts from the caller of `readstream()`.
    if max_field > 0 and len(field) > max_field:
        warn(
            f'line {lineno}: field longer than {max_field} characters, '
            f'truncated: {field[:16]!r}...',
            FieldTruncatedWarning, stacklevel=stacklevel + 2)
        return field[:max_field]
    return field


class IniParser(FileHandler[IniDocument]):
    def __init__(
        self, filename: str | PathLike[str],
        encoding: str | None = None, *,
        max_field: int = MAX_FIELD_WIDTH
    ) -> None:
        """`max_field` bounds keys, values and section names,
        a non-positive one means no bound at all."""
        super().__init__(filename)
        self._codec = encoding
        self._max_field = max_field

    @staticmethod
    def readstream(
        buf: TextIOBase | TextIO,
        ins: IniDocument | None = None, *,
        flags: IniOption = IniOption.NONE,
        max_field: int = MAX_FIELD_WIDTH,
        _stacklevel: int = 1
    ) -> IniDocument:
        """Read a decoded text stream into `ins`.

        A new document with `flags` is created when `ins` is `None`,
        otherwise `ins` keeps its own options and existing pairs,
        with duplicated keys overwritten.
        """
        def clip(field: str) -> str:
            return _clip(field, max_field, lineno, _stacklevel + 1)

        if ins is None:
            ins = IniDocument(flags)
        spaced = IniOption.ALLOW_SPACE_AROUND_DELIMITER in ins.flags
        allow_empty = IniOption.ALLOW_EMPTY_VALUES in ins.flags
        pair_fmt = PAIR_SPACED if spaced else PAIR_STRICT
        bare_fmt = BARE_KEY_SPACED if spaced else BARE_KEY_STRICT

        this_sect = ins.default_section
        lineno = dropped = 0
        while i := buf.readline():
            lineno += 1
            line = i.strip()
            if m := SECTION.match(line):
                sect = ins.insert_section(IniSection(clip(m[1])))
                if sect is not None:
                    this_sect = sect
            elif m := pair_fmt.fullmatch(line):
                this_sect.insert(IniPair(clip(m[1]), clip(m[2].strip())))
            elif allow_empty and (m := bare_fmt.fullmatch(line)):
                this_sect.insert(IniPair(clip(m[1])))
            else:
                if line:
                    logger.debug('line %d dropped: %r', lineno, line)
                dropped += 1
        logger.debug(
            'parsed %d lines (%d dropped), %d sections',
            lineno, dropped, len(ins.sections))
        return ins

    @staticmethod
    def _decode_file(filename: str) -> StringIO:
        with open(filename, 'rb') as fp:
            raw = fp.read()

        codec = chardet.detect(raw)
        encoding = codec.get('encoding')
        if not encoding or codec['confidence'] < 0.8:
            encoding = 'utf-8'

        # fallbacks, latin-1 decodes any bytes.
        try:
            buf = raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug('%s: unable to decode as %s', filename, encoding)
            buf = raw.decode('latin-1')
        return StringIO(buf)

    def _open_text(self) -> TextIOBase:
        try:
            # when encoding is None, `open()` would fallback to system default.
            # and when encoding got wrong, fallback to `chardet`.
            with open(self._fn, 'r', encoding=self._codec) as fp:
                return StringIO(fp.read())
        except UnicodeDecodeError:
            logger.debug(
                '%s: not encoded as %s, guessing',
                self._fn, self._codec or 'default')
            return self._decode_file(self._fn)

    def read(
        self, ins: IniDocument | None = None,
        flags: IniOption = IniOption.NONE, *,
        _stacklevel: int = 1
    ) -> IniDocument:
        """Read the file this parser is bound to.

        With `ins` given, pairs are loaded into it (see `readstream()`),
        and `flags` is ignored in favor of its own options.

        Raises `IniFileError` if the file is unable to open or read,
        including an unknown `encoding`.
        Nothing is loaded into `ins` in that case.
        """
        try:
            buf = self._open_text()
        except (OSError, UnicodeError, LookupError) as e:
            logger.warning('unable to read %s: %s', self._fn, e)
            raise IniFileError(self._fn, f'unable to read: {e}') from e
        return self.readstream(
            buf, ins, flags=flags, max_field=self._max_field,
            _stacklevel=_stacklevel + 1)

    @staticmethod
    def _output_section(section: IniSection, allow_empty: bool) -> str:
        ret = '' if section.is_default else f'[{section.name}]\n'
        for pair in section:
            if pair.value:
                ret += f'{pair.key}={pair.value}\n'
            elif allow_empty:
                ret += f'{pair.key}=\n'
        return ret

    @staticmethod
    def writestream(instance: IniDocument, buf: TextIOBase | TextIO) -> None:
        """Write `instance` to a text stream.

        The default section always comes first and is always followed
        by a blank line, even if empty. Empty named sections are skipped.

        An empty string value is written as an absent one: `key=` with
        `ALLOW_EMPTY_VALUES` (read back as `None`), skipped otherwise.
        """
        allow_empty = IniOption.ALLOW_EMPTY_VALUES in instance.flags
        buf.write(IniParser._output_section(
            instance.default_section, allow_empty))
        buf.write('\n')
        for section in instance.sections.values():
            if not len(section):
                continue
            buf.write(IniParser._output_section(section, allow_empty))
            buf.write('\n')

    def write(self, instance: IniDocument) -> None:
        """Save to the file this parser is bound to, UTF-8 by default.

        Raises `IniFileError` on failure. What has been written
        before the failure is NOT rolled back.
        """
        try:
            with open(self._fn, 'w', encoding=self._codec or 'utf-8') as fp:
                self.writestream(instance, fp)
        except (OSError, UnicodeError, LookupError) as e:
            logger.warning('unable to write %s: %s', self._fn, e)
            raise IniFileError(self._fn, f'unable to write: {e}') from e
        logger.debug('%s written, %d sections', self._fn, len(instance.sections))

    def __str__(self) -> str:
        return 'INI file: ' + super().__str__() + f' ({self._codec})'


def loads(
    text: str, flags: IniOption = IniOption.NONE, *,
    max_field: int = MAX_FIELD_WIDTH
) -> IniDocument:
    return IniParser.readstream(
        StringIO(text), flags=flags, max_field=max_field, _stacklevel=2)


def dumps(instance: IniDocument) -> str:
    buf = StringIO()
    IniParser.writestream(instance, buf)
    return buf.getvalue()


def load(
    filename: str | PathLike[str],
    flags: IniOption = IniOption.NONE,
    encoding: str | None = None
) -> IniDocument:
    """Create a document with `flags` and parse `filename` into it."""
    return IniParser(filename, encoding).read(flags=flags, _stacklevel=2)


def dump(
    instance: IniDocument,
    filename: str | PathLike[str],
    encoding: str | None = None
) -> None:
    IniParser(filename, encoding).write(instance)
