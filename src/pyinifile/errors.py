# -*- encoding: utf-8 -*-
# @File   : errors.py
# @Time   : 2024/10/12 21:52:03
# @Author : Kariko Lin


class IniError(Exception):
    """Base of every error raised by this package."""
    pass


class IniFileError(IniError):
    """To record INI files unable to open, read or write.

    The original `OSError` is kept as `__cause__`.
    """
    def __init__(self, filename: str, message: str) -> None:
        super().__init__(f'{filename}: {message}')
        self.filename = filename


class FieldTruncatedWarning(UserWarning):
    """A key or value was longer than the parser allows, and got cut."""
    pass
