# -*- encoding: utf-8 -*-
# @File   : __init__.py
# @Time   : 2024/10/12 21:35:02
# @Author : Kariko Lin

import logging

from .consts import DEFAULT, MAX_FIELD_WIDTH, DefaultSection, IniOption
from .errors import FieldTruncatedWarning, IniError, IniFileError
from .model import IniDocument, IniPair, IniSection, PairStore, SectionStore
from .parser import IniParser, dump, dumps, load, loads

__all__ = [
    'IniDocument', 'IniSection', 'IniPair', 'PairStore', 'SectionStore',
    'IniParser', 'load', 'loads', 'dump', 'dumps',
    'IniOption', 'DEFAULT', 'DefaultSection', 'MAX_FIELD_WIDTH',
    'IniError', 'IniFileError', 'FieldTruncatedWarning'
]

logging.basicConfig(level=logging.INFO,
                    format='[%(asctime)s] %(levelname)s: %(message)s')
