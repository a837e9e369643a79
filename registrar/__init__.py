"""Booklist Registrar — export a catalog booklist and register it as ISCN records."""

__version__ = "0.3.0"
