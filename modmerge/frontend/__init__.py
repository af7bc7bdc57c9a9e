# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration front end.

Parses `.mdecl` declaration files into `Declaration` records. The grammar
lives next to the parser in `grammar.lark`.
"""

from __future__ import annotations

from .parser import DeclarationParseError, DeclarationUnit, parse_declarations, parse_file

__all__ = ["DeclarationParseError", "DeclarationUnit", "parse_declarations", "parse_file"]
