# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token, Tree
from lark.exceptions import UnexpectedInput

from modmerge.core.span import Span
from modmerge.processor.declarations import Declaration

_GRAMMAR_PATH = Path(__file__).with_name("grammar.lark")
_GRAMMAR_SRC = _GRAMMAR_PATH.read_text()

_PARSER = Lark(
	_GRAMMAR_SRC,
	parser="lalr",
	lexer="basic",
	start="unit",
	propagate_positions=True,
	maybe_placeholders=False,
)


class DeclarationParseError(ValueError):
	"""
	User-facing error for malformed declaration files.

	The CLI turns this into a parser-phase diagnostic instead of a traceback.
	"""

	def __init__(self, message: str, *, span: Span) -> None:
		super().__init__(message)
		self.span = span


@dataclass
class DeclarationUnit:
	"""One parsed file: package, imports and declarations in source order."""

	package: Optional[str] = None
	imports: dict[str, str] = field(default_factory=dict)
	declarations: List[Declaration] = field(default_factory=list)
	file: Optional[str] = None


def _name(node: Tree) -> str:
	return node.data if isinstance(node.data, str) else node.data.value


def _qname(node: Tree) -> str:
	return ".".join(tok.value for tok in node.children if isinstance(tok, Token))


def _resolve(name: str, unit: DeclarationUnit, local: set[str]) -> str:
	"""
	Resolve a supertype reference.

	Dotted names are already fully qualified. Simple names go through the
	file's imports, then classes declared in the same file, then stay as
	written (a type from the default namespace).
	"""
	if "." in name:
		return name
	if name in unit.imports:
		return unit.imports[name]
	if name in local and unit.package:
		return f"{unit.package}.{name}"
	return name


def parse_declarations(source: str, *, file: str | None = None) -> DeclarationUnit:
	try:
		tree = _PARSER.parse(source)
	except UnexpectedInput as err:
		line = getattr(err, "line", None)
		column = getattr(err, "column", None)
		span = Span(file=file, line=line if isinstance(line, int) and line > 0 else None, column=column if isinstance(column, int) and column > 0 else None)
		raise DeclarationParseError(f"invalid declaration syntax: {err.__class__.__name__}", span=span) from err
	return _build_unit(tree, file=file)


def parse_file(path: Path) -> DeclarationUnit:
	return parse_declarations(path.read_text(encoding="utf-8"), file=str(path))


def _build_unit(tree: Tree, *, file: str | None) -> DeclarationUnit:
	unit = DeclarationUnit(file=file)
	raw_classes: list[tuple[str, list[str], list[str], Span]] = []
	for child in tree.children:
		if not isinstance(child, Tree):
			continue
		kind = _name(child)
		if kind == "package_decl":
			unit.package = _qname(child.children[0])
		elif kind == "import_decl":
			target = _qname(child.children[0])
			simple = target.rpartition(".")[2]
			existing = unit.imports.get(simple)
			if existing is not None and existing != target:
				raise DeclarationParseError(
					f"conflicting imports for '{simple}': {existing} and {target}",
					span=Span.from_meta(child.meta, file=file),
				)
			unit.imports[simple] = target
		elif kind == "class_decl":
			raw_classes.append(_build_class(child, file=file))

	local = {name for name, _, _, _ in raw_classes}
	seen: set[str] = set()
	for name, tags, supers, span in raw_classes:
		if name in seen:
			raise DeclarationParseError(f"duplicate class '{name}' in the same file", span=span)
		seen.add(name)
		fqn = f"{unit.package}.{name}" if unit.package else name
		unit.declarations.append(
			Declaration(
				fqn=fqn,
				supertypes=tuple(_resolve(s, unit, local) for s in supers),
				tags=tuple(tags),
				span=span,
			)
		)
	return unit


def _build_class(node: Tree, *, file: str | None) -> tuple[str, list[str], list[str], Span]:
	tags: list[str] = []
	supers: list[str] = []
	name: str | None = None
	for child in node.children:
		if isinstance(child, Token) and child.type == "NAME":
			name = child.value
		elif isinstance(child, Tree) and _name(child) == "annotation":
			tags.append(next(t.value for t in child.children if isinstance(t, Token)))
		elif isinstance(child, Tree) and _name(child) == "supertypes":
			supers.extend(_qname(q) for q in child.children if isinstance(q, Tree))
	if name is None:
		raise DeclarationParseError("class declaration missing a name", span=Span.from_meta(node.meta, file=file))
	return name, tags, supers, Span.from_meta(node.meta, file=file)


__all__ = ["DeclarationParseError", "DeclarationUnit", "parse_declarations", "parse_file"]
