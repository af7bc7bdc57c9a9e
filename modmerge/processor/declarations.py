# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declarations handed to the processor and the reference subtype query.

The processor never inspects a type hierarchy directly: it receives a
`SubtypeQuery` callable. `TypeHierarchy` is the implementation the host uses;
tests can pass any function instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable

from modmerge.core.span import Span
from modmerge.module import APPLICATION_MODULE_FQN, LIBRARY_MODULE_FQN


@dataclass(frozen=True)
class Declaration:
	"""A top-level type declaration: name, direct supertypes and annotation tags."""

	fqn: str
	supertypes: tuple[str, ...] = ()
	tags: tuple[str, ...] = ()
	span: Span = field(default_factory=Span)

	def is_tagged(self, tag: str) -> bool:
		return tag in self.tags

	def __str__(self) -> str:
		return self.fqn


SubtypeQuery = Callable[[Declaration, str], bool]


class TypeHierarchy:
	"""
	Supertype edges for every declaration seen so far in a session.

	Subtyping is reflexive and transitive. The built-in contracts are seeded
	with `ApplicationModule <: LibraryModule`; supertypes that were never
	declared are treated as leaves.
	"""

	def __init__(self) -> None:
		self._supers: dict[str, tuple[str, ...]] = {
			APPLICATION_MODULE_FQN: (LIBRARY_MODULE_FQN,),
			LIBRARY_MODULE_FQN: (),
		}

	def add(self, decl: Declaration) -> None:
		self._supers[decl.fqn] = tuple(decl.supertypes)

	def add_all(self, decls: Iterable[Declaration]) -> None:
		for decl in decls:
			self.add(decl)

	def _walk(self, seeds: Iterable[str], start: str) -> list[str]:
		out: list[str] = []
		seen = {start}
		queue = list(seeds)
		while queue:
			cur = queue.pop(0)
			if cur in seen:
				continue
			seen.add(cur)
			out.append(cur)
			queue.extend(self._supers.get(cur, ()))
		return out

	def supertypes_of(self, fqn: str) -> list[str]:
		"""All transitive supertypes of `fqn` (excluding itself), breadth-first."""
		return self._walk(self._supers.get(fqn, ()), fqn)

	def is_subtype_name(self, fqn: str, contract: str) -> bool:
		return fqn == contract or contract in self.supertypes_of(fqn)

	def is_subtype(self, decl: Declaration, contract: str) -> bool:
		"""
		`SubtypeQuery` over this hierarchy. A declaration the hierarchy does not
		know is answered from its own supertypes and is not recorded.
		"""
		if decl.fqn == contract:
			return True
		return contract in self._walk(self._supers.get(decl.fqn, decl.supertypes), decl.fqn)


__all__ = ["Declaration", "SubtypeQuery", "TypeHierarchy"]
