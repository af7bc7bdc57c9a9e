# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Symbol classifier.

Given a tagged declaration, decide whether it is a library module, the
application module, or an invalid use of the tag.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from modmerge.errors import INVALID_MODULE_KIND, ModuleMergeError
from modmerge.module import APPLICATION_MODULE_FQN, LIBRARY_MODULE_FQN
from modmerge.processor.declarations import Declaration, SubtypeQuery


class ModuleKind(Enum):
	LIBRARY = "library"
	APPLICATION = "application"
	INVALID = "invalid"


def classify(
	decl: Declaration,
	is_subtype: SubtypeQuery,
	*,
	library_contract: str = LIBRARY_MODULE_FQN,
	application_contract: str = APPLICATION_MODULE_FQN,
) -> ModuleKind:
	# Application first: the application contract is itself a library subtype.
	if is_subtype(decl, application_contract):
		return ModuleKind.APPLICATION
	if is_subtype(decl, library_contract):
		return ModuleKind.LIBRARY
	return ModuleKind.INVALID


def partition_declarations(
	decls: Iterable[Declaration],
	is_subtype: SubtypeQuery,
	*,
	library_contract: str = LIBRARY_MODULE_FQN,
	application_contract: str = APPLICATION_MODULE_FQN,
	round_no: int | None = None,
) -> tuple[list[Declaration], list[Declaration]]:
	"""
	Classify `decls` and split them into (libraries, applications).

	Input order is preserved within each list. The first invalid declaration
	aborts the whole batch.
	"""
	libraries: list[Declaration] = []
	applications: list[Declaration] = []
	for decl in decls:
		kind = classify(decl, is_subtype, library_contract=library_contract, application_contract=application_contract)
		if kind is ModuleKind.APPLICATION:
			applications.append(decl)
		elif kind is ModuleKind.LIBRARY:
			libraries.append(decl)
		else:
			raise ModuleMergeError(
				reason_code=INVALID_MODULE_KIND,
				message=(
					f"module tag can only be applied to {library_contract} and "
					f"{application_contract} implementations, not: {decl.fqn}"
				),
				declaration=decl.fqn,
				round=round_no,
				span=decl.span,
			)
	return libraries, applications


__all__ = ["ModuleKind", "classify", "partition_declarations"]
