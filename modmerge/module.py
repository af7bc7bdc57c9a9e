# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Runtime contracts implemented by tagged modules.

Declarations are classified against the fully-qualified names of these two
classes. `ApplicationModule` extends `LibraryModule`, so the classifier must
test for the application contract first.
"""

from __future__ import annotations

from typing import Any

LIBRARY_MODULE_FQN = "modmerge.module.LibraryModule"
APPLICATION_MODULE_FQN = "modmerge.module.ApplicationModule"


class LibraryModule:
	"""Setup logic contributed by a library; one of possibly many per application."""

	def apply(self, context: Any, registry: Any) -> None:
		"""Register components. The default does nothing."""


class ApplicationModule(LibraryModule):
	"""
	The single integration point of an application.

	Its presence tells the processor that every library module has been
	accounted for and the generated aggregator can be written.
	"""


__all__ = ["APPLICATION_MODULE_FQN", "ApplicationModule", "LIBRARY_MODULE_FQN", "LibraryModule"]
