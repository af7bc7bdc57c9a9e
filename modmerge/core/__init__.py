# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Shared primitives: source spans and diagnostics."""
