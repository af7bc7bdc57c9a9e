# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
modmerge: multi-pass module discovery and aggregator generation.

The processor entrypoint is `modmerge.processor.processor.ModuleProcessor`;
the reference host loop is `modmerge.host.BuildSession` and the CLI
entrypoint is `modmerge.cli:main`.
"""

__all__ = []
