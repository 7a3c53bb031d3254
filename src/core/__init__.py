"""Lantern audit core: run context, orchestration and the audit runner."""
