"""Shared models for project metadata and debug configurations."""

from .configurations import *  # noqa: F403 - intentional re-export

__all__ = [name for name in dir() if not name.startswith("_")]
