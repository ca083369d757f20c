"""Filesystem discovery and dynamic loading of definition units.

Unit files are plain Python modules loaded by path. A unit exports a module
attribute named ``command``; anything that is not a recognised definition kind
is skipped. Discovery never raises: unreadable directories and broken units
degrade to empty results and are logged.
"""

from __future__ import annotations

from typing import Any, Optional
import asyncio
import hashlib
import importlib.util
import logging
import os
import sys

from .structures import ContextMenu, DefinitionKind, classify

logger = logging.getLogger(__name__)

UNIT_EXPORT = "command"
UNIT_SUFFIX = ".py"


def _is_candidate(name: str) -> bool:
    # Private helpers (_consts.py, __init__.py, __pycache__) are never units
    return not name.startswith("_") and not name.startswith(".")


def ListDirectory(path: str) -> list[str]:
    """Return absolute paths of the candidate entries of a directory.

    Args:
        path: Directory to list.

    Returns:
        list[str]: Sorted absolute child paths; empty if the directory is
        missing or unreadable.
    """
    try:
        names = sorted(os.listdir(path))
    except OSError as e:
        logger.debug("Cannot read directory '%s': %s", path, e)
        return []
    out: list[str] = []
    for name in names:
        if not _is_candidate(name):
            continue
        full = os.path.abspath(os.path.join(path, name))
        if os.path.isfile(full) and not name.endswith(UNIT_SUFFIX):
            continue
        out.append(full)
    return out


async def ReadDirectory(path: str) -> list[str]:
    """Async wrapper around ListDirectory that runs the listing off the loop."""
    return await asyncio.to_thread(ListDirectory, path)


def _module_name_for(path: str) -> str:
    digest = hashlib.sha1(path.encode("utf-8")).hexdigest()[:12]
    stem = os.path.splitext(os.path.basename(path))[0].replace(".", "_").replace("-", "_")
    return f"_definition_unit_{stem}_{digest}"


def LoadUnitModule(path: str) -> Optional[Any]:
    """Execute the module at ``path`` and return its exported object.

    The module is executed fresh on every call so a second registration pass
    sees edits made on disk.

    Returns:
        The ``command`` attribute of the module, or None when the module
        cannot be imported or exports nothing.
    """
    module_name = _module_name_for(path)
    try:
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            logger.warning("Skipping unit '%s': no import spec", path)
            return None
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise
    except Exception as e:
        logger.warning("Skipping unit '%s' (import failed): %s", path, e)
        return None
    return getattr(module, UNIT_EXPORT, None)


def LoadDefinition(path: str, expected: DefinitionKind) -> Optional[Any]:
    """Load a unit and return it only if it is of the expected kind."""
    obj = LoadUnitModule(path)
    if obj is None:
        return None
    kind = classify(obj)
    if kind is not expected:
        logger.debug("Skipping unit '%s': exported %s, expected %s", path, kind, expected.value)
        return None
    return obj


async def LoadDefinitionAsync(path: str, expected: DefinitionKind) -> Optional[Any]:
    return await asyncio.to_thread(LoadDefinition, path, expected)


async def LoadContextMenus(root: str) -> list[ContextMenu]:
    """Load every context menu directly under ``root`` (one level, no nesting)."""
    paths = [p for p in await ReadDirectory(root) if p.endswith(UNIT_SUFFIX)]
    results = await asyncio.gather(*(LoadDefinitionAsync(p, DefinitionKind.CONTEXT_MENU) for p in paths))
    menus = [m for m in results if m is not None]
    logger.info("Loaded %d context menus from %s", len(menus), root)
    return menus
