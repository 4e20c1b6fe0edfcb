"""Ordered evaluation of boot sources backed by a :class:`LoadRegistry`."""

from __future__ import annotations

import hashlib
import importlib.machinery
import importlib.util
import logging
import re
import sys
from collections.abc import Sequence
from pathlib import Path
from types import ModuleType

from .registry import LoadRegistry

LOGGER = logging.getLogger(__name__)
_MODULE_PREFIX = "loadstate.boot_modules"
_UNSAFE_CHARS = re.compile(r"[^0-9A-Za-z_]")


class BootError(RuntimeError):
    """Raised when a boot source is missing or fails to evaluate."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class _FreshSourceLoader(importlib.machinery.SourceFileLoader):
    """Source loader that never reads or writes bytecode caches."""

    def get_code(self, fullname: str):
        return self.source_to_code(self.get_data(self.path), self.path)


class BootLoader:
    """Evaluate sources from ``output_dir`` once per process."""

    def __init__(self, registry: LoadRegistry, output_dir: Path) -> None:
        self._registry = registry
        self._output_dir = Path(output_dir).expanduser()
        self._modules: dict[str, ModuleType] = {}
        self._load_order: list[str] = []

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def load(self, names: Sequence[str]) -> list[str]:
        """Evaluate ``names`` in order, skipping any already loaded.

        Returns the names evaluated by this call. A failing source is not
        marked loaded and stops the sequence.
        """

        if isinstance(names, str):
            raise TypeError("load() expects a sequence of names, not a str.")

        evaluated: list[str] = []
        for name in names:
            if self._registry.is_loaded(name):
                LOGGER.debug("Skipping '%s': already loaded", name)
                continue
            location = self.source_path(name)
            try:
                module = self._evaluate(name, location)
            except BootError as exc:
                LOGGER.error("%s", exc)
                raise
            except Exception as exc:
                LOGGER.exception("Failed to evaluate '%s' from %s", name, location)
                raise BootError(name, f"Failed to evaluate '{name}': {exc}") from exc
            self._modules[name] = module
            self._load_order.append(name)
            self._registry.mark_loaded(name)
            evaluated.append(name)
            LOGGER.debug("Loaded '%s' from %s", name, location)

        if evaluated:
            LOGGER.info("Evaluated %s boot source(s)", len(evaluated))
        return evaluated

    def get(self, name: str) -> ModuleType:
        """Return module by name."""
        try:
            return self._modules[name]
        except KeyError as exc:
            raise KeyError(
                f"Module '{name}' was not evaluated by this loader. "
                f"Available: {list(self._load_order)}"
            ) from exc

    def source_path(self, name: str) -> Path:
        return self._output_dir / name

    @property
    def module_names(self) -> list[str]:
        """Return names evaluated by this loader, in evaluation order."""
        return list(self._load_order)

    def _evaluate(self, name: str, path: Path) -> ModuleType:
        if not path.is_file():
            raise BootError(name, f"Boot source '{name}' not found: {path}")

        module_name = f"{_MODULE_PREFIX}.{_module_suffix(name)}"
        source_loader = _FreshSourceLoader(module_name, str(path))
        spec = importlib.util.spec_from_file_location(module_name, path, loader=source_loader)
        if spec is None or spec.loader is None:
            raise BootError(name, f"Cannot load boot source '{name}' from {path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[spec.name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(spec.name, None)
            raise
        return module


def _module_suffix(name: str) -> str:
    """Readable stem plus a digest of the raw name, so distinct names never collide."""
    stem = name[:-3] if name.endswith(".py") else name
    readable = _UNSAFE_CHARS.sub("_", stem) or "source"
    digest = hashlib.sha1(name.encode("utf-8", "surrogatepass")).hexdigest()[:12]
    return f"_{readable}_{digest}"


__all__ = ["BootError", "BootLoader"]
