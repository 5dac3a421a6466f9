# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Configuration for flysession: YAML/TOML files, env overrides and dataclass binding."""

from __future__ import annotations

import dataclasses
import os
import re
import tomllib
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_PREFIX_ATTR = "__flysession_config_prefix__"
_ENV_PREFIX = "FLYSESSION_"
_FILE_STEM = "flysession"
_SUFFIXES = (".yaml", ".toml")
_MAX_PLACEHOLDER_DEPTH = 10
_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Attach a configuration prefix to a dataclass so :meth:`Config.bind` can fill it.

    Usage::

        @config_properties(prefix="flysession.session")
        @dataclass
        class SessionProperties:
            name: str = "flysession"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


def _lookup(data: dict[str, Any], key: str) -> Any:
    """Walk a dotted *key* through nested dicts, ``None`` when any step is missing."""
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
        if node is None:
            return None
    return node


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _merge(current, value)
        else:
            merged[key] = value
    return merged


def _read_file(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with path.open("rb") as fh:
            return tomllib.load(fh) or {}
    with path.open() as fh:
        return yaml.safe_load(fh) or {}


def _coerce(value: Any, target: Any) -> Any:
    """Convert string values (env vars, placeholders) to the annotated scalar type."""
    if not isinstance(value, str):
        return value
    if target is bool:
        return value.strip().lower() in _TRUE_STRINGS
    if target is int:
        return int(value)
    if target is float:
        return float(value)
    return value


class Config:
    """Nested configuration read with dotted keys.

    Lookup order, first hit wins:

    1. ``FLYSESSION_*`` environment variables (see :meth:`env_key`)
    2. values loaded from files or passed in as a dict
    3. the caller's default (or the dataclass default when binding)
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Files that contributed to this config, in merge order."""
        return list(self._sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    @classmethod
    def _from_files(cls, files: Iterator[tuple[Path, str]]) -> Config:
        data: dict[str, Any] = {}
        sources: list[str] = []
        for path, label in files:
            data = _merge(data, _read_file(path))
            sources.append(label)
        config = cls(data)
        config._sources = sources
        return config

    @classmethod
    def from_sources(cls, base_dir: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Merge every ``flysession`` file found under *base_dir*.

        ``config/flysession.{yaml,toml}`` is read first, then the copy in
        *base_dir* itself, then ``flysession-<profile>`` overlays from both
        places for each active profile.
        """
        base_dir = Path(base_dir)
        dirs = (base_dir / "config", base_dir)

        def files() -> Iterator[tuple[Path, str]]:
            for directory in dirs:
                for suffix in _SUFFIXES:
                    path = directory / f"{_FILE_STEM}{suffix}"
                    if path.is_file():
                        yield path, str(path)
            for profile in active_profiles or []:
                for directory in dirs:
                    for suffix in _SUFFIXES:
                        path = directory / f"{_FILE_STEM}-{profile}{suffix}"
                        if path.is_file():
                            yield path, f"{path} (profile: {profile})"

        return cls._from_files(files())

    @classmethod
    def from_file(cls, path: str | Path, active_profiles: list[str] | None = None) -> Config:
        """Read one file plus its ``<stem>-<profile><suffix>`` siblings.

        A missing *path* yields an empty config.
        """
        path = Path(path)

        def files() -> Iterator[tuple[Path, str]]:
            if not path.exists():
                return
            yield path, str(path)
            for profile in active_profiles or []:
                overlay = path.with_name(f"{path.stem}-{profile}{path.suffix}")
                if overlay.exists():
                    yield overlay, f"{overlay} (profile: {profile})"

        return cls._from_files(files())

    @staticmethod
    def env_key(key: str) -> str:
        """``flysession.session.max-age`` -> ``FLYSESSION_SESSION_MAX_AGE``."""
        return _ENV_PREFIX + key.removeprefix("flysession.").upper().replace(".", "_").replace("-", "_")

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value at dotted *key*.

        Strings may reference ``${ENV_VAR}``, ``${other.key}`` or
        ``${name:fallback}``; references are expanded on read.
        """
        override = os.environ.get(self.env_key(key))
        if override is not None:
            return override

        value = _lookup(self._data, key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._expand(value)
        return value

    def _expand(self, text: str, depth: int = 0) -> str:
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Placeholder expansion of '{text}' is too deep, check for circular references")

        def substitute(match: re.Match[str]) -> str:
            ref, sep, fallback = match.group(1).partition(":")
            env_value = os.environ.get(ref)
            if env_value is not None:
                return env_value
            found = _lookup(self._data, ref)
            if found is not None:
                resolved = str(found)
                return self._expand(resolved, depth + 1) if "${" in resolved else resolved
            if sep:
                return fallback
            raise ValueError(f"Cannot resolve placeholder '${{{match.group(1)}}}' from environment or config")

        return _PLACEHOLDER_RE.sub(substitute, text)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Return the mapping stored under *prefix*, or an empty dict."""
        section = _lookup(self._data, prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Instantiate a ``@config_properties`` dataclass from this config.

        Each field is looked up as ``<prefix>.<field-with-dashes>`` first and
        ``<prefix>.<field_with_underscores>`` second; absent fields keep
        their dataclass default.
        """
        prefix = getattr(config_cls, _PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{field.name.replace('_', '-')}")
            if value is None:
                value = self.get(f"{prefix}.{field.name}")
            if value is not None:
                kwargs[field.name] = _coerce(value, hints.get(field.name))
        return config_cls(**kwargs)
