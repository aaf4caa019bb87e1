"""Load build configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from compose_html._constants import (
    DEFAULT_MIN_PAGE_USAGE,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SCRIPT_SRC_PREFIX,
)

from .models import BeautifyConfig, BuildConfig, BuildConfigError

PATH_KEYS = ("input_dir", "output_dir", "root_dir")
VALUE_KEYS = ("min_page_usage", "script_src_prefix", "beautify")


def load_build_config(
    path: Path | None = None,
    *,
    overrides: typ.Mapping[str, typ.Any] | None = None,
    required: bool = True,
) -> BuildConfig:
    """Load the YAML file describing a build and apply command-line overrides.

    Parameters
    ----------
    path : Path, optional
        Configuration file (for example ``compose.yaml``). Relative paths in
        the file resolve against the file's directory.
    overrides : Mapping[str, Any], optional
        Values that replace file values; ``None`` entries are ignored and
        relative paths resolve against the current working directory.
    required : bool, optional
        When ``False`` a missing file yields the defaults instead of an error.

    Returns
    -------
    BuildConfig
        The merged configuration.

    Raises
    ------
    FileNotFoundError
        If ``required`` is set and ``path`` does not exist.
    BuildConfigError
        If a value has the wrong type or an unknown key is present.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_build_config(Path("compose.yaml"))  # doctest: +SKIP
    >>> config.min_page_usage  # doctest: +SKIP
    2
    """
    raw: dict[str, typ.Any] = {}
    base_dir = Path.cwd()
    if path is not None and path.exists():
        raw = _read_yaml(path)
        base_dir = path.resolve().parent
    elif path is not None and required:
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    unknown = sorted(set(raw) - {*PATH_KEYS, *VALUE_KEYS})
    if unknown:
        msg = f"Unknown configuration keys: {', '.join(unknown)}"
        raise BuildConfigError(msg)

    values: dict[str, typ.Any] = {
        key: _resolve_path(raw[key], base_dir, key) for key in PATH_KEYS if key in raw
    }
    for key in VALUE_KEYS:
        if key in raw:
            values[key] = raw[key]
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key in PATH_KEYS:
            values[key] = _resolve_path(value, Path.cwd(), key)
        elif key == "beautify" and isinstance(value, bool):
            # A bare switch keeps the configured indent.
            configured = _build_beautify_config(values.get(key, True))
            values[key] = BeautifyConfig(enabled=value, indent=configured.indent)
        else:
            values[key] = value

    input_dir = values.get("input_dir", base_dir)
    return BuildConfig(
        input_dir=input_dir,
        output_dir=values.get("output_dir", input_dir / DEFAULT_OUTPUT_DIR),
        root_dir=values.get("root_dir"),
        min_page_usage=_int_value(
            values.get("min_page_usage", DEFAULT_MIN_PAGE_USAGE), "min_page_usage"
        ),
        script_src_prefix=_str_value(
            values.get("script_src_prefix", DEFAULT_SCRIPT_SRC_PREFIX),
            "script_src_prefix",
        ),
        beautify=_build_beautify_config(values.get("beautify", True)),
    )


def _read_yaml(path: Path) -> dict[str, typ.Any]:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise BuildConfigError(msg)
    return dict(loaded)


def _resolve_path(value: object, base_dir: Path, key: str) -> Path:
    match value:
        case Path():
            path = value
        case str() if value.strip():
            path = Path(value.strip())
        case _:
            msg = f"'{key}' must be a non-empty path."
            raise BuildConfigError(msg)
    return path if path.is_absolute() else (base_dir / path).resolve()


def _int_value(value: object, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"'{key}' must be an integer, got {value!r}."
        raise BuildConfigError(msg)
    return value


def _str_value(value: object, key: str) -> str:
    if not isinstance(value, str):
        msg = f"'{key}' must be a string, got {value!r}."
        raise BuildConfigError(msg)
    return value


def _build_beautify_config(value: object) -> BeautifyConfig:
    """Build a BeautifyConfig from ``true``/``false`` or a mapping payload."""
    match value:
        case BeautifyConfig():
            return value
        case bool():
            return BeautifyConfig(enabled=value)
        case dict():
            indent = value.get("indent")
            if indent is not None and (
                isinstance(indent, bool) or not isinstance(indent, int | str)
            ):
                msg = f"'beautify.indent' must be an integer or string, got {indent!r}."
                raise BuildConfigError(msg)
            enabled = bool(value.get("enabled", True))
            return BeautifyConfig(enabled=enabled, indent=indent)
        case _:
            msg = f"'beautify' must be a boolean or mapping, got {value!r}."
            raise BuildConfigError(msg)


__all__ = ["load_build_config"]
