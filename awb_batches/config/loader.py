from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader for the highlighted batch extractor.

Responsibilities:
- Load YAML config (default: config/extract.yml)
- Validate keys against the bundled JSON schema (config_schema.json)
- Apply defaults for every omitted key
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"
DEFAULT_CONFIG_PATH = Path("config/extract.yml")
CONFIG_ENV_VAR = "AWB_BATCHES_CONFIG"

DEFAULT_IDENTIFIER_TOKENS = ("AWB No", "提单号")
DEFAULT_GROUP_KEY_TOKENS = ("Collaborated Batch", "WMS协作批次")
DEFAULT_QUANTITY_TOKENS = ("大箱数", "箱数", "Box Count", "Box Qty")
# M列 (13列目, index 12): 見出しが無い旧フォーマット用の位置フォールバック
DEFAULT_QUANTITY_FALLBACK_INDEX = 12
DEFAULT_CSV_HEADERS = ("WMS协作批次", "AWB No", "大箱数")

CLASSIFIERS = ("majority", "fill")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class HeaderTokens:
    identifier: tuple[str, ...] = DEFAULT_IDENTIFIER_TOKENS
    group_key: tuple[str, ...] = DEFAULT_GROUP_KEY_TOKENS
    quantity: tuple[str, ...] = DEFAULT_QUANTITY_TOKENS


@dataclass(frozen=True)
class ExportConfig:
    csv_headers: tuple[str, str, str] = DEFAULT_CSV_HEADERS
    identifier_separator: str = ", "
    encoding: str = "utf-8-sig"  # Excel で中文見出しを正しく開くため BOM 付き


@dataclass(frozen=True)
class ExtractConfig:
    headers: HeaderTokens = field(default_factory=HeaderTokens)
    quantity_fallback_index: int | None = DEFAULT_QUANTITY_FALLBACK_INDEX
    allowed_extensions: tuple[str, ...] = (".xlsx",)
    sheet: str | None = None  # None = 先頭シート
    classifier: str = "majority"
    export: ExportConfig = field(default_factory=ExportConfig)
    error_log_dir: str = "./logs"
    preview_limit: int = 5


def default_config() -> ExtractConfig:
    return ExtractConfig()


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: the schema file is missing or invalid, or the data violates it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _tokens(raw: dict[str, Any], key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    values = raw.get(key)
    if values is None:
        return default
    return tuple(str(v).strip() for v in values if str(v).strip())


def load_config(path: Path) -> ExtractConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    headers_raw = data.get("headers") or {}
    headers = HeaderTokens(
        identifier=_tokens(headers_raw, "identifier", DEFAULT_IDENTIFIER_TOKENS),
        group_key=_tokens(headers_raw, "group_key", DEFAULT_GROUP_KEY_TOKENS),
        quantity=_tokens(headers_raw, "quantity", DEFAULT_QUANTITY_TOKENS),
    )
    if not headers.identifier or not headers.group_key:
        raise ConfigError("config validation failed: identifier and group_key need at least one token")

    export_raw = data.get("export") or {}
    export = ExportConfig(
        csv_headers=tuple(export_raw.get("csv_headers", DEFAULT_CSV_HEADERS)),  # type: ignore[arg-type]
        identifier_separator=export_raw.get("identifier_separator", ", "),
        encoding=export_raw.get("encoding", "utf-8-sig"),
    )

    extensions = data.get("allowed_extensions", [".xlsx"])
    return ExtractConfig(
        headers=headers,
        quantity_fallback_index=data.get("quantity_fallback_index", DEFAULT_QUANTITY_FALLBACK_INDEX),
        allowed_extensions=tuple(e.lower() for e in extensions),
        sheet=data.get("sheet"),
        classifier=data.get("classifier", "majority"),
        export=export,
        error_log_dir=data.get("error_log_dir", "./logs"),
        preview_limit=data.get("preview_limit", 5),
    )


def resolve_config(explicit: Path | None = None) -> ExtractConfig:
    """Pick the config for a run.

    Priority: explicit path > $AWB_BATCHES_CONFIG > config/extract.yml > built-in defaults.
    An explicitly requested file (argument or env var) must exist.
    """
    if explicit is not None:
        return load_config(explicit)
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return load_config(Path(env_path))
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return default_config()
