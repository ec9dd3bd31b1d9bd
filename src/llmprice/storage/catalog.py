"""Canonical pricing catalog: load, validate and persist ``llm-pricing.json``.

The catalog is kept as the plain JSON tree so fields the pipeline does not
know about (category, features, ...) survive a run unchanged.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from numbers import Real
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import CatalogMalformed, CatalogMissing, SaveFailed
from ..utils.logging import get_logger

logger = get_logger(__name__)

Catalog = Dict[str, Any]


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def utc_now_iso() -> str:
    """Millisecond ISO-8601 UTC timestamp with a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def validate_catalog(data: Any, path: Union[str, Path] = "<catalog>") -> Catalog:
    """Check the structural invariants; raise :class:`CatalogMalformed`."""
    if not isinstance(data, dict):
        raise CatalogMalformed(path, "top level must be an object")

    if parse_timestamp(data.get("lastUpdated")) is None:
        raise CatalogMalformed(path, "'lastUpdated' must be an ISO-8601 timestamp")

    providers = data.get("providers")
    if not isinstance(providers, list):
        raise CatalogMalformed(path, "'providers' must be a list")

    seen_providers = set()
    for p_idx, provider in enumerate(providers):
        where = f"providers[{p_idx}]"
        if not isinstance(provider, dict):
            raise CatalogMalformed(path, f"{where} must be an object")
        name = provider.get("name")
        if not isinstance(name, str) or not name.strip():
            raise CatalogMalformed(path, f"{where}.name is required")
        if name in seen_providers:
            raise CatalogMalformed(path, f"duplicate provider name {name!r}")
        seen_providers.add(name)

        models = provider.get("models")
        if not isinstance(models, list):
            raise CatalogMalformed(path, f"{where}.models must be a list")

        seen_ids = set()
        for m_idx, model in enumerate(models):
            m_where = f"{name}.models[{m_idx}]"
            if not isinstance(model, dict):
                raise CatalogMalformed(path, f"{m_where} must be an object")
            for key in ("name", "modelId"):
                if not isinstance(model.get(key), str):
                    raise CatalogMalformed(path, f"{m_where}.{key} is required")
            if model["modelId"] in seen_ids:
                raise CatalogMalformed(path, f"{name}: duplicate modelId {model['modelId']!r}")
            seen_ids.add(model["modelId"])

            pricing = model.get("pricing")
            if not isinstance(pricing, dict):
                raise CatalogMalformed(path, f"{m_where}.pricing is required")
            for key in ("input", "output"):
                value = pricing.get(key)
                if not _is_number(value):
                    raise CatalogMalformed(path, f"{m_where}.pricing.{key} must be numeric")
                if value < 0:
                    raise CatalogMalformed(path, f"{m_where}.pricing.{key} must be >= 0")

    return data


def load_catalog(path: Union[str, Path]) -> Catalog:
    """Read and validate the catalog. No implicit repair."""
    path = Path(path)
    if not path.exists():
        raise CatalogMissing(path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CatalogMalformed(path, f"invalid JSON: {exc}") from exc
    except OSError as exc:
        raise CatalogMalformed(path, f"unreadable: {exc}") from exc

    catalog = validate_catalog(data, path)
    logger.info("Loaded existing data: %d providers", len(catalog["providers"]))
    return catalog


def next_timestamp(previous: Any) -> str:
    """Current instant, never earlier than ``previous``."""
    now = utc_now_iso()
    prev = parse_timestamp(previous)
    if prev is not None and prev > parse_timestamp(now):
        return previous
    return now


def save_catalog(path: Union[str, Path], catalog: Catalog) -> str:
    """Stamp ``lastUpdated`` and write the catalog atomically.

    The JSON goes to a temp file in the target directory which then replaces
    the catalog, so readers only ever see the old or the new version.
    Returns the timestamp written.
    """
    path = Path(path)
    stamp = next_timestamp(catalog.get("lastUpdated"))
    catalog["lastUpdated"] = stamp
    payload = json.dumps(catalog, indent=2, ensure_ascii=False) + "\n"

    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.stem}.",
            suffix=".tmp",
            delete=False,
        ) as fh:
            tmp_name = fh.name
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise SaveFailed(path, f"could not write catalog: {exc}") from exc
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.debug("Temp file already gone: %s", tmp_name)

    logger.info("Catalog saved: %s", path)
    return stamp


def find_provider(catalog: Catalog, name: str) -> Optional[Dict[str, Any]]:
    for provider in catalog.get("providers", []):
        if provider.get("name") == name:
            return provider
    return None


def model_counts(catalog: Catalog) -> List[int]:
    return [len(p.get("models", [])) for p in catalog.get("providers", [])]
