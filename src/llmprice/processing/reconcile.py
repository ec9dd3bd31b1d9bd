"""Match scraped tuples to catalog models and apply price changes in place."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config.settings import SYNTHESIS_FACTOR_DEFAULT
from ..models import PriceChange, ScrapedTuple
from ..utils.logging import get_logger

logger = get_logger(__name__)

Model = Dict[str, Any]

_DROPPED = object()


@dataclass
class ReconcileResult:
    changes: List[PriceChange] = field(default_factory=list)
    unmatched: List[str] = field(default_factory=list)
    skipped: int = 0


def _json_number(value: float):
    value = float(value)
    if value.is_integer():
        return int(value)
    return value


def match_rank(model: Model, name: str) -> Optional[Tuple[int, int, int]]:
    """Rank of ``model`` for a scraped name, ``None`` when it does not match.

    Higher is better: exact name/modelId first, then the longest shared
    substring, then the closest name length.
    """
    wanted = (name or "").strip().lower()
    if not wanted:
        return None
    m_name = str(model.get("name") or "").strip().lower()
    m_id = str(model.get("modelId") or "").strip().lower()

    overlaps = []
    if m_name and wanted in m_name:
        overlaps.append(len(wanted))
    if m_name and m_name in wanted:
        overlaps.append(len(m_name))
    if m_id and wanted in m_id:
        overlaps.append(len(wanted))
    if not overlaps:
        return None

    exact = 1 if wanted in (m_name, m_id) else 0
    return exact, max(overlaps), -abs(len(m_name) - len(wanted))


def match_model(models: Iterable[Model], name: str, prefer_longest: bool = True) -> Optional[Model]:
    best: Optional[Model] = None
    best_rank: Optional[Tuple[int, int, int]] = None
    for model in models:
        rank = match_rank(model, name)
        if rank is None:
            continue
        if not prefer_longest:
            return model
        # strict ">" keeps catalog order on ties
        if best_rank is None or rank > best_rank:
            best, best_rank = model, rank
    return best


def _apply(provider_name: str, model: Model, item: ScrapedTuple, protect_output: bool):
    """Write one tuple's prices into ``model``.

    Returns a :class:`PriceChange`, ``None`` when the catalog already agrees
    with the tuple, or ``_DROPPED`` when the tuple cannot be used.
    """
    try:
        new_input = float(item.input_price)
        pricing = model["pricing"]
        old_input = pricing["input"]
        old_output = pricing["output"]

        synthesized = item.output_synthesized or item.output_price is None
        if item.output_price is not None:
            new_output = float(item.output_price)
        else:
            new_output = round(new_input * SYNTHESIS_FACTOR_DEFAULT, 6)
    except (KeyError, TypeError, ValueError) as exc:
        logger.debug("  Skipping malformed tuple %r: %s", item, exc)
        return _DROPPED

    if synthesized:
        if new_input == 0:
            return _DROPPED
        if new_input == old_input:
            # an estimate never rewrites a known output on its own
            return None
        if protect_output:
            new_output = float(old_output)

    if old_input == new_input and old_output == new_output:
        return None

    change = PriceChange(
        provider=provider_name,
        model=model["name"],
        old_input=old_input,
        old_output=old_output,
        new_input=_json_number(new_input),
        new_output=_json_number(new_output),
    )
    pricing["input"] = change.new_input
    pricing["output"] = change.new_output
    return change


def reconcile(
    provider: Dict[str, Any],
    scraped: Iterable[ScrapedTuple],
    protect_output: bool = False,
    prefer_longest: bool = True,
) -> ReconcileResult:
    """Apply scraped prices to ``provider['models']``.

    Never raises. Every tuple is matched first; each catalog model then
    takes its best candidate: highest match rank, then a scraped output
    over an estimated one, then page order. A candidate that cannot be
    used passes the model on to the next one. The choice depends only on
    the scraped tuples, so a second run over the same input changes
    nothing.
    """
    result = ReconcileResult()
    provider_name = provider.get("name", "?") if isinstance(provider, dict) else "?"
    models = provider.get("models", []) if isinstance(provider, dict) else []

    candidates: Dict[int, List[Tuple[Tuple, ScrapedTuple]]] = {}
    targets: Dict[int, Model] = {}
    for index, item in enumerate(scraped):
        try:
            if item.input_price is None:
                result.skipped += 1
                continue
            float(item.input_price)
            model = match_model(models, item.name, prefer_longest=prefer_longest)
            if model is None:
                result.unmatched.append(item.name)
                logger.debug("  No catalog match for %r", item.name)
                continue
            rank = match_rank(model, item.name)
            real_output = not (item.output_synthesized or item.output_price is None)
        except (AttributeError, TypeError, ValueError) as exc:
            logger.debug("  Skipping malformed tuple %r: %s", item, exc)
            result.skipped += 1
            continue
        targets[id(model)] = model
        candidates.setdefault(id(model), []).append(((rank, real_output, -index), item))

    for key, entries in candidates.items():
        entries.sort(key=lambda entry: entry[0], reverse=True)
        for position, (_, item) in enumerate(entries):
            outcome = _apply(provider_name, targets[key], item, protect_output)
            if outcome is _DROPPED:
                result.skipped += 1
                continue
            result.skipped += len(entries) - position - 1
            if outcome is not None:
                result.changes.append(outcome)
            break

    if result.changes:
        logger.info("  Updated %d model prices", len(result.changes))
    return result
