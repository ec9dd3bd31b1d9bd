from typing import Any, Dict, List


def validate_pricing(pricing: Dict[str, Any]) -> List[str]:
    warnings = []

    input_price = pricing.get("input")
    output_price = pricing.get("output")

    if (input_price is not None and input_price < 0) or (output_price is not None and output_price < 0):
        warnings.append("negative_price")

    if input_price and output_price is not None and output_price < 0.5 * input_price:
        warnings.append("output_below_half_input")

    return warnings


def price_warnings(catalog: Dict[str, Any]) -> Dict[str, List[str]]:
    """Sanity warnings per ``"Provider/Model"``; never blocks a save."""
    found: Dict[str, List[str]] = {}
    for provider in catalog.get("providers", []):
        for model in provider.get("models", []):
            codes = validate_pricing(model.get("pricing") or {})
            if codes:
                found[f"{provider.get('name')}/{model.get('name')}"] = codes
    return found
