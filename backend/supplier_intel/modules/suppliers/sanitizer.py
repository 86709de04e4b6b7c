"""Post-processing of LLM supplier profiles before Pydantic validation.

Fixes common LLM output errors:
  1. Numeric fields returned as objects or lists -> None
  2. Booleans in numeric fields -> None (not a count)
  3. List fields returned as null -> [] and as a bare string -> [string]
  4. List items wrapped in {"name": ...} / {"value": ...} dicts -> plain strings
  5. Plain text fields returned as lists -> joined with "; "
  6. productOfferings returned as a list of product names -> {"name": "Yes"}
  7. recentNews entries that are not objects are dropped
"""

from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# Field-type constants (camelCase wire names)
# ---------------------------------------------------------------------------

NUMERIC_FIELDS = {"revenue", "employees", "yearFounded", "latitude", "longitude"}

STRING_LIST_FIELDS = {
    "certifications",
    "geographicCoverage",
    "industriesServed",
    "strengths",
    "weaknesses",
    "subsidiaries",
    "awards",
    "valueAddedServices",
}

PLAIN_STRING_FIELDS = {
    "id",
    "companyName",
    "companyType",
    "website",
    "companyBrief",
    "headquartersAddress",
    "headquartersCity",
    "headquartersCountry",
    "productionCapacity",
    "contactEmail",
    "parentCompany",
    "ceo",
    "diversity",
    "esgStatus",
    "cybersecurityUpdates",
    "netProfitMargin",
    "supplyChainDisruptions",
    "plantShutdowns",
}


def _unwrap(item: Any) -> str | None:
    if item is None:
        return None
    if isinstance(item, dict):
        for key in ("value", "name", "title"):
            if item.get(key) is not None:
                return str(item[key])
        joined = "; ".join(f"{k}: {v}" for k, v in item.items() if v is not None)
        return joined or None
    return str(item)


def _fix_numeric(val: Any) -> Any:
    if isinstance(val, bool) or isinstance(val, (dict, list, tuple, set)):
        return None
    return val


def _fix_string_list(val: Any) -> list[str]:
    if val is None:
        return []
    if isinstance(val, str):
        return [val] if val.strip() else []
    if isinstance(val, dict):
        return [str(k) for k in val]
    if not isinstance(val, (list, tuple)):
        return [str(val)]
    cleaned = []
    for item in val:
        v = _unwrap(item)
        if v:
            cleaned.append(v)
    return cleaned


def _fix_plain_string(val: Any) -> str | None:
    if val is None or isinstance(val, str):
        return val
    if isinstance(val, (list, tuple)):
        parts = [p for p in (_unwrap(item) for item in val) if p]
        return "; ".join(parts) if parts else None
    return _unwrap(val)


def _fix_offerings(val: Any) -> dict[str, str]:
    if isinstance(val, dict):
        return {str(k): str(v) if v is not None else "No" for k, v in val.items()}
    if isinstance(val, (list, tuple)):
        return {name: "Yes" for name in (_unwrap(item) for item in val) if name}
    return {}


def sanitize_profile_payload(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with LLM shape errors repaired."""
    result: dict[str, Any] = {}
    for key, val in data.items():
        if key in NUMERIC_FIELDS:
            result[key] = _fix_numeric(val)
        elif key in STRING_LIST_FIELDS:
            result[key] = _fix_string_list(val)
        elif key in PLAIN_STRING_FIELDS:
            result[key] = _fix_plain_string(val)
        elif key == "productOfferings":
            result[key] = _fix_offerings(val)
        elif key == "recentNews":
            result[key] = [n for n in val if isinstance(n, dict)] if isinstance(val, list) else []
        else:
            result[key] = val
    return result
