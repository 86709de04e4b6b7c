"""Trade/industry classification codes per procurement category."""

from __future__ import annotations

from supplier_intel.modules.suppliers.schemas import TaxonomyCodes

_TAXONOMY: dict[str, dict[str, list[str]]] = {
    "aluminium": {
        "HS": ["7601", "7602", "7603", "7604", "7605", "7606", "7607", "7608", "7609"],
        "SIC": ["3334", "3353", "3354", "3355", "3356"],
        "UNSPSC": ["111015", "111016", "111017", "111018"],
        "NAICS": ["331312", "331313", "331314", "331315", "331316"],
    },
    "steel": {
        "HS": ["7201", "7202", "7203", "7204", "7205", "7206", "7207", "7208", "7209"],
        "SIC": ["3312", "3313", "3315", "3316", "3317"],
        "UNSPSC": ["111015", "111016", "111017"],
        "NAICS": ["331111", "331112", "331210", "331221", "331222"],
    },
    "electronics": {
        "HS": ["8471", "8473", "8474", "8517", "8528", "8532", "8533", "8534"],
        "SIC": ["3571", "3572", "3573", "3574", "3575", "3576", "3577"],
        "UNSPSC": ["411000", "411100", "411200", "411300"],
        "NAICS": ["334111", "334112", "334113", "334119", "334210", "334220"],
    },
    "automotive": {
        "HS": ["8701", "8702", "8703", "8704", "8705", "8706", "8707", "8708"],
        "SIC": ["3711", "3713", "3714", "3715", "3716"],
        "UNSPSC": ["251000", "251100", "251200", "251300"],
        "NAICS": ["336111", "336112", "336120", "336211", "336212"],
    },
    "pharmaceuticals": {
        "HS": ["3001", "3002", "3003", "3004", "3005", "3006"],
        "SIC": ["2833", "2834", "2835", "2836"],
        "UNSPSC": ["511000", "511100", "511200", "511300"],
        "NAICS": ["325412", "325413", "325414", "325415"],
    },
    "chemicals": {
        "HS": ["2801", "2802", "2803", "2804", "2805", "2806", "2807", "2808", "2809"],
        "SIC": ["2812", "2813", "2816", "2819", "2821", "2822", "2823", "2824"],
        "UNSPSC": ["121000", "121100", "121200", "121300"],
        "NAICS": ["325110", "325120", "325130", "325180", "325190", "325200"],
    },
}

_ALIASES = {"aluminum": "aluminium"}

_GENERIC = ["Generic category codes"]


def get_taxonomy_codes(category: str) -> TaxonomyCodes:
    """HS / SIC / UNSPSC / NAICS codes for a category (placeholder if unknown)."""
    key = (category or "").strip().lower()
    key = _ALIASES.get(key, key)
    codes = _TAXONOMY.get(key)
    if codes is None:
        return TaxonomyCodes(HS=_GENERIC, SIC=_GENERIC, UNSPSC=_GENERIC, NAICS=_GENERIC)
    return TaxonomyCodes(**codes)
