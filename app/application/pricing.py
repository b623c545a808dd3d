"""Diagnosis text and repair price estimation for the appliance catalog.

Predefined issues are priced from ``BASE_PRICING`` (PHP) and adjusted by brand
and model signals. Custom free-text issues are validated here and, when remote
AI is unavailable, priced by a keyword and severity heuristic.

All randomness goes through an injectable ``random.Random`` so callers and
tests can make jitter reproducible.
"""
import math
import random
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .diagnosis_texts import GENERIC_DIAGNOSIS, INSTANT_DIAGNOSES

CUSTOM_ISSUE = "Others (please specify)"
FALLBACK_PRICE = 2500
MINIMUM_PRICE = 500
MIN_USD_ESTIMATE = 5
MAX_USD_ESTIMATE = 500

BASE_PRICING: Dict[str, Dict[str, int]] = {
    "Television": {
        "No display/black screen": 3200,
        "No sound": 2200,
        "Remote not working": 600,
        "Screen flickering": 2800,
        "Poor picture quality": 2500,
    },
    "Electric Fan": {
        "Not spinning": 800,
        "Making noise": 500,
        "Speed control not working": 400,
        "Oscillation not working": 300,
        "Power issues": 350,
    },
    "Air Conditioner": {
        "Not cooling": 3800,
        "Not turning on": 2200,
        "Making strange noises": 2800,
        "Water leaking": 1800,
        "Remote not working": 800,
    },
    "Refrigerator": {
        "Not cooling": 4200,
        "Making loud noises": 3200,
        "Water leaking": 2200,
        "Ice maker not working": 1800,
        "Door not sealing": 1200,
    },
    "Washing Machine": {
        "Not spinning": 3800,
        "Not draining": 2800,
        "Making loud noises": 3200,
        "Not filling with water": 2200,
        "Door not locking": 1800,
    },
    "Microwave": {
        "Not heating": 2800,
        "Not turning on": 1800,
        "Making strange noises": 2200,
        "Turntable not spinning": 1200,
        "Door not closing properly": 1000,
    },
}

CATEGORIES: List[str] = list(BASE_PRICING)

BRAND_MULTIPLIERS: Dict[str, float] = {
    # Premium
    "Samsung": 1.3, "LG": 1.2, "Sony": 1.4, "Panasonic": 1.1, "Sharp": 1.0,
    "Toshiba": 0.9, "Daikin": 1.3, "Carrier": 1.2, "Mitsubishi Electric": 1.4,
    "Whirlpool": 1.0, "Electrolux": 1.1, "GE": 1.0, "Hitachi": 1.1,
    "Philips": 1.0, "Xiaomi": 1.1,
    # Local brands
    "Condura": 1.0, "Kolin": 0.9, "Asahi": 0.8, "Asahi Appliances": 0.8,
    "Hanabishi": 0.7, "Imarflex": 0.7, "American Home": 0.8, "Fujidenzo": 0.8,
    "Everest": 0.8, "Devant": 0.9, "Beko": 0.9, "KDK": 0.9, "Astron": 0.8,
    "Standard": 0.7,
    # Budget
    "TCL": 0.9, "Hisense": 0.8, "Haier": 0.8, "Midea": 0.8, "Gree": 0.8,
    "Skyworth": 0.8, "Konka": 0.7, "AOC": 0.7, "KTC": 0.7, "Ross": 0.7,
    "Prestiz": 0.7, "Sanus": 0.7, "Xenon": 0.7, "Xtreme": 0.7, "Avision": 0.7,
    "Elba": 0.7, "Ezy": 0.7, "Tekno": 0.7, "Dowell": 0.7, "Fabriano": 0.7,
    "Koppel": 0.7, "Camel": 0.7, "Everlast": 0.7, "Black & Decker": 0.8,
    "Anker": 0.8,
}

_BRAND_LOOKUP: Dict[str, float] = {name.lower(): value for name, value in BRAND_MULTIPLIERS.items()}

# (keywords, multiplier); first group that matches wins
MODEL_SIGNALS: List[Tuple[Tuple[str, ...], float]] = [
    (("oled", "qled", "8k", "neo qled", "micro led", "mini led"), 1.3),
    (("4k", "hdr", "dolby vision", "quantum", "crystal"), 1.2),
    (("smart", "android", "webos", "tizen", "roku"), 1.1),
]

SCREEN_SIZE_PATTERN = re.compile(r'(\d+)[\s"]*(inch|in|"|cm)', re.IGNORECASE)
SCREEN_SIZE_STEPS: List[Tuple[int, float]] = [(75, 1.25), (65, 1.15), (55, 1.05)]

SEVERITY_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("critical", ("broken", "cracked", "shattered", "exploded", "burned", "melted", "dead", "completely")),
    ("major", ("not working", "stopped", "failed", "damaged", "leaking", "overheating", "smoking")),
    ("moderate", ("slow", "weak", "intermittent", "sometimes", "occasionally", "flickering", "noisy")),
    ("minor", ("slightly", "little", "small", "minor", "barely", "almost")),
]

COMPONENT_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "screen": ("screen", "display", "monitor", "lcd", "led", "picture", "image"),
    "power": ("power", "electric", "battery", "charging", "plug", "cord", "cable"),
    "mechanical": ("motor", "fan", "spinning", "rotating", "moving", "mechanical"),
    "electronic": ("circuit", "board", "chip", "sensor", "control", "remote"),
    "cooling": ("cooling", "heating", "temperature", "thermal", "refrigerant"),
    "water": ("water", "leak", "drain", "pump", "valve", "hose"),
}

COMPONENT_MULTIPLIERS: Dict[str, float] = {
    "screen": 1.5,
    "power": 1.2,
    "mechanical": 1.3,
    "electronic": 1.4,
    "cooling": 1.6,
    "water": 1.1,
}

BRAND_TIERS: List[Tuple[Tuple[str, ...], float]] = [
    (("samsung", "lg", "sony", "panasonic", "daikin", "mitsubishi"), 1.3),
    (("whirlpool", "electrolux", "sharp", "toshiba", "hitachi"), 1.1),
    (("generic", "unknown", "local", "cheap"), 0.8),
]

SEVERITY_BASE_PRICES: Dict[str, Dict[str, int]] = {
    "Television": {"critical": 3000, "major": 2000, "moderate": 1500, "minor": 1000},
    "Electric Fan": {"critical": 1200, "major": 800, "moderate": 600, "minor": 400},
    "Air Conditioner": {"critical": 4000, "major": 2500, "moderate": 1800, "minor": 1200},
    "Refrigerator": {"critical": 5000, "major": 3000, "moderate": 2000, "minor": 1500},
    "Washing Machine": {"critical": 3500, "major": 2200, "moderate": 1500, "minor": 1000},
}
DEFAULT_SEVERITY_PRICE = 1500

_REPEATED_CHAR = re.compile(r"(.)\1{8,}")
_SPECIAL_CHAR = re.compile(r"[^a-zA-Z0-9\s]")
_KEYBOARD_MASH = re.compile(
    r"^(asdfghjkl|qwertyuiop|zxcvbnm|qazwsxedc|rfvtgbyhn|ujmikolp;|qwertyuiopasdfghjklzxcvbnm)$",
    re.IGNORECASE,
)
_FIRST_INTEGER = re.compile(r"\d+")


@dataclass(frozen=True)
class IssueValidation:
    is_valid: bool
    reason: str = ""


def round_half_up(value: float) -> int:
    # Halves always go up (2.5 -> 3), unlike round()
    return int(math.floor(value + 0.5))


def issues_for(category: str) -> List[str]:
    return list(BASE_PRICING.get(category, {})) + [CUSTOM_ISSUE]


def is_predefined_issue(category: str, issue: str) -> bool:
    return issue in BASE_PRICING.get(category, {})


def brand_multiplier(brand: Optional[str]) -> float:
    if not brand:
        return 1.0
    return _BRAND_LOOKUP.get(brand.strip().lower(), 1.0)


def _labels(brand: Optional[str], model: Optional[str]) -> Tuple[str, str]:
    brand_info = f" {brand.strip()}" if brand and brand.strip() else ""
    model_info = f" ({model.strip()})" if model and model.strip() else ""
    return brand_info, model_info


def instant_diagnosis(category: str, issue: str, brand: Optional[str] = None, model: Optional[str] = None) -> str:
    brand_info, model_info = _labels(brand, model)
    template = INSTANT_DIAGNOSES.get(category, {}).get(issue)
    if template is None:
        return GENERIC_DIAGNOSIS.format(category=category, brand=brand_info, model=model_info, issue=issue)
    return template.format(brand=brand_info, model=model_info)


def heuristic_diagnosis(category: str, issue: str, brand: Optional[str] = None, model: Optional[str] = None) -> str:
    brand_info, model_info = _labels(brand, model)
    return GENERIC_DIAGNOSIS.format(category=category, brand=brand_info, model=model_info, issue=issue.strip())


def instant_base_price(category: str, issue: str, brand: Optional[str] = None, model: Optional[str] = None) -> Optional[int]:
    """Deterministic part of the predefined-issue price, before jitter.

    Returns None when the (category, issue) pair has no table entry.
    """
    base = BASE_PRICING.get(category, {}).get(issue)
    if base is None:
        return None

    price = base
    if brand:
        price = round_half_up(price * brand_multiplier(brand))

    if model:
        lowered = model.lower()
        for keywords, factor in MODEL_SIGNALS:
            if any(k in lowered for k in keywords):
                price = round_half_up(price * factor)
                break

        if category == "Television":
            match = SCREEN_SIZE_PATTERN.search(model)
            if match:
                size = int(match.group(1))
                for threshold, factor in SCREEN_SIZE_STEPS:
                    if size >= threshold:
                        price = round_half_up(price * factor)
                        break
    return price


def instant_price(
    category: str,
    issue: str,
    brand: Optional[str] = None,
    model: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> int:
    base = instant_base_price(category, issue, brand, model)
    if base is None:
        return FALLBACK_PRICE

    rng = rng or random.Random()
    variation = base * 0.05
    jittered = base + (rng.random() - 0.5) * 2 * variation
    rounded = round_half_up(jittered / 5) * 5
    return max(MINIMUM_PRICE, rounded)


def validate_custom_issue(text: str) -> IssueValidation:
    trimmed = (text or "").strip()

    if len(trimmed) < 2:
        return IssueValidation(False, "Please provide a description (at least 2 characters)")
    if len(trimmed) > 1000:
        return IssueValidation(False, "Description is too long. Please keep it under 1000 characters")
    if _REPEATED_CHAR.search(trimmed):
        return IssueValidation(False, "Please provide a more meaningful description")
    if len(_SPECIAL_CHAR.findall(trimmed)) > len(trimmed) * 0.5:
        return IssueValidation(False, "Please use more readable text to describe the issue")
    if _KEYBOARD_MASH.match(trimmed):
        return IssueValidation(False, "Please provide a meaningful description of the issue")
    return IssueValidation(True)


def detect_severity(text: str) -> str:
    lowered = text.lower()
    for severity, keywords in SEVERITY_KEYWORDS:
        if any(k in lowered for k in keywords):
            return severity
    return "moderate"


def detect_components(text: str) -> List[str]:
    lowered = text.lower()
    return [name for name, keywords in COMPONENT_KEYWORDS.items() if any(k in lowered for k in keywords)]


def brand_tier_multiplier(brand: Optional[str]) -> float:
    if not brand:
        return 1.0
    lowered = brand.lower()
    for names, factor in BRAND_TIERS:
        if any(n in lowered for n in names):
            return factor
    return 1.0


def heuristic_base_price(category: str, text: str, brand: Optional[str] = None) -> int:
    severity = detect_severity(text)
    base = SEVERITY_BASE_PRICES.get(category, {}).get(severity, DEFAULT_SEVERITY_PRICE)
    components = detect_components(text)
    component_factor = max((COMPONENT_MULTIPLIERS[c] for c in components), default=1.0)
    return round_half_up(base * component_factor * brand_tier_multiplier(brand))


def heuristic_price(category: str, text: str, brand: Optional[str] = None, rng: Optional[random.Random] = None) -> int:
    rng = rng or random.Random()
    price = heuristic_base_price(category, text, brand)
    variation = price * 0.1
    jittered = price + (rng.random() - 0.5) * 2 * variation
    return max(MINIMUM_PRICE, round_half_up(jittered))


def parse_usd_estimate(text: str) -> int:
    match = _FIRST_INTEGER.search(text or "")
    if not match:
        raise ValueError(f"No price found in response: {text!r}")
    value = int(match.group(0))
    if value < MIN_USD_ESTIMATE or value > MAX_USD_ESTIMATE:
        raise ValueError(f"Price {value} USD is outside {MIN_USD_ESTIMATE}-{MAX_USD_ESTIMATE}")
    return value


def diagnosis_prompt(category: str, issue: str, brand: Optional[str], model: Optional[str]) -> str:
    return f"""As an expert electronics repair technician, provide a detailed diagnosis for:

APPLIANCE: {category}
ISSUE DESCRIPTION: {issue}
BRAND: {brand or 'Not specified'}
MODEL: {model or 'Not specified'}

INSTRUCTIONS:
1. If MODEL is provided, use it to give SPECIFIC technical details about that exact model
2. Analyze the symptoms and provide a detailed technical diagnosis
3. Explain the most likely cause(s) of the problem with model-specific components
4. Mention any secondary issues that might be present
5. If no model provided, give general but detailed diagnosis
6. Keep the response informative but accessible to users

RESPOND WITH A DETAILED DIAGNOSIS (2-3 sentences, technical but clear)."""


def price_prompt(category: str, issue: str, brand: Optional[str], model: Optional[str]) -> str:
    return f"""As an expert electronics repair technician, analyze and estimate the repair cost in USD for:

APPLIANCE: {category}
ISSUE DESCRIPTION: {issue}
BRAND: {brand or 'Not specified'}
MODEL: {model or 'Not specified'}

INSTRUCTIONS:
1. If MODEL is provided, use it to give SPECIFIC pricing for that exact model's parts and repair complexity
2. Estimate repair cost in USD based on US market pricing for parts and labor
3. Factor in brand reputation and part availability (premium brands = higher costs)
4. Account for 2-4 hours typical labor time at $50-80/hour
5. If no model provided, use general category pricing

RESPOND WITH ONLY A NUMBER IN USD (no currency symbol, no explanation, no text):
Example: 150"""
