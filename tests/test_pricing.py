import random

import pytest

from app.application.pricing import (
    BASE_PRICING,
    CUSTOM_ISSUE,
    FALLBACK_PRICE,
    MINIMUM_PRICE,
    brand_multiplier,
    detect_components,
    detect_severity,
    heuristic_base_price,
    heuristic_price,
    instant_base_price,
    instant_diagnosis,
    instant_price,
    issues_for,
    parse_usd_estimate,
    round_half_up,
    validate_custom_issue,
)


def test_round_half_up_rounds_halves_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


@pytest.mark.parametrize("seed", range(25))
def test_instant_price_stays_near_base(seed):
    rng = random.Random(seed)
    for category, issues in BASE_PRICING.items():
        for issue in issues:
            base = instant_base_price(category, issue)
            price = instant_price(category, issue, rng=rng)
            assert price % 5 == 0
            assert price >= MINIMUM_PRICE
            assert abs(price - max(base, MINIMUM_PRICE)) <= base * 0.05 + 2.5 or price == MINIMUM_PRICE


def test_samsung_refrigerator_not_cooling():
    base = instant_base_price("Refrigerator", "Not cooling", "Samsung")
    assert base == 5460
    rng = random.Random(7)
    for _ in range(50):
        price = instant_price("Refrigerator", "Not cooling", "Samsung", rng=rng)
        assert 5460 * 0.95 - 2.5 <= price <= 5460 * 1.05 + 2.5
        assert price % 5 == 0
    text = instant_diagnosis("Refrigerator", "Not cooling", "Samsung")
    assert "Samsung" in text
    assert "{" not in text


def test_brand_lookup_ignores_case():
    assert brand_multiplier("samsung") == brand_multiplier("Samsung") == 1.3
    assert brand_multiplier("  sony ") == 1.4
    assert brand_multiplier("NoNameCo") == 1.0
    assert brand_multiplier(None) == 1.0


def test_model_signals_and_screen_size():
    # 2200 * 1.4 (Sony) -> 3080, OLED * 1.3 -> 4004, 55 inch * 1.05 -> 4204
    assert instant_base_price("Television", "No sound", "Sony", "55 inch OLED") == 4204
    # Screen size only applies to televisions
    assert instant_base_price("Microwave", "Not heating", None, "smart 60 inch") == round_half_up(2800 * 1.1)


def test_unknown_pair_falls_back():
    assert instant_base_price("Television", "Exploded") is None
    assert instant_price("Television", "Exploded") == FALLBACK_PRICE


def test_issue_lists_end_with_custom_option():
    for category in BASE_PRICING:
        issues = issues_for(category)
        assert issues[-1] == CUSTOM_ISSUE
        assert len(issues) == len(BASE_PRICING[category]) + 1


def test_custom_issue_validation():
    assert validate_custom_issue("a").is_valid is False
    assert validate_custom_issue("aaaaaaaaa").is_valid is False
    assert validate_custom_issue("x" * 1001).is_valid is False
    assert validate_custom_issue("!!!???###").is_valid is False
    assert validate_custom_issue("qwertyuiop").is_valid is False
    assert validate_custom_issue("The fan stopped spinning after a power outage").is_valid is True


def test_severity_and_components():
    assert detect_severity("My TV screen is cracked") == "critical"
    assert detect_severity("water is leaking from the bottom") == "major"
    assert detect_severity("it is a bit noisy") == "moderate"
    assert detect_severity("slightly loose knob") == "minor"
    assert detect_severity("it behaves oddly") == "moderate"
    assert detect_components("the screen and the power cord") == ["screen", "power"]


def test_heuristic_prices():
    assert heuristic_base_price("Television", "My TV screen is cracked") == 4500
    assert heuristic_base_price("Television", "My TV screen is cracked", "LG") == round_half_up(4500 * 1.3)
    # Categories without a severity table use the default price
    assert heuristic_base_price("Microwave", "it behaves oddly") == 1500
    rng = random.Random(3)
    for _ in range(20):
        assert heuristic_price("Electric Fan", "slightly loose knob", rng=rng) == MINIMUM_PRICE
        price = heuristic_price("Television", "My TV screen is cracked", rng=rng)
        assert 4050 <= price <= 4950


def test_parse_usd_estimate():
    assert parse_usd_estimate("150") == 150
    assert parse_usd_estimate("Approximately 80 USD") == 80
    with pytest.raises(ValueError):
        parse_usd_estimate("a lot")
    with pytest.raises(ValueError):
        parse_usd_estimate("600")
    with pytest.raises(ValueError):
        parse_usd_estimate("$1,200")
