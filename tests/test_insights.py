from dataclasses import replace

import pytest

from greencalc.insights import confidence_score, recommendations
from greencalc.sources import default_source


def test_confidence_is_capped(solar_system, financial):
    mixed = solar_system.with_sources(default_source(name) for name in ("solar", "wind", "hydro", "wave"))
    assert confidence_score(mixed, financial, weather_resolved=True) == 1.0


def test_confidence_penalties(solar_system, financial):
    pricey = replace(financial, interest_rate_pct=20.0)
    assert confidence_score(solar_system, pricey, weather_resolved=True) == pytest.approx(0.9 * 0.8)


def test_recommendations_for_small_expensive_system(solar_system, financial, make_source):
    small = solar_system.with_sources([make_source(capacity_kw=3.0)])
    notes = recommendations(small, replace(financial, interest_rate_pct=12.0), {"solar": 0.5, "wind": 0.2})
    assert len(notes) == 3
    assert not any(note.startswith("Excellent") for note in notes)


def test_best_weather_is_named(solar_system, financial):
    notes = recommendations(solar_system, financial, {"solar": 0.5, "wind": 0.9})
    assert notes[0].startswith("Excellent conditions for wind energy")
