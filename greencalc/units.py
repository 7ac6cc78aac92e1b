from __future__ import annotations

from typing import NewType

# Tagged floats so kW, kWh and money stay apart in signatures.
Kw = NewType("Kw", float)
Kwh = NewType("Kwh", float)
KgCo2 = NewType("KgCo2", float)
Currency = NewType("Currency", float)
CurrencyPerKwh = NewType("CurrencyPerKwh", float)
Percent = NewType("Percent", float)
Years = NewType("Years", int)
