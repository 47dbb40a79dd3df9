import re
from datetime import timedelta


class TimeParser:
    def __init__(self) -> None:
        self._units = {
            "ms": "milliseconds",
            "s": "seconds",
            "m": "minutes",
            "h": "hours",
        }

    def parse(self, time_amount: str) -> float:
        matches = list(
            re.finditer(
                r"(?P<val>\d+(\.\d+)?)(?P<unit>ms|[smh])?",
                time_amount.strip(),
                flags=re.I,
            )
        )

        if not matches:
            raise ValueError(f"Invalid duration: {time_amount!r}")

        return float(
            timedelta(
                **{
                    self._units.get(
                        (m.group("unit") or "s").lower(),
                        "seconds",
                    ): float(
                        m.group("val")
                    )
                    for m in matches
                }
            ).total_seconds()
        )
