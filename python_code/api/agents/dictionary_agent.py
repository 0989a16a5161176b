import random
import re
import threading
from typing import Set


DICTIONARY = [
    "alias", "token", "entry", "record", "datum", "value", "item", "node", "unit", "ref",
    "handle", "slot", "field", "flag", "marker", "facet", "aspect", "figure", "gauge", "meter",
]


def generate_alternate_name(original: str, rng: random.Random) -> str:
    base = rng.choice(DICTIONARY)
    # Detect styles
    is_upper_snake = bool(re.fullmatch(r"[A-Z0-9]+(_[A-Z0-9]+)+", original))
    is_pascal = bool(re.fullmatch(r"[A-Z][A-Za-z0-9]*", original))
    is_camel = bool(re.fullmatch(r"[a-z][A-Za-z0-9]*", original)) and any(c.isupper() for c in original)

    def to_pascal(s: str) -> str:
        return re.sub(r"(^|[_-])(\w)", lambda m: m.group(2).upper(), s)

    def to_camel(s: str) -> str:
        p = to_pascal(s)
        return p[0].lower() + p[1:] if p else p

    def to_upper_snake(s: str) -> str:
        return re.sub(r"[-\s]", "_", re.sub(r"([a-z])([A-Z])", r"\1_\2", s)).upper()

    if is_pascal:
        return to_pascal(base)
    if is_camel:
        return to_camel(base)
    if is_upper_snake:
        return to_upper_snake(base)
    return base


class DictionaryAgent():
    """Offline naming agent: picks dictionary words in the style of the original name."""

    def __init__(self, seed=None):
        self.rng = random.Random(seed)
        self.used_names: Set[str] = set()
        # get_response runs in worker threads during parallel passes
        self._lock = threading.Lock()

    def _unique(self, base: str) -> str:
        candidate = base
        i = 1
        while candidate in self.used_names:
            i += 1
            candidate = f"{base}_{i}"
        self.used_names.add(candidate)
        return candidate

    def get_response(self, current_name, surrounding_code):
        with self._lock:
            return self._unique(generate_alternate_name(current_name, self.rng))
