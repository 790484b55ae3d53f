"""Nameserver Selector: uniform random pick of the next hop."""

from __future__ import annotations

import random
import time
from typing import Optional, Sequence

# Process-wide source, seeded once from the clock. Pass an explicit
# random.Random to choose_nameserver() for reproducible selection.
_rng = random.Random(time.time())


def choose_nameserver(
    nameservers: Sequence[str], rng: Optional[random.Random] = None
) -> str:
    """Brief: Pick one member of `nameservers` uniformly at random.

    Inputs:
      - nameservers: Non-empty sequence of hostnames.
      - rng: Optional generator; defaults to the process-wide source.

    Outputs:
      - One element of `nameservers`.
    """

    if not nameservers:
        raise ValueError("cannot choose from an empty nameserver list")
    return (rng or _rng).choice(list(nameservers))
