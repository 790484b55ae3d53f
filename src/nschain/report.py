"""Line-oriented rendering of walk results."""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .walker import ROOT_ZONE, StepResult

ROOT_HEADER = "Retrieving list of root nameservers:"
NEXT_HOP_MARK = " ➡️ "
PLAIN_MARK = " - "


def format_header(zone: str, parent: str) -> List[str]:
    """Brief: Lines announcing a zone level before it is queried.

    Inputs:
      - zone: Fully-qualified zone about to be queried.
      - parent: Nameserver the query goes to.

    Outputs:
      - The root header for ".", otherwise a blank separator line followed by
        the "Finding nameservers ..." line.
    """

    if zone == ROOT_ZONE:
        return [ROOT_HEADER]
    return [
        "",
        f"Finding nameservers for zone '{zone}' using parent nameserver '{parent}'",
    ]


def format_nameservers(step: StepResult) -> List[str]:
    """Brief: One line per sorted nameserver; the next hop is marked unless final."""

    lines = []
    for nameserver in step.sorted_nameservers:
        if nameserver == step.selected and not step.is_final:
            lines.append(NEXT_HOP_MARK + nameserver)
        else:
            lines.append(PLAIN_MARK + nameserver)
    return lines


def format_step(step: StepResult) -> List[str]:
    return format_header(step.zone, step.parent) + format_nameservers(step)


def _write(lines: List[str], stream: Optional[TextIO]) -> None:
    out = stream or sys.stdout
    for line in lines:
        print(line, file=out)
    out.flush()


def print_header(zone: str, parent: str, stream: Optional[TextIO] = None) -> None:
    _write(format_header(zone, parent), stream)


def print_nameservers(step: StepResult, stream: Optional[TextIO] = None) -> None:
    _write(format_nameservers(step), stream)


def print_step(step: StepResult, stream: Optional[TextIO] = None) -> None:
    _write(format_step(step), stream)
