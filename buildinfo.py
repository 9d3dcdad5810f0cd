"""Branch build timestamps from SteamCMD app_info_print output."""

import re

from fetchers.base import ParseError
from models import BRANCH_ORDER, BranchBuild, BuildSnapshot

# Build data for every branch lives below this key in the depots section
_BRANCHES_ANCHOR = '"branches"'

# Quotes and tabs are KeyValues formatting; removing them glues each key to its value
_NOISE_RE = re.compile(r'["\t]')

# "timeupdated" glued to an epoch timestamp. Build ids use a different key, so
# they never match here even though they are digit runs of similar length.
_TIME_UPDATED_RE = re.compile(r"timeupdated(\d{6,12})(?!\d)")
_BUILD_ID_RE = re.compile(r"buildid(\d+)")


def parse_build_info(raw: str) -> BuildSnapshot:
    """Extract public/beta/private last-update timestamps from app_info_print output.

    Raises ParseError when the branches section is missing or it does not hold
    exactly one timestamp per branch.
    """
    start = raw.find(_BRANCHES_ANCHOR)
    if start == -1:
        raise ParseError("no branches section found")

    section = _NOISE_RE.sub("", raw[start:])

    timestamps = [int(m) for m in _TIME_UPDATED_RE.findall(section)]
    if not timestamps:
        raise ParseError("no build information found")
    if len(timestamps) != len(BRANCH_ORDER):
        raise ParseError(
            f"expected {len(BRANCH_ORDER)} branch timestamps, found {len(timestamps)}"
        )

    build_ids = _BUILD_ID_RE.findall(section)
    if len(build_ids) != len(BRANCH_ORDER):
        build_ids = [None] * len(BRANCH_ORDER)

    branches = {
        name: BranchBuild(name=name, build_id=build_id, time_updated=ts)
        for name, build_id, ts in zip(BRANCH_ORDER, build_ids, timestamps)
    }
    return BuildSnapshot(**branches)
