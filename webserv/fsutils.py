"""Filesystem and selection helpers used while building responses."""

import os
import re
import time

from webserv.textutils import concat_paths

_DIGITS = re.compile(r"[0-9]+")

_LISTING_HEAD = (
    "<html>\n<head><title>List of directory content</title></head>\n<body>\n"
    '<h1>Index Of </h1><hr>\n<table style="width: 100%">'
)
_LISTING_TAIL = "</table>\n<hr>\n</body>\n</html>"


def is_number(text: str) -> bool:
    """Return True if ``text`` is a non-empty run of ASCII digits."""
    return _DIGITS.fullmatch(text) is not None


def find_position(values: list[int]) -> int:
    """Return the index of the smallest non-negative value, or -1."""
    best = -1
    for index, value in enumerate(values):
        if value > -1 and (best == -1 or value < values[best]):
            best = index
    return best


def longest_common_prefix(text: str, candidates: list[str]) -> int:
    """Return the longest prefix length ``text`` shares with any candidate."""
    return max((len(os.path.commonprefix([text, c])) for c in candidates), default=0)


def find_index_of_max(values: list[int]) -> int:
    """Return the index of the first largest value."""
    if not values:
        raise ValueError("find_index_of_max() needs at least one value")
    return max(range(len(values)), key=values.__getitem__)


def _link_base(dir_path: str) -> str:
    base = dir_path[4:] if dir_path.startswith("www") else dir_path
    return base[base.rfind("/") + 1:]


def directory_listing_html(dir_path: str) -> str:
    """Return an HTML table listing the entries of ``dir_path``."""
    try:
        names = [".", "..", *sorted(os.listdir(dir_path))]
    except OSError:
        names = []
    link_base = _link_base(dir_path)
    parts = [_LISTING_HEAD]
    for name in names:
        try:
            info = os.stat(concat_paths(dir_path, name))
            size, mtime = info.st_size, info.st_mtime
        except OSError:
            size, mtime = 0, 0.0
        parts.append(
            f'\n<tr>\n\t<td><a href="{concat_paths(link_base, name)}">{name}</a><br>'
            f"</td>\n\t<td>{time.ctime(mtime)}\n</td>\n\t<td>{size}</td></tr>"
        )
    parts.append(_LISTING_TAIL)
    return "".join(parts)


def current_time_millis() -> int:
    """Return the current time in milliseconds, at whole-second precision."""
    return int(time.time()) * 1000