"""Small string helpers shared by the request and response code."""

_WHITESPACE = " \t\n\r\f\v"


def concat_paths(base: str, tail: str) -> str:
    """Join two path fragments with exactly one slash between them."""
    if base and not base.endswith("/"):
        base += "/"
    if tail.startswith("/"):
        tail = tail[1:]
    return base + tail


def split_pair(text: str, delimiter: str) -> tuple[str, str]:
    """Split ``text`` at the first ``delimiter`` into a trimmed key and value.

    The key loses trailing whitespace, the value loses whitespace on both
    sides.  When the delimiter is absent both halves are the whole text.
    """
    position = text.find(delimiter)
    if position == -1:
        left, right = text, text
    else:
        left, right = text[:position], text[position + 1:]
    return left.rstrip(_WHITESPACE), right.strip(_WHITESPACE)