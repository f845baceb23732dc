"""Case-insensitive prefix and suffix matching for names and URLs."""


def match_suffix(txt: str, ext: str, skip: int = 0) -> bool:
    """Tell whether ``ext`` ends ``txt`` once ``skip`` trailing characters are ignored.

    The comparison ignores ASCII case.
    """
    start = len(txt) - len(ext) - skip
    if start < 0:
        return False
    return txt[start:start + len(ext)].lower() == ext.lower()


def match_prefix(txt: str, ext: str) -> bool:
    """Tell whether ``txt`` starts with ``ext``, ignoring ASCII case."""
    return txt[:len(ext)].lower() == ext.lower()