from typing import List


def csv_to_list(v: str | List[str] | None) -> List[str]:
    if v is None:
        return []
    if isinstance(v, (list, tuple)):
        return [str(s).strip() for s in v if s and str(s).strip()]
    return [s.strip() for s in str(v).split(",") if s.strip()]


def split_top_level(text: str, sep: str = ",") -> List[str]:
    """
    Split on `sep` only where it is not nested inside parentheses or brackets,
    e.g. "yuv420p(tv, bt709), 1280x720" -> ["yuv420p(tv, bt709)", "1280x720"].
    Tokens are stripped; empty tokens are dropped.
    """
    out: List[str] = []
    depth = 0
    buf: List[str] = []
    for ch in text:
        if ch in "([":
            depth += 1
        elif ch in ")]" and depth > 0:
            depth -= 1
        if ch == sep and depth == 0:
            out.append("".join(buf))
            buf = []
            continue
        buf.append(ch)
    out.append("".join(buf))
    return [t.strip() for t in out if t.strip()]
