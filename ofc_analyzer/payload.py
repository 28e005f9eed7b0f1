from collections import deque
from typing import Any, Dict, List


PRIORITY_KEYS = ("finances", "data", "items", "reports", "results", "entries", "values")
REPORT_MARKER_KEYS = ("year", "period", "balance_sheet", "balance", "income_statement")


def looks_like_reports(items: List[Any]) -> bool:
    return any(
        isinstance(item, dict) and any(key in item for key in REPORT_MARKER_KEYS)
        for item in items
    )


def _ordered_children(node: Dict[str, Any]) -> List[Any]:
    children = [node[key] for key in PRIORITY_KEYS if key in node]
    children.extend(value for key, value in node.items() if key not in PRIORITY_KEYS)
    return children


def locate_reports(response: Any) -> List[Any]:
    """Find the array of per-period reports inside an arbitrary provider response.

    The walk is breadth-first over dicts and lists, visiting the usual
    container keys before the rest. Returns an empty list when nothing in the
    response looks like a report array.
    """
    queue = deque([response])
    seen = set()
    while queue:
        node = queue.popleft()
        if not isinstance(node, (dict, list)) or id(node) in seen:
            continue
        seen.add(id(node))

        if isinstance(node, list):
            if looks_like_reports(node):
                return list(node)
            children = node
        else:
            children = _ordered_children(node)

        for child in children:
            if isinstance(child, (dict, list)):
                queue.append(child)
    return []
