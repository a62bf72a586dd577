"""
On-demand expansion of stored references.

``populate`` replaces reference ids with projections of the referenced
documents. A dotted path such as ``products.product`` expands the field inside
every element of a list. References that no longer resolve become
``{"id": ref, "unresolved": True}``.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence

from database import Store


def unresolved(ref: Any) -> Dict[str, Any]:
    return {"id": ref, "unresolved": True}


def project(doc: Dict[str, Any], fields: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    if fields is None:
        return dict(doc)
    out = {"id": doc["id"]}
    for f in fields:
        if f in doc:
            out[f] = doc[f]
    return out


def _holders(doc: Dict[str, Any], path: List[str]) -> Iterable[Dict[str, Any]]:
    """Yield every dict that directly owns the last segment of ``path``."""
    if len(path) == 1:
        yield doc
        return
    child = doc.get(path[0])
    if isinstance(child, list):
        for element in child:
            if isinstance(element, dict):
                yield from _holders(element, path[1:])
    elif isinstance(child, dict):
        yield from _holders(child, path[1:])


def populate(store: Store, docs: List[Dict[str, Any]], path: str, kind: str,
             fields: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
    """Expand ``path`` in every document of ``docs`` in place, with one lookup per call."""
    segments = path.split(".")
    key = segments[-1]
    holders = [h for d in docs for h in _holders(d, segments) if h.get(key) is not None]
    found = store.find_by_ids(kind, {str(h[key]) for h in holders})
    for h in holders:
        ref = h[key]
        target = found.get(str(ref))
        h[key] = project(target, fields) if target is not None else unresolved(ref)
    return docs


def populate_one(store: Store, doc: Dict[str, Any], path: str, kind: str,
                 fields: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    populate(store, [doc], path, kind, fields)
    return doc
