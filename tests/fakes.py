"""In-memory stand-ins for the Motor objects the repositories touch."""

from __future__ import annotations

import copy
import re
import types
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

_MISSING = object()


def _get_path(doc: Any, path: str) -> Any:
    current = doc
    for part in path.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return _MISSING
    return current


def _eq(value: Any, expected: Any) -> bool:
    if expected is None:
        return value is _MISSING or value is None
    if isinstance(value, list) and not isinstance(expected, list):
        return expected in value
    return value == expected


def _match_operator(value: Any, op: str, arg: Any) -> bool:
    if op == "$gt":
        return value is not _MISSING and value is not None and value > arg
    if op == "$ne":
        return not _eq(value, arg)
    if op == "$exists":
        return (value is not _MISSING) is bool(arg)
    if op == "$all":
        return isinstance(value, list) and all(item in value for item in arg)
    if op == "$in":
        return any(_eq(value, item) for item in arg)
    if op == "$regex":
        return isinstance(value, str) and re.search(arg, value) is not None
    raise NotImplementedError(op)


def matches(doc: Dict[str, Any], filt: Dict[str, Any]) -> bool:
    for key, expected in filt.items():
        value = _get_path(doc, key)
        if isinstance(expected, dict) and expected and all(k.startswith("$") for k in expected):
            if not all(_match_operator(value, op, arg) for op, arg in expected.items()):
                return False
        elif not _eq(value, expected):
            return False
    return True


def _eval(doc: Dict[str, Any], expr: Any) -> Any:
    if isinstance(expr, str) and expr.startswith("$"):
        return _get_path(doc, expr[1:])
    if isinstance(expr, dict):
        if "$literal" in expr:
            return expr["$literal"]
        if "$ifNull" in expr:
            value, default = expr["$ifNull"]
            resolved = _eval(doc, value)
            return default if resolved is _MISSING or resolved is None else resolved
        out = {}
        for k, v in expr.items():
            resolved = _eval(doc, v)
            if resolved is not _MISSING:
                out[k] = resolved
        return out
    return expr


def _sort_key(value: Any) -> Any:
    return (value is _MISSING or value is None, value if value not in (_MISSING, None) else 0)


def _sort(docs: List[Dict[str, Any]], keys: List[tuple[str, int]]) -> List[Dict[str, Any]]:
    ordered = list(docs)
    for key, direction in reversed(keys):
        ordered.sort(key=lambda d: _sort_key(_get_path(d, key)), reverse=direction < 0)
    return ordered


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = list(docs)

    def sort(self, key: Any, direction: int = 1):
        keys = key if isinstance(key, list) else [(key, direction)]
        self._docs = _sort(self._docs, keys)
        return self

    def limit(self, n: int):
        if n > 0:
            self._docs = self._docs[:n]
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        docs = [copy.deepcopy(d) for d in self._docs]
        return docs if length is None else docs[:length]


class FakeCollection:
    def __init__(self, db: "FakeDatabase", name: str):
        self.db = db
        self.name = name
        self.docs: List[Dict[str, Any]] = []
        self.indexes: List[Dict[str, Any]] = []
        self.calls: List[tuple[str, Any]] = []
        self.fail_with: Optional[BaseException] = None
        self._next_id = 0

    def _check(self, op: str, payload: Any) -> None:
        self.calls.append((op, copy.deepcopy(payload)))
        if self.fail_with is not None:
            raise self.fail_with

    def _find_doc(self, filt: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return next((d for d in self.docs if matches(d, filt)), None)

    async def create_index(self, keys: Any, **kwargs: Any) -> str:
        self.indexes.append({"keys": keys, **kwargs})
        return kwargs.get("name", "ix")

    async def insert_one(self, doc: Dict[str, Any]):
        self._check("insert_one", doc)
        stored = copy.deepcopy(doc)
        if "_id" not in stored:
            self._next_id += 1
            stored["_id"] = f"{self.name}-{self._next_id}"
        if any(d["_id"] == stored["_id"] for d in self.docs):
            raise DuplicateKeyError(f"duplicate _id {stored['_id']!r}")
        self.docs.append(stored)
        return types.SimpleNamespace(inserted_id=stored["_id"])

    async def find_one(self, filt: Dict[str, Any]):
        self._check("find_one", filt)
        doc = self._find_doc(filt)
        return copy.deepcopy(doc) if doc else None

    def find(self, filt: Optional[Dict[str, Any]] = None, projection: Any = None) -> FakeCursor:
        self._check("find", filt)
        return FakeCursor([d for d in self.docs if matches(d, filt or {})])

    async def find_one_and_update(self, filt, update, upsert=False, return_document=ReturnDocument.BEFORE):
        self._check("find_one_and_update", (filt, update))
        doc = self._find_doc(filt)
        if doc is None:
            return None
        before = copy.deepcopy(doc)
        self._apply(doc, update)
        return before if return_document == ReturnDocument.BEFORE else copy.deepcopy(doc)

    async def find_one_and_delete(self, filt):
        self._check("find_one_and_delete", filt)
        doc = self._find_doc(filt)
        if doc is None:
            return None
        self.docs.remove(doc)
        return doc

    async def update_one(self, filt, update, upsert=False):
        self._check("update_one", (filt, update, upsert))
        doc = self._find_doc(filt)
        if doc is None:
            if not upsert:
                return types.SimpleNamespace(matched_count=0, upserted_id=None)
            doc = {k: v for k, v in filt.items() if not isinstance(v, dict)}
            self._next_id += 1
            doc["_id"] = f"{self.name}-{self._next_id}"
            self.docs.append(doc)
        self._apply(doc, update)
        return types.SimpleNamespace(matched_count=1, upserted_id=None)

    async def delete_many(self, filt):
        before = len(self.docs)
        self.docs = [d for d in self.docs if not matches(d, filt)]
        return types.SimpleNamespace(deleted_count=before - len(self.docs))

    def aggregate(self, pipeline: List[Dict[str, Any]]) -> FakeCursor:
        self._check("aggregate", pipeline)
        docs = [copy.deepcopy(d) for d in self.docs]
        for stage in pipeline:
            (op, arg), = stage.items()
            docs = getattr(self, "_stage_" + op[1:])(docs, arg)
        return FakeCursor(docs)

    @staticmethod
    def _apply(doc: Dict[str, Any], update: Dict[str, Any]) -> None:
        for key, value in update.get("$set", {}).items():
            doc[key] = copy.deepcopy(value)
        for key, value in update.get("$inc", {}).items():
            doc[key] = doc.get(key, 0) + value

    # ---------- pipeline stages ----------

    @staticmethod
    def _stage_match(docs, arg):
        return [d for d in docs if matches(d, arg)]

    @staticmethod
    def _stage_project(docs, arg):
        out = []
        for d in docs:
            projected: Dict[str, Any] = {}
            if arg.get("_id", 1) and "_id" in d:
                projected["_id"] = d["_id"]
            for key, expr in arg.items():
                if key == "_id":
                    continue
                value = _get_path(d, key) if expr in (1, True) else _eval(d, expr)
                if value is not _MISSING:
                    projected[key] = value
            out.append(projected)
        return out

    @staticmethod
    def _stage_unwind(docs, arg):
        path = arg[1:]
        out = []
        for d in docs:
            value = d.get(path, _MISSING)
            if value is _MISSING or value is None or value == []:
                continue
            for item in value if isinstance(value, list) else [value]:
                out.append({**d, path: item})
        return out

    @staticmethod
    def _stage_group(docs, arg):
        groups: Dict[Any, Dict[str, Any]] = {}
        order: List[Any] = []
        for d in docs:
            key_value = _eval(d, arg["_id"])
            key = repr(key_value)
            if key not in groups:
                groups[key] = {"_id": key_value}
                order.append(key)
            for field, acc in arg.items():
                if field == "_id":
                    continue
                amount = _eval(d, acc["$sum"])
                groups[key][field] = groups[key].get(field, 0) + (
                    0 if amount is _MISSING else amount
                )
        return [groups[k] for k in order]

    @staticmethod
    def _stage_sort(docs, arg):
        return _sort(docs, list(arg.items()))

    @staticmethod
    def _stage_limit(docs, arg):
        return docs[:arg]

    def _stage_out(self, docs, arg):
        target = self.db[arg]
        replacement = []
        for d in docs:
            self.db._ids += 1
            replacement.append({"_id": f"{arg}-{self.db._ids}", **d})
        target.docs = replacement
        return []


class FakeDatabase:
    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}
        self._ids = 0

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(self, name)
        return self.collections[name]

    def fail_all(self, exc: BaseException | None = None) -> None:
        for coll in self.collections.values():
            coll.fail_with = exc or ServerSelectionTimeoutError("no servers")
