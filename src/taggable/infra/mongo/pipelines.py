# taggable/infra/mongo/pipelines.py
from __future__ import annotations

import re
from typing import Any, Dict, List

from pymongo import ASCENDING, DESCENDING

from taggable.domain.models.ContextModel import TaggableContext

Pipeline = List[Dict[str, Any]]

POSITIVE = {"value": {"$gt": 0}}


def build_recompute_pipeline(context: TaggableContext, target: str) -> Pipeline:
    """
    One unit per (document, tag[, group]) summed per key and written over
    ``target`` with ``$out``, which swaps the collection contents in one step.
    """
    group_expr: Any = (
        {"$ifNull": [f"${context.group_by}", None]}
        if context.group_by
        else {"$literal": None}
    )
    return [
        {"$match": {context.field: {"$exists": True, "$ne": []}}},
        {"$project": {"_id": 0, "tag": f"${context.field}", "group": group_expr}},
        {"$unwind": "$tag"},
        {"$group": {"_id": {"tag": "$tag", "group": "$group"}, "value": {"$sum": 1}}},
        {"$project": {"_id": 0, "tag": "$_id.tag", "group": "$_id.group", "value": 1}},
        {"$out": target},
    ]


def build_weights_pipeline(group: Any = None) -> Pipeline:
    match: Dict[str, Any] = dict(POSITIVE)
    if group is not None:
        match["group"] = group
    return [
        {"$match": match},
        {"$group": {"_id": "$tag", "value": {"$sum": "$value"}}},
        {"$sort": {"_id": ASCENDING}},
        {"$project": {"_id": 0, "tag": "$_id", "value": 1}},
    ]


def build_autocomplete_pipeline(
    prefix: str, *, sort_by_count: bool = False, limit: int = 0, group: Any = None
) -> Pipeline:
    match: Dict[str, Any] = {"tag": {"$regex": f"^{re.escape(prefix)}"}, **POSITIVE}
    if group is not None:
        match["group"] = group
    sort: Dict[str, int] = (
        {"value": DESCENDING, "_id": ASCENDING} if sort_by_count else {"_id": ASCENDING}
    )
    pipeline: Pipeline = [
        {"$match": match},
        {"$group": {"_id": "$tag", "value": {"$sum": "$value"}}},
        {"$sort": sort},
    ]
    if limit > 0:
        pipeline.append({"$limit": limit})
    pipeline.append({"$project": {"_id": 0, "tag": "$_id", "value": 1}})
    return pipeline
