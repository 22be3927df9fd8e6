#!/usr/bin/env python3
"""
Force a full recompute of tag weights for one document collection.

Usage:
	python scripts/recalculate_tags.py --collection articles --context tags --context artists:artist_names:owner

Each --context is NAME[:FIELD[:GROUP_BY]].
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from taggable.core.logging import configure_logging
from taggable.domain.errors import AggregationUpdateFailed
from taggable.domain.registry import ContextRegistry
from taggable.infra.db import close_client, configure, ping
from taggable.infra.lifecycle import build_collection
from taggable.infra.settings import load_settings

logger = logging.getLogger("recalculate_tags")


def parse_context(raw: str) -> tuple[str, dict[str, str]]:
	name, _, rest = raw.partition(":")
	field, _, group_by = rest.partition(":")
	options: dict[str, str] = {"strategy": "batch"}
	if field:
		options["field"] = field
	if group_by:
		options["group_by"] = group_by
	return name, options


async def recalculate(collection: str, contexts: list[str]) -> int:
	registry = ContextRegistry(collection, dict(parse_context(raw) for raw in contexts))
	try:
		if not await ping():
			logger.error("MongoDB is unreachable; nothing recomputed")
			return 2
		timings = await build_collection(registry).queries.recalculate_all_contexts()
	except AggregationUpdateFailed as exc:
		logger.error("%s", exc)
		return 1
	finally:
		await close_client()
	for name, seconds in timings.items():
		logger.info("%s.%s recomputed in %.3fs", collection, name, seconds)
	return 0


def main() -> int:
	parser = argparse.ArgumentParser(description="Recompute tag weight collections")
	parser.add_argument("--collection", required=True, help="Document collection holding the tags")
	parser.add_argument("--context", action="append", required=True, help="NAME[:FIELD[:GROUP_BY]]")
	args = parser.parse_args()

	settings = load_settings()
	configure_logging(settings)
	configure(settings)
	return asyncio.run(recalculate(args.collection, args.context))


if __name__ == "__main__":
	sys.exit(main())
