from taggable.domain.usecase.aggregation.batch import BatchAggregator, RecalculateTagWeights
from taggable.domain.usecase.aggregation.realtime import IncrementalAggregator
from taggable.domain.usecase.aggregation.sync import TagAggregationSync

__all__ = [
    "BatchAggregator",
    "IncrementalAggregator",
    "RecalculateTagWeights",
    "TagAggregationSync",
]
