"""Pipeline services: normalization, indexing, chunking, search, output, merging."""

from showlist.services.artifact_writer import ArtifactWriter, dump_json, file_info
from showlist.services.chunker import ChunkedEvents, DataChunker
from showlist.services.indexer import DataIndexer
from showlist.services.normalizer import EntityNormalizer, EntityRegistry, NormalizationResult
from showlist.services.search_index import SearchIndex, SearchIndexBuilder
from showlist.services.source_merger import MergePlan, SourceMerger

__all__ = [
    "ArtifactWriter",
    "ChunkedEvents",
    "DataChunker",
    "DataIndexer",
    "EntityNormalizer",
    "EntityRegistry",
    "MergePlan",
    "NormalizationResult",
    "SearchIndex",
    "SearchIndexBuilder",
    "SourceMerger",
    "dump_json",
    "file_info",
]
