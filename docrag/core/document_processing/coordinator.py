"""
Batch ingestion coordinator.

Drives one document through extract -> chunk -> embed -> store for a single
scope. Extraction runs in a worker thread; chunks are embedded and stored in
batches with bounded concurrency and a pause between batches. Chunks of the
same unit are stored in the order they were produced. A failed chunk is
recorded and its siblings continue; cancellation stops before the next batch.

Dependencies: asyncio, docrag.boundary.interfaces, docrag.core.scopes
System role: Pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time
from datetime import timedelta
from typing import Any

from docrag.boundary.interfaces import Embedder, Extractor, VectorStore, VisionService
from docrag.boundary.vdb.vector_schemas import Record
from docrag.configs.ingestion import IngestionSettings
from docrag.core.exceptions import (
    ConfigurationError,
    EmbeddingError,
    ExtractionError,
    StorageError,
)
from docrag.core.scopes import ScopedCollectionRegistry, StoragePartitionHandle
from docrag.observability.log_utils import log_exception_with_context, log_with_context

from .key_generators import KeyGenerator, UuidKeyGenerator
from .models import (
    ChunkOutcome,
    IngestionReport,
    IngestionRequest,
    IngestionState,
    SourceUnit,
    TextChunk,
)
from .segmenter import Segmenter
from .size_planner import AdaptiveSizePlanner
from .tokenizers import Tokenizer, WordTokenizer

logger = logging.getLogger(__name__)

SOURCE_TYPE_TEXT = "text"
SOURCE_TYPE_IMAGE = "image"
ABORTED_MESSAGE = "Skipped after an embedding failure aborted the ingestion"


class _PendingChunk:
    """A chunk waiting for embedding, with the unit it belongs to."""

    __slots__ = ("chunk", "unit_position", "page", "source_type")

    def __init__(self, chunk: TextChunk, unit_position: int, page: int, source_type: str) -> None:
        self.chunk = chunk
        self.unit_position = unit_position
        self.page = page
        self.source_type = source_type


class BatchIngestionCoordinator:
    """Ingest documents into scoped vector storage in bounded batches."""

    def __init__(
        self,
        extractor: Extractor,
        embedder: Embedder,
        vector_store: VectorStore,
        registry: ScopedCollectionRegistry | None = None,
        settings: IngestionSettings | None = None,
        key_generator: KeyGenerator | None = None,
        tokenizer: Tokenizer | None = None,
        planner: AdaptiveSizePlanner | None = None,
        vision_service: VisionService | None = None,
        fail_on_embedding_error: bool | None = None,
    ) -> None:
        """
        Initialize coordinator with its collaborators.

        Args:
            extractor: Turns the source file into units
            embedder: Embeds chunk text
            vector_store: Partitioned record storage
            registry: Scope to partition resolver (default partitions if None)
            settings: Ingestion defaults (environment settings if None)
            key_generator: Record key allocation (random UUIDs if None)
            tokenizer: Chunk size measure (words if None)
            planner: Adaptive sizing, used when settings.adaptive_chunking is on
            vision_service: Image-to-text conversion; image units are skipped without it
            fail_on_embedding_error: Overrides settings.fail_on_embedding_error
        """
        self._settings = settings or IngestionSettings()
        self._extractor = extractor
        self._embedder = embedder
        self._vector_store = vector_store
        self._registry = registry or ScopedCollectionRegistry()
        self._key_generator = key_generator or UuidKeyGenerator()
        self._tokenizer = tokenizer or WordTokenizer()
        self._planner = planner or AdaptiveSizePlanner(self._settings.base_chunk_size)
        self._vision_service = vision_service
        self._fail_fast = (
            self._settings.fail_on_embedding_error
            if fail_on_embedding_error is None
            else fail_on_embedding_error
        )

    async def ingest(
        self,
        request: IngestionRequest,
        cancel_event: asyncio.Event | None = None,
    ) -> IngestionReport:
        """
        Ingest one document into its scope.

        Args:
            request: Document, scope and batching parameters
            cancel_event: When set, no further batch starts; stored chunks stay

        Returns:
            IngestionReport: Per-chunk outcomes and counts

        Raises:
            ConfigurationError: Invalid parameters, raised before any I/O
            ExtractionError: Unreadable source; nothing is written
            EmbeddingError: Only when fail-fast is configured
        """
        start_time = time.perf_counter()
        request.validate_parameters()

        handle = self._registry.resolve(request.scope)
        batch_size = request.batch_size or self._settings.batch_size
        delay = (
            request.inter_batch_delay
            if request.inter_batch_delay is not None
            else timedelta(milliseconds=self._settings.inter_batch_delay_ms)
        )
        file_name = request.display_name

        # Sizing that does not depend on the text is checked before any I/O
        segmenter = None
        if request.chunk_size is not None or not self._settings.adaptive_chunking:
            segmenter = self._build_segmenter(request, text=None)

        self._log_state(IngestionState.EXTRACTING, request)
        units, skipped_units = await self._extract(request)

        if segmenter is None:
            segmenter = self._build_segmenter(
                request, text="\n".join(unit.text or "" for unit, _ in units)
            )

        replaced = 0
        if request.replace_existing:
            replaced = await self._vector_store.delete(
                handle.partition, handle.merged_filter({"file_name": file_name})
            )
            if replaced:
                logger.info(f"{__name__}:ingest - Replaced {replaced} existing records of {file_name}")

        self._log_state(IngestionState.CHUNKING, request)
        pending = self._segment_units(units, segmenter, file_name)

        report = IngestionReport(
            source_path=request.source_path,
            scope=request.scope,
            state=IngestionState.COMPLETED,
            chunk_size=segmenter.unit_size,
            chunk_overlap=segmenter.overlap,
            total_chunks=len(pending),
            replaced_count=replaced,
            skipped_units=skipped_units,
        )

        batches = [pending[i:i + batch_size] for i in range(0, len(pending), batch_size)]
        for batch_number, batch in enumerate(batches, start=1):
            if cancel_event is not None and cancel_event.is_set():
                report.state = IngestionState.CANCELLED
                break

            self._log_state(
                IngestionState.EMBEDDING_BATCH,
                request,
                batch=batch_number,
                batch_count=len(batches),
                batch_chunks=len(batch),
            )
            try:
                outcomes = await self._process_batch(batch, batch_size, handle, request, file_name)
            except EmbeddingError:
                self._log_state(IngestionState.FAILED, request, batch=batch_number)
                raise
            report.outcomes.extend(outcomes)
            self._log_state(IngestionState.STORED, request, batch=batch_number)

            if batch_number < len(batches) and delay > timedelta(0):
                await asyncio.sleep(delay.total_seconds())

        report.stored_count = sum(1 for outcome in report.outcomes if outcome.stored)
        report.failed_count = sum(1 for outcome in report.outcomes if not outcome.stored)
        report.processing_time_ms = (time.perf_counter() - start_time) * 1000

        self._log_state(
            report.state,
            request,
            stored=report.stored_count,
            failed=report.failed_count,
            skipped_units=len(report.skipped_units),
        )
        return report

    def _build_segmenter(self, request: IngestionRequest, text: str | None) -> Segmenter:
        """Resolve chunk size and overlap; explicit request values win."""
        adaptive = self._settings.adaptive_chunking

        if request.chunk_size is not None:
            chunk_size = request.chunk_size
        elif adaptive and text is not None:
            chunk_size = self._planner.plan_chunk_size(text)
        else:
            chunk_size = self._settings.chunk_size

        if request.chunk_overlap is not None:
            overlap = request.chunk_overlap
        elif adaptive:
            overlap = self._planner.plan_overlap(chunk_size)
        else:
            overlap = self._settings.chunk_overlap

        if overlap >= chunk_size:
            raise ConfigurationError(
                f"chunk_overlap ({overlap}) must be smaller than chunk_size ({chunk_size})",
                field="chunk_overlap",
            )
        return Segmenter(chunk_size, overlap, self._tokenizer)

    async def _extract(self, request: IngestionRequest) -> tuple[list[tuple[SourceUnit, str]], list[int]]:
        """
        Extract units and convert image units to text.

        Returns:
            Text units tagged with their source type, and the pages of image
            units that were skipped for lack of a vision service
        """
        try:
            raw_units = await asyncio.to_thread(self._extractor.extract, request.source_path)
        except ExtractionError as e:
            log_exception_with_context(
                logger, f"{__name__}:_extract - FAILED", e, source_path=request.source_path
            )
            self._log_state(IngestionState.FAILED, request)
            raise
        except Exception as e:
            self._log_state(IngestionState.FAILED, request)
            raise ExtractionError(
                f"Failed to extract document: {e}", source_path=request.source_path
            ) from e

        units: list[tuple[SourceUnit, str]] = []
        skipped: list[int] = []
        for unit in raw_units:
            if not unit.is_binary:
                units.append((unit, SOURCE_TYPE_TEXT))
                continue

            if self._vision_service is None:
                logger.warning(
                    f"{__name__}:_extract - No vision service, skipping image unit on page {unit.unit_index}"
                )
                skipped.append(unit.unit_index)
                continue

            try:
                text = await self._vision_service.describe_image(
                    unit.binary_payload, unit.mime_type or "image/png"
                )
            except Exception as e:
                self._log_state(IngestionState.FAILED, request)
                if isinstance(e, ExtractionError):
                    raise
                raise ExtractionError(
                    f"Failed to convert image on page {unit.unit_index}: {e}",
                    source_path=request.source_path,
                    file_type=unit.mime_type,
                ) from e
            units.append((SourceUnit(text=text, unit_index=unit.unit_index), SOURCE_TYPE_IMAGE))

        logger.info(
            f"{__name__}:_extract - {request.source_path}: {len(units)} units, {len(skipped)} skipped"
        )
        return units, skipped

    def _segment_units(
        self,
        units: list[tuple[SourceUnit, str]],
        segmenter: Segmenter,
        file_name: str,
    ) -> list[_PendingChunk]:
        pending: list[_PendingChunk] = []
        for position, (unit, source_type) in enumerate(units):
            header = f"{file_name}\nPage: {unit.unit_index}\n"
            for chunk in segmenter.segment(unit.text or "", header=header, source_unit_index=unit.unit_index):
                pending.append(_PendingChunk(chunk, position, unit.unit_index, source_type))
        return pending

    async def _process_batch(
        self,
        batch: list[_PendingChunk],
        batch_size: int,
        handle: StoragePartitionHandle,
        request: IngestionRequest,
        file_name: str,
    ) -> list[ChunkOutcome]:
        """
        Embed and store one batch concurrently, preserving per-unit store order.

        In fail-fast mode the first embedding failure sets the abort event:
        chunks that have not started embedding or storing are skipped, calls
        already in flight finish, then the failure is re-raised.
        """
        semaphore = asyncio.Semaphore(batch_size)
        abort = asyncio.Event()
        last_done: dict[int, asyncio.Event] = {}
        tasks = []

        for item in batch:
            done = asyncio.Event()
            previous = last_done.get(item.unit_position)
            last_done[item.unit_position] = done
            tasks.append(
                asyncio.create_task(
                    self._process_chunk(
                        item, semaphore, previous, done, abort, handle, request, file_name
                    )
                )
            )

        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)

    async def _process_chunk(
        self,
        item: _PendingChunk,
        semaphore: asyncio.Semaphore,
        previous: asyncio.Event | None,
        done: asyncio.Event,
        abort: asyncio.Event,
        handle: StoragePartitionHandle,
        request: IngestionRequest,
        file_name: str,
    ) -> ChunkOutcome:
        chunk = item.chunk
        key = self._key_generator.generate(chunk, source=file_name, scope=str(request.scope))
        outcome = ChunkOutcome(
            key=key,
            source_unit_index=chunk.source_unit_index,
            sequence_in_unit=chunk.sequence_in_unit,
            stored=False,
        )

        try:
            async with semaphore:
                if abort.is_set():
                    outcome.error = ABORTED_MESSAGE
                    return outcome
                vector = await self._embed(chunk.content)

            # Store after the previous chunk of the same unit
            if previous is not None:
                await previous.wait()

            if abort.is_set():
                outcome.error = ABORTED_MESSAGE
                return outcome

            record = Record(
                key=key,
                text=chunk.content,
                embedding=vector,
                scope_metadata=handle.merged_filter(
                    self._record_metadata(request.metadata, file_name, item)
                ),
                reference_description=f"{file_name}#page={item.page}",
                reference_link=f"file://{file_name}#page={item.page}",
                token_count=chunk.unit_count,
            )
            async with semaphore:
                await self._upsert(handle.partition, record)

            outcome.stored = True
        except EmbeddingError as e:
            if self._fail_fast:
                abort.set()
                raise
            outcome.error = str(e)
            log_with_context(
                logger,
                logging.WARNING,
                f"{__name__}:_process_chunk - Embedding failed, chunk skipped",
                key=key,
                page=item.page,
                sequence=chunk.sequence_in_unit,
                error=str(e),
            )
        except StorageError as e:
            outcome.error = str(e)
            log_with_context(
                logger,
                logging.WARNING,
                f"{__name__}:_process_chunk - Store failed, chunk skipped",
                key=key,
                page=item.page,
                sequence=chunk.sequence_in_unit,
                error=str(e),
            )
        finally:
            done.set()

        return outcome

    async def _embed(self, text: str) -> list[float]:
        try:
            return await self._embedder.embed(text)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Failed to generate embedding: {e}") from e

    async def _upsert(self, partition: str, record: Record) -> None:
        try:
            await self._vector_store.upsert(partition, record)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to store record: {e}", operation="upsert") from e

    @staticmethod
    def _record_metadata(
        metadata: dict[str, Any] | None,
        file_name: str,
        item: _PendingChunk,
    ) -> dict[str, str]:
        merged = {key: str(value) for key, value in (metadata or {}).items()}
        merged.update(
            {
                "file_name": file_name,
                "source_type": item.source_type,
                "page": str(item.page),
            }
        )
        return merged

    def _log_state(self, state: IngestionState, request: IngestionRequest, **context: Any) -> None:
        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:ingest - {state.value.upper()}: {request.display_name}",
            state=state.value,
            source_path=request.source_path,
            scope=str(request.scope),
            **context,
        )
