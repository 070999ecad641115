"""
Scoped collection registry.

Models the two retrieval scopes as a closed tagged union and resolves a
scope to its storage partition and metadata filter. This module is the
only place that builds scope filters, so a conversation's documents can
never leak into another conversation's search.

Dependencies: pydantic, docrag.configs
System role: Scope isolation for ingestion, search and deletion
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from docrag.configs.vector_store import VectorStoreSettings
from docrag.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CATEGORY_KEY = "category"
CONVERSATION_KEY = "conversation_id"


class DocumentCollectionType(str, Enum):
    """Collection type tag used by loose argument bundles."""

    GLOBAL = "global"
    CONVERSATION = "conversation"


class GlobalScope(BaseModel):
    """Reference material shared across all conversations, grouped by category."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["global"] = "global"
    category_id: str = Field(min_length=1, description="Category the documents belong to")

    def __str__(self) -> str:
        return f"global:{self.category_id}"


class ConversationScope(BaseModel):
    """Attachments private to a single conversation."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["conversation"] = "conversation"
    conversation_id: str = Field(min_length=1, description="Owning conversation ID")

    def __str__(self) -> str:
        return f"conversation:{self.conversation_id}"


ScopeDescriptor = Annotated[
    Union[GlobalScope, ConversationScope],
    Field(discriminator="kind"),
]

_scope_adapter: TypeAdapter[Any] = TypeAdapter(ScopeDescriptor)


class StoragePartitionHandle(BaseModel):
    """Concrete partition name plus the metadata filter every operation must apply."""

    model_config = ConfigDict(frozen=True)

    partition: str
    filter: dict[str, str]

    def merged_filter(self, extra: Mapping[str, Any] | None = None) -> dict[str, str]:
        """
        Combine the scope filter with caller-supplied metadata matches.

        Scope keys always win so callers cannot widen a query beyond the scope.
        """
        merged = {key: str(value) for key, value in (extra or {}).items()}
        merged.update(self.filter)
        return merged


def parse_scope(value: Any) -> GlobalScope | ConversationScope:
    """
    Validate a scope given as a model or a plain dict with a `kind` tag.

    Raises:
        ConfigurationError: If the value is not a valid scope
    """
    if isinstance(value, (GlobalScope, ConversationScope)):
        return value
    try:
        return _scope_adapter.validate_python(value)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid scope: {e}", field="scope") from e


def scope_from_args(args: Mapping[str, Any] | None) -> GlobalScope | ConversationScope:
    """
    Build a scope from a loose argument bundle.

    Accepts the keys used by the chat server when it forwards collection
    arguments: `DocumentCollectionType` plus `CategoryId` or `ConversationId`.

    Args:
        args: Argument mapping

    Returns:
        GlobalScope | ConversationScope: Typed scope

    Raises:
        ConfigurationError: If the bundle is incomplete or the type is unknown
    """
    if not args or "DocumentCollectionType" not in args:
        raise ConfigurationError(
            "Args must contain a DocumentCollectionType property",
            field="DocumentCollectionType",
        )

    raw_type = args["DocumentCollectionType"]
    try:
        collection_type = DocumentCollectionType(str(getattr(raw_type, "value", raw_type)).lower())
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid DocumentCollectionType: {raw_type}",
            field="DocumentCollectionType",
        ) from e

    if collection_type is DocumentCollectionType.GLOBAL:
        category_id = args.get("CategoryId")
        if not category_id:
            raise ConfigurationError("Args must contain a CategoryId property", field="CategoryId")
        return GlobalScope(category_id=str(category_id))

    conversation_id = args.get("ConversationId")
    if not conversation_id:
        raise ConfigurationError(
            "Args must contain a ConversationId property", field="ConversationId"
        )
    return ConversationScope(conversation_id=str(conversation_id))


class ScopedCollectionRegistry:
    """Resolve scope descriptors to storage partitions."""

    def __init__(self, settings: VectorStoreSettings | None = None) -> None:
        """
        Initialize registry with partition names.

        Args:
            settings: Vector store settings (defaults if None)
        """
        settings = settings or VectorStoreSettings()
        self._global_partition = settings.global_partition
        self._conversation_partition = settings.conversation_partition

    @property
    def partitions(self) -> tuple[str, str]:
        """Names of the global and conversation partitions."""
        return self._global_partition, self._conversation_partition

    def resolve(self, scope: GlobalScope | ConversationScope) -> StoragePartitionHandle:
        """
        Resolve a scope to its partition handle.

        Args:
            scope: Scope descriptor

        Returns:
            StoragePartitionHandle: Partition name and filter predicate

        Raises:
            ConfigurationError: If the scope is not a known variant
        """
        if isinstance(scope, GlobalScope):
            handle = StoragePartitionHandle(
                partition=self._global_partition,
                filter={CATEGORY_KEY: scope.category_id},
            )
        elif isinstance(scope, ConversationScope):
            handle = StoragePartitionHandle(
                partition=self._conversation_partition,
                filter={CONVERSATION_KEY: scope.conversation_id},
            )
        else:
            raise ConfigurationError(f"Unsupported scope type: {type(scope).__name__}", field="scope")

        logger.debug(f"{__name__}:resolve - {scope} -> {handle.partition} {handle.filter}")
        return handle
