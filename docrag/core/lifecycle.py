"""
Lifecycle binder.

Cascades conversation and session deletion to the retrieval index and the
raw file store. Vector records are removed first; raw files are deleted only
after vector deletion succeeds, so a failed cascade can be retried or the
documents re-ingested from the files that remain.

Dependencies: docrag.core.retrieval_tools, docrag.boundary.interfaces
System role: Cleanup hook invoked by the chat session layer
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel

from docrag.boundary.interfaces import FileStore
from docrag.core.retrieval_tools import RetrievalToolSurface
from docrag.core.scopes import ConversationScope
from docrag.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

SessionResolver = Callable[[str], Awaitable[str | None]]


async def _identity_resolver(session_id: str) -> str | None:
    return session_id


class CascadeResult(BaseModel):
    """Counts removed by one cascade."""

    conversation_id: str | None = None
    records_deleted: int = 0
    files_deleted: int = 0


class LifecycleBinder:
    """Delete a conversation's vectors and files when it goes away."""

    def __init__(
        self,
        tool_surface: RetrievalToolSurface,
        file_store: FileStore,
        session_resolver: SessionResolver | None = None,
    ) -> None:
        """
        Initialize binder.

        Args:
            tool_surface: Scoped deletion over the vector store
            file_store: Raw uploaded file storage
            session_resolver: Maps a session ID to its conversation ID, or
                None for an unknown session (identity if not given)
        """
        self._tool_surface = tool_surface
        self._file_store = file_store
        self._session_resolver = session_resolver or _identity_resolver

    async def on_conversation_deleted(self, conversation_id: str) -> CascadeResult:
        """
        Remove all records and files of a conversation.

        Safe to repeat; a conversation with nothing stored yields zero counts.

        Raises:
            StorageError: When vector deletion fails (files are left in place)
                or file deletion fails
        """
        logger.info(f"{__name__}:on_conversation_deleted - START conversation_id={conversation_id}")
        scope = ConversationScope(conversation_id=conversation_id)

        try:
            records_deleted = await self._tool_surface.delete_all(scope)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:on_conversation_deleted - Vector deletion failed, files kept",
                e,
                conversation_id=conversation_id,
            )
            raise

        files_deleted = await asyncio.to_thread(self._file_store.delete_files_by_folder, conversation_id)

        result = CascadeResult(
            conversation_id=conversation_id,
            records_deleted=records_deleted,
            files_deleted=files_deleted,
        )
        logger.info(
            f"{__name__}:on_conversation_deleted - END records={records_deleted}, files={files_deleted}"
        )
        return result

    async def on_session_deleted(self, session_id: str) -> CascadeResult:
        """
        Cascade deletion for the conversation behind a chat session.

        Returns:
            CascadeResult: Zero counts when the session maps to no conversation
        """
        conversation_id = await self._session_resolver(session_id)
        if not conversation_id:
            logger.info(f"{__name__}:on_session_deleted - No conversation for session {session_id}")
            return CascadeResult()
        return await self.on_conversation_deleted(conversation_id)
