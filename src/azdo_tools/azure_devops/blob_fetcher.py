"""Blob content retrieval as text."""

import threading
from collections.abc import Iterator
from typing import Any, Callable, Iterable, List, Optional

from ..utils.logger import setup_logger
from .errors import PLACEHOLDER_CONTENT, BlobTimeoutError

logger = setup_logger(__name__)

DEFAULT_STREAM_TIMEOUT = 30.0
CHUNK_SIZE = 64 * 1024


class BlobContentFetcher:
    """
    Reads blob content and decodes it as UTF-8 text.

    The Git client may hand back bytes, text, or a stream (a streaming
    ``requests.Response`` or an iterator of byte chunks). Streams are read
    on a reader thread; if the whole stream is not read within
    ``stream_timeout`` seconds it is closed and the fetch fails, whether the
    stream stalled or kept trickling.
    """

    def __init__(self, git_client, stream_timeout: float = DEFAULT_STREAM_TIMEOUT):
        """
        Args:
            git_client: Object exposing ``get_blob_content(repository_id, blob_id)``
            stream_timeout: Seconds allowed for reading a whole stream
        """
        self.git_client = git_client
        self.stream_timeout = stream_timeout

    def fetch_text(self, repository_id: str, blob_id: str) -> str:
        """
        Fetch a blob and return its text.

        Raises:
            BlobTimeoutError: The stream was not fully read in time
            requests.RequestException: On API or stream errors
        """
        content = self.git_client.get_blob_content(repository_id, blob_id)
        return self.read_content(content, blob_id)

    def read_content(self, content: Any, blob_id: str) -> str:
        """Turn whatever the client returned into text."""
        if isinstance(content, (bytes, bytearray)):
            return bytes(content).decode("utf-8", errors="replace")

        if isinstance(content, str):
            return content

        if hasattr(content, "iter_content"):
            return self._read_stream(content.iter_content(chunk_size=CHUNK_SIZE), blob_id, content.close)

        if isinstance(content, Iterator):
            return self._read_stream(content, blob_id, getattr(content, "close", None))

        logger.warning(f"Unrecognized content type {type(content).__name__} for objectId {blob_id}")
        return PLACEHOLDER_CONTENT

    def _read_stream(
        self, chunks: Iterable[Any], blob_id: str, close: Optional[Callable[[], None]]
    ) -> str:
        buffer = bytearray()
        failures: List[Exception] = []

        def consume() -> None:
            try:
                for chunk in chunks:
                    buffer.extend(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
            except Exception as e:
                # Re-raised on the calling thread below.
                failures.append(e)

        reader = threading.Thread(target=consume, name=f"blob-{blob_id}", daemon=True)
        reader.start()
        reader.join(self.stream_timeout)

        if reader.is_alive():
            logger.error(f"Stream timeout for objectId {blob_id}")
            self._abort(close, blob_id)
            raise BlobTimeoutError(blob_id, self.stream_timeout)

        if close is not None:
            close()
        if failures:
            raise failures[0]

        return buffer.decode("utf-8", errors="replace")

    @staticmethod
    def _abort(close: Optional[Callable[[], None]], blob_id: str) -> None:
        if close is None:
            return
        try:
            close()
        except ValueError:
            # A generator cannot be closed while the reader thread is inside it.
            logger.debug(f"Stream for objectId {blob_id} is busy; the reader thread is abandoned")
