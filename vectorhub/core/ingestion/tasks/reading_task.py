"""
File reading task.

Reads an uploaded file from blob storage as UTF-8 text. Files above the
stream threshold are fetched in fixed-size byte slices and decoded
incrementally, so a multi-byte character split across two slices decodes
exactly as it would in one read.

Dependencies: vectorhub.boundary.storage
System role: Read stage of the embedding ingestion pipeline
"""

import asyncio
import codecs
import logging

from vectorhub.boundary.storage.blob_storage import BlobStorage
from vectorhub.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class ReadingTask:
    """Read blob storage files into text."""

    def __init__(
        self,
        storage: BlobStorage,
        stream_threshold_bytes: int,
        slice_bytes: int,
    ) -> None:
        """
        Initialize reading task.

        Args:
            storage: Blob storage holding uploaded files
            stream_threshold_bytes: Files larger than this are read in slices
            slice_bytes: Bytes per slice for streamed reads
        """
        self._storage = storage
        self._stream_threshold_bytes = stream_threshold_bytes
        self._slice_bytes = slice_bytes

    async def read_text(self, key: str) -> str:
        """
        Read a file as text.

        Args:
            key: Blob storage key

        Returns:
            str: Decoded file content

        Raises:
            NotFoundError: If the file does not exist
            UpstreamError: If blob storage fails
            ValidationError: If the file is not valid UTF-8
        """
        size = await asyncio.to_thread(self._storage.size, key)

        try:
            if size <= self._stream_threshold_bytes:
                data = await asyncio.to_thread(self._storage.read, key)
                return data.decode("utf-8")
            return await self._read_streamed(key, size)
        except UnicodeDecodeError as e:
            raise ValidationError(
                f"File {key} is not valid UTF-8 text",
                field="file",
                details={"position": e.start},
            ) from e

    async def _read_streamed(self, key: str, size: int) -> str:
        decoder = codecs.getincrementaldecoder("utf-8")()
        parts: list[str] = []
        offset = 0
        slices = 0

        while offset < size:
            length = min(self._slice_bytes, size - offset)
            data = await asyncio.to_thread(self._storage.read_range, key, offset, length)
            if not data:
                break
            parts.append(decoder.decode(data))
            offset += len(data)
            slices += 1

        parts.append(decoder.decode(b"", final=True))
        logger.info(
            f"{__name__}:_read_streamed - Read {offset} bytes in {slices} slices",
            extra={"key": key, "size": size},
        )
        return "".join(parts)
