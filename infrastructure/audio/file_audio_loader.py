# infrastructure/audio/file_audio_loader.py
# Implementation of IAudioLoader for local files and HTTP(S) URLs.

import asyncio
import logging
import os
from typing import Optional

import requests

from application.dto.sample_buffer import SampleBuffer
from application.ports.audio_decoder_port import IAudioDecoder
from application.ports.audio_loader_port import IAudioLoader
from audiokit.errors import FetchFailure
from audiokit.utils import DEFAULT_DECODE_OPTIONS, URL_TIMEOUT, is_url
from infrastructure.audio.soundfile_decoder import SoundfileDecoder

logger = logging.getLogger(__name__)


class FileAudioLoader(IAudioLoader):
    """Read a path from disk or download a URL, then hand the bytes to a decoder."""

    def __init__(
        self,
        decoder: Optional[IAudioDecoder] = None,
        timeout: float = URL_TIMEOUT,
    ) -> None:
        self._decoder: IAudioDecoder = decoder or SoundfileDecoder()
        self._timeout: float = timeout

    async def load(self, key: str) -> SampleBuffer:
        if is_url(key):
            data: bytes = await asyncio.to_thread(self._download, key)
            return await self._decoder.decode(data, DEFAULT_DECODE_OPTIONS)

        if not os.path.isfile(key):
            raise FetchFailure(
                f"Audio file not found: '{key}'.\n"
                f"    → Check the path and try again."
            )
        return await self._decoder.decode(key, DEFAULT_DECODE_OPTIONS)

    def _download(self, url: str) -> bytes:
        logger.info("downloading %s", url)
        try:
            response = requests.get(
                url,
                headers={"Accept": "audio/*,*/*;q=0.9"},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise FetchFailure(f"Network error downloading {url}: {exc}") from exc

        content_type: str = response.headers.get("content-type", "").lower()
        if content_type and not any(t in content_type for t in ("audio/", "application/ogg", "octet-stream")):
            logger.warning("unexpected content-type %s for %s", content_type, url)
        return response.content
