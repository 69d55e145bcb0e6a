"""
Image description tool.

Sends an image (from a local file or a remote URL) to a vision-capable chat
model together with a fixed instruction and returns the model's description.
The description is used as extra context by the chat agent, for example
when an FAQ answer points to a screenshot.
"""

import base64
import logging
import mimetypes
from pathlib import Path
from typing import Callable, Optional, Tuple
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from src.errors import ComponentNotInitializedError, ImageFetchError
from src.llm.ollama_client import PullProgress, get_vision_llm, pull_model


logger = logging.getLogger(__name__)

DESCRIBE_INSTRUCTION = """Describe the image in detail.
If it is a screenshot of an application, list every component along with its type and description.
Someone who cannot see the image must be able to understand everything in it from your description alone.
If the image is a chart, describe what it represents and how it is organized.
If the image is a diagram, describe what it represents and how it is organized.
If the image is text, transcribe the text."""

DEFAULT_CONTENT_TYPE = "image/*"


class ImageDescriber:
    """
    Describes images with a vision chat model.

    initialize() must run before describe(); it pulls the vision model into
    the local runtime (or accepts an already built chat model).
    """

    def __init__(self, http_client: httpx.Client, model: str = "llava"):
        """
        Args:
            http_client: Client used to download remote images
            model: Vision model name to pull on initialize()
        """
        self.http_client = http_client
        self.model = model
        self._llm: Optional[BaseChatModel] = None

    @property
    def initialized(self) -> bool:
        return self._llm is not None

    def initialize(
        self,
        llm: Optional[BaseChatModel] = None,
        on_progress: Optional[Callable[[PullProgress], None]] = None,
    ) -> None:
        """
        Prepare the vision model.

        Args:
            llm: Ready chat model; when omitted the configured vision model
                is pulled and used
            on_progress: Pull progress callback
        """
        if llm is None:
            logger.info("Preparing model %s", self.model)
            pull_model(self.model, on_progress=on_progress)
            llm = get_vision_llm()
        self._llm = llm

    def describe(self, image_ref: str) -> str:
        """
        Describe the image at a local path or remote URL.

        Args:
            image_ref: file:// URI, plain filesystem path, or http(s) URL

        Returns:
            str: The model's description, verbatim (may be empty)

        Raises:
            ComponentNotInitializedError: If initialize() has not run
            ImageFetchError: If the image download is not successful
            ValueError: If the reference uses an unsupported scheme or a
                file URI names a remote host
        """
        logger.info("Analyzing image '%s'...", image_ref)

        if self._llm is None:
            raise ComponentNotInitializedError(
                "Image describer has not been initialized",
                component="image_describer",
            )

        data, content_type = self._load(image_ref)
        encoded = base64.b64encode(data).decode("ascii")

        message = HumanMessage(content=[
            {"type": "text", "text": DESCRIBE_INSTRUCTION},
            {"type": "image_url", "image_url": {"url": f"data:{content_type};base64,{encoded}"}},
        ])

        response = self._llm.invoke([message])
        text = _message_text(response.content)
        logger.info("%s", text)
        return text

    def _load(self, image_ref: str) -> Tuple[bytes, str]:
        parsed = urlparse(image_ref)
        scheme = parsed.scheme.lower()

        if scheme in ("http", "https"):
            return self._download(image_ref)
        if scheme == "file":
            if parsed.netloc not in ("", "localhost"):
                raise ValueError(f"Unsupported file URI host: '{parsed.netloc}'")
            return self._read_local(Path(url2pathname(parsed.path)))
        # Single letters are Windows drive letters, e.g. C:\images\a.png
        if scheme == "" or len(scheme) == 1:
            return self._read_local(Path(image_ref))

        raise ValueError(f"Unsupported image reference scheme: '{scheme}'")

    def _read_local(self, path: Path) -> Tuple[bytes, str]:
        content_type, _ = mimetypes.guess_type(path.name)
        return path.read_bytes(), content_type or DEFAULT_CONTENT_TYPE

    def _download(self, url: str) -> Tuple[bytes, str]:
        response = self.http_client.get(url)
        if not response.is_success:
            raise ImageFetchError(url, response.status_code, component="image_describer")

        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        return response.content, content_type or DEFAULT_CONTENT_TYPE


def _message_text(content) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
