"""
Tests for the image description tool.

These tests verify:
1. Nothing works before initialize()
2. Local references read the file and never touch the network
3. Remote references download the image and never touch the filesystem
4. Failed downloads raise ImageFetchError
"""

import base64
from unittest.mock import MagicMock

import httpx
import pytest
from langchain_core.messages import AIMessage

from src.errors import ComponentNotInitializedError, ImageFetchError
from src.tools.image_describer import DESCRIBE_INSTRUCTION, ImageDescriber


PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


def failing_transport():
    def handler(request):
        raise AssertionError(f"unexpected network request to {request.url}")
    return httpx.MockTransport(handler)


def image_transport(status_code=200, content=PNG_BYTES, content_type="image/png"):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(status_code, content=content, headers={"content-type": content_type})

    return httpx.MockTransport(handler), requests


def fake_vision_llm(reply="A login screen with two text fields."):
    llm = MagicMock()
    llm.invoke.return_value = AIMessage(content=reply)
    return llm


def sent_parts(llm):
    messages = llm.invoke.call_args.args[0]
    assert len(messages) == 1
    return messages[0].content


class TestInitialization:
    """Test the initialization precondition."""

    @pytest.mark.parametrize("image_ref", [
        "https://example.com/a.png",
        "file:///tmp/a.png",
        "/tmp/a.png",
        "",
    ])
    def test_describe_before_initialize_fails(self, image_ref):
        """describe() always fails before initialize()."""
        describer = ImageDescriber(httpx.Client(transport=failing_transport()))

        with pytest.raises(ComponentNotInitializedError):
            describer.describe(image_ref)

    def test_initialize_with_llm(self):
        """An injected chat model makes the describer ready."""
        describer = ImageDescriber(httpx.Client(transport=failing_transport()))
        describer.initialize(llm=fake_vision_llm())

        assert describer.initialized is True

    def test_initialize_pulls_model(self, monkeypatch):
        """Without an injected model the vision model is pulled first."""
        pulled = []
        monkeypatch.setattr(
            "src.tools.image_describer.pull_model",
            lambda model, on_progress=None: pulled.append(model),
        )
        llm = fake_vision_llm()
        monkeypatch.setattr("src.tools.image_describer.get_vision_llm", lambda: llm)

        describer = ImageDescriber(httpx.Client(transport=failing_transport()), model="llava")
        describer.initialize()

        assert pulled == ["llava"]
        assert describer.initialized is True


class TestLocalImages:
    """Test local file references."""

    def test_file_uri(self, tmp_path):
        """file:// URIs are read from disk and sent with their content type."""
        image = tmp_path / "screen.png"
        image.write_bytes(PNG_BYTES)
        llm = fake_vision_llm()
        describer = ImageDescriber(httpx.Client(transport=failing_transport()))
        describer.initialize(llm=llm)

        result = describer.describe(image.as_uri())

        assert result == "A login screen with two text fields."
        text_part, image_part = sent_parts(llm)
        assert text_part == {"type": "text", "text": DESCRIBE_INSTRUCTION}
        expected = base64.b64encode(PNG_BYTES).decode("ascii")
        assert image_part["image_url"]["url"] == f"data:image/png;base64,{expected}"

    def test_file_uri_with_escaped_characters(self, tmp_path):
        """Percent-escapes in file URIs are decoded to the real path."""
        image = tmp_path / "my screen.png"
        image.write_bytes(PNG_BYTES)
        llm = fake_vision_llm()
        describer = ImageDescriber(httpx.Client(transport=failing_transport()))
        describer.initialize(llm=llm)

        uri = image.as_uri()
        assert "%20" in uri
        assert describer.describe(uri) == "A login screen with two text fields."

    def test_file_uri_localhost(self, tmp_path):
        """file://localhost/... is a local file."""
        image = tmp_path / "screen.png"
        image.write_bytes(PNG_BYTES)
        describer = ImageDescriber(httpx.Client(transport=failing_transport()))
        describer.initialize(llm=fake_vision_llm())

        assert describer.describe(image.as_uri().replace("file://", "file://localhost", 1))

    def test_file_uri_remote_host_rejected(self):
        """file URIs naming another host are refused without reading anything."""
        describer = ImageDescriber(httpx.Client(transport=failing_transport()))
        llm = fake_vision_llm()
        describer.initialize(llm=llm)

        with pytest.raises(ValueError, match="fileserver"):
            describer.describe("file://fileserver/share/screen.png")

        llm.invoke.assert_not_called()

    def test_plain_path(self, tmp_path):
        """Scheme-less references are local paths."""
        image = tmp_path / "chart.jpg"
        image.write_bytes(b"jpeg")
        llm = fake_vision_llm("A bar chart.")
        describer = ImageDescriber(httpx.Client(transport=failing_transport()))
        describer.initialize(llm=llm)

        assert describer.describe(str(image)) == "A bar chart."
        _, image_part = sent_parts(llm)
        assert image_part["image_url"]["url"].startswith("data:image/jpeg;base64,")

    def test_unknown_extension_uses_generic_type(self, tmp_path):
        """Files without a known image type are sent as image/*."""
        image = tmp_path / "capture"
        image.write_bytes(b"data")
        llm = fake_vision_llm()
        describer = ImageDescriber(httpx.Client(transport=failing_transport()))
        describer.initialize(llm=llm)

        describer.describe(str(image))

        _, image_part = sent_parts(llm)
        assert image_part["image_url"]["url"].startswith("data:image/*;base64,")

    def test_missing_file(self, tmp_path):
        """A missing local file propagates the OS error."""
        describer = ImageDescriber(httpx.Client(transport=failing_transport()))
        describer.initialize(llm=fake_vision_llm())

        with pytest.raises(FileNotFoundError):
            describer.describe(str(tmp_path / "missing.png"))


class TestRemoteImages:
    """Test http(s) references."""

    def test_download(self, monkeypatch):
        """Remote images are downloaded and sent with the response content type."""
        transport, requests = image_transport(content_type="image/png; charset=binary")
        llm = fake_vision_llm("A diagram.")
        describer = ImageDescriber(httpx.Client(transport=transport))
        describer.initialize(llm=llm)
        read_local = MagicMock()
        monkeypatch.setattr(describer, "_read_local", read_local)

        result = describer.describe("https://example.com/images/diagram.png")

        assert result == "A diagram."
        assert [str(r.url) for r in requests] == ["https://example.com/images/diagram.png"]
        read_local.assert_not_called()
        _, image_part = sent_parts(llm)
        assert image_part["image_url"]["url"].startswith("data:image/png;base64,")

    @pytest.mark.parametrize("status_code", [404, 500])
    def test_failed_download(self, status_code):
        """Non-success responses raise ImageFetchError and the model is not called."""
        transport, _ = image_transport(status_code=status_code)
        llm = fake_vision_llm()
        describer = ImageDescriber(httpx.Client(transport=transport))
        describer.initialize(llm=llm)

        with pytest.raises(ImageFetchError) as exc_info:
            describer.describe("https://example.com/missing.png")

        assert exc_info.value.status_code == status_code
        llm.invoke.assert_not_called()

    def test_empty_reply_returned_verbatim(self):
        """An empty description is returned as is."""
        transport, _ = image_transport()
        describer = ImageDescriber(httpx.Client(transport=transport))
        describer.initialize(llm=fake_vision_llm(""))

        assert describer.describe("http://example.com/a.png") == ""

    def test_unsupported_scheme(self):
        """Only file and http(s) references are supported."""
        describer = ImageDescriber(httpx.Client(transport=failing_transport()))
        describer.initialize(llm=fake_vision_llm())

        with pytest.raises(ValueError, match="ftp"):
            describer.describe("ftp://example.com/a.png")
