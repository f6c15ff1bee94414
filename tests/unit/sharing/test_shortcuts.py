"""
Unit Tests for the iOS Shortcuts Forwarder.

The URL launcher and clipboard are mocked.
"""

from unittest.mock import AsyncMock, patch

import pytest

from noteprompt.core.exceptions import (
    ExternalServiceError,
    UnsupportedPlatformError,
    ValidationError,
)
from noteprompt.sharing.shortcuts import ShortcutsForwarder


@pytest.fixture
def launcher() -> AsyncMock:
    mock = AsyncMock()
    mock.can_open.return_value = True
    mock.open.return_value = True
    return mock


@pytest.fixture
def clipboard() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def forwarder(launcher, clipboard) -> ShortcutsForwarder:
    return ShortcutsForwarder(launcher, clipboard, platform="ios")


class TestBuildShortcutUrl:
    def test_encodes_name_and_text(self, forwarder):
        url = forwarder.build_shortcut_url("Ask AI", "a b&c=d\n#1")

        assert url == (
            "shortcuts://run-shortcut?name=Ask%20AI"
            "&input=text&text=a%20b%26c%3Dd%0A%231"
        )

    def test_without_content(self, forwarder):
        assert forwarder.build_shortcut_url("SendToClaude") == "shortcuts://run-shortcut?name=SendToClaude"

    def test_non_ascii_is_utf8_encoded(self, forwarder):
        assert forwarder.build_shortcut_url("S", "é").endswith("text=%C3%A9")


class TestValidation:
    @pytest.mark.parametrize("name", ["SendToClaude", "My Shortcut", "ask-ai_2"])
    def test_valid_names(self, name):
        assert ShortcutsForwarder.is_valid_shortcut_name(name)

    @pytest.mark.parametrize("name", ["", "a/b", "what?", "x<y", 'say "hi"', "a|b"])
    def test_invalid_names(self, name):
        assert not ShortcutsForwarder.is_valid_shortcut_name(name)

    def test_clipboard_threshold(self, forwarder):
        prefix_length = len(forwarder.build_shortcut_url("S", ""))
        fits = "a" * (forwarder.url_max_length - prefix_length)

        assert not forwarder.should_use_clipboard(fits, "S")
        assert forwarder.should_use_clipboard(fits + "a", "S")


class TestPlatform:
    @pytest.mark.parametrize(("platform", "supported"), [("ios", True), ("iOS", True), ("android", False)])
    def test_is_supported(self, launcher, clipboard, platform, supported):
        assert ShortcutsForwarder(launcher, clipboard, platform).is_supported is supported

    async def test_can_launch_asks_launcher_on_ios(self, forwarder, launcher):
        assert await forwarder.can_launch_shortcuts() is True
        launcher.can_open.assert_awaited_once_with("shortcuts://")

    async def test_can_launch_is_false_elsewhere(self, launcher, clipboard):
        forwarder = ShortcutsForwarder(launcher, clipboard, platform="android")

        assert await forwarder.can_launch_shortcuts() is False
        launcher.can_open.assert_not_awaited()


class TestSend:
    async def test_short_text_goes_in_url(self, forwarder, launcher, clipboard):
        result = await forwarder.send("# Prompt\nHello")

        assert result is True
        expected = forwarder.build_shortcut_url("SendToClaude", "# Prompt\nHello")
        launcher.open.assert_awaited_once_with(expected)
        clipboard.copy.assert_not_awaited()

    async def test_long_text_goes_to_clipboard(self, forwarder, launcher, clipboard):
        content = "x" * 5000

        await forwarder.send(content, shortcut_name="Ask")

        clipboard.copy.assert_awaited_once_with(content)
        launcher.open.assert_awaited_once_with("shortcuts://run-shortcut?name=Ask")

    async def test_content_is_not_modified(self, forwarder, clipboard):
        content = "  **raw** markdown  \n\n" + "y" * 3000

        await forwarder.send(content)

        clipboard.copy.assert_awaited_once_with(content)

    async def test_unsupported_platform_checked_first(self, launcher, clipboard):
        forwarder = ShortcutsForwarder(launcher, clipboard, platform="android")

        with pytest.raises(UnsupportedPlatformError) as exc_info:
            await forwarder.send("")

        assert exc_info.value.code == "SYS_UNSUPPORTED_PLATFORM"
        launcher.open.assert_not_awaited()

    async def test_blank_content(self, forwarder, launcher):
        with pytest.raises(ValidationError):
            await forwarder.send(" \n\t")
        launcher.open.assert_not_awaited()

    async def test_invalid_shortcut_name(self, forwarder):
        with pytest.raises(ValidationError):
            await forwarder.send("text", shortcut_name="bad/name")

    async def test_launcher_cannot_open(self, forwarder, launcher):
        launcher.can_open.return_value = False

        with pytest.raises(ExternalServiceError, match="Ask"):
            await forwarder.send("text", shortcut_name="Ask")
        launcher.open.assert_not_awaited()

    async def test_launcher_result_is_returned(self, forwarder, launcher):
        launcher.open.return_value = False
        assert await forwarder.send("text") is False


class TestFromConfig:
    def test_uses_shortcuts_yaml(self, launcher, clipboard):
        from noteprompt.core.config import get_app_config

        config = get_app_config().shortcuts
        forwarder = ShortcutsForwarder.from_config(launcher, clipboard, "ios")

        assert forwarder.default_shortcut_name == config.default_shortcut_name
        assert forwarder.url_max_length == config.url_max_length
        assert forwarder.url_scheme == config.url_scheme


class TestSendLogging:
    async def test_logs_channel_with_sharing_source(self, forwarder):
        with patch("noteprompt.sharing.shortcuts.log_with_source") as log:
            await forwarder.send("x" * 5000)

        args, kwargs = log.call_args
        assert args[1:3] == ("sharing", "info")
        assert kwargs["via"] == "clipboard"
        assert kwargs["length"] == 5000
