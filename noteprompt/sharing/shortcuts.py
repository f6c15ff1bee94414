"""
iOS Shortcuts Forwarder.

Hands a note's text to a named iOS Shortcut via the shortcuts:// URL
scheme. Short text travels in the URL itself. Text whose URL would exceed
the scheme's length limit is put on the clipboard instead, and the shortcut
is launched without input so it can read the clipboard.

URL opening and the clipboard belong to the host platform and are injected.
The text is passed on exactly as given.

Usage:
    forwarder = ShortcutsForwarder(launcher, clipboard, platform="ios")
    await forwarder.send(note.content)
"""

import re
from typing import Protocol
from urllib.parse import quote

from noteprompt.core.exceptions import (
    ExternalServiceError,
    UnsupportedPlatformError,
    ValidationError,
)
from noteprompt.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

DEFAULT_SHORTCUT_NAME = "SendToClaude"
URL_MAX_LENGTH = 2000
URL_SCHEME = "shortcuts://"

_INVALID_NAME_CHARS = re.compile(r'[<>:"/\\|?*]')


class UrlLauncher(Protocol):
    """Opens URLs with the host platform."""

    async def can_open(self, url: str) -> bool: ...

    async def open(self, url: str) -> bool: ...


class Clipboard(Protocol):
    """Host clipboard."""

    async def copy(self, text: str) -> None: ...


class ShortcutsForwarder:
    """Sends note text to an iOS Shortcut."""

    def __init__(
        self,
        launcher: UrlLauncher,
        clipboard: Clipboard,
        platform: str,
        default_shortcut_name: str | None = None,
        url_max_length: int | None = None,
        url_scheme: str | None = None,
    ) -> None:
        """
        Args:
            launcher: Opens shortcuts:// URLs
            clipboard: Receives text too long for a URL
            platform: Host platform name, e.g. "ios" or "android"
            default_shortcut_name: Target when send() is given none
            url_max_length: Longest URL passed to the launcher
            url_scheme: Scheme prefix of the Shortcuts app
        """
        self._launcher = launcher
        self._clipboard = clipboard
        self.platform = platform.lower()
        self.default_shortcut_name = default_shortcut_name or DEFAULT_SHORTCUT_NAME
        self.url_max_length = url_max_length or URL_MAX_LENGTH
        self.url_scheme = url_scheme or URL_SCHEME

    @classmethod
    def from_config(cls, launcher: UrlLauncher, clipboard: Clipboard, platform: str) -> "ShortcutsForwarder":
        """Build a forwarder using config/settings/shortcuts.yaml."""
        from noteprompt.core.config import get_app_config

        config = get_app_config().shortcuts
        return cls(
            launcher,
            clipboard,
            platform,
            default_shortcut_name=config.default_shortcut_name,
            url_max_length=config.url_max_length,
            url_scheme=config.url_scheme,
        )

    @property
    def is_supported(self) -> bool:
        return self.platform == "ios"

    def build_shortcut_url(self, shortcut_name: str, content: str | None = None) -> str:
        """
        Build a run-shortcut URL.

        Args:
            shortcut_name: Shortcut to run
            content: Text input for the shortcut; omitted when None

        Returns:
            URL with the content percent-encoded
        """
        url = f"{self.url_scheme}run-shortcut?name={quote(shortcut_name, safe='')}"
        if content is not None:
            url += f"&input=text&text={quote(content, safe='')}"
        return url

    def should_use_clipboard(self, content: str, shortcut_name: str) -> bool:
        """Whether content makes the URL longer than the scheme allows."""
        return len(self.build_shortcut_url(shortcut_name, content)) > self.url_max_length

    @staticmethod
    def is_valid_shortcut_name(name: str) -> bool:
        return bool(name) and _INVALID_NAME_CHARS.search(name) is None

    async def can_launch_shortcuts(self) -> bool:
        """Whether the Shortcuts app can be opened on this device."""
        if not self.is_supported:
            return False
        return await self._launcher.can_open(self.url_scheme)

    async def send(self, content: str, shortcut_name: str | None = None) -> bool:
        """
        Run a shortcut with the note text as input.

        Args:
            content: Note content, forwarded unmodified
            shortcut_name: Target shortcut; defaults to the configured one

        Returns:
            Whatever the launcher reports for opening the URL

        Raises:
            UnsupportedPlatformError: If not running on iOS
            ValidationError: If content is blank or the name is invalid
            ExternalServiceError: If the shortcut URL cannot be opened
        """
        name = shortcut_name or self.default_shortcut_name

        if not self.is_supported:
            raise UnsupportedPlatformError("iOS Shortcuts are only available on iOS devices")
        if not content.strip():
            raise ValidationError("Note content cannot be empty")
        if not self.is_valid_shortcut_name(name):
            raise ValidationError("Invalid shortcut name", details={"shortcut_name": name})

        via_clipboard = self.should_use_clipboard(content, name)
        if via_clipboard:
            await self._clipboard.copy(content)
            url = self.build_shortcut_url(name)
        else:
            url = self.build_shortcut_url(name, content)
        log_with_source(
            logger,
            "sharing",
            "info",
            "Forwarding note",
            shortcut=name,
            length=len(content),
            via="clipboard" if via_clipboard else "url",
        )

        if not await self._launcher.can_open(url):
            raise ExternalServiceError(
                f'Could not launch shortcut "{name}". '
                "Make sure the shortcut exists in the Shortcuts app."
            )
        return await self._launcher.open(url)
