"""
Hands the request archive to an external share target, usually an email draft.
"""

import asyncio
import html
import logging
import platform
import re
from dataclasses import dataclass
from datetime import datetime
from email.message import EmailMessage
from email.utils import formatdate
from pathlib import Path
from typing import Protocol, Sequence
from urllib.parse import urlparse
from urllib.request import url2pathname

from pathvalidate import sanitize_filename

from icon_request.exceptions import HandoffFailedError
from icon_request.models.app import AppRecord
from icon_request.models.config import RequestConfig

log = logging.getLogger(__name__)

STORE_LINK = "https://play.google.com/store/apps/details?id={pkg}"


class UriTransformer(Protocol):
    """Rewrites the archive locator before it is handed to the share target."""

    def transform(self, locator: str) -> str: ...


class IdentityUriTransformer:
    def transform(self, locator: str) -> str:
        return locator


class ShareTarget(Protocol):
    """The external chooser that receives the archive (fire-and-forget)."""

    def present(
        self, locator: str, recipient: str, subject: str, html_body: str
    ) -> None: ...


@dataclass(frozen=True)
class DeviceInfo:
    """Host details appended to the email body when device info is enabled."""

    os_name: str
    os_release: str
    machine: str

    @classmethod
    def current(cls) -> "DeviceInfo":
        return cls(
            os_name=platform.system() or "Unknown",
            os_release=platform.release(),
            machine=platform.machine() or "Unknown",
        )

    def to_html(self) -> str:
        return (
            f"OS: {html.escape(self.os_name)} {html.escape(self.os_release)}<br/>"
            f"Device: {html.escape(self.machine)}"
        )


def _lines_to_html(text: str) -> str:
    return html.escape(text).replace("\n", "<br/>")


def build_email_body(
    apps: Sequence[AppRecord],
    config: RequestConfig,
    device: DeviceInfo | None = None,
) -> str:
    """Builds the HTML body listing every selected app."""
    parts: list[str] = []
    if config.email_header:
        parts.append(_lines_to_html(config.email_header))
        parts.append("<br/><br/>")

    for i, app in enumerate(apps):
        if i > 0:
            parts.append("<br/><br/>")
        parts.append(f"Name: <b>{html.escape(app.name)}</b><br/>")
        parts.append(f"Code: <b>{html.escape(app.code)}</b><br/>")
        link = STORE_LINK.format(pkg=app.pkg)
        parts.append(f"Link: {html.escape(link)}<br/>")

    if config.include_device_info:
        device = device or DeviceInfo.current()
        parts.append(f"<br/><br/>{device.to_html()}")
        if config.email_footer:
            parts.append("<br/>")
            parts.append(_lines_to_html(config.email_footer))
    elif config.email_footer:
        parts.append("<br/><br/>")
        parts.append(_lines_to_html(config.email_footer))
    return "".join(parts)


_BR = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]+>")


def html_to_text(body: str) -> str:
    """Plain-text rendition of an email body built by `build_email_body`."""
    return html.unescape(_TAG.sub("", _BR.sub("\n", body)))


def locator_to_path(locator: str) -> Path | None:
    """Resolves a file:// locator to a local path, or None for other schemes."""
    parsed = urlparse(locator)
    if parsed.scheme != "file":
        return None
    return Path(url2pathname(parsed.path))


class ShareHandoff:
    """Delivers the archive through a `ShareTarget`."""

    def __init__(
        self,
        target: ShareTarget,
        uri_transformer: UriTransformer | None = None,
        device: DeviceInfo | None = None,
    ):
        self.target = target
        self.uri_transformer = uri_transformer or IdentityUriTransformer()
        self.device = device

    async def handoff(
        self, archive: Path, apps: Sequence[AppRecord], config: RequestConfig
    ) -> None:
        locator = archive.resolve().as_uri()
        new_locator = self.uri_transformer.transform(locator)
        if new_locator != locator:
            log.debug(f"Transformed URI {locator} -> {new_locator}")

        body = build_email_body(apps, config, self.device)
        log.info("Launching share target...")
        try:
            await asyncio.to_thread(
                self.target.present,
                new_locator,
                config.email_recipient or "",
                config.email_subject,
                body,
            )
        except Exception as e:
            raise HandoffFailedError(f"Unable to share the request: {e}") from e


class EmlDraftTarget:
    """
    Writes an email draft (.eml) with the archive attached into an outbox
    folder, ready to be opened by any mail client.
    """

    def __init__(self, outbox_dir: Path, sender: str | None = None):
        self.outbox_dir = Path(outbox_dir)
        self.sender = sender
        self.last_draft: Path | None = None

    def present(
        self, locator: str, recipient: str, subject: str, html_body: str
    ) -> None:
        msg = EmailMessage()
        msg["To"] = recipient
        msg["Subject"] = subject
        msg["Date"] = formatdate(localtime=True)
        if self.sender:
            msg["From"] = self.sender
        msg["X-Unsent"] = "1"

        archive = locator_to_path(locator)
        text_body = html_to_text(html_body)
        if archive is None:
            # Non-file locators cannot be attached; link to them instead
            text_body += f"\n\nArchive: {locator}"
            html_body += f"<br/><br/>Archive: {html.escape(locator)}"
        msg.set_content(text_body)
        msg.add_alternative(html_body, subtype="html")
        if archive is not None:
            msg.add_attachment(
                archive.read_bytes(),
                maintype="application",
                subtype="zip",
                filename=archive.name,
            )

        self.outbox_dir.mkdir(parents=True, exist_ok=True)
        stem = archive.stem if archive else datetime.now().strftime("%Y%m%d_%H%M%S")
        draft = self.outbox_dir / sanitize_filename(f"{stem}.eml")
        draft.write_bytes(bytes(msg))
        self.last_draft = draft
        log.info(f"Email draft saved to {draft}")
