"""Tests for the share channel: email body, URI transformation and drafts."""

from email import message_from_bytes, policy
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from icon_request.delivery.share import (
    DeviceInfo,
    EmlDraftTarget,
    ShareHandoff,
    build_email_body,
    html_to_text,
    locator_to_path,
)
from icon_request.exceptions import HandoffFailedError
from icon_request.models.app import AppRecord
from icon_request.models.config import RequestConfig

DEVICE = DeviceInfo(os_name="Linux", os_release="6.1", machine="x86_64")


# ── build_email_body ───────────────────────────────────────────────────────────


class TestBuildEmailBody:
    def test_app_block(self, camera_app: AppRecord, share_config: RequestConfig) -> None:
        body = build_email_body([camera_app], share_config)
        assert body == (
            "Name: <b>Camera</b><br/>"
            "Code: <b>com.cam/.Main</b><br/>"
            "Link: https://play.google.com/store/apps/details?id=com.cam<br/>"
        )

    def test_blocks_are_separated(self, apps: list[AppRecord], share_config: RequestConfig) -> None:
        body = build_email_body(apps, share_config)
        assert body.count("Name: <b>") == 3
        assert "<br/><br/>Name: <b>Google Maps</b>" in body

    def test_header_newlines_become_breaks(self, camera_app: AppRecord, share_config: RequestConfig) -> None:
        config = share_config.model_copy(update={"email_header": "Hi!\nPlease theme these."})
        body = build_email_body([camera_app], config)
        assert body.startswith("Hi!<br/>Please theme these.<br/><br/>Name: <b>Camera</b>")

    def test_device_info_then_footer(self, camera_app: AppRecord, share_config: RequestConfig) -> None:
        config = share_config.model_copy(update={"include_device_info": True, "email_footer": "Thanks\nBob"})
        body = build_email_body([camera_app], config, DEVICE)
        assert body.endswith(
            "<br/><br/>OS: Linux 6.1<br/>Device: x86_64<br/>Thanks<br/>Bob"
        )

    def test_current_device_omits_host_name(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("platform.node", lambda: "alice-laptop")
        assert "alice-laptop" not in DeviceInfo.current().to_html()

    def test_header_keeps_leading_and_trailing_breaks(self, camera_app: AppRecord, share_config: RequestConfig) -> None:
        config = RequestConfig(
            email_recipient="a@b.c", email_header="\nHi!\n", cache_folder=share_config.cache_folder, include_device_info=False
        )
        body = build_email_body([camera_app], config)
        assert body.startswith("<br/>Hi!<br/><br/><br/>Name: <b>Camera</b>")

    def test_footer_without_device_info(self, camera_app: AppRecord, share_config: RequestConfig) -> None:
        config = share_config.model_copy(update={"email_footer": "Thanks"})
        body = build_email_body([camera_app], config, DEVICE)
        assert body.endswith("details?id=com.cam<br/><br/><br/>Thanks")
        assert "OS:" not in body

    def test_app_text_is_escaped(self, share_config: RequestConfig) -> None:
        app = AppRecord(name="<script>", pkg="com.x", code="com.x/.A&B")
        body = build_email_body([app], share_config)
        assert "<script>" not in body
        assert "&lt;script&gt;" in body
        assert "com.x/.A&amp;B" in body


class TestHtmlToText:
    def test_converts_breaks_and_strips_tags(self) -> None:
        assert html_to_text("Name: <b>A &amp; B</b><br/>Code: <b>x</b>") == "Name: A & B\nCode: x"


class TestLocatorToPath:
    def test_file_uri(self, tmp_path: Path) -> None:
        path = tmp_path / "My Request.zip"
        assert locator_to_path(path.as_uri()) == path

    def test_other_schemes(self) -> None:
        assert locator_to_path("content://provider/icons.zip") is None


# ── ShareHandoff ───────────────────────────────────────────────────────────────


class _PrefixTransformer:
    def transform(self, locator: str) -> str:
        return locator.replace("file://", "content://icon.provider")


class TestShareHandoff:
    async def test_presents_file_locator(self, tmp_path: Path, camera_app: AppRecord, share_config: RequestConfig) -> None:
        archive = tmp_path / "IconRequest.zip"
        archive.write_bytes(b"zip")
        target = MagicMock()

        await ShareHandoff(target, device=DEVICE).handoff(archive, [camera_app], share_config)

        target.present.assert_called_once()
        locator, recipient, subject, body = target.present.call_args.args
        assert locator == archive.resolve().as_uri()
        assert recipient == "designer@example.com"
        assert subject == "Icon Request"
        assert "Name: <b>Camera</b>" in body

    async def test_uses_transformed_locator(self, tmp_path: Path, camera_app: AppRecord, share_config: RequestConfig) -> None:
        archive = tmp_path / "IconRequest.zip"
        archive.write_bytes(b"zip")
        target = MagicMock()

        await ShareHandoff(target, uri_transformer=_PrefixTransformer()).handoff(archive, [camera_app], share_config)

        locator = target.present.call_args.args[0]
        assert locator.startswith("content://icon.provider")

    async def test_target_failure(self, tmp_path: Path, camera_app: AppRecord, share_config: RequestConfig) -> None:
        target = MagicMock()
        target.present.side_effect = RuntimeError("no mail client")
        with pytest.raises(HandoffFailedError, match="no mail client"):
            await ShareHandoff(target).handoff(tmp_path / "a.zip", [camera_app], share_config)


# ── EmlDraftTarget ─────────────────────────────────────────────────────────────


class TestEmlDraftTarget:
    def test_writes_draft_with_attachment(self, tmp_path: Path) -> None:
        archive = tmp_path / "IconRequest-20240101_120000.zip"
        archive.write_bytes(b"PK-data")
        outbox = tmp_path / "outbox"
        target = EmlDraftTarget(outbox)

        target.present(archive.as_uri(), "designer@example.com", "Icon Request", "Name: <b>Camera</b><br/>")

        assert target.last_draft == outbox / "IconRequest-20240101_120000.eml"
        msg = message_from_bytes(target.last_draft.read_bytes(), policy=policy.default)
        assert msg["To"] == "designer@example.com"
        assert msg["Subject"] == "Icon Request"
        attachments = list(msg.iter_attachments())
        assert len(attachments) == 1
        assert attachments[0].get_filename() == archive.name
        assert attachments[0].get_content() == b"PK-data"
        assert msg.get_body(preferencelist=("plain",)).get_content().startswith("Name: Camera")

    def test_non_file_locator_is_linked(self, tmp_path: Path) -> None:
        target = EmlDraftTarget(tmp_path)
        target.present("content://provider/icons.zip", "a@b.c", "Subj", "Body")
        msg = message_from_bytes(target.last_draft.read_bytes(), policy=policy.default)
        assert list(msg.iter_attachments()) == []
        assert "content://provider/icons.zip" in msg.get_body(preferencelist=("plain",)).get_content()
