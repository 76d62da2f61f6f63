"""Tests for FormattedDetail — the builder, section parsing and raw fallback."""

from __future__ import annotations

from herald.message import (
    DetailBlock,
    DetailBuilder,
    FormattedDetail,
    Message,
    Style,
    StyledText,
)
from herald.message.detail import RAW_NOT_AVAILABLE


class TestDetailBuilder:
    def test_blocks_in_order(self) -> None:
        builder = DetailBuilder()
        builder.text().append_plain("Base description")
        builder.section("New section").append_styled("hello", Style.MONOSPACE)
        detail = builder.build()

        assert detail.blocks == (
            DetailBlock(parts=(StyledText.plain("Base description"),)),
            DetailBlock(
                title="New section",
                parts=(StyledText.styled("hello", Style.MONOSPACE),),
            ),
        )

    def test_appends_chain(self) -> None:
        builder = DetailBuilder()
        builder.section("s").append_plain("a ").append_styled("b", Style.BOLD, Style.ITALICS)
        [block] = builder.build().blocks
        assert block.plain_text == "a b"
        assert block.parts[1].styles == (Style.BOLD, Style.ITALICS)

    def test_raw_derived_from_blocks(self) -> None:
        builder = DetailBuilder()
        builder.text().append_plain("Backup finished late.")
        builder.section("Timing").append_plain("took ").append_styled("3h", Style.BOLD)
        assert builder.build().raw == "Backup finished late.\n\nTiming:\ntook 3h"

    def test_explicit_raw_kept(self) -> None:
        builder = DetailBuilder(raw="plain version")
        builder.section("s").append_plain("x")
        assert builder.build().raw == "plain version"
        assert DetailBuilder().raw("later").build().raw == "later"

    def test_empty_builder(self) -> None:
        detail = DetailBuilder().build()
        assert detail.blocks == ()
        assert detail.raw == RAW_NOT_AVAILABLE


class TestParse:
    def test_sections(self) -> None:
        detail = FormattedDetail.parse("intro\n#<Timing>#\n3h\n4h\n#<Disk>#\n93%")
        assert detail.raw == "intro\n#<Timing>#\n3h\n4h\n#<Disk>#\n93%"
        assert [b.title for b in detail.blocks] == [None, "Timing", "Disk"]
        assert [b.plain_text for b in detail.blocks] == ["intro\n", "3h\n4h\n", "93%\n"]

    def test_no_headers_is_one_text_block(self) -> None:
        [block] = FormattedDetail.parse("just text").blocks
        assert not block.is_section

    def test_empty_section_kept(self) -> None:
        detail = FormattedDetail.parse("#<Empty>#\n#<Full>#\nx")
        assert [b.title for b in detail.blocks] == ["Empty", "Full"]
        assert detail.blocks[0].plain_text == ""

    def test_short_marker_is_text(self) -> None:
        [block] = FormattedDetail.parse("#<>#").blocks
        assert not block.is_section
        assert block.plain_text == "#<>#\n"


class TestMessageDetail:
    def test_plain_detail(self) -> None:
        msg = Message(detail="body")
        assert not msg.has_formatting
        assert msg.raw_detail == "body"

    def test_formatted_detail(self) -> None:
        msg = Message(detail=FormattedDetail.parse("#<S>#\nbody"))
        assert msg.has_formatting
        assert msg.raw_detail == "#<S>#\nbody"

    def test_formatted_detail_from_dict(self) -> None:
        msg = Message.model_validate(
            {"detail": {"raw": "r", "blocks": [{"title": "S", "parts": [{"text": "x"}]}]}}
        )
        assert isinstance(msg.detail, FormattedDetail)
        assert msg.detail.blocks[0].title == "S"
