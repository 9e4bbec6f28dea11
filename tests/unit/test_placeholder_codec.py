"""
Unit tests for md_translator/placeholder_codec.py - PlaceholderCodec
"""
import pytest

from md_translator.placeholder_codec import (
    BlockKind,
    ExtractedBlock,
    PlaceholderCodec,
)


FENCED_DOC = "# T\n\nUse `f()` here.\n\n```dart\nvoid f(){}\n```\n"


class TestExtract:
    """Test code block extraction."""

    def test_no_code_returns_text_unchanged(self, codec):
        doc = "# Title\n\nNo code here.\n"
        result = codec.extract(doc)
        assert result.clean_text == doc
        assert result.blocks == []

    def test_empty_input(self, codec):
        result = codec.extract("")
        assert result.clean_text == ""
        assert result.blocks == []

    def test_fenced_block_replaced_by_anchor(self, codec):
        result = codec.extract(FENCED_DOC)

        assert len(result.blocks) == 1
        block = result.blocks[0]
        assert block.anchor == "⟪CODE_0⟫"
        assert block.kind is BlockKind.FENCED
        assert block.language == "dart"
        assert block.original_text == "```dart\nvoid f(){}\n```"
        assert result.clean_text == "# T\n\nUse `f()` here.\n\n⟪CODE_0⟫\n"

    def test_inline_code_kept_by_default(self, codec):
        result = codec.extract(FENCED_DOC)
        assert "`f()`" in result.clean_text
        assert result.inline_count == 0
        assert result.fenced_count == 1

    def test_tilde_fence(self, codec):
        doc = "Text\n\n~~~\nraw ``` inside\n~~~\n\nMore"
        result = codec.extract(doc)
        assert len(result.blocks) == 1
        assert result.blocks[0].original_text == "~~~\nraw ``` inside\n~~~"
        assert result.blocks[0].language == ""
        assert result.clean_text == "Text\n\n⟪CODE_0⟫\n\nMore"

    def test_indented_fence_keeps_indentation_outside(self, codec):
        doc = "- item\n\n  ```js\n  let a = 1;\n  ```\n- next\n"
        result = codec.extract(doc)
        assert len(result.blocks) == 1
        assert result.blocks[0].original_text == "  ```js\n  let a = 1;\n  ```"
        assert result.clean_text == "- item\n\n⟪CODE_0⟫\n- next\n"

    def test_longer_fence_wraps_nested_fence(self, codec):
        doc = "Intro\n\n````md\n```js\nlet x = 1\n```\n````\n"
        result = codec.extract(doc)
        assert len(result.blocks) == 1
        assert result.blocks[0].original_text == "````md\n```js\nlet x = 1\n```\n````"
        assert result.blocks[0].language == "md"
        assert result.clean_text == "Intro\n\n⟪CODE_0⟫\n"

    def test_closing_fence_must_stand_alone(self, codec):
        doc = "```\na\n```not a close\nb\n```\n"
        result = codec.extract(doc)
        assert len(result.blocks) == 1
        assert result.blocks[0].original_text == "```\na\n```not a close\nb\n```"

    def test_anchor_counter_starts_at_zero_each_call(self, codec):
        doc = "```\na\n```\n\n```\nb\n```"
        first = codec.extract(doc)
        second = codec.extract(doc)
        assert [b.anchor for b in first.blocks] == ["⟪CODE_0⟫", "⟪CODE_1⟫"]
        assert [b.anchor for b in second.blocks] == ["⟪CODE_0⟫", "⟪CODE_1⟫"]

    def test_extract_inline_enabled(self):
        codec = PlaceholderCodec(extract_inline=True)
        result = codec.extract(FENCED_DOC)

        assert result.fenced_count == 1
        assert result.inline_count == 1
        assert result.blocks[0].kind is BlockKind.FENCED
        assert result.blocks[1].kind is BlockKind.INLINE
        assert result.blocks[1].original_text == "`f()`"
        assert "`" not in result.clean_text

    def test_anchors_contain_no_markdown_syntax(self, codec):
        anchor = codec.make_anchor(42)
        for ch in "[]`# \n":
            assert ch not in anchor


class TestRestore:
    """Test anchor restoration."""

    def test_round_trip_without_translation(self, codec, sample_documents):
        for doc in sample_documents.values():
            result = codec.extract(doc)
            assert codec.restore(result.clean_text, result.blocks) == doc

    def test_round_trip_with_inline_extraction(self, sample_documents):
        codec = PlaceholderCodec(extract_inline=True)
        doc = sample_documents["with_code"]
        result = codec.extract(doc)
        assert codec.restore(result.clean_text, result.blocks) == doc

    def test_restore_is_literal(self, codec):
        """Replacement text with regex metacharacters is inserted as is."""
        block = ExtractedBlock(original_text="```\n\\1 $0 \\g<0>\n```", anchor="⟪CODE_0⟫")
        assert codec.restore("x ⟪CODE_0⟫ y", [block]) == "x ```\n\\1 $0 \\g<0>\n``` y"

    def test_restore_every_occurrence(self, codec):
        block = ExtractedBlock(original_text="`a`", anchor="⟪CODE_0⟫", kind=BlockKind.INLINE)
        assert codec.restore("⟪CODE_0⟫ and ⟪CODE_0⟫", [block]) == "`a` and `a`"

    def test_restore_without_blocks(self, codec):
        assert codec.restore("text", []) == "text"


class TestAnchorValidation:
    """Test detection of lost or corrupted anchors."""

    @pytest.fixture
    def blocks(self, codec):
        return codec.extract("```\na\n```\n\n```\nb\n```").blocks

    def test_validate_anchors_all_present(self, codec, blocks):
        assert codec.validate_anchors("⟪CODE_0⟫\n\n⟪CODE_1⟫", blocks) == []

    def test_validate_anchors_reports_missing(self, codec, blocks):
        assert codec.validate_anchors("⟪CODE_0⟫ only", blocks) == ["⟪CODE_1⟫"]

    def test_find_unexpected_anchors(self, codec, blocks):
        text = "⟪CODE_0⟫ ⟪CODE_7⟫ ⟪CODE_7⟫ ⟪CODE_1⟫ ⟪CODE_3⟫"
        assert codec.find_unexpected_anchors(text, blocks) == ["⟪CODE_7⟫", "⟪CODE_3⟫"]

    def test_check_restoration_success(self, codec):
        doc = "Intro\n\n```\ncode\n```\n"
        result = codec.extract(doc)
        final = codec.restore(result.clean_text.upper(), result.blocks)
        assert codec.check_restoration(final, result.blocks)

    def test_check_restoration_fails_on_leftover_anchor(self, codec, blocks):
        final = "```\na\n```\n\n```\nb\n```\n⟪CODE_9⟫"
        assert not codec.check_restoration(final, blocks)

    def test_check_restoration_fails_on_missing_block(self, codec, blocks):
        assert not codec.check_restoration("```\na\n```", blocks)

    def test_anchor_text_inside_restored_code_is_allowed(self, codec):
        doc = "Docs\n\n```\nanchors look like ⟪CODE_5⟫\n```\n"
        result = codec.extract(doc)
        final = codec.restore(result.clean_text, result.blocks)
        assert final == doc
        assert codec.check_restoration(final, result.blocks)

    def test_anchor_text_naming_another_block_is_not_substituted(self, codec):
        doc = "```\nplaceholders look like ⟪CODE_1⟫\n```\n\ntext\n\n```\nsecond\n```\n"
        result = codec.extract(doc)
        final = codec.restore(result.clean_text, result.blocks)
        assert final == doc
        assert codec.check_restoration(final, result.blocks)

    def test_restoration_report(self, codec, blocks):
        translated = "⟪CODE_0⟫ ⟪CODE_8⟫"
        report = codec.restoration_report(translated, blocks)
        assert report['total_expected_anchors'] == 2
        assert report['missing_anchors'] == ["⟪CODE_1⟫"]
        assert report['missing_anchors_count'] == 1
        assert report['unexpected_anchors'] == ["⟪CODE_8⟫"]
        assert report['unexpected_anchors_count'] == 1
        assert report['restoration_success'] is False
