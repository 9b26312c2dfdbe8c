"""Tests for token-budget segmentation and style selection."""
import pytest

from lullaby.core import TokenBudgetSegmenter, VoiceStyle, VoiceStyleSelector
from lullaby.core.segmentation import RegexTokenizer, sentence_spans

PARAGRAPH = (
    "One two three four five. "
    "Six seven eight nine ten. "
    "Eleven twelve thirteen."
)


@pytest.fixture
def segmenter():
    return TokenBudgetSegmenter()


class TestTokenizer:

    def test_words_and_punctuation(self):
        tokenizer = RegexTokenizer()
        assert tokenizer.count("Hello, world!") == 4
        assert tokenizer.count("") == 0

    def test_sentence_spans_tile_text(self):
        spans = sentence_spans(PARAGRAPH)
        assert len(spans) == 3
        assert "".join(PARAGRAPH[s:e] for s, e in spans) == PARAGRAPH

    def test_sentence_spans_without_terminator(self):
        assert sentence_spans("no ending here") == [(0, 14)]


class TestSegmenter:

    def test_short_text_one_chunk(self, segmenter):
        chunks = segmenter.segment("short", max_tokens=100)
        assert len(chunks) == 1
        assert chunks[0].text == "short"
        assert chunks[0].style is VoiceStyle.SHORT
        assert chunks[0].sequence_index == 0

    def test_empty_text_no_chunks(self, segmenter):
        assert segmenter.segment("", max_tokens=10) == []

    def test_invalid_budget(self, segmenter):
        with pytest.raises(ValueError):
            segmenter.segment("hello", max_tokens=0)

    def test_sentence_boundaries_respected(self, segmenter):
        chunks = segmenter.segment(PARAGRAPH, max_tokens=6)
        assert [c.text for c in chunks] == [
            "One two three four five. ",
            "Six seven eight nine ten. ",
            "Eleven twelve thirteen.",
        ]
        assert [c.sequence_index for c in chunks] == [0, 1, 2]
        assert not any(c.forced_split for c in chunks)

    def test_sentences_packed_greedily(self, segmenter):
        chunks = segmenter.segment(PARAGRAPH, max_tokens=12)
        assert len(chunks) == 2
        assert chunks[0].token_count == 12
        assert chunks[1].token_count == 4

    @pytest.mark.parametrize("max_tokens", [1, 3, 6, 7, 11])
    def test_chunks_tile_and_fit(self, segmenter, max_tokens):
        chunks = segmenter.segment(PARAGRAPH, max_tokens=max_tokens)
        assert "".join(c.text for c in chunks) == PARAGRAPH
        assert all(c.token_count <= max_tokens for c in chunks)
        for previous, current in zip(chunks, chunks[1:]):
            assert previous.end == current.start

    def test_oversized_sentence_forced_split(self, segmenter):
        text = " ".join(f"word{i}" for i in range(25))
        chunks, warnings = segmenter.segment_with_warnings(text, max_tokens=10)

        assert [c.token_count for c in chunks] == [10, 10, 5]
        assert all(c.forced_split for c in chunks)
        assert "".join(c.text for c in chunks) == text
        assert len(warnings) == 1
        assert "exceeds limit of 10" in warnings[0]

    def test_short_text_bypasses_splitting(self, segmenter):
        chunks, warnings = segmenter.segment_with_warnings("a b c d e f g h", max_tokens=3)
        assert len(chunks) == 1
        assert chunks[0].token_count == 8
        assert warnings == []

    def test_long_chunk_gets_long_style(self, segmenter):
        text = " ".join(["word"] * 100)
        chunks = segmenter.segment(text, max_tokens=510)
        assert chunks[0].style is VoiceStyle.LONG


class TestStyleSelector:

    @pytest.mark.parametrize("tokens,style", [
        (1, VoiceStyle.SHORT),
        (16, VoiceStyle.SHORT),
        (17, VoiceStyle.MEDIUM),
        (64, VoiceStyle.MEDIUM),
        (65, VoiceStyle.LONG),
    ])
    def test_buckets(self, tokens, style):
        assert VoiceStyleSelector().select(tokens) is style

    def test_speaking_rate_shifts_bucket(self):
        selector = VoiceStyleSelector()
        assert selector.select(10) is VoiceStyle.SHORT
        assert selector.select(10, speaking_rate=2.0) is VoiceStyle.MEDIUM

    @pytest.mark.parametrize("short_max,medium_max", [(0, 10), (20, 10), (10, 10)])
    def test_invalid_bounds(self, short_max, medium_max):
        with pytest.raises(ValueError):
            VoiceStyleSelector(short_max, medium_max)

    def test_speed_factors(self):
        assert VoiceStyle.SHORT.speed_factor > VoiceStyle.MEDIUM.speed_factor
        assert VoiceStyle.LONG.speed_factor < VoiceStyle.MEDIUM.speed_factor
