"""Token-budget segmentation and voice style selection.

The synthesis backend accepts a bounded number of tokens per call. Long text
is cut into chunks that each fit, preferring sentence boundaries so cadence
stays natural. Chunk spans always tile the input: joining chunk texts in
sequence order gives back the original string exactly.

Each chunk also gets a style bucket from its own token count. A single fixed
style clips words on long chunks and drags on very short ones.
"""
import re
from dataclasses import dataclass
from typing import Optional

from .constants import VoiceStyle
from .logging import get_logger

logger = get_logger(__name__)

SENTENCE_END = re.compile(r"[.!?]+(?:\s+|$)")


class RegexTokenizer:
    """Word runs and single punctuation marks count as one token each."""

    def __init__(self, pattern: str = r"\w+|[^\w\s]"):
        self.pattern = re.compile(pattern)

    def spans(self, text: str) -> list[tuple[int, int]]:
        return [match.span() for match in self.pattern.finditer(text)]

    def count(self, text: str) -> int:
        return sum(1 for _ in self.pattern.finditer(text))


class VoiceStyleSelector:
    """Maps a chunk's token count to a style bucket."""

    def __init__(self, short_max: int = 16, medium_max: int = 64):
        if not 0 < short_max < medium_max:
            raise ValueError(
                f"Style bounds must satisfy 0 < short_max < medium_max, "
                f"got {short_max}, {medium_max}"
            )
        self.short_max = short_max
        self.medium_max = medium_max

    def select(self, token_count: int, speaking_rate: float = 1.0) -> VoiceStyle:
        """Pick a style bucket.

        Args:
            token_count: Tokens in the chunk
            speaking_rate: Rate multiplier from the driving wave; faster
                delivery packs more tokens per style window

        Returns:
            SHORT, MEDIUM or LONG
        """
        effective = token_count * speaking_rate
        if effective <= self.short_max:
            return VoiceStyle.SHORT
        if effective <= self.medium_max:
            return VoiceStyle.MEDIUM
        return VoiceStyle.LONG


@dataclass(frozen=True)
class Chunk:
    """A bounded text fragment ready for one backend call.

    Attributes:
        text: The fragment, including trailing whitespace
        start: Offset of the fragment in the segmented text
        end: End offset (exclusive)
        token_count: Tokens in text
        style: Style bucket for the fragment
        sequence_index: Position in the audio concatenation order
        forced_split: The fragment came from a sentence cut at the token limit
    """
    text: str
    start: int
    end: int
    token_count: int
    style: VoiceStyle
    sequence_index: int
    forced_split: bool = False


def sentence_spans(text: str) -> list[tuple[int, int]]:
    """Contiguous (start, end) spans, one per sentence, covering all of text."""
    spans = []
    start = 0
    for match in SENTENCE_END.finditer(text):
        spans.append((start, match.end()))
        start = match.end()
    if start < len(text):
        spans.append((start, len(text)))
    return spans


class TokenBudgetSegmenter:
    """Splits text into ordered chunks within a token budget."""

    def __init__(
        self,
        tokenizer: Optional[RegexTokenizer] = None,
        selector: Optional[VoiceStyleSelector] = None,
        short_text_threshold: int = 50,
    ):
        self.tokenizer = tokenizer or RegexTokenizer()
        self.selector = selector or VoiceStyleSelector()
        self.short_text_threshold = short_text_threshold

    def segment(
        self,
        text: str,
        max_tokens: int,
        speaking_rate: float = 1.0,
    ) -> list[Chunk]:
        """Split text into chunks. Forced splits are logged as warnings."""
        chunks, _ = self.segment_with_warnings(text, max_tokens, speaking_rate)
        return chunks

    def segment_with_warnings(
        self,
        text: str,
        max_tokens: int,
        speaking_rate: float = 1.0,
    ) -> tuple[list[Chunk], list[str]]:
        """Split text into chunks and report any forced splits.

        Args:
            text: Normalized text
            max_tokens: Backend token capacity per call
            speaking_rate: Rate multiplier used when picking styles

        Returns:
            (chunks, warnings). Empty text gives no chunks.

        Raises:
            ValueError: If max_tokens < 1
        """
        if max_tokens < 1:
            raise ValueError(f"max_tokens must be at least 1, got {max_tokens}")
        if not text:
            return [], []

        total = self.tokenizer.count(text)

        # Short alerts are spoken in one pass; sentence splitting them gave
        # uneven cadence.
        if len(text) < self.short_text_threshold or total <= max_tokens:
            style = self.selector.select(total, speaking_rate)
            return [Chunk(text, 0, len(text), total, style, 0)], []

        warnings: list[str] = []
        pieces: list[tuple[int, int, bool]] = []
        for start, end in sentence_spans(text):
            pieces.extend(self._fit_sentence(text, start, end, max_tokens, warnings))

        chunks: list[Chunk] = []
        current: Optional[list] = None  # [start, end, tokens, forced]
        for start, end, forced in pieces:
            tokens = self.tokenizer.count(text[start:end])
            if current is not None and current[2] + tokens <= max_tokens:
                current[1] = end
                current[2] += tokens
                current[3] = current[3] or forced
                continue
            if current is not None:
                chunks.append(self._make_chunk(text, current, len(chunks), speaking_rate))
            current = [start, end, tokens, forced]
        if current is not None:
            chunks.append(self._make_chunk(text, current, len(chunks), speaking_rate))

        logger.debug(f"Segmented {total} tokens into {len(chunks)} chunks")
        return chunks, warnings

    def _fit_sentence(
        self,
        text: str,
        start: int,
        end: int,
        max_tokens: int,
        warnings: list[str],
    ) -> list[tuple[int, int, bool]]:
        spans = self.tokenizer.spans(text[start:end])
        if len(spans) <= max_tokens:
            return [(start, end, False)]

        pieces = []
        piece_start = start
        for index in range(max_tokens, len(spans), max_tokens):
            cut = start + spans[index][0]
            pieces.append((piece_start, cut, True))
            piece_start = cut
        pieces.append((piece_start, end, True))

        warning = (
            f"Sentence of {len(spans)} tokens exceeds limit of {max_tokens}; "
            f"split into {len(pieces)} parts at offset {start}"
        )
        logger.warning(warning)
        warnings.append(warning)
        return pieces

    def _make_chunk(
        self,
        text: str,
        piece: list,
        index: int,
        speaking_rate: float,
    ) -> Chunk:
        start, end, tokens, forced = piece
        return Chunk(
            text=text[start:end],
            start=start,
            end=end,
            token_count=tokens,
            style=self.selector.select(tokens, speaking_rate),
            sequence_index=index,
            forced_split=forced,
        )
