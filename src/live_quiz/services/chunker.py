"""Split transcript text into bounded chunks for transport."""

import re
from collections.abc import Iterator
from dataclasses import dataclass

DEFAULT_MAX_CHUNK_SIZE = 8000

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class TranscriptChunk:
    """One piece of a chunked transcript."""

    text: str
    index: int
    total: int

    @property
    def is_last(self) -> bool:
        return self.index == self.total - 1


@dataclass(frozen=True)
class TranscriptChunks:
    """Lazy, restartable sequence of chunks for one piece of text.

    Sentences are packed greedily; a sentence longer than the limit is
    split on words. A single word longer than the limit is emitted whole,
    so the limit is advisory for unsplittable tokens.
    """

    text: str
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE

    def __post_init__(self) -> None:
        if self.max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be positive")

    def __iter__(self) -> Iterator[TranscriptChunk]:
        total = len(self)
        for index, piece in enumerate(self._pieces()):
            yield TranscriptChunk(text=piece, index=index, total=total)

    def __len__(self) -> int:
        return sum(1 for _ in self._pieces())

    def _pieces(self) -> Iterator[str]:
        current = ""
        for unit in self._units():
            if not current:
                current = unit
            elif len(current) + 1 + len(unit) <= self.max_chunk_size:
                current = f"{current} {unit}"
            else:
                yield current
                current = unit
        if current:
            yield current

    def _units(self) -> Iterator[str]:
        stripped = self.text.strip()
        if not stripped:
            return
        for sentence in _SENTENCE_BOUNDARY.split(stripped):
            if len(sentence) <= self.max_chunk_size:
                yield sentence
            else:
                yield from _WHITESPACE.split(sentence)


def chunk_transcript(
    text: str, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE
) -> TranscriptChunks:
    """Return the chunk sequence for ``text``."""
    return TranscriptChunks(text=text, max_chunk_size=max_chunk_size)
