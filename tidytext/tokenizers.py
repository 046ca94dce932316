"""
Tokenization specs and rule-based text segmentation.

A :class:`TokenSpec` says how to split a unit of text; a :class:`Tokenizer`
applies it, producing a lazy sequence of ``(token, start)`` pairs where
``start`` is the offset of the token in the original text. Segmentation is
purely rule and regex based.

Strategies:
    word: letter/digit runs, punctuation dropped
    character: one token per grapheme, whitespace skipped
    sentence: split after terminal punctuation
    line: split on newlines, blank lines skipped
    paragraph: split on blank lines, inner whitespace squished
    regex: split on a caller-supplied delimiter pattern
    ngrams: contiguous word n-grams
    character_shingles: contiguous character n-grams

Example:
    Split text into sentences::

        from tidytext.tokenizers import TokenSpec, Tokenizer

        tokenizer = Tokenizer(TokenSpec(strategy="sentence"))
        list(tokenizer.tokenize("Hello world. Bye."))
        # ['hello world.', 'bye.']

    Keep offsets::

        list(Tokenizer(strategy="word", lowercase=False).spans("Hi there"))
        # [('Hi', 0), ('there', 3)]

.. codeauthor:: David Brown <dwb2@andrew.cmu.edu>
"""

import regex
from collections import deque
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from .config import CONFIG, PATTERNS
from .validation import (
    InvalidSpecError,
    ParameterValidationError,
    validate_choice_parameter,
    validate_text_value,
)

# plural spellings accepted for convenience (e.g. token="words")
_STRATEGY_ALIASES = {
    "words": "word",
    "characters": "character",
    "sentences": "sentence",
    "lines": "line",
    "paragraphs": "paragraph",
    "ngram": "ngrams",
    "character_shingle": "character_shingles",
}

Span = Tuple[str, int]


@dataclass(frozen=True)
class TokenSpec:
    """
    Describes how to split a unit of text.

    Attributes:
        strategy: One of the supported strategies (see module docstring).
            Plural spellings such as 'words' are accepted.
        pattern: Delimiter regex. Required for 'regex', rejected otherwise.
        lowercase: Lowercase every produced token.
        n: Largest gram size for 'ngrams' / 'character_shingles'.
        n_min: Smallest gram size; defaults to ``n``.

    Raises:
        InvalidSpecError: If the combination of options is invalid.

    Example:
        >>> TokenSpec(strategy="regex", pattern=r";\\s*")
        >>> TokenSpec.from_dict({"strategy": "ngrams", "n": 3, "n_min": 1})
    """

    strategy: str = CONFIG.DEFAULT_STRATEGY
    pattern: Optional[str] = None
    lowercase: bool = True
    n: Optional[int] = None
    n_min: Optional[int] = None
    compiled: Optional[regex.Pattern] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        strategy = self.strategy
        if isinstance(strategy, str):
            strategy = _STRATEGY_ALIASES.get(strategy.lower(), strategy.lower())
        validate_choice_parameter(
            strategy,
            CONFIG.SUPPORTED_STRATEGIES,
            "strategy",
            "in TokenSpec",
            error_class=InvalidSpecError,
        )
        object.__setattr__(self, "strategy", strategy)

        if not isinstance(self.lowercase, bool):
            raise InvalidSpecError(
                f"lowercase must be True or False in TokenSpec, got {self.lowercase!r}"
            )

        self._check_pattern()
        self._check_sizes()

    def _check_pattern(self) -> None:
        if self.strategy != "regex":
            if self.pattern is not None:
                raise InvalidSpecError(
                    f"A pattern was given for strategy '{self.strategy}' in TokenSpec. "
                    "Patterns are only used with strategy='regex'."
                )
            return

        if not isinstance(self.pattern, str) or self.pattern == "":
            raise InvalidSpecError(
                "strategy='regex' requires a non-empty delimiter pattern in TokenSpec, "
                f"got {self.pattern!r}"
            )
        try:
            compiled = regex.compile(self.pattern)
        except regex.error as e:
            raise InvalidSpecError(
                f"Pattern {self.pattern!r} does not compile in TokenSpec: {e}"
            ) from e
        object.__setattr__(self, "compiled", compiled)

    def _check_sizes(self) -> None:
        if self.strategy not in CONFIG.SIZED_STRATEGIES:
            if self.n is not None or self.n_min is not None:
                raise InvalidSpecError(
                    f"n and n_min are only used with "
                    f"{' or '.join(CONFIG.SIZED_STRATEGIES)}, "
                    f"not strategy '{self.strategy}'."
                )
            return

        default = (
            CONFIG.DEFAULT_NGRAM_SIZE
            if self.strategy == "ngrams"
            else CONFIG.DEFAULT_SHINGLE_SIZE
        )
        n = default if self.n is None else self.n
        n_min = n if self.n_min is None else self.n_min

        for name, value in (("n", n), ("n_min", n_min)):
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidSpecError(
                    f"{name} must be a positive integer in TokenSpec, got {value!r}"
                )
        if n_min > n:
            raise InvalidSpecError(
                f"n_min ({n_min}) must not be larger than n ({n}) in TokenSpec."
            )

        object.__setattr__(self, "n", n)
        object.__setattr__(self, "n_min", n_min)

    @classmethod
    def from_dict(cls, options: Dict[str, Any]) -> "TokenSpec":
        """
        Build a spec from a plain configuration mapping.

        :param options: Mapping with any of strategy, pattern, lowercase,
            n and n_min.
        :return: A validated TokenSpec.
        """
        if not isinstance(options, dict):
            raise InvalidSpecError(
                f"Expected a dict of TokenSpec options, got {type(options).__name__}"
            )
        allowed = [f.name for f in fields(cls) if f.init]
        unknown = [key for key in options if key not in allowed]
        if unknown:
            raise InvalidSpecError(
                f"Unknown TokenSpec option(s): {', '.join(map(str, unknown))}\n"
                f"Valid options are: {', '.join(allowed)}"
            )
        return cls(**options)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.init}


def _as_spec(spec: Union[TokenSpec, Dict[str, Any], str, None], options: dict) -> TokenSpec:
    if spec is None:
        return TokenSpec.from_dict(options)
    # a strategy name combines with the other options
    if isinstance(spec, str) and "strategy" not in options:
        return TokenSpec.from_dict({"strategy": spec, **options})
    if options:
        raise ParameterValidationError(
            "Pass either a TokenSpec or keyword options, not both: "
            f"{', '.join(options)}"
        )
    if isinstance(spec, TokenSpec):
        return spec
    if isinstance(spec, dict):
        return TokenSpec.from_dict(spec)
    raise InvalidSpecError(
        f"Expected a TokenSpec, dict or strategy name, got {type(spec).__name__}"
    )


def _stripped_span(text: str, start: int, end: int) -> Iterator[Span]:
    segment = text[start:end]
    stripped = segment.strip()
    if stripped:
        yield stripped, start + len(segment) - len(segment.lstrip())


def _gram_spans(
    items: Iterator[Span], n_min: int, n: int, separator: str
) -> Iterator[Span]:
    """Slide a window over spans, yielding joined grams of n_min..n items."""

    def grams_from(window):
        head = list(window)
        for size in range(n_min, min(n, len(head)) + 1):
            yield separator.join(tok for tok, _ in head[:size]), head[0][1]

    window = deque()
    for item in items:
        window.append(item)
        if len(window) == n:
            yield from grams_from(window)
            window.popleft()

    # starts too close to the end for the longest gram
    while window:
        yield from grams_from(window)
        window.popleft()


class Tokenizer:
    """
    Applies a :class:`TokenSpec` to text.

    Accepts a TokenSpec, a dict of spec options, or the spec options as
    keyword arguments. A strategy name may be passed positionally along
    with the other keyword options.

    Example:
        >>> tokenizer = Tokenizer(strategy="regex", pattern=r"\\s*;\\s*")
        >>> list(tokenizer.tokenize("a; b;c"))
        ['a', 'b', 'c']
    """

    def __init__(self, spec: Union[TokenSpec, Dict[str, Any], str, None] = None, **options):
        self.spec = _as_spec(spec, options)
        self._segment = getattr(self, f"_{self.spec.strategy}_spans")

    def __repr__(self):
        return f"Tokenizer({self.spec!r})"

    def spans(self, text: Union[str, bytes, None]) -> Iterator[Span]:
        """
        Split text into ``(token, start)`` pairs.

        The text is checked eagerly, so encoding errors are raised here
        rather than on first iteration. The returned iterator is lazy and
        can be consumed once.

        :param text: A str, UTF-8 bytes, or None.
        :return: An iterator of (token, start offset) tuples.
        """
        text = validate_text_value(text, "in Tokenizer")
        if not text:
            return iter(())
        spans = self._segment(text)
        if self.spec.lowercase:
            return ((token.lower(), start) for token, start in spans)
        return spans

    def tokenize(self, text: Union[str, bytes, None]) -> Iterator[str]:
        """Split text into tokens, dropping offsets."""
        return (token for token, _ in self.spans(text))

    @staticmethod
    def _word_spans(text: str) -> Iterator[Span]:
        for match in PATTERNS.WORD.finditer(text):
            yield match.group(), match.start()

    @staticmethod
    def _character_spans(text: str) -> Iterator[Span]:
        for match in PATTERNS.GRAPHEME.finditer(text):
            cluster = match.group()
            if not cluster.isspace():
                yield cluster, match.start()

    @staticmethod
    def _sentence_spans(text: str) -> Iterator[Span]:
        pos = 0
        for match in PATTERNS.SENTENCE_BOUNDARY.finditer(text):
            yield from _stripped_span(text, pos, match.start())
            pos = match.end()
        yield from _stripped_span(text, pos, len(text))

    @staticmethod
    def _line_spans(text: str) -> Iterator[Span]:
        for match in PATTERNS.LINE.finditer(text):
            if match.group().strip():
                yield match.group(), match.start()

    @staticmethod
    def _paragraph_spans(text: str) -> Iterator[Span]:
        pos = 0
        for match in PATTERNS.PARAGRAPH_BREAK.finditer(text):
            for block, start in _stripped_span(text, pos, match.start()):
                yield " ".join(block.split()), start
            pos = match.end()
        for block, start in _stripped_span(text, pos, len(text)):
            yield " ".join(block.split()), start

    def _regex_spans(self, text: str) -> Iterator[Span]:
        pos = 0
        for match in self.spec.compiled.finditer(text):
            if match.start() > pos:
                yield text[pos:match.start()], pos
            pos = max(pos, match.end())
        if pos < len(text):
            yield text[pos:], pos

    def _ngrams_spans(self, text: str) -> Iterator[Span]:
        return _gram_spans(
            self._word_spans(text), self.spec.n_min, self.spec.n, CONFIG.NGRAM_SEPARATOR
        )

    def _character_shingles_spans(self, text: str) -> Iterator[Span]:
        alphanumeric = (
            (cluster, start)
            for cluster, start in self._character_spans(text)
            if cluster[0].isalnum()
        )
        return _gram_spans(alphanumeric, self.spec.n_min, self.spec.n, "")


def tokenize(
    text: Union[str, bytes, None],
    spec: Union[TokenSpec, Dict[str, Any], str, None] = None,
    **options,
) -> Iterator[str]:
    """
    Split text into tokens under a spec.

    :param text: A str, UTF-8 bytes, or None (empty result).
    :param spec: A TokenSpec, a dict of options, or a strategy name.
        Keyword options build a spec when ``spec`` is omitted.
    :return: A lazy iterator of tokens.

    Example:
        >>> list(tokenize("The cat sat.", "word"))
        ['the', 'cat', 'sat']
    """
    return Tokenizer(spec, **options).tokenize(text)
