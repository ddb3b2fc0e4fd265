"""Lexical feature extraction for model selection.

Turns a prompt into the few cheap features the classifiers score against.
Everything here is a deterministic character heuristic: the token estimate is
``ceil(len(prompt) / chars_per_token)``, not a tokenizer count, and the file
count is a regex guess at how many files the prompt talks about.

Usage:
    from automodel.routing.features import extract_features

    features = extract_features("Refactor src/app.py and src/db.py")
    print(features.token_estimate, features.file_count)
"""

from collections.abc import Mapping
from dataclasses import dataclass
import math
import re
from typing import Any

DEFAULT_CHARS_PER_TOKEN = 4

# Upper bound on path-like tokens counted in one prompt
MAX_FILE_COUNT = 50

_PATH_LIKE = re.compile(r"[\w-]+\.\w+|[\w-]+/[\w-]+")
_EXPLICIT_FILE_COUNT = re.compile(r"(\d+)\s+files?\b", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class PromptFeatures:
    """Features extracted from one prompt.

    Attributes:
        raw: The prompt as given ("" for missing input).
        normalized: Lower-cased prompt, used for keyword matching.
        token_estimate: Character-based token estimate.
        file_count: Estimated number of files mentioned.
    """

    raw: str
    normalized: str
    token_estimate: int
    file_count: int

    @property
    def is_empty(self) -> bool:
        return not self.raw.strip()


EMPTY_FEATURES = PromptFeatures(raw="", normalized="", token_estimate=0, file_count=0)


def estimate_tokens(text: str, chars_per_token: int = DEFAULT_CHARS_PER_TOKEN) -> int:
    """Estimate tokens as ``ceil(len(text) / chars_per_token)``."""
    if not text:
        return 0
    return math.ceil(len(text) / max(1, chars_per_token))


def estimate_file_count(text: str) -> int:
    """Estimate how many files a prompt refers to.

    An explicit "N files" phrase wins. Otherwise path-like tokens
    ("app.py", "src/db") are counted, capped at MAX_FILE_COUNT.
    """
    if not text:
        return 0
    explicit = _EXPLICIT_FILE_COUNT.search(text)
    if explicit:
        return int(explicit.group(1))
    return min(len(_PATH_LIKE.findall(text)), MAX_FILE_COUNT)


def extract_features(
    prompt: Any,
    *,
    chars_per_token: int = DEFAULT_CHARS_PER_TOKEN,
) -> PromptFeatures:
    """Extract features from a prompt.

    Never raises. None or any non-string input yields EMPTY_FEATURES.

    Args:
        prompt: The prompt text.
        chars_per_token: Characters per estimated token.

    Returns:
        PromptFeatures for the prompt.
    """
    if not isinstance(prompt, str) or not prompt:
        return EMPTY_FEATURES

    return PromptFeatures(
        raw=prompt,
        normalized=prompt.lower(),
        token_estimate=estimate_tokens(prompt, chars_per_token),
        file_count=estimate_file_count(prompt),
    )


def _join_text_parts(parts: Any) -> str | None:
    if not isinstance(parts, list):
        return None
    texts = [
        part["text"]
        for part in parts
        if isinstance(part, Mapping)
        and part.get("type") == "text"
        and isinstance(part.get("text"), str)
    ]
    return "\n".join(texts)


def extract_prompt_text(args: Any) -> str | None:
    """Pull prompt text out of a host payload.

    Accepts a plain string, a mapping with ``text``, ``message`` or ``prompt``,
    or a mapping with ``parts`` / ``body.parts`` lists of
    ``{"type": "text", "text": ...}`` entries (joined with newlines).

    Returns:
        The prompt text, or None if the payload carries none.
    """
    if isinstance(args, str):
        return args
    if not isinstance(args, Mapping):
        return None

    for key in ("text", "message", "prompt"):
        value = args.get(key)
        if isinstance(value, str) and value:
            return value

    joined = _join_text_parts(args.get("parts"))
    if joined is not None:
        return joined

    body = args.get("body")
    if isinstance(body, Mapping):
        return _join_text_parts(body.get("parts"))

    return None
