"""Token counting.

The collector only needs a `Callable[[str], int]`. `TiktokenTokenizer` is the
adapter the CLI uses; tests pass plain functions.
"""

from __future__ import annotations

from collections.abc import Callable

import tiktoken

from repo_clip.config import DEFAULT_MODEL
from repo_clip.exceptions import TokenizerInitError

Tokenizer = Callable[[str], int]


class TiktokenTokenizer:
    """Count tokens with the tiktoken encoding of a model.

    `model` may be a model name (`gpt-4o`) or an encoding name
    (`cl100k_base`). Encoding is thread-safe, so one instance is shared by
    all workers.
    """

    def __init__(self, model: str = DEFAULT_MODEL) -> None:
        self.model = model
        try:
            self.encoding = tiktoken.encoding_for_model(model)
        except KeyError:
            try:
                self.encoding = tiktoken.get_encoding(model)
            except Exception as e:
                raise TokenizerInitError(model=model, reason=str(e)) from e
        except Exception as e:
            raise TokenizerInitError(model=model, reason=str(e)) from e

    def __call__(self, text: str) -> int:
        return len(self.encoding.encode(text, disallowed_special=()))


def load_tokenizer(model: str = DEFAULT_MODEL) -> Tokenizer:
    """Build the tokenizer used by a run.

    Raises:
        TokenizerInitError: if no encoding can be resolved for `model`.
    """
    return TiktokenTokenizer(model)
