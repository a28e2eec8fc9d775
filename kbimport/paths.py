"""Path resolution for tutorial-relative references."""

import os
import re
from pathlib import Path
from typing import Union

_SEPARATORS = re.compile(r"[\\/]")


def resolve(base: Union[str, Path], relative: str) -> Path:
    """Join ``relative`` onto ``base`` after normalizing its separators.

    Both ``/`` and ``\\`` are accepted in ``relative`` and mapped to the host
    separator. No existence check is made.
    """
    normalized = _SEPARATORS.sub(lambda _m: os.sep, relative)
    return Path(str(base) + os.sep + normalized)
