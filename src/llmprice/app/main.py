"""Process entry point: the CLI plus a last-resort error log.

``python -m llmprice``, ``update_pricing.py`` and the ``llmprice-update``
console script all land here.
"""

from typing import List, Optional

from ..utils.logging import get_logger
from .cli import main as cli_main

logger = get_logger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        return cli_main(argv)
    except Exception as exc:
        # full traceback goes to logs/llmprice.log
        logger.error("Unexpected error: %s", exc, exc_info=True)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
