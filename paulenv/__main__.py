"""Report the container engine paulenv would use on this host.

    python -m paulenv [engine]
"""

from __future__ import annotations

import asyncio
import logging
import sys

from paulenv.engines import EngineError, detect_engine
from paulenv.logging_config import setup_logging

logger = logging.getLogger(__name__)


async def report(preferred: str | None = None) -> int:
    """Detect an engine, log its version and return an exit status."""
    setup_logging()
    try:
        engine = await detect_engine(preferred)
        setup_logging(engine.name)
        info = await engine.info()
    except EngineError as e:
        logger.error(f"No usable container engine: {e}")
        return 1
    logger.info(f"{engine.display_name} {info.version} ({engine.binary})")
    print(f"{info.name} {info.version}")
    return 0


def main() -> None:
    preferred = sys.argv[1] if len(sys.argv) > 1 else None
    sys.exit(asyncio.run(report(preferred)))


if __name__ == "__main__":
    main()
