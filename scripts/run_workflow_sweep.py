"""Run the deferred workflow step sweep.

Usage:
    uv run python -m scripts.run_workflow_sweep [--once] [--verbose]
With --once, runs a single sweep and exits; otherwise sweeps every
SWEEP_INTERVAL_SECONDS until interrupted. --verbose logs at DEBUG.
Several instances may run at once:
each due step is claimed by exactly one of them.
Requires DATABASE_URL.
"""

import asyncio
import logging
import sys

import httpx

from caseflow.core.config import get_settings
import caseflow.infrastructure.persistence.database as database
from caseflow.infrastructure.services.workflow_engine import create_workflow_engine
from caseflow.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger("scripts.run_workflow_sweep")


async def main() -> None:
    """Sweep once or forever."""
    setup_logging(logging.DEBUG if "--verbose" in sys.argv[1:] else None)
    settings = get_settings()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)
    run_once = "--once" in sys.argv[1:]

    async with httpx.AsyncClient(timeout=settings.channel_timeout_seconds) as http:
        engine = create_workflow_engine(settings, http_client=http)
        try:
            if run_once:
                result = await engine.sweep_due_steps()
                print(
                    f"Done. due={result.due} executed={result.executed} "
                    f"failed={result.failed} skipped={result.skipped} "
                    f"expired={result.expired} errors={result.errors}"
                )
                return
            while True:
                try:
                    await engine.sweep_due_steps()
                except Exception:
                    logger.exception("Sweep tick failed; retrying next interval")
                await asyncio.sleep(settings.sweep_interval_seconds)
        finally:
            await database.dispose_engine()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Sweep stopped")
