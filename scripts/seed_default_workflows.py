"""Seed the default workflows (deadline reminders, document upload notice) for a firm.

Usage:
    uv run python -m scripts.seed_default_workflows <firm_id>
Requires DATABASE_URL and an existing firm row.
"""

import asyncio
import sys

from caseflow.core.config import get_settings
import caseflow.infrastructure.persistence.database as database
from caseflow.infrastructure.persistence.models import Firm
from caseflow.infrastructure.persistence.repositories import WorkflowRepository
from caseflow.infrastructure.services.default_workflows import create_default_workflows


async def main() -> None:
    """Create the default workflows for the given firm."""
    if len(sys.argv) < 2:
        print(
            "Usage: uv run python -m scripts.seed_default_workflows <firm_id>",
            file=sys.stderr,
        )
        sys.exit(1)
    firm_id = sys.argv[1]

    get_settings()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)

    try:
        async with database.AsyncSessionLocal() as session:
            async with session.begin():
                if await session.get(Firm, firm_id) is None:
                    print(f"Firm not found: {firm_id}", file=sys.stderr)
                    sys.exit(1)
                created = await create_default_workflows(
                    WorkflowRepository(session), firm_id
                )
        for workflow in created:
            print(f"Created workflow {workflow.id}: {workflow.name} ({workflow.trigger})")
    finally:
        await database.dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
