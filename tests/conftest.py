"""Pytest configuration and fixtures for caseflow.

Integration fixtures run the real repositories against a temporary SQLite
file through aiosqlite (schema from Base.metadata). Channel fixtures are
in-memory fakes that record what would have been sent. db_session targets
PostgreSQL and skips when DATABASE_URL is not set.
"""

from dataclasses import dataclass, field

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from caseflow.application.dtos.workflow import ChatIntegrationResult, DeliveryResult
from caseflow.core.config import Settings
from caseflow.domain.entities.workflow import EventContext
from caseflow.domain.exceptions import SqlNotConfiguredException
from caseflow.infrastructure.persistence import models  # noqa: F401  (registers tables)
from caseflow.infrastructure.persistence.database import (
    Base,
    create_session_factory,
    get_session_factory,
)
from caseflow.infrastructure.persistence.models import (
    CaseTeamMember,
    Firm,
    LegalCase,
    User,
)


@dataclass
class FakeMessageSender:
    """IMessageSender that records sends. Addresses in `failing` get an error result."""

    sms_enabled: bool = True
    failing: set[str] = field(default_factory=set)
    emails: list[dict] = field(default_factory=list)
    sms: list[dict] = field(default_factory=list)

    async def send_email(
        self, to: str, subject: str, html: str, text: str
    ) -> DeliveryResult:
        if to in self.failing:
            return DeliveryResult(success=False, error="mailbox unavailable")
        self.emails.append({"to": to, "subject": subject, "html": html, "text": text})
        return DeliveryResult(success=True, message_id=f"email-{len(self.emails)}")

    async def send_sms(self, to: str, body: str) -> DeliveryResult:
        if to in self.failing:
            return DeliveryResult(success=False, error="invalid number")
        self.sms.append({"to": to, "body": body})
        return DeliveryResult(success=True, message_id=f"sms-{len(self.sms)}")


@dataclass
class FakeChatMessenger:
    """IChatMessenger that records posts; `result` is returned for every call."""

    result: DeliveryResult | None = field(
        default_factory=lambda: DeliveryResult(success=True, message_id="chat-1")
    )
    posts: list[dict] = field(default_factory=list)

    async def send_chat_message(
        self,
        integration: ChatIntegrationResult,
        text: str,
        *,
        channel: str | None = None,
        team_id: str | None = None,
        channel_id: str | None = None,
    ) -> DeliveryResult | None:
        self.posts.append(
            {
                "provider": integration.provider,
                "text": text,
                "channel": channel,
                "team_id": team_id,
                "channel_id": channel_id,
            }
        )
        return self.result


@pytest.fixture
def test_settings() -> Settings:
    """Settings independent of the environment (.env ignored)."""
    return Settings(
        _env_file=None,
        database_url="",
        channel_timeout_seconds=1.0,
        sweep_batch_size=50,
    )


@pytest.fixture
def message_sender() -> FakeMessageSender:
    return FakeMessageSender()


@pytest.fixture
def chat_messenger() -> FakeChatMessenger:
    return FakeChatMessenger()


@pytest.fixture
async def session_factory(tmp_path) -> async_sessionmaker[AsyncSession]:
    """Session factory over a fresh SQLite file (one connection per session)."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'caseflow.db'}",
        connect_args={"timeout": 30},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
async def db_session() -> AsyncSession:
    """PostgreSQL session for repository tests. Rolls back after the test.

    Requires DATABASE_URL (postgresql+asyncpg://...) with migrations applied;
    skips otherwise. Mark such tests with @pytest.mark.requires_db and run
    without a database via: pytest -m 'not requires_db'.
    """
    try:
        factory = get_session_factory()
    except SqlNotConfiguredException:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with factory() as session:
        yield session
        await session.rollback()


@dataclass
class SeededFirm:
    firm_id: str
    owner_id: str
    attorney_id: str
    paralegal_id: str
    case_id: str


@pytest.fixture
async def seeded_firm(session_factory) -> SeededFirm:
    """A firm with an owner, an attorney (case lead) and a paralegal on one case."""
    async with session_factory() as db:
        firm = Firm(name="Smith & Partners")
        db.add(firm)
        await db.flush()
        owner = User(
            firm_id=firm.id,
            email="owner@smith.test",
            phone="5551230000",
            full_name="Olive Owner",
            role="owner",
        )
        attorney = User(
            firm_id=firm.id,
            email="attorney@smith.test",
            phone="5551230001",
            full_name="Ari Attorney",
            role="attorney",
        )
        paralegal = User(
            firm_id=firm.id,
            email=None,
            phone="5551230002",
            full_name="Pat Paralegal",
            role="paralegal",
        )
        db.add_all([owner, attorney, paralegal])
        await db.flush()
        case = LegalCase(
            firm_id=firm.id,
            name="Smith v. Jones",
            case_number="2026-CV-001",
            case_type="litigation",
            status="open",
            lead_attorney_id=attorney.id,
        )
        db.add(case)
        await db.flush()
        db.add_all(
            [
                CaseTeamMember(case_id=case.id, user_id=attorney.id, team_role="lead"),
                CaseTeamMember(case_id=case.id, user_id=paralegal.id),
            ]
        )
        await db.commit()
        return SeededFirm(
            firm_id=firm.id,
            owner_id=owner.id,
            attorney_id=attorney.id,
            paralegal_id=paralegal.id,
            case_id=case.id,
        )


@pytest.fixture
def discovery_context(seeded_firm) -> EventContext:
    """Discovery deadline event for the seeded case, acted on by the attorney."""
    return EventContext(
        firm_id=seeded_firm.firm_id,
        entity_id="disc-1",
        entity_type="discovery_request",
        case_id=seeded_firm.case_id,
        case_name="Smith v. Jones",
        case_number="2026-CV-001",
        user_id=seeded_firm.attorney_id,
        metadata={"requestTitle": "First Interrogatories", "dueDate": "2026-11-02"},
    )
