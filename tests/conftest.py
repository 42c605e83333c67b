from __future__ import annotations

import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-for-foresy-suite-0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from foresy.core.dependencies import get_db_session
from foresy.core.security import hash_password
from foresy.main import app
from foresy.models import Base, Company, Cra, Mission, MissionCompany, User, UserCompany
from foresy.models.enums import CompanyRole, CraStatus, MissionStatus, MissionType
from foresy.services.auth_service import AuthenticationService
from foresy.services.rate_limit_service import get_rate_limiter

PASSWORD = "password123"


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def _override():
        yield db_session

    get_rate_limiter().reset()
    app.dependency_overrides[get_db_session] = _override
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        get_rate_limiter().reset()


@pytest.fixture
def make_user(db_session):
    counter = {"value": 0}

    def _make_user(email: str | None = None, password: str = PASSWORD, active: bool = True, name: str | None = None) -> User:
        counter["value"] += 1
        user = User(
            email=email or f"user{counter['value']}@example.com",
            password_hash=hash_password(password, rounds=4),
            name=name,
            active=active,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_company(db_session):
    counter = {"value": 0}

    def _make_company(user: User | None = None, role: CompanyRole = CompanyRole.INDEPENDENT, name: str = "Acme") -> Company:
        counter["value"] += 1
        company = Company(name=name, siret=f"{counter['value']:014d}", country="FR", currency="EUR")
        db_session.add(company)
        db_session.flush()
        if user is not None:
            db_session.add(UserCompany(user_id=user.id, company_id=company.id, role=role))
        db_session.commit()
        return company

    return _make_company


@pytest.fixture
def make_mission(db_session):
    def _make_mission(user: User, company: Company, name: str = "Platform build", status: MissionStatus = MissionStatus.LEAD) -> Mission:
        mission = Mission(
            name=name,
            mission_type=MissionType.TIME_BASED,
            status=status,
            start_date=date(2025, 1, 1),
            daily_rate=60000,
            currency="EUR",
            created_by_user_id=user.id,
        )
        mission.mission_companies.append(MissionCompany(company_id=company.id, role=CompanyRole.INDEPENDENT))
        db_session.add(mission)
        db_session.commit()
        return mission

    return _make_mission


@pytest.fixture
def make_cra(db_session):
    def _make_cra(user: User, month: int = 1, year: int = 2026, status: CraStatus = CraStatus.DRAFT) -> Cra:
        cra = Cra(month=month, year=year, status=status, currency="EUR", created_by_user_id=user.id)
        db_session.add(cra)
        db_session.commit()
        return cra

    return _make_cra


@pytest.fixture
def auth_headers(db_session):
    def _auth_headers(user: User) -> dict[str, str]:
        service = AuthenticationService(db_session)
        payload = service.open_session(user)
        db_session.commit()
        return {"Authorization": f"Bearer {payload['token']}"}

    return _auth_headers


@pytest.fixture
def freelancer(make_user, make_company):
    """User owning an independent company."""
    user = make_user(email="freelancer@example.com")
    make_company(user, CompanyRole.INDEPENDENT, name="Freelance SAS")
    return user
