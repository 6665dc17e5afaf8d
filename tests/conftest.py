import os

# Configuración de pruebas antes de importar la aplicación
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["REDIS_URL"] = ""
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from datetime import date, datetime
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gymtrials.db.base import Base
from gymtrials.db.redis_client import get_redis_client
from gymtrials.db.session import get_db
from gymtrials.middleware.rate_limit import limiter
from gymtrials.models.gym import Gym
from gymtrials.models.member import Member, Trainer
from gymtrials.models.trial import BookingStatus, SessionType, TrialBooking
from gymtrials.models.user import User
from main import app


# Usar una base de datos en memoria para pruebas
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

limiter.enabled = False


@pytest.fixture(scope="session")
def db_engine():
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """
    Sesión sobre un esquema recién creado. Los servicios hacen commit y
    rollback, así que cada test crea y borra las tablas.
    """
    Base.metadata.create_all(bind=db_engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=db_engine)


@pytest.fixture(scope="function")
def client(db):
    """
    Crea un cliente de prueba usando la sesión de prueba y sin Redis.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    async def override_get_redis_client():
        yield None

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis_client] = override_get_redis_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def gym(db):
    gym = Gym(name="Gym Centro", email="centro@gym.test", timezone="UTC")
    db.add(gym)
    db.commit()
    db.refresh(gym)
    return gym


@pytest.fixture(scope="function")
def other_gym(db):
    gym = Gym(name="Gym Norte", timezone="America/Mexico_City")
    db.add(gym)
    db.commit()
    db.refresh(gym)
    return gym


def _create_user(db, email="ana@test.com", total=3, used=0, reset=datetime(2024, 6, 1, 8, 0)):
    user = User(
        email=email,
        first_name="Ana",
        last_name="García",
        total_trials=total,
        used_trials=used,
        remaining_trials=total - used,
        trial_last_reset_date=reset,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _create_booking(
    db,
    gym,
    user=None,
    preferred_date=date(2024, 6, 10),
    session_type=SessionType.TRIAL,
    status=BookingStatus.PENDING,
):
    booking = TrialBooking(
        gym_id=gym.id,
        user_id=user.id if user else None,
        name=user.full_name if user else "Visitante",
        email=user.email if user else "visitante@test.com",
        phone="5551234567",
        session_type=session_type,
        preferred_date=preferred_date,
        preferred_time="10:00",
        status=status,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


@pytest.fixture(scope="function")
def make_user(db):
    """Factoría de usuarios con el cupo de pruebas indicado."""
    return lambda **kwargs: _create_user(db, **kwargs)


@pytest.fixture(scope="function")
def make_booking(db):
    return lambda gym, **kwargs: _create_booking(db, gym, **kwargs)


@pytest.fixture(scope="function")
def user(db):
    return _create_user(db)


@pytest.fixture(scope="function")
def member(db, gym):
    member = Member(
        gym_id=gym.id,
        name="Luis Pérez",
        email="luis@test.com",
        phone="5550001111",
        plan_name="Mensual",
        join_date=date(2024, 6, 5),
        membership_valid_until=date(2024, 6, 20),
    )
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


@pytest.fixture(scope="function")
def trainer(db, gym):
    trainer = Trainer(gym_id=gym.id, first_name="Marta", last_name="Ruiz", join_date=date(2024, 1, 15))
    db.add(trainer)
    db.commit()
    db.refresh(trainer)
    return trainer
