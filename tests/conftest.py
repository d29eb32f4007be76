import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from bandtrack.database import Base
import bandtrack.models  # noqa: F401 register all models
from bandtrack.models.user import User, UserRole
from bandtrack.models.equipment import Equipment, EquipmentCategory, EquipmentCondition


TEST_DB_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db():
    engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(engine)


@pytest.fixture
def student(db):
    user = User(username="student", email="student@test.com", hashed_password="x", role=UserRole.student.value)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def director(db):
    user = User(username="reditel", email="reditel@test.com", hashed_password="x", role=UserRole.band_director.value)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def make_equipment(db):
    def _make(qr_code="QR_BRASS_001", category=EquipmentCategory.brass, condition=EquipmentCondition.good, **kwargs):
        equipment = Equipment(
            qr_code=qr_code,
            make=kwargs.pop("make", "Yamaha"),
            model=kwargs.pop("model", "YTR-2330"),
            category=category,
            condition=condition,
            **kwargs,
        )
        db.add(equipment)
        db.commit()
        db.refresh(equipment)
        return equipment
    return _make


@pytest.fixture
def trumpet(make_equipment):
    return make_equipment()


@pytest.fixture
def in_week():
    return datetime.now(timezone.utc) + timedelta(days=7)
