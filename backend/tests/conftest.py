"""Test configuration and fixtures."""

from datetime import datetime
from decimal import Decimal

import bcrypt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from campusdesk.database import Base, get_db
from campusdesk.main import app
from campusdesk.auth import AuthService, Role, RoleName, StudentProfile, User
from campusdesk.models import (
    Assignment, Course, Expense, Lesson, Module, OneOff, Recurring, RecurringFrequency,
    Rubric, RubricCriterion, Submission, SubmissionStatus,
)


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

PASSWORD = "Passw0rd!"

_real_gensalt = bcrypt.gensalt


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Cheap bcrypt rounds so user fixtures stay fast."""
    monkeypatch.setattr(bcrypt, "gensalt", lambda *args, **kwargs: _real_gensalt(rounds=4))


@pytest.fixture
def engine():
    """Fresh database per test so commits and rollbacks behave as in production."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create test database session."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    """API client sharing the test session."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def roles(db_session):
    created = {}
    for name in RoleName:
        role = Role(name=name.value, description=f"{name.value} role")
        db_session.add(role)
        created[name] = role
    db_session.commit()
    return created


def make_user(db_session, role, email, full_name=None, is_active=True):
    user = User(email=email, full_name=full_name, role_id=role.id, is_active=is_active)
    user.set_password(PASSWORD)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def user_factory(db_session):
    def build(role, email, full_name=None, is_active=True):
        return make_user(db_session, role, email, full_name, is_active)

    return build


@pytest.fixture
def admin_user(db_session, roles):
    return make_user(db_session, roles[RoleName.admin], "admin@example.com", "Ada Admin")


@pytest.fixture
def teacher_user(db_session, roles):
    return make_user(db_session, roles[RoleName.teacher], "teacher@example.com", "Tom Teacher")


@pytest.fixture
def student_user(db_session, roles):
    return make_user(db_session, roles[RoleName.student], "student@example.com", "Sam Student")


@pytest.fixture
def parent_user(db_session, roles):
    return make_user(db_session, roles[RoleName.parent], "parent@example.com", "Pat Parent")


@pytest.fixture
def student(db_session, student_user):
    profile = StudentProfile(user_id=student_user.id, grade_level="10")
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile


@pytest.fixture
def other_student(db_session, roles):
    user = make_user(db_session, roles[RoleName.student], "other@example.com", "Olive Other")
    profile = StudentProfile(user_id=user.id)
    db_session.add(profile)
    db_session.commit()
    db_session.refresh(profile)
    return profile


@pytest.fixture
def auth_headers(db_session):
    """Build bearer headers for a user."""
    service = AuthService(db_session)

    def build(user):
        return {"Authorization": f"Bearer {service.create_token_for(user)}"}

    return build


@pytest.fixture
def course(db_session):
    course = Course(name="Robotics 101", code="ROB101", description="Intro to robotics")
    db_session.add(course)
    db_session.commit()
    db_session.refresh(course)
    return course


@pytest.fixture
def course_outline(db_session, course):
    """Published modules with a mix of published and draft lessons.

    Four lessons count towards progress: three in "Foundations" and one in
    "Motors". The draft lesson and the draft module's lessons do not.
    """
    foundations = Module(course_id=course.id, title="Foundations", order=0, is_published=True)
    motors = Module(course_id=course.id, title="Motors", order=1, is_published=True)
    drafts = Module(course_id=course.id, title="Coming soon", order=2, is_published=False)
    db_session.add_all([foundations, motors, drafts])
    db_session.flush()

    lessons = {
        "safety": Lesson(module_id=foundations.id, title="Safety", order=0, is_published=True),
        "tools": Lesson(module_id=foundations.id, title="Tools", order=1, is_published=True),
        "wiring": Lesson(module_id=foundations.id, title="Wiring", order=2, is_published=True),
        "draft": Lesson(module_id=foundations.id, title="Draft lesson", order=3, is_published=False),
        "dc_motors": Lesson(module_id=motors.id, title="DC motors", order=0, is_published=True),
        "servos": Lesson(module_id=drafts.id, title="Servos", order=0, is_published=True),
    }
    db_session.add_all(lessons.values())
    db_session.commit()
    return {"foundations": foundations, "motors": motors, "drafts": drafts, "lessons": lessons}


@pytest.fixture
def rubric(db_session, teacher_user):
    rubric = Rubric(
        title="Build Project Rubric",
        description="Scoring for the robot build",
        created_by=teacher_user.id,
        criteria=[
            RubricCriterion(title="Design", max_points=40, order=0),
            RubricCriterion(title="Build", max_points=40, order=1),
            RubricCriterion(title="Presentation", max_points=20, order=2),
        ],
    )
    db_session.add(rubric)
    db_session.commit()
    db_session.refresh(rubric)
    return rubric


@pytest.fixture
def criteria(rubric):
    return {criterion.title: criterion for criterion in rubric.criteria}


@pytest.fixture
def assignment(db_session, course, rubric, teacher_user):
    assignment = Assignment(
        title="Line follower build",
        description="Build a line-following robot",
        course_id=course.id,
        due_date=datetime(2024, 3, 1),
        max_points=100,
        grade_category="projects",
        rubric_id=rubric.id,
        created_by=teacher_user.id,
    )
    db_session.add(assignment)
    db_session.commit()
    db_session.refresh(assignment)
    return assignment


@pytest.fixture
def submission(db_session, assignment, student):
    submission = Submission(
        assignment_id=assignment.id,
        student_id=student.id,
        status=SubmissionStatus.submitted,
        content="Video link and write-up",
        submitted_at=datetime(2024, 2, 28, 18, 30),
    )
    db_session.add(submission)
    db_session.commit()
    db_session.refresh(submission)
    return submission


def make_expense(db_session, incurred_by, schedule=None, **overrides):
    fields = dict(
        amount=Decimal("49.99"),
        date=datetime(2024, 1, 15),
        vendor="Parts Supplier",
        description="Monthly parts subscription",
        category="supplies",
        receipt_url="https://receipts.example.com/jan.pdf",
        incurred_by_id=incurred_by.id,
        project_id="proj-1",
        inventory_item_id="inv-7",
        quarter="Q1",
    )
    fields.update(overrides)
    expense = Expense(**fields)
    expense.schedule = schedule or OneOff()
    db_session.add(expense)
    db_session.commit()
    db_session.refresh(expense)
    return expense


@pytest.fixture
def monthly_template(db_session, admin_user):
    return make_expense(
        db_session,
        admin_user,
        Recurring(frequency=RecurringFrequency.monthly, next_date=datetime(2024, 1, 15)),
    )


@pytest.fixture
def expense_factory(db_session):
    def build(incurred_by, schedule=None, **overrides):
        return make_expense(db_session, incurred_by, schedule, **overrides)

    return build
