"""Test cases for database utilities."""

import pytest
from unittest.mock import patch, MagicMock
from sqlalchemy.exc import SQLAlchemyError

from campusdesk.database import (
    get_db, get_db_session, create_tables, drop_tables,
    check_database_connection, engine, Base, _engine_options
)


class TestDatabaseUtilities:
    """Test cases for database utility functions."""

    def test_get_db_dependency(self):
        """Test get_db dependency function."""
        db_generator = get_db()
        db_session = next(db_generator)

        assert db_session is not None

        # Clean up
        with pytest.raises(StopIteration):
            next(db_generator)

    def test_get_db_session_context_manager(self):
        """Test get_db_session context manager."""
        with get_db_session() as db:
            assert db is not None
            assert db.is_active

    @patch('campusdesk.database.SessionLocal')
    def test_get_db_session_commits(self, mock_session_local):
        db = mock_session_local.return_value

        with get_db_session():
            pass

        db.commit.assert_called_once()
        db.close.assert_called_once()

    @patch('campusdesk.database.SessionLocal')
    def test_get_db_session_rollback_on_error(self, mock_session_local):
        """Test that get_db_session rolls back on database errors."""
        db = mock_session_local.return_value

        with pytest.raises(SQLAlchemyError):
            with get_db_session():
                raise SQLAlchemyError("Test error")

        db.rollback.assert_called_once()
        db.commit.assert_not_called()
        db.close.assert_called_once()

    @patch('campusdesk.database.Base.metadata.create_all')
    def test_create_tables_success(self, mock_create_all):
        """Test successful table creation."""
        mock_create_all.return_value = None

        create_tables()

        mock_create_all.assert_called_once_with(bind=engine)

    @patch('campusdesk.database.Base.metadata.create_all')
    def test_create_tables_error(self, mock_create_all):
        """Test table creation error handling."""
        mock_create_all.side_effect = SQLAlchemyError("Connection failed")

        with pytest.raises(SQLAlchemyError):
            create_tables()

    @patch('campusdesk.database.Base.metadata.drop_all')
    def test_drop_tables_success(self, mock_drop_all):
        """Test successful table dropping."""
        mock_drop_all.return_value = None

        drop_tables()

        mock_drop_all.assert_called_once_with(bind=engine)

    @patch('campusdesk.database.Base.metadata.drop_all')
    def test_drop_tables_error(self, mock_drop_all):
        """Test table dropping error handling."""
        mock_drop_all.side_effect = SQLAlchemyError("Connection failed")

        with pytest.raises(SQLAlchemyError):
            drop_tables()

    @patch('campusdesk.database.engine')
    def test_check_database_connection_success(self, mock_engine):
        """Test successful database connection check."""
        mock_conn = MagicMock()
        mock_engine.connect.return_value.__enter__.return_value = mock_conn

        result = check_database_connection()

        assert result is True
        mock_conn.execute.assert_called_once()

    @patch('campusdesk.database.engine')
    def test_check_database_connection_failure(self, mock_engine):
        """Test database connection check failure."""
        mock_engine.connect.side_effect = SQLAlchemyError("Connection failed")

        result = check_database_connection()

        assert result is False


class TestDatabaseConfiguration:
    """Test cases for database configuration."""

    def test_engine_configuration(self):
        """Test that engine is properly configured."""
        assert engine is not None
        assert engine.pool._recycle == 3600

    def test_base_metadata_has_every_table(self):
        """Test that Base metadata knows every table once the app is imported."""
        import campusdesk.main  # noqa: F401

        tables = set(Base.metadata.tables)
        assert {
            "users", "roles", "permissions", "role_permissions", "student_profiles",
            "courses", "modules", "lessons", "lesson_progress",
            "rubrics", "rubric_criteria", "assignments", "submissions", "rubric_scores",
            "quizzes", "quiz_questions", "quiz_attempts", "quiz_answers", "expenses",
        } <= tables

    def test_sqlite_options(self):
        options = _engine_options("sqlite:///./test.db")

        assert options["connect_args"] == {"check_same_thread": False}
        assert "pool_size" not in options

    def test_server_database_options(self, monkeypatch):
        monkeypatch.setenv("DB_POOL_SIZE", "5")

        options = _engine_options("postgresql://campusdesk@localhost/campusdesk")

        assert options["pool_size"] == 5
        assert options["max_overflow"] == 20
        assert "connect_args" not in options
