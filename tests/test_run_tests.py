"""
Tests for the test runner's command line.
"""
import sys

import run_tests


class TestRunTestsCommand:
    """Test how run_tests.py builds the pytest invocation"""

    def test_defaults_to_sqlite_file(self, monkeypatch):
        monkeypatch.delenv("TEST_DATABASE_URL", raising=False)

        command, env = run_tests.build_command(run_tests.parse_args([]))

        assert command == [sys.executable, "-m", "pytest", "tests/", "-v", "--tb=short"]
        assert env["TEST_DATABASE_URL"] == run_tests.DEFAULT_TEST_DATABASE_URL

    def test_database_url_is_passed_to_the_suite(self):
        """Test --database-url reaches conftest through the environment"""
        args = run_tests.parse_args(["--database-url", "postgresql+asyncpg://localhost/shorturl_test"])

        _, env = run_tests.build_command(args)

        assert env["TEST_DATABASE_URL"] == "postgresql+asyncpg://localhost/shorturl_test"

    def test_database_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///./other.db")

        assert run_tests.parse_args([]).database_url == "sqlite+aiosqlite:///./other.db"

    def test_extra_arguments_go_to_pytest(self):
        args = run_tests.parse_args(["--", "-k", "allocator", "-x"])

        command, _ = run_tests.build_command(args)

        assert command[-3:] == ["-k", "allocator", "-x"]
