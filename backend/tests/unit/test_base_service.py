# backend/tests/unit/test_base_service.py
"""Transaction and timing behaviour shared by every service."""

from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from studiobook.core.exceptions import StorageException
from studiobook.services.base import BaseService


class _ProbeService(BaseService):
    @BaseService.measure_operation("probe")
    def probe(self, fail: bool = False) -> str:
        if fail:
            raise ValueError("boom")
        return "ok"


class TestMeasureOperation:
    def test_counts_successes_and_failures(self):
        service = _ProbeService(Mock(spec=Session))

        assert service.probe() == "ok"
        with pytest.raises(ValueError):
            service.probe(fail=True)

        stats = service.get_metrics()["probe"]
        assert stats["count"] >= 2
        assert stats["success_count"] >= 1
        assert stats["failure_count"] >= 1
        assert stats["min_time"] <= stats["max_time"]


class TestTransaction:
    def test_commits_on_success(self):
        db = Mock(spec=Session)
        service = _ProbeService(db)

        with service.transaction():
            pass

        db.commit.assert_called_once()
        db.rollback.assert_not_called()

    def test_database_error_becomes_storage_exception(self):
        db = Mock(spec=Session)
        service = _ProbeService(db)

        with pytest.raises(StorageException):
            with service.transaction():
                raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

        db.rollback.assert_called_once()
        db.commit.assert_not_called()

    def test_other_errors_propagate_unchanged(self):
        db = Mock(spec=Session)
        service = _ProbeService(db)

        with pytest.raises(KeyError):
            with service.transaction():
                raise KeyError("missing")

        db.rollback.assert_called_once()
