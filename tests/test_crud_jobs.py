"""
Tests for the job CRUD layer against an in-memory database.

Tests cover:
- Creating jobs
- Filtered listings (salary, equity, title, company)
- Partial updates and not-found handling
"""

from decimal import Decimal

import pytest
from sqlalchemy import text

from jobly.core.exceptions import NotFoundError, ValidationError
from jobly.crud import job as job_crud
from jobly.schemas.job import JobCreateRequest, JobFilter, JobUpdateRequest


class TestCreate:
    """Tests for job_crud.create"""

    def test_create_job(self, db_session, seed):
        job = job_crud.create(db_session, JobCreateRequest(
            title="New",
            salary=50,
            equity=Decimal("0.5"),
            company_handle="c1",
        ))

        assert isinstance(job["id"], int)
        assert job == {
            "id": job["id"],
            "title": "New",
            "salary": 50,
            "equity": Decimal("0.5"),
            "companyHandle": "c1",
        }

    def test_create_job_without_optional_fields(self, db_session, seed):
        job = job_crud.create(db_session, JobCreateRequest(title="Bare", company_handle="c2"))

        assert job["salary"] is None
        assert job["equity"] is None


class TestFindAll:
    """Tests for job_crud.find_all"""

    def test_no_filter(self, db_session, seed):
        assert job_crud.find_all(db_session) == seed["jobs"]

    def test_empty_filter_object(self, db_session, seed):
        assert job_crud.find_all(db_session, JobFilter()) == seed["jobs"]

    def test_filter_by_title(self, db_session, seed):
        jobs = job_crud.find_all(db_session, JobFilter(title="Job1"))
        assert jobs == [seed["jobs"][0]]

    def test_title_is_case_insensitive(self, db_session, seed):
        jobs = job_crud.find_all(db_session, JobFilter(title="job"))
        assert jobs == seed["jobs"]

    def test_filter_by_min_salary(self, db_session, seed):
        jobs = job_crud.find_all(db_session, JobFilter(min_salary=150))
        assert jobs == [seed["jobs"][1], seed["jobs"][2]]

    def test_filter_by_has_equity(self, db_session, seed):
        jobs = job_crud.find_all(db_session, JobFilter(has_equity=True))
        assert jobs == [seed["jobs"][0], seed["jobs"][2]]

    def test_has_equity_false_does_not_filter(self, db_session, seed):
        jobs = job_crud.find_all(db_session, JobFilter(has_equity=False))
        assert jobs == seed["jobs"]

    def test_filter_by_company_handle(self, db_session, seed):
        jobs = job_crud.find_all(db_session, JobFilter(company_handle="c1"))
        assert jobs == [seed["jobs"][0], seed["jobs"][2]]

    def test_combined_filters(self, db_session, seed):
        jobs = job_crud.find_all(db_session, JobFilter(min_salary=150, company_handle="c1"))
        assert jobs == [seed["jobs"][2]]

    @pytest.mark.parametrize("evil", [";SELECT * FROM companies;", "';SELECT * FROM jobs;", "' OR '1'='1"])
    def test_cannot_sql_inject(self, db_session, seed, evil):
        assert job_crud.find_all(db_session, JobFilter(title=evil)) == []
        assert len(job_crud.find_all(db_session)) == 3


class TestFindByCompany:
    """Tests for job_crud.find_by_company"""

    def test_jobs_for_company(self, db_session, seed):
        assert job_crud.find_by_company(db_session, "c1") == [seed["jobs"][0], seed["jobs"][2]]

    def test_exact_handle_match(self, db_session, seed):
        assert job_crud.find_by_company(db_session, "c") == []


class TestGet:
    """Tests for job_crud.get"""

    def test_get_job(self, db_session, seed):
        job = seed["jobs"][0]
        assert job_crud.get(db_session, job["id"]) == job

    def test_get_nonexistent_job(self, db_session, seed):
        with pytest.raises(NotFoundError):
            job_crud.get(db_session, -1)


class TestUpdate:
    """Tests for job_crud.update"""

    def test_update_job(self, db_session, seed):
        job_id = seed["jobs"][0]["id"]

        job = job_crud.update(db_session, job_id, JobUpdateRequest(
            title="JobUpdate",
            salary=10000,
            equity=Decimal("0.3"),
        ))

        assert job == {
            "id": job_id,
            "title": "JobUpdate",
            "salary": 10000,
            "equity": Decimal("0.3"),
            "companyHandle": "c1",
        }
        row = db_session.execute(
            text("SELECT title, salary FROM jobs WHERE id = :id"), {"id": job_id}
        ).one()
        assert tuple(row) == ("JobUpdate", 10000)

    def test_partial_update_leaves_other_fields(self, db_session, seed):
        original = seed["jobs"][1]

        job = job_crud.update(db_session, original["id"], JobUpdateRequest(salary=999))

        assert job == {**original, "salary": 999}

    def test_update_to_null(self, db_session, seed):
        job = job_crud.update(db_session, seed["jobs"][0]["id"], JobUpdateRequest(salary=None, equity=None))

        assert job["salary"] is None
        assert job["equity"] is None

    def test_update_nonexistent_job(self, db_session, seed):
        with pytest.raises(NotFoundError):
            job_crud.update(db_session, -1, JobUpdateRequest(title="Nope"))

        assert job_crud.find_all(db_session) == seed["jobs"]

    def test_update_with_no_data(self, db_session, seed):
        with pytest.raises(ValidationError):
            job_crud.update(db_session, seed["jobs"][0]["id"], JobUpdateRequest())


class TestRemove:
    """Tests for job_crud.remove"""

    def test_remove_job(self, db_session, seed):
        job_id = seed["jobs"][0]["id"]

        job_crud.remove(db_session, job_id)

        with pytest.raises(NotFoundError):
            job_crud.get(db_session, job_id)

    def test_remove_nonexistent_job(self, db_session, seed):
        with pytest.raises(NotFoundError):
            job_crud.remove(db_session, -1)
