"""Tests for the value and job status models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from cloud_code_client.constants.job_status import JobStatus
from cloud_code_client.models.job_status import JobStatusRecord, JobsData
from cloud_code_client.models.values import EntityReference, GeoPoint
from tests.test_helpers import TestHelpers
from tests.test_fixtures import TestFixtures


@pytest.mark.unit
@pytest.mark.models
class TestGeoPoint:

    def test_positional_construction(self):
        point = GeoPoint(50, -120.5)
        assert point.latitude == 50.0
        assert point.longitude == -120.5

    @pytest.mark.parametrize("latitude,longitude", [(90.1, 0), (-91, 0), (0, 180.5), (0, -181)])
    def test_out_of_range_rejected(self, latitude, longitude):
        with pytest.raises(ValidationError):
            GeoPoint(latitude, longitude)

    def test_frozen(self):
        point = GeoPoint(1, 2)
        with pytest.raises(ValidationError):
            point.latitude = 3


@pytest.mark.unit
@pytest.mark.models
class TestEntityReference:

    def test_accepts_wire_names(self):
        reference = EntityReference.model_validate({"className": "TestClass", "objectId": "abc"})
        assert reference.class_name == "TestClass"
        assert reference.object_id == "abc"

    def test_unsaved_reference_has_no_id(self):
        assert EntityReference(class_name="TestClass").object_id is None


@pytest.mark.unit
@pytest.mark.models
class TestJobStatus:

    @pytest.mark.parametrize("status,terminal", [
        (JobStatus.QUEUED, False),
        (JobStatus.RUNNING, False),
        (JobStatus.SUCCEEDED, True),
        (JobStatus.FAILED, True),
    ])
    def test_is_terminal(self, status, terminal):
        assert status.is_terminal is terminal

    def test_rank_only_increases_along_lifecycle(self):
        assert JobStatus.QUEUED.rank < JobStatus.RUNNING.rank < JobStatus.SUCCEEDED.rank
        assert JobStatus.SUCCEEDED.rank == JobStatus.FAILED.rank


@pytest.mark.unit
@pytest.mark.models
class TestJobStatusRecord:

    def test_from_wire_payload(self):
        payload = TestHelpers.create_job_status_payload(status="succeeded")
        payload["finishedAt"] = datetime(2024, 5, 1, 12, 0, 5, tzinfo=timezone.utc)

        record = JobStatusRecord.model_validate(payload)

        assert record.object_id == TestFixtures.JOB_STATUS_ID
        assert record.job_name == "CloudJob1"
        assert record.status is JobStatus.SUCCEEDED
        assert record.params == TestFixtures.JOB_PARAMS
        assert record.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        assert record.is_terminal

    def test_date_envelope_accepted(self):
        record = JobStatusRecord.model_validate(TestHelpers.create_job_status_payload(status="failed"))
        assert record.finished_at == datetime(2024, 5, 1, 12, 0, 5, 250000, tzinfo=timezone.utc)

    def test_get_by_wire_or_attribute_name(self):
        record = JobStatusRecord.model_validate(
            TestHelpers.create_job_status_payload(status="failed", message="cloud job failed")
        )
        assert record.get("status") is JobStatus.FAILED
        assert record.get("message") == "cloud job failed"
        assert record.get("jobName") == record.get("job_name") == "CloudJob1"
        assert record.get("params")["startedBy"] == "Monty Python"
        assert record.get("missing", "default") == "default"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            JobStatusRecord.model_validate(TestHelpers.create_job_status_payload(status="paused"))


@pytest.mark.unit
@pytest.mark.models
class TestJobsData:

    def test_available_read_from_jobs_key(self):
        data = JobsData.model_validate({"in_use": ["CloudJob2"], "jobs": ["CloudJob1", "CloudJob2"]})
        assert data.in_use == ["CloudJob2"]
        assert data.available == ["CloudJob1", "CloudJob2"]

    def test_defaults_empty(self):
        data = JobsData.model_validate({})
        assert data.in_use == []
        assert data.available == []
