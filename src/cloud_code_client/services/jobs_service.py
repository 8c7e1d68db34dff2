"""
Background job control: start a job, look up its status record, list the
jobs known to the server, and poll a status record until it settles.

Every job operation authenticates with the master key.
"""
import asyncio
import logging
from typing import Any, AsyncIterator, Awaitable, Mapping, Optional, Union

from pydantic import ValidationError

from cloud_code_client.constants.api_constants import ApiConstants
from cloud_code_client.constants.http_constants import HttpHeaders
from cloud_code_client.constants.job_status import JobStatus
from cloud_code_client.exceptions.exceptions import (
    InvalidResponseException,
    InvariantViolationException,
    JobStatusMismatchException,
    JobWaitTimeoutException,
    MasterKeyRequiredException,
)
from cloud_code_client.models.job_status import JobStatusRecord, JobsData
from cloud_code_client.services.cloud_functions import validate_name
from cloud_code_client.services.codec import decode, encode_params
from cloud_code_client.services.http_client import HttpClientService


class JobService:
    """Starts background jobs and tracks their status records."""

    def __init__(self, http_client_service: HttpClientService):
        self.logger = logging.getLogger(__name__)
        self.http_client_service = http_client_service

    def _require_master_key(self, operation: str) -> None:
        if not self.http_client_service.config_service.get_master_key():
            raise MasterKeyRequiredException(operation)

    def start_job(self, name: str, params: Optional[Mapping[str, Any]] = None) -> Awaitable[str]:
        """
        Start a background job without waiting for it to finish.

        Arguments are validated before this method returns; the awaitable
        resolves to the job status id as soon as the server accepts the job.

        Raises:
            InvalidJobException: (awaited) no job is registered under ``name``.
        """
        validate_name("name", name)
        payload = encode_params(params)
        self._require_master_key(f"Job '{name}'")
        return self._start_job(name, payload)

    async def _start_job(self, name: str, payload: dict) -> str:
        path = ApiConstants.JOBS_PATH.format(name=name)
        response = await self.http_client_service.post(path, payload, use_master_key=True)
        job_status_id = response.headers.get(HttpHeaders.JOB_STATUS_ID)
        if not job_status_id:
            raise InvalidResponseException(f"Server accepted job '{name}' without returning a job status id")
        self.logger.info(f"Started job '{name}' with status id {job_status_id}")
        return job_status_id

    async def get_job_status(self, job_status_id: str) -> JobStatusRecord:
        """
        Fetch the current status record of a job. Does not wait for the job.

        Raises:
            ObjectNotFoundException: no status record exists for the id.
        """
        validate_name("job_status_id", job_status_id)
        self._require_master_key("Job status lookup")
        path = ApiConstants.JOB_STATUS_PATH.format(object_id=job_status_id)
        response = await self.http_client_service.get(path, use_master_key=True)
        body = decode(HttpClientService.decode_json(response))
        try:
            return JobStatusRecord.model_validate(body)
        except ValidationError as e:
            raise InvalidResponseException(f"Invalid job status record for {job_status_id}: {e}") from e

    async def get_jobs_data(self) -> JobsData:
        """List registered jobs and the jobs currently executing."""
        self._require_master_key("Jobs data lookup")
        response = await self.http_client_service.get(ApiConstants.JOBS_DATA_PATH, use_master_key=True)
        body = HttpClientService.decode_json(response)
        try:
            return JobsData.model_validate(body)
        except ValidationError as e:
            raise InvalidResponseException(f"Invalid jobs data: {e}") from e

    async def iter_job_statuses(
        self,
        job_status_id: str,
        interval: Optional[float] = None
    ) -> AsyncIterator[JobStatusRecord]:
        """
        Yield successive status snapshots of a job, sleeping ``interval``
        seconds between lookups, ending after the first terminal snapshot.

        Raises:
            InvariantViolationException: a status moved backwards, e.g.
                running to queued.
        """
        if interval is None:
            interval = self.http_client_service.config_service.get_poll_interval()

        previous: Optional[JobStatusRecord] = None
        while True:
            record = await self.get_job_status(job_status_id)
            if previous is not None and record.status.rank < previous.status.rank:
                raise InvariantViolationException(
                    f"Job {job_status_id} went from '{previous.status.value}' back to '{record.status.value}'"
                )
            yield record
            if record.is_terminal:
                return
            previous = record
            await asyncio.sleep(interval)

    async def wait_for_job_status(
        self,
        job_status_id: str,
        status: Optional[Union[JobStatus, str]] = None,
        *,
        interval: Optional[float] = None,
        timeout: Optional[float] = None
    ) -> JobStatusRecord:
        """
        Poll a job until it reaches ``status``, or any terminal status when
        ``status`` is None, and return the final record.

        Polling is unbounded unless ``timeout`` is given.

        Raises:
            JobStatusMismatchException: the job settled on a different terminal status.
            JobWaitTimeoutException: ``timeout`` elapsed first.
        """
        target = JobStatus(status) if status is not None else None
        if timeout is None:
            return await self._poll_until(job_status_id, target, interval)
        try:
            return await asyncio.wait_for(self._poll_until(job_status_id, target, interval), timeout)
        except asyncio.TimeoutError as e:
            raise JobWaitTimeoutException(job_status_id, timeout) from e

    async def _poll_until(
        self,
        job_status_id: str,
        target: Optional[JobStatus],
        interval: Optional[float]
    ) -> JobStatusRecord:
        polls = 0
        statuses = self.iter_job_statuses(job_status_id, interval)
        try:
            async for record in statuses:
                polls += 1
                if target is not None and record.status == target:
                    self.logger.debug(f"Job {job_status_id} reached '{target.value}' after {polls} polls")
                    return record
                if record.is_terminal:
                    if target is not None:
                        raise JobStatusMismatchException(
                            job_status_id, target.value, record.status.value, record.message
                        )
                    self.logger.debug(f"Job {job_status_id} finished as '{record.status.value}' after {polls} polls")
                    return record
        finally:
            await statuses.aclose()
        raise InvariantViolationException(f"Polling job {job_status_id} ended without a terminal status")
