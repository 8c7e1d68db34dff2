import logging
from typing import Any, Awaitable, Mapping, Optional, Union

import httpx

from cloud_code_client.constants.job_status import JobStatus
from cloud_code_client.models.job_status import JobStatusRecord, JobsData
from cloud_code_client.services.cloud_functions import CloudFunctionService
from cloud_code_client.services.configuration_service import ConfigurationService
from cloud_code_client.services.http_client import HttpClientService
from cloud_code_client.services.jobs_service import JobService

logger = logging.getLogger(__name__)


class CloudCodeClient:
    """
    Entry point for calling cloud functions and controlling background jobs.

    One client owns one connection pool. Construct it once, share it with
    every caller, and close it (or use it as an async context manager) when
    done::

        config = ConfigurationService.from_settings(
            server_url="http://localhost:1337/parse",
            application_id="app",
            master_key="secret",
        )
        async with CloudCodeClient(config) as client:
            result = await client.run("hello", {"name": "world"})
            job_status_id = await client.start_job("cleanup")
            record = await client.wait_for_job_status(job_status_id)
    """

    def __init__(self, config_service: ConfigurationService, *, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config_service = config_service
        self.http_client_service = HttpClientService(config_service, transport=transport)
        self.functions = CloudFunctionService(self.http_client_service)
        self.jobs = JobService(self.http_client_service)
        logger.debug(f"Client created for {config_service.get_server_url()}")

    @classmethod
    def from_settings(cls, *, transport: Optional[httpx.AsyncBaseTransport] = None, **settings: Any) -> "CloudCodeClient":
        """Create a client from keyword settings (server_url, application_id, master_key, ...)."""
        return cls(ConfigurationService.from_settings(**settings), transport=transport)

    async def __aenter__(self) -> "CloudCodeClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        await self.http_client_service.close()

    def run(
        self,
        name: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        use_master_key: bool = False,
        session_token: Optional[str] = None
    ) -> Awaitable[Any]:
        """Call a cloud function. See ``CloudFunctionService.run``."""
        return self.functions.run(name, params, use_master_key=use_master_key, session_token=session_token)

    def start_job(self, name: str, params: Optional[Mapping[str, Any]] = None) -> Awaitable[str]:
        """Start a background job and return an awaitable for its status id."""
        return self.jobs.start_job(name, params)

    async def get_job_status(self, job_status_id: str) -> JobStatusRecord:
        return await self.jobs.get_job_status(job_status_id)

    async def get_jobs_data(self) -> JobsData:
        return await self.jobs.get_jobs_data()

    async def wait_for_job_status(
        self,
        job_status_id: str,
        status: Optional[Union[JobStatus, str]] = None,
        *,
        interval: Optional[float] = None,
        timeout: Optional[float] = None
    ) -> JobStatusRecord:
        return await self.jobs.wait_for_job_status(job_status_id, status, interval=interval, timeout=timeout)
