"""
Async client for a Parse-style backend's cloud functions and background jobs.
"""
__version__ = "0.1.0"

from cloud_code_client.client import CloudCodeClient
from cloud_code_client.constants.error_codes import ErrorCodes, ErrorKind
from cloud_code_client.constants.job_status import JobStatus
from cloud_code_client.exceptions.base_exception import CloudCodeExceptionBase
from cloud_code_client.exceptions.exceptions import (
    ConnectionFailedException,
    EntityReferenceNotAllowedException,
    InvalidFunctionException,
    InvalidJobException,
    InvalidParameterException,
    InvalidResponseException,
    JobStatusMismatchException,
    JobWaitTimeoutException,
    MasterKeyRequiredException,
    ObjectNotFoundException,
    ScriptFailedException,
    ServerErrorException,
    UnsupportedValueException,
    ValidationException,
)
from cloud_code_client.models import EntityReference, GeoPoint, JobStatusRecord, JobsData
from cloud_code_client.services.configuration_service import ConfigurationService

__all__ = [
    "CloudCodeClient",
    "CloudCodeExceptionBase",
    "ConfigurationService",
    "ConnectionFailedException",
    "EntityReference",
    "EntityReferenceNotAllowedException",
    "ErrorCodes",
    "ErrorKind",
    "GeoPoint",
    "InvalidFunctionException",
    "InvalidJobException",
    "InvalidParameterException",
    "InvalidResponseException",
    "JobStatus",
    "JobStatusMismatchException",
    "JobStatusRecord",
    "JobWaitTimeoutException",
    "JobsData",
    "MasterKeyRequiredException",
    "ObjectNotFoundException",
    "ScriptFailedException",
    "ServerErrorException",
    "UnsupportedValueException",
    "ValidationException",
]
