from cloud_code_client.models.values import EntityReference, GeoPoint
from cloud_code_client.models.job_status import JobStatusRecord, JobsData

__all__ = ["EntityReference", "GeoPoint", "JobStatusRecord", "JobsData"]
