from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cloud_code_client.constants.job_status import JobStatus


class JobStatusRecord(BaseModel):
    """
    Snapshot of a background job's status as stored on the server.
    """
    object_id: str = Field(..., description="The job status id returned by start_job", alias="objectId")
    job_name: Optional[str] = Field(None, description="The name of the job", alias="jobName")
    status: JobStatus = Field(..., description="Current status of the job")
    params: Dict[str, Any] = Field(default_factory=dict, description="Parameters the job was started with")
    message: Optional[str] = Field(None, description="Last message reported by the job")
    source: Optional[str] = Field(None, description="What started the job, e.g. 'api'")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")
    finished_at: Optional[datetime] = Field(None, alias="finishedAt")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("created_at", "updated_at", "finished_at", mode="before")
    @classmethod
    def _unwrap_date(cls, value: Any) -> Any:
        # Date envelopes carry the timestamp under "iso"
        if isinstance(value, dict) and value.get("__type") == "Date":
            return value.get("iso")
        return value

    @property
    def is_terminal(self) -> bool:
        """Returns whether the job has finished, successfully or not."""
        return self.status.is_terminal

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a field by its wire name or attribute name."""
        for name, field in type(self).model_fields.items():
            if key in (name, field.alias):
                return getattr(self, name)
        return default


class JobsData(BaseModel):
    """
    Jobs known to the server.

    Attributes:
        in_use: Names of jobs currently executing
        available: Names of every job definition registered on the server
    """
    in_use: List[str] = Field(default_factory=list)
    available: List[str] = Field(default_factory=list, alias="jobs")

    model_config = ConfigDict(populate_by_name=True)
