class ApiConstants:
    """REST paths, relative to the configured server URL."""
    FUNCTIONS_PATH = "functions/{name}"
    JOBS_PATH = "jobs/{name}"
    JOB_STATUS_PATH = "classes/_JobStatus/{object_id}"
    JOBS_DATA_PATH = "cloud_code/jobs/data"


class ValueTypes:
    """Values of the ``__type`` envelope used for built-in value types."""
    TYPE_KEY = "__type"
    DATE = "Date"
    GEO_POINT = "GeoPoint"
    BYTES = "Bytes"
    POINTER = "Pointer"
    OBJECT = "Object"
