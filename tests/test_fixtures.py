"""Common test data fixtures."""


class TestFixtures:
    """Common test data fixtures."""

    SERVER_URL = "http://localhost:1337/parse"
    APPLICATION_ID = "integration"
    REST_API_KEY = "rest"
    MASTER_KEY = "notsosecret"
    SESSION_TOKEN = "r:8d1c3e5f0a9b"

    BAR_PARAMS_OK = {"key1": "value2", "key2": "value1"}
    BAR_PARAMS_FAIL = {"key1": "value1", "key2": "value2"}
    BAR_RESULT = "Foo"
    BAR_FAILURE_MESSAGE = "Validation failed."

    JOB_PARAMS = {"startedBy": "Monty Python"}
    JOB_FAILURE_MESSAGE = "cloud job failed"

    # Status sequence each job reports on successive lookups; the last entry repeats
    JOB_SCHEDULES = {
        "CloudJob1": ["queued", "running", "succeeded"],
        "CloudJob2": ["running", "running", "running", "running", "succeeded"],
        "CloudJobFailing": ["running", "failed"],
    }

    JOB_STATUS_ID = "Xy7Kq2LmNp"
    CREATED_AT = "2024-05-01T12:00:00.000Z"
