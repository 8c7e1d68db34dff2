class HttpHeaders:
    """Request and response headers understood by the backend."""
    APPLICATION_ID = "X-Parse-Application-Id"
    REST_API_KEY = "X-Parse-REST-API-Key"
    MASTER_KEY = "X-Parse-Master-Key"
    SESSION_TOKEN = "X-Parse-Session-Token"
    CLIENT_VERSION = "X-Parse-Client-Version"
    JOB_STATUS_ID = "X-Parse-Job-Status-Id"
    CONTENT_TYPE = "Content-Type"
    USER_AGENT = "User-Agent"


class ContentTypes:
    JSON = "application/json"
