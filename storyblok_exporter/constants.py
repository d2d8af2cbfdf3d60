"""Constants shared across the Drupal to Storyblok export tool."""

# HTTP status codes
HTTP_OK = 200
HTTP_CREATED = 201
HTTP_NO_CONTENT = 204
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_RATE_LIMIT = 429
HTTP_SERVER_ERROR_MIN = 500

# Storyblok Management API
STORYBLOK_API_URL = "https://mapi.storyblok.com/v1/spaces/"
STORY_COMPONENT = "article"

# Drupal source query
DEFAULT_CONTENT_TYPE = "article"
JSONAPI_INCLUDE = "uid,field_image,field_tags"
IMAGE_FIELD = "field_image"
TAGS_FIELD = "field_tags"
AUTHOR_FIELD = "uid"

CREATED_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_REQUEST_TIMEOUT = 30

LOGGER_NAME = "storyblok_exporter"
OUTPUT_ROOT = "storyblok_export_output"
