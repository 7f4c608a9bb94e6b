"""Business rule limits shared by validation, search and the service layer"""


class CoordinateLimits:
    """WGS84 coordinate bounds"""
    SYSTEM = "WGS84"
    MIN_LATITUDE = -90.0
    MAX_LATITUDE = 90.0
    MIN_LONGITUDE = -180.0
    MAX_LONGITUDE = 180.0


class LocationLimits:
    """Distance and search radius limits"""
    EARTH_RADIUS_KM = 6371.0
    DEFAULT_CHECKIN_DISTANCE_METERS = 500
    MAX_CHECKIN_DISTANCE_METERS = 10000
    MIN_SEARCH_RADIUS_KM = 0.1
    MAX_PLACE_SEARCH_RADIUS_KM = 50.0
    MAX_REGION_SEARCH_RADIUS_KM = 100.0


class UserLimits:
    MIN_PASSWORD_LENGTH = 8
    MAX_PASSWORD_LENGTH = 128
    MIN_NAME_LENGTH = 1
    MAX_NAME_LENGTH = 100
    MAX_BIO_LENGTH = 500
    RESET_TOKEN_EXPIRY_HOURS = 24


class ContentLimits:
    """Shared by regions and places"""
    MIN_NAME_LENGTH = 1
    MAX_NAME_LENGTH = 200
    MAX_DESCRIPTION_LENGTH = 2000
    MAX_SHORT_DESCRIPTION_LENGTH = 300
    MAX_ADDRESS_LENGTH = 500
    MAX_PHONE_LENGTH = 20
    MAX_TAG_LENGTH = 50


class CheckinLimits:
    MAX_COMMENT_LENGTH = 1000
    MAX_CAPTION_LENGTH = 200
    MAX_PHOTOS_PER_CHECKIN = 10
    MIN_RATING = 1
    MAX_RATING = 5
    DUPLICATE_CHECKIN_WINDOW_HOURS = 24


class ReportLimits:
    MIN_REASON_LENGTH = 10
    MAX_REASON_LENGTH = 1000
    MAX_REVIEW_NOTES_LENGTH = 1000


class PaginationLimits:
    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100


class SearchLimits:
    MIN_SUGGESTION_QUERY_LENGTH = 2
    DEFAULT_SUGGESTION_LIMIT = 10
    DEFAULT_FEATURED_LIMIT = 10
    WILDCARD = "*"


class MediaLimits:
    """Region and place image uploads"""
    MAX_FILES_PER_UPLOAD = 10
    MAX_IMAGES_PER_ENTITY = 20
    MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
    IMAGE_CONTENT_TYPE_PATTERN = r"^image/(jpeg|jpg|png|webp|gif)$"
