"""Constants for persisted model field names"""


class CommonFields:
    """Field names shared by every document"""
    ID = "id"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    USER_ID = "user_id"

    # MongoDB specific
    MONGO_ID = "_id"  # MongoDB's internal _id field


class ContentFields:
    """Field name constants for Region and Place models"""
    ID = "id"
    NAME = "name"
    DESCRIPTION = "description"
    SHORT_DESCRIPTION = "short_description"
    COORDINATES = "coordinates"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    ADDRESS = "address"
    STATUS = "status"
    CREATED_BY = "created_by"
    COVER_IMAGE = "cover_image"
    IMAGES = "images"
    TAGS = "tags"
    VISIT_COUNT = "visit_count"
    FAVORITE_COUNT = "favorite_count"
    IS_REPORTED = "is_reported"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class RegionFields(ContentFields):
    """Field name constants for Region model"""
    PLACE_COUNT = "place_count"


class PlaceFields(ContentFields):
    """Field name constants for Place model"""
    CATEGORY = "category"
    REGION_ID = "region_id"
    PHONE = "phone"
    WEBSITE = "website"
    EMAIL = "email"
    BUSINESS_HOURS = "business_hours"
    CHECKIN_COUNT = "checkin_count"
    AVERAGE_RATING = "average_rating"


class FavoriteFields:
    ID = "id"
    USER_ID = "user_id"
    REGION_ID = "region_id"
    PLACE_ID = "place_id"
    CREATED_AT = "created_at"


class PinFields:
    ID = "id"
    USER_ID = "user_id"
    REGION_ID = "region_id"
    DISPLAY_ORDER = "display_order"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class PermissionFields:
    ID = "id"
    PLACE_ID = "place_id"
    USER_ID = "user_id"
    CAN_EDIT = "can_edit"
    CAN_DELETE = "can_delete"
    INVITED_BY = "invited_by"
    INVITED_AT = "invited_at"
    ACCEPTED_AT = "accepted_at"


class CheckinFields:
    ID = "id"
    USER_ID = "user_id"
    PLACE_ID = "place_id"
    COMMENT = "comment"
    RATING = "rating"
    PHOTOS = "photos"
    USER_LOCATION = "user_location"
    STATUS = "status"
    IS_PRIVATE = "is_private"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class CheckinPhotoFields:
    ID = "id"
    CHECKIN_ID = "checkin_id"
    URL = "url"
    CAPTION = "caption"
    DISPLAY_ORDER = "display_order"
    CREATED_AT = "created_at"


class ReportFields:
    ID = "id"
    REPORTER_USER_ID = "reporter_user_id"
    ENTITY_TYPE = "entity_type"
    ENTITY_ID = "entity_id"
    TYPE = "type"
    REASON = "reason"
    STATUS = "status"
    REVIEWED_BY = "reviewed_by"
    REVIEWED_AT = "reviewed_at"
    REVIEW_NOTES = "review_notes"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class UserFields:
    ID = "id"
    EMAIL = "email"
    HASHED_PASSWORD = "hashed_password"
    NAME = "name"
    BIO = "bio"
    AVATAR = "avatar"
    ROLE = "role"
    STATUS = "status"
    EMAIL_VERIFIED = "email_verified"
    LAST_LOGIN_AT = "last_login_at"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SessionFields:
    ID = "id"
    USER_ID = "user_id"
    TOKEN = "token"
    EXPIRES_AT = "expires_at"
    CREATED_AT = "created_at"


class PasswordResetFields:
    ID = "id"
    USER_ID = "user_id"
    TOKEN = "token"
    EXPIRES_AT = "expires_at"
    USED_AT = "used_at"
    CREATED_AT = "created_at"
