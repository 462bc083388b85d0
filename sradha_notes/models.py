"""
Pydantic models for Sradha's Notes

Field names are snake_case in Python and camelCase on the wire and in MongoDB.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, ClassVar, List, Optional, Tuple, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

def utcnow() -> datetime:
    """Naive UTC at millisecond precision, which is what MongoDB hands back."""
    return _naive_utc(datetime.now(timezone.utc))

class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_default=True,
    )

class UpdateModel(CamelModel):
    """Partial update: only fields present in the request are written."""
    required_fields: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def required_fields_not_null(self):
        for name in self.required_fields:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be empty")
        return self

    def changes(self, exclude: Tuple[str, ...] = ()) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True, exclude=set(exclude))

def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)

NaiveUtcDatetime = Annotated[datetime, AfterValidator(_naive_utc)]

# =====================================================================================
# IMAGES
# =====================================================================================

class ImageRef(CamelModel):
    url: str = Field(min_length=1)
    external_id: Optional[str] = None

# Raw base64 data URI, remote URL, or an already uploaded image
ImageInput = Union[ImageRef, str]

# =====================================================================================
# NOTES
# =====================================================================================

class NoteColor(str, Enum):
    ROSE = "rose"
    PURPLE = "purple"
    BLUE = "blue"
    YELLOW = "yellow"
    GREEN = "green"
    ORANGE = "orange"

class NoteCategory(str, Enum):
    PERSONAL = "personal"
    STUDY = "study"
    DREAMS = "dreams"
    MEMORIES = "memories"
    IDEAS = "ideas"

class NoteCreate(CamelModel):
    title: Optional[str] = Field(None, max_length=200)
    content: str = Field(min_length=1)
    color: NoteColor = NoteColor.ROSE
    emoji: str = "💕"
    category: NoteCategory = NoteCategory.PERSONAL
    images: List[ImageInput] = []

class NoteUpdate(UpdateModel):
    required_fields = ("content", "color", "emoji", "category", "images",
                       "is_loved", "is_pinned", "is_archived")

    title: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    color: Optional[NoteColor] = None
    emoji: Optional[str] = None
    category: Optional[NoteCategory] = None
    images: Optional[List[ImageInput]] = None
    is_loved: Optional[bool] = None
    is_pinned: Optional[bool] = None
    is_archived: Optional[bool] = None

# =====================================================================================
# MOODS
# =====================================================================================

class MoodName(str, Enum):
    HAPPY = "Happy"
    LOVED = "Loved"
    PEACEFUL = "Peaceful"
    EXCITED = "Excited"
    TIRED = "Tired"
    SAD = "Sad"
    FRUSTRATED = "Frustrated"
    HOPEFUL = "Hopeful"

class MoodDetails(CamelModel):
    emoji: str = Field(min_length=1)
    name: MoodName
    color: str = Field(min_length=1)
    message: Optional[str] = None

class MoodCreate(CamelModel):
    mood: MoodDetails
    note: Optional[str] = Field(None, max_length=500)
    date: NaiveUtcDatetime = Field(default_factory=utcnow)

# =====================================================================================
# LETTERS
# =====================================================================================

class LetterCreate(CamelModel):
    to: str = "My Beautiful Self"
    subject: Optional[str] = Field(None, max_length=200)
    content: str = Field(min_length=1)

class LetterUpdate(UpdateModel):
    required_fields = ("to", "content", "is_read")

    to: Optional[str] = None
    subject: Optional[str] = Field(None, max_length=200)
    content: Optional[str] = Field(None, min_length=1)
    is_read: Optional[bool] = None

# =====================================================================================
# MEMORIES
# =====================================================================================

class MemoryCreate(CamelModel):
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    images: List[ImageInput] = []
    date: Optional[NaiveUtcDatetime] = None

class MemoryUpdate(UpdateModel):
    required_fields = ("images",)

    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    images: Optional[List[ImageInput]] = None
    date: Optional[NaiveUtcDatetime] = None

# =====================================================================================
# TODOS
# =====================================================================================

class TodoPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

class TodoCreate(CamelModel):
    text: str = Field(min_length=1)
    priority: TodoPriority = TodoPriority.NORMAL

class TodoUpdate(UpdateModel):
    required_fields = ("text", "priority", "completed")

    text: Optional[str] = Field(None, min_length=1)
    priority: Optional[TodoPriority] = None
    completed: Optional[bool] = None

# =====================================================================================
# EVENTS
# =====================================================================================

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

def _calendar_day(value: str) -> str:
    datetime.strptime(value, "%Y-%m-%d")
    return value

# "YYYY-MM-DD" that names a real day
CalendarDay = Annotated[str, Field(pattern=DATE_PATTERN), AfterValidator(_calendar_day)]

class EventCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    emoji: str = "💕"
    date: CalendarDay
    time: Optional[str] = None

class EventUpdate(UpdateModel):
    required_fields = ("title", "emoji", "date")

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    emoji: Optional[str] = None
    date: Optional[CalendarDay] = None
    time: Optional[str] = None

# =====================================================================================
# STUDY
# =====================================================================================

class SectionColor(str, Enum):
    ROSE = "rose"
    PURPLE = "purple"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    CYAN = "cyan"
    PINK = "pink"

class SectionCreate(CamelModel):
    name: str = Field(min_length=1)
    emoji: str = "📚"
    color: SectionColor = SectionColor.ROSE

class SectionUpdate(UpdateModel):
    required_fields = ("name", "emoji", "color")

    name: Optional[str] = Field(None, min_length=1)
    emoji: Optional[str] = None
    color: Optional[SectionColor] = None

class PdfCreate(CamelModel):
    name: str = Field(min_length=1)
    section_id: str = Field(min_length=1)
    file_data: str = Field(min_length=1)
    size: Optional[str] = None
    last_page: int = Field(1, ge=1)
    total_pages: int = Field(1, ge=1)
    is_favorite: bool = False

class PdfUpdate(UpdateModel):
    required_fields = ("name", "last_page", "total_pages", "is_favorite")

    name: Optional[str] = Field(None, min_length=1)
    last_page: Optional[int] = Field(None, ge=1)
    total_pages: Optional[int] = Field(None, ge=1)
    is_favorite: Optional[bool] = None

# =====================================================================================
# UPLOADS & AUTH
# =====================================================================================

class Base64Upload(CamelModel):
    image: Optional[str] = None
    folder: Optional[str] = None

class MultipleUpload(CamelModel):
    images: List[str] = []
    folder: Optional[str] = None

class LoginRequest(CamelModel):
    username: str = ""
    password: str = ""
