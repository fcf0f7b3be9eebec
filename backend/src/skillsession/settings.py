from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timezone as dt_timezone, tzinfo
import os
from pathlib import Path
from zoneinfo import ZoneInfo


def _load_local_env_file() -> None:
    """Load variables from .env if present, without overriding exported ones."""
    env_path = Path('.env')
    if not env_path.exists():
        return

    for raw_line in env_path.read_text(encoding='utf-8').splitlines():
        line = raw_line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, value = line.split('=', 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        os.environ.setdefault(key, value)


_load_local_env_file()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class TableNames:
    availability: str = "availability"
    slots: str = "slots"
    bookings: str = "bookingdetails"
    teachers: str = "teachers"
    learners: str = "learners"
    skills: str = "skills"

    def key_fields(self) -> dict[str, str]:
        """Partition key attribute of each table."""
        return {
            self.availability: "id",
            self.slots: "id",
            self.bookings: "bookingId",
            self.teachers: "id",
            self.learners: "id",
            self.skills: "skill",
        }


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    debug: bool
    db_backend: str
    database_url: str | None
    aws_region: str
    dynamodb_endpoint_url: str | None
    timezone: str = "UTC"
    slot_duration_minutes: int = 60
    strict_slot_tiling: bool = False
    scan_page_size: int = 100
    tables: TableNames = field(default_factory=TableNames)

    @property
    def tzinfo(self) -> tzinfo:
        # UTC needs no tz database
        if self.timezone.upper() == "UTC":
            return dt_timezone.utc
        return ZoneInfo(self.timezone)


def load_settings() -> Settings:
    defaults = TableNames()
    return Settings(
        app_name=os.getenv("APP_NAME", "skillsession"),
        app_version=os.getenv("APP_VERSION", "0.1.0"),
        debug=_flag("APP_DEBUG"),
        db_backend=os.getenv("DB_BACKEND", "memory"),
        database_url=os.getenv("DATABASE_URL"),
        aws_region=os.getenv("AWS_REGION", "eu-north-1"),
        dynamodb_endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL"),
        timezone=os.getenv("APP_TIMEZONE", "UTC"),
        slot_duration_minutes=int(os.getenv("SLOT_DURATION_MINUTES", "60")),
        strict_slot_tiling=_flag("STRICT_SLOT_TILING"),
        scan_page_size=int(os.getenv("SCAN_PAGE_SIZE", "100")),
        tables=TableNames(
            availability=os.getenv("AVAILABILITY_TABLE", defaults.availability),
            slots=os.getenv("SLOTS_TABLE", defaults.slots),
            bookings=os.getenv("BOOKINGS_TABLE", defaults.bookings),
            teachers=os.getenv("TEACHERS_TABLE", defaults.teachers),
            learners=os.getenv("LEARNERS_TABLE", defaults.learners),
            skills=os.getenv("SKILLS_TABLE", defaults.skills),
        ),
    )
