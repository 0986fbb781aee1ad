"""Copy definitions for the CampusReach entity tables.

Column lists are explicit allow-lists so columns added to either schema do
not break the copy.
"""

from migrator.schemas.state import Phase
from migrator.schemas.user import UserIdMapping
from migrator.services.copy_service import Row, TableCopySpec


def _member_profile(row: Row, mapping: UserIdMapping | None) -> Row:
    # The new OrganizationMember schema denormalises the user's profile
    return {"email": mapping.email, "name": mapping.name, "logoUrl": mapping.image}


def _volunteer_profile(row: Row, mapping: UserIdMapping | None) -> Row:
    return {"email": mapping.email, "name": mapping.name, "image": mapping.image}


def _unverified_hours(row: Row, mapping: UserIdMapping | None) -> Row:
    # hoursVerified is new in the Supabase schema
    return {"hoursVerified": False}


ORGANIZATIONS = TableCopySpec(
    table="Organization",
    label="organizations",
    source_columns=(
        "id", "name", "slug", "email", "industry", "logoUrl", "description", "mission",
        "contactName", "contactEmail", "contactPhone", "categories",
        "twitter", "instagram", "facebook", "linkedin", "timezone", "locale",
        "defaultEventLocationTemplate", "defaultTimeCommitmentHours",
        "defaultVolunteersNeeded", "createdAt", "updatedAt",
    ),
)

EVENTS = TableCopySpec(
    table="Event",
    label="events",
    source_columns=(
        "id", "organizationId", "title", "shortDescription", "startsAt",
        "endsAt", "location", "volunteersNeeded", "notes", "timeCommitmentHours",
        "attachments", "specialties", "createdAt", "updatedAt",
    ),
)

ORGANIZATION_MEMBERS = TableCopySpec(
    table="OrganizationMember",
    label="organization members",
    source_columns=("id", "organizationId", "userId", "createdAt"),
    target_columns=("id", "organizationId", "userId", "email", "name", "logoUrl", "createdAt"),
    user_column="userId",
    enrich=_member_profile,
)

VOLUNTEERS = TableCopySpec(
    table="Volunteer",
    label="volunteers",
    source_columns=(
        "id", "userId", "slug", "firstName", "lastName", "pronouns", "school", "major",
        "graduationDate", "phone", "transportMode", "radiusMiles", "transportNotes",
        "weeklyGoalHours", "createdAt", "updatedAt",
    ),
    target_columns=(
        "id", "userId", "email", "slug", "firstName", "lastName", "name", "image",
        "pronouns", "school", "major", "graduationDate", "phone",
        "transportMode", "radiusMiles", "transportNotes",
        "weeklyGoalHours", "createdAt", "updatedAt",
    ),
    user_column="userId",
    enrich=_volunteer_profile,
)

ORGANIZATION_CONTACTS = TableCopySpec(
    table="OrganizationContact",
    label="organization contacts",
    source_columns=("id", "organizationId", "name", "email", "phone", "role", "createdAt"),
)

EVENT_SIGNUPS = TableCopySpec(
    table="EventSignup",
    label="event signups",
    source_columns=("id", "eventId", "volunteerId", "status", "createdAt", "updatedAt"),
    target_columns=("id", "eventId", "volunteerId", "status", "hoursVerified", "createdAt", "updatedAt"),
    enrich=_unverified_hours,
)

GROUP_CHATS = TableCopySpec(
    table="GroupChat",
    label="group chats",
    source_columns=("id", "eventId", "createdAt"),
)

EVENT_RATINGS = TableCopySpec(
    table="EventRating",
    label="event ratings",
    source_columns=("id", "eventId", "volunteerId", "rating", "comment", "createdAt"),
)

TIME_ENTRIES = TableCopySpec(
    table="TimeEntry",
    label="time entries",
    source_columns=("id", "volunteerId", "eventId", "date", "hours", "notes", "createdAt", "updatedAt"),
)

CHAT_MESSAGES = TableCopySpec(
    table="ChatMessage",
    label="chat messages",
    source_columns=("id", "groupChatId", "eventId", "userId", "authorType", "kind", "body", "createdAt"),
    user_column="userId",
    user_optional=True,
)

# Dependency order: independent tables, then user-mapped tables, then tables
# referencing copied organizations/events/volunteers, then messages.
PHASE_TABLES: dict[Phase, TableCopySpec] = {
    Phase.ORGS: ORGANIZATIONS,
    Phase.EVENTS: EVENTS,
    Phase.MEMBERS: ORGANIZATION_MEMBERS,
    Phase.VOLUNTEERS: VOLUNTEERS,
    Phase.CONTACTS: ORGANIZATION_CONTACTS,
    Phase.SIGNUPS: EVENT_SIGNUPS,
    Phase.GROUPCHATS: GROUP_CHATS,
    Phase.RATINGS: EVENT_RATINGS,
    Phase.TIMEENTRIES: TIME_ENTRIES,
    Phase.MESSAGES: CHAT_MESSAGES,
}

DESTINATION_TABLES = tuple(spec.table for spec in PHASE_TABLES.values())
