"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ALL_CREWS = "all"
DEFAULT_OVERTIME_WARNING_HOURS = 12

# Document store collections
CREWS = "crews"
EMPLOYEES = "employees"
POSITIONS = "positions"
PHASES = "phases"
PROJECTS = "projects"
ABSENCE_TYPES = "absence-types"
SPECIAL_HOUR_TYPES = "special-hour-types"
UNPRODUCTIVE_HOUR_TYPES = "unproductive-hour-types"
DAILY_REPORTS = "daily-reports"
DAILY_LABOR = "daily-labor"
PERMISSIONS = "permissions"

COLLECTIONS = (
    CREWS,
    EMPLOYEES,
    POSITIONS,
    PHASES,
    PROJECTS,
    ABSENCE_TYPES,
    SPECIAL_HOUR_TYPES,
    UNPRODUCTIVE_HOUR_TYPES,
    DAILY_REPORTS,
    DAILY_LABOR,
    PERMISSIONS,
)
