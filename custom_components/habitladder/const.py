# File: const.py
"""Constants for the HabitLadder integration.

This file centralizes configuration keys, defaults, storage keys, data field
names, signal suffixes, outcome codes and platform identifiers for consistency
across the integration.
"""

import logging

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
# Integration Name
HABITLADDER_TITLE = "HabitLadder"

# Integration Domain
DOMAIN = "habitladder"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.BUTTON,
    Platform.CALENDAR,
    Platform.SENSOR,
]

# Coordinator
COORDINATOR = "coordinator"
COORDINATOR_SUFFIX = "_coordinator"

# Update / Autosave Intervals
DEFAULT_UPDATE_INTERVAL = 1  # minutes
AUTOSAVE_INTERVAL_SECONDS = 60


# ------------------------------------------------------------------------------------------------
# Storage
# ------------------------------------------------------------------------------------------------
STORAGE_VERSION = 1
STORAGE_KEY_PREFIX = "habitladder"

# Logical keys, each persisted independently
STORAGE_KEY_DEFAULT_LADDER = "default_ladder"
STORAGE_KEY_ACTIVE_LADDER = "active_ladder"
STORAGE_KEY_CUSTOM_LADDERS = "custom_ladders"
STORAGE_KEY_USAGE_FLAGS = "usage_flags"
STORAGE_KEY_LEGACY_HABITS = "habits"
STORAGE_KEY_CALENDAR_EVENTS = "calendar_events"

STORAGE_KEYS = [
    STORAGE_KEY_DEFAULT_LADDER,
    STORAGE_KEY_ACTIVE_LADDER,
    STORAGE_KEY_CUSTOM_LADDERS,
    STORAGE_KEY_USAGE_FLAGS,
    STORAGE_KEY_LEGACY_HABITS,
    STORAGE_KEY_CALENDAR_EVENTS,
]

# Source of the working habit list after load
HABITS_SOURCE_ACTIVE_LADDER = "active_ladder"
HABITS_SOURCE_DEFAULT_LADDER = "default_ladder"
HABITS_SOURCE_LEGACY = "legacy"
HABITS_SOURCE_NONE = "none"


# ------------------------------------------------------------------------------------------------
# Data Keys
# ------------------------------------------------------------------------------------------------
# Habit
DATA_HABIT_ID = "id"
DATA_HABIT_NAME = "name"
DATA_HABIT_DESCRIPTION = "description"
DATA_HABIT_COMPLETION_DATES = "completion_dates"
DATA_HABIT_LAST_CHECKED_DATE = "last_checked_date"
DATA_HABIT_IS_UNLOCKED = "is_unlocked"
DATA_HABIT_HAS_BEEN_CELEBRATED = "has_been_celebrated"

# Ladder
DATA_LADDER_ID = "id"
DATA_LADDER_NAME = "name"
DATA_LADDER_EMOJI = "emoji"
DATA_LADDER_CREATED_DATE = "created_date"
DATA_LADDER_HABITS = "habits"
DATA_LADDER_STREAK_POLICY = "streak_policy"

# Usage Flags
DATA_USAGE_USED_FREE_DEFAULT_SLOT = "used_free_default_slot"
DATA_USAGE_USED_FREE_CUSTOM_SLOT = "used_free_custom_slot"

# Calendar log entry
DATA_EVENT_HABIT_ID = "habit_id"
DATA_EVENT_HABIT_NAME = "habit_name"
DATA_EVENT_CALENDAR_DAY = "calendar_day"

# Field names written by the pre-ladder app version
LEGACY_HABIT_FIELD_ALIASES = {
    "completionDates": DATA_HABIT_COMPLETION_DATES,
    "lastCheckedDate": DATA_HABIT_LAST_CHECKED_DATE,
    "isUnlocked": DATA_HABIT_IS_UNLOCKED,
    "hasBeenCelebrated": DATA_HABIT_HAS_BEEN_CELEBRATED,
}
LEGACY_LADDER_FIELD_ALIASES = {
    "createdDate": DATA_LADDER_CREATED_DATE,
}
LEGACY_USAGE_FIELD_ALIASES = {
    "hasUsedDefaultProfile": DATA_USAGE_USED_FREE_DEFAULT_SLOT,
    "hasUsedCustomLadder": DATA_USAGE_USED_FREE_CUSTOM_SLOT,
}


# ------------------------------------------------------------------------------------------------
# Progression
# ------------------------------------------------------------------------------------------------
# Consecutive days (or capped completions) a habit needs before its successor unlocks
UNLOCK_STREAK_THRESHOLD = 3

STREAK_POLICY_CONSECUTIVE_DAY = "consecutive_day"
STREAK_POLICY_TOTAL_COUNT_CAPPED = "total_count_capped"
STREAK_POLICIES = [
    STREAK_POLICY_CONSECUTIVE_DAY,
    STREAK_POLICY_TOTAL_COUNT_CAPPED,
]
DEFAULT_STREAK_POLICY = STREAK_POLICY_CONSECUTIVE_DAY

# Ladder size bounds for user-created ladders
MIN_LADDER_HABITS = 1
MAX_LADDER_HABITS = 7


# ------------------------------------------------------------------------------------------------
# Outcomes (returned as values, never raised)
# ------------------------------------------------------------------------------------------------
COMPLETION_OUTCOME_COMPLETED = "completed"
COMPLETION_OUTCOME_ALREADY_COMPLETED_TODAY = "already_completed_today"
COMPLETION_OUTCOME_HABIT_NOT_FOUND = "habit_not_found"
COMPLETION_OUTCOME_HABIT_LOCKED = "habit_locked"

LADDER_OUTCOME_OK = "ok"
LADDER_OUTCOME_QUOTA_EXCEEDED = "quota_exceeded"
LADDER_OUTCOME_PREMIUM_REQUIRED = "premium_required"
LADDER_OUTCOME_LADDER_NOT_FOUND = "ladder_not_found"
LADDER_OUTCOME_PROFILE_NOT_FOUND = "profile_not_found"
LADDER_OUTCOME_INVALID_LADDER = "invalid_ladder"
LADDER_OUTCOME_NO_ACTIVE_LADDER = "no_active_ladder"

DEFAULT_PROFILE_LIMIT_MESSAGE = (
    "You can only have one default profile unless you upgrade to Premium. "
    "Upgrade to access unlimited default profiles."
)
CUSTOM_LADDER_LIMIT_MESSAGE = (
    "You can only create one custom ladder unless you upgrade to Premium. "
    "Upgrade to create unlimited custom ladders."
)
PREMIUM_REQUIRED_MESSAGE = "This ladder is only available with Premium."

# Validation error keys
ERROR_LADDER_NAME_REQUIRED = "ladder_name_required"
ERROR_LADDER_NAME_RESERVED = "ladder_name_reserved"
ERROR_LADDER_NAME_DUPLICATE = "ladder_name_duplicate"
ERROR_HABITS_REQUIRED = "habits_required"
ERROR_TOO_MANY_HABITS = "too_many_habits"
ERROR_HABIT_NAME_REQUIRED = "habit_name_required"
ERROR_INVALID_STREAK_POLICY = "invalid_streak_policy"


# ------------------------------------------------------------------------------------------------
# Signals (instance-scoped dispatcher suffixes)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_HABIT_COMPLETED = "habit_completed"
SIGNAL_SUFFIX_HABIT_UNLOCKED = "habit_unlocked"
SIGNAL_SUFFIX_LADDER_ALL_UNLOCKED = "ladder_all_unlocked"
SIGNAL_SUFFIX_LADDER_RESET = "ladder_reset"
SIGNAL_SUFFIX_LADDER_CHANGED = "ladder_changed"
SIGNAL_SUFFIX_ACTIONABLE_HABIT_CHANGED = "actionable_habit_changed"


# ------------------------------------------------------------------------------------------------
# Configuration / Options
# ------------------------------------------------------------------------------------------------
CONF_PREMIUM_USER = "premium_user"
CONF_STREAK_POLICY = "streak_policy"
CONF_NOTIFY_SERVICE = "notify_service"
CONF_REMINDER_TIME = "reminder_time"
CONF_NOTIFY_ON_CHANGE = "notify_on_change"

DEFAULT_PREMIUM_USER = False
DEFAULT_NOTIFY_SERVICE = ""
DEFAULT_REMINDER_TIME = "09:00:00"
DEFAULT_NOTIFY_ON_CHANGE = False


# ------------------------------------------------------------------------------------------------
# Notifications
# ------------------------------------------------------------------------------------------------
NOTIFY_TITLE_NEXT_HABIT = "Time for your next habit! 🎯"
NOTIFY_MESSAGE_NEXT_HABIT = "Ready to complete: {habit_name}"
NOTIFY_TAG_NEXT_HABIT = "habitladder_next_habit"


# ------------------------------------------------------------------------------------------------
# Calendar
# ------------------------------------------------------------------------------------------------
CALENDAR_EVENT_SUMMARY = "Completed: {habit_name}"
CALENDAR_EVENT_DESCRIPTION = "Habit completed via HabitLadder"


# ------------------------------------------------------------------------------------------------
# Entities
# ------------------------------------------------------------------------------------------------
SENSOR_LADDER_PROGRESS_SUFFIX = "_ladder_progress"
SENSOR_HABIT_RUNG_SUFFIX = "_habit_rung_{index}"
BUTTON_COMPLETE_RUNG_SUFFIX = "_complete_rung_{index}"
CALENDAR_SUFFIX = "_completions_calendar"

ICON_LADDER = "mdi:stairs"
ICON_LADDER_COMPLETE = "mdi:stairs-up"
ICON_HABIT_LOCKED = "mdi:lock"
ICON_HABIT_DONE_TODAY = "mdi:check-circle"
ICON_HABIT_OPEN = "mdi:checkbox-blank-circle-outline"
ICON_COMPLETE_BUTTON = "mdi:check-bold"

# Translation keys
TRANS_KEY_SENSOR_LADDER_PROGRESS = "ladder_progress"
TRANS_KEY_SENSOR_HABIT_RUNG = "habit_rung"
TRANS_KEY_BUTTON_COMPLETE_RUNG = "complete_rung"
TRANS_KEY_CALENDAR_COMPLETIONS = "completions"
TRANS_KEY_ATTR_RUNG = "rung"

# Extra State Attributes
ATTR_LADDER_ID = "ladder_id"
ATTR_LADDER_NAME = "ladder_name"
ATTR_LADDER_EMOJI = "ladder_emoji"
ATTR_HABITS_SOURCE = "habits_source"
ATTR_IS_CUSTOM_LADDER = "is_custom_ladder"
ATTR_HABITS = "habits"
ATTR_TOTAL_HABITS = "total_habits"
ATTR_COMPLETED_TODAY = "completed_today"
ATTR_ALL_UNLOCKED = "all_unlocked"
ATTR_NEXT_HABIT_ID = "next_habit_id"
ATTR_NEXT_HABIT_NAME = "next_habit_name"
ATTR_STREAK_POLICY = "streak_policy"
ATTR_USAGE_SUMMARY = "usage_summary"
ATTR_CUSTOM_LADDERS = "custom_ladders"
ATTR_RUNG = "rung"
ATTR_HABIT_ID = "habit_id"
ATTR_HABIT_NAME = "habit_name"
ATTR_DESCRIPTION = "description"
ATTR_IS_UNLOCKED = "is_unlocked"
ATTR_IS_COMPLETED_TODAY = "is_completed_today"
ATTR_HAS_QUALIFYING_STREAK = "has_qualifying_streak"
ATTR_TOTAL_COMPLETION_DAYS = "total_completion_days"
ATTR_LAST_CHECKED_DATE = "last_checked_date"


# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_COMPLETE_HABIT = "complete_habit"
SERVICE_RESET_LADDER = "reset_ladder"
SERVICE_SELECT_PROFILE = "select_profile"
SERVICE_CREATE_CUSTOM_LADDER = "create_custom_ladder"
SERVICE_ADD_CURATED_LADDER = "add_curated_ladder"
SERVICE_RENAME_CUSTOM_LADDER = "rename_custom_ladder"
SERVICE_DELETE_CUSTOM_LADDER = "delete_custom_ladder"
SERVICE_ACTIVATE_CUSTOM_LADDER = "activate_custom_ladder"
SERVICE_SWITCH_TO_DEFAULT_LADDER = "switch_to_default_ladder"

SERVICES = [
    SERVICE_COMPLETE_HABIT,
    SERVICE_RESET_LADDER,
    SERVICE_SELECT_PROFILE,
    SERVICE_CREATE_CUSTOM_LADDER,
    SERVICE_ADD_CURATED_LADDER,
    SERVICE_RENAME_CUSTOM_LADDER,
    SERVICE_DELETE_CUSTOM_LADDER,
    SERVICE_ACTIVATE_CUSTOM_LADDER,
    SERVICE_SWITCH_TO_DEFAULT_LADDER,
]

FIELD_HABIT_ID = "habit_id"
FIELD_HABIT_NAME = "habit_name"
FIELD_PROFILE = "profile"
FIELD_LADDER = "ladder"
FIELD_LADDER_NAME = "ladder_name"
FIELD_NEW_NAME = "new_name"
FIELD_HABITS = "habits"
FIELD_EMOJI = "emoji"
FIELD_STREAK_POLICY = "streak_policy"
FIELD_ACTIVATE = "activate"
FIELD_NAME = "name"
FIELD_DESCRIPTION = "description"

# Service error messages
ERROR_NOT_LOADED = "HabitLadder is not loaded"
ERROR_HABIT_NOT_FOUND_FMT = "Habit '{}' not found in the active ladder"
ERROR_HABIT_LOCKED_FMT = "Habit '{}' is still locked"
ERROR_HABIT_SELECTOR_REQUIRED = "Provide either habit_id or habit_name"
ERROR_LADDER_OPERATION_FMT = "Ladder operation failed ({}): {}"

# Notify service payload keys
NOTIFY_DOMAIN = "notify"
NOTIFY_TITLE = "title"
NOTIFY_MESSAGE = "message"
NOTIFY_DATA = "data"
NOTIFY_TAG = "tag"


# ------------------------------------------------------------------------------------------------
# Config / Options Flow
# ------------------------------------------------------------------------------------------------
CONFIG_FLOW_STEP_USER = "user"
OPTIONS_FLOW_STEP_INIT = "init"
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_INVALID_REMINDER_TIME = "invalid_reminder_time"
TRANS_KEY_CFOF_STREAK_POLICY = "streak_policy"
