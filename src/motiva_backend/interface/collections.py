from enum import Enum

class ProtectedCollection(str, Enum):
    """Collections that may only be reached through the protected data gateway"""
    CLIENT_ASSIGNED_WORKOUTS = "clientassignedworkouts"
    PROGRAM_ASSIGNMENTS = "programassignments"
    TRAINER_CLIENT_ASSIGNMENTS = "trainerclientassignments"
    TRAINER_CLIENT_MESSAGES = "trainerclientmessages"
    TRAINER_CLIENT_NOTES = "trainerclientnotes"
    WEEKLY_CHECKINS = "weeklycheckins"
    WEEKLY_COACHES_NOTES = "weeklycoachesnotes"
    WEEKLY_SUMMARIES = "weeklysummaries"
    TRAINER_NOTIFICATIONS = "trainernotifications"
    TRAINER_NOTIFICATION_PREFERENCES = "trainernotificationpreferences"
    CLIENT_PROFILES = "clientprofiles"
    CLIENT_PROGRAMS = "clientprograms"
    PROGRAM_DRAFTS = "programdrafts"
    PROGRAMS = "programs"

PROTECTED_COLLECTIONS = frozenset(c.value for c in ProtectedCollection)

# Internal collections, never exposed through the gateway
MEMBER_ROLES = "memberroles"
MEMBER_SESSIONS = "membersessions"
PARQ_SUBMISSIONS = "parqsubmissions"

# Ownership fields
CLIENT_ID = "clientId"
TRAINER_ID = "trainerId"

# System fields stamped by the gateway
ID_FIELD = "_id"
VERSION_FIELD = "_version"
CREATED_FIELD = "_createdDate"
UPDATED_FIELD = "_updatedDate"
