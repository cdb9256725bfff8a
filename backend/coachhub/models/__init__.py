from coachhub.models.user import User, UserRole
from coachhub.models.exercise import Equipment, Exercise, ExerciseEquipment, Location
from coachhub.models.program import Difficulty, Program, ProgramItem, Section
from coachhub.models.client_program import (
    AssignmentSource, ClientExerciseNote, ClientProgram, ClientProgramItem,
)
from coachhub.models.schedule import ScheduledProgram
from coachhub.models.session import Kudos, SessionItem, SessionStatus, TrainingSession
from coachhub.models.notification import Notification, NotificationType
from coachhub.models.event import Event, EventRegistration, RegistrationStatus
from coachhub.models.community import Comment, CommentLike, Community, CommunityMember, Post, PostLike
from coachhub.models.media import Media, MediaKind

__all__ = [
    "AssignmentSource", "ClientExerciseNote", "ClientProgram", "ClientProgramItem", "Comment", "CommentLike",
    "Community", "CommunityMember", "Difficulty", "Equipment", "Event", "EventRegistration",
    "Exercise", "ExerciseEquipment", "Kudos", "Location", "Media", "MediaKind", "Notification",
    "NotificationType", "Post", "PostLike", "Program", "ProgramItem", "RegistrationStatus",
    "ScheduledProgram", "Section", "SessionItem", "SessionStatus", "TrainingSession", "User",
    "UserRole",
]
