"""Writer roster management — commands and handlers.

Writers are looked up by the user id they sign in with, which is also what
orders carry as `writer_id`.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.writer.writer import WriterProfile


@ordering.command(part_of="WriterProfile")
class RegisterWriter:
    user_id: Identifier(required=True)
    display_name: String(required=True, max_length=100)


@ordering.command(part_of="WriterProfile")
class ApproveWriter:
    user_id: Identifier(required=True)


@ordering.command(part_of="WriterProfile")
class SuspendWriter:
    user_id: Identifier(required=True)
    reason: String(max_length=500)


def _profile_for(user_id: str) -> WriterProfile:
    profile = current_domain.repository_for(WriterProfile).find_by_user(user_id)
    if profile is None:
        raise ObjectNotFoundError(f"No writer profile for user {user_id}")
    return profile


def register_writer(user_id: str, display_name: str) -> str:
    """Add a pending writer to the roster; returns the profile id."""
    repo = current_domain.repository_for(WriterProfile)
    if repo.find_by_user(user_id) is not None:
        raise ValidationError({"user_id": [f"User {user_id} already has a writer profile"]})
    profile = WriterProfile.register(user_id=user_id, display_name=display_name)
    repo.add(profile)
    return str(profile.id)


def approve_writer(user_id: str) -> None:
    profile = _profile_for(user_id)
    profile.approve()
    current_domain.repository_for(WriterProfile).add(profile)


def suspend_writer(user_id: str, reason: str | None = None) -> None:
    profile = _profile_for(user_id)
    profile.suspend(reason)
    current_domain.repository_for(WriterProfile).add(profile)


@ordering.command_handler(part_of=WriterProfile)
class WriterRosterHandler:
    @handle(RegisterWriter)
    def register(self, command):
        return register_writer(command.user_id, command.display_name)

    @handle(ApproveWriter)
    def approve(self, command):
        approve_writer(command.user_id)

    @handle(SuspendWriter)
    def suspend(self, command):
        suspend_writer(command.user_id, command.reason)
