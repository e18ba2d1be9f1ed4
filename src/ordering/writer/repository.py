from ordering.domain import ordering
from ordering.writer.writer import WriterProfile, WriterStatus


@ordering.repository(part_of=WriterProfile)
class WriterProfileRepository:
    def find_by_user(self, user_id: str) -> WriterProfile | None:
        return self._dao.query.filter(user_id=user_id).all().first

    def approved(self) -> list[WriterProfile]:
        return self._dao.query.filter(status=WriterStatus.APPROVED.value).order_by("display_name").all().items
