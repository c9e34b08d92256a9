from dataclasses import dataclass
from typing import Literal, Protocol, Sequence


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ImageAttachment:
    mime_type: str
    data: bytes


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str
    image: ImageAttachment | None = None


class ChatModel(Protocol):
    async def complete(self, messages: Sequence[ChatMessage]) -> str: ...

    async def ping(self) -> list[str]: ...
