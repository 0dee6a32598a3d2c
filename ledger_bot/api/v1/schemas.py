"""Pydantic schemas for the subset of Bot API updates the webhook reads"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Chat(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    username: Optional[str] = None
    first_name: Optional[str] = None

    @property
    def display_name(self) -> Optional[str]:
        return self.username or self.first_name


class Message(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message_id: Optional[int] = None
    text: Optional[str] = None
    chat: Chat


class Update(BaseModel):
    """Inbound webhook payload"""

    model_config = ConfigDict(extra="ignore")

    update_id: Optional[int] = None
    message: Optional[Message] = None
    edited_message: Optional[Message] = None


class WebhookAck(BaseModel):
    """Acknowledgement returned to the transport"""

    ok: bool = Field(default=True)
