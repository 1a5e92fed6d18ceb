from pydantic import BaseModel


class MessageOut(BaseModel):
    message: str


class PostDeleted(MessageOut):
    post_id: str


class CommentDeleted(MessageOut):
    comment_id: str
