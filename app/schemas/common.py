from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel

from app.core.clock import to_local_naive


# Incoming timestamps are stored as naive local time
LocalDateTime = Annotated[datetime, AfterValidator(to_local_naive)]


class MessageResponse(BaseModel):
    success: bool = True
    message: str
