from pydantic import BaseModel

class Toast(BaseModel):
    id: str
    message: str
    type: str
