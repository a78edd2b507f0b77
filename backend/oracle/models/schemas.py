from pydantic import BaseModel, Field


# --- Chat ---

class ChatMessage(BaseModel):
    role: str = Field(..., pattern="^(user|assistant)$")
    content: str


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(..., min_length=1)


# --- Usage ---

class UsageSnapshot(BaseModel):
    token_count: int = Field(default=0, ge=0)
    cost_estimate: float = Field(default=0.0, ge=0)


# --- Health ---

class HealthResponse(BaseModel):
    status: str
    version: str
