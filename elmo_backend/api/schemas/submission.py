from pydantic import BaseModel, Field


class ResourceIdResponse(BaseModel):
    resource_id: int


class SubmissionResponse(BaseModel):
    resource_id: int
    groups: dict[str, bool] = Field(default_factory=dict)
    success: bool
