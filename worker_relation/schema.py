from pydantic import BaseModel, ConfigDict
from .models import RelationType


class WorkerRelationSchema(BaseModel):
    id: int
    company_id: str
    worker_id: str
    relation_type: RelationType
    model_config = ConfigDict(from_attributes=True)


class WorkerRelationPayload(BaseModel):
    relation_type: RelationType
    model_config = ConfigDict(extra="forbid")
