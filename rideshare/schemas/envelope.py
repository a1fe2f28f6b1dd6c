"""Response envelope shared by every non-login endpoint."""

from pydantic import BaseModel


class ResultResponse(BaseModel):
    """`result` is 1 on success and 0 on failure, with `error` explaining the failure."""

    result: int
    error: str | None = None
