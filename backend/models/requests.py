from pydantic import BaseModel, Field


class ExtractFromUrlRequest(BaseModel):
    url: str = Field(..., max_length=2048, description="Job posting URL (http or https)")
    user_id: str = Field(..., min_length=1, description="User whose model credentials are used")


class ExtractFromTextRequest(BaseModel):
    text: str = Field(..., max_length=200000, description="Job posting text pasted by the user")
    user_id: str = Field(..., min_length=1, description="User whose model credentials are used")
