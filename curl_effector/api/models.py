from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from curl_effector.core.types import CurlRequest, CurlResult, HttpHeader


class HttpHeaderIn(BaseModel):
    name: str
    value: str


class CurlRequestIn(BaseModel):
    """Target URL plus ordered headers, as sent by the caller."""

    url: str
    headers: List[HttpHeaderIn] = Field(default_factory=list)

    def to_request(self) -> CurlRequest:
        return CurlRequest(
            url=self.url,
            headers=tuple(HttpHeader(name=h.name, value=h.value) for h in self.headers),
        )


class CurlGetIn(BaseModel):
    request: CurlRequestIn
    output_vault_path: str


class CurlPostIn(BaseModel):
    request: CurlRequestIn
    data_vault_path: str
    output_vault_path: str


class CurlResultOut(BaseModel):
    """Mirror of CurlResult. A failed curl call is still a 200 response."""

    success: bool
    payload: str = ""
    error: str = ""

    @classmethod
    def from_result(cls, result: CurlResult) -> "CurlResultOut":
        return cls(success=result.success, payload=result.payload, error=result.error)
