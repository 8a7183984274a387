"""Namecheap registrar schemas (camelCase on the wire)."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RecordType = Literal["A", "AAAA", "CNAME", "MX", "TXT", "NS", "SRV", "URL", "URL301", "FRAME"]


class NamecheapDomain(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    user: str | None = None
    created: str | None = None
    expires: str | None = None
    is_expired: bool = Field(default=False, alias="isExpired")
    is_locked: bool = Field(default=False, alias="isLocked")
    auto_renew: bool = Field(default=False, alias="autoRenew")
    whois_guard: str | None = Field(default=None, alias="whoisGuard")
    is_premium: bool = Field(default=False, alias="isPremium")
    is_our_dns: bool = Field(default=False, alias="isOurDNS")


class DNSRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: RecordType
    hostname: str
    address: str
    ttl: int = 1800
    mxpref: int | None = None
    record_id: str | None = Field(default=None, alias="recordId")


class DomainAvailability(BaseModel):
    domain: str
    available: bool
    premium: bool = False
    price: str | None = None


class CheckDomainsRequest(BaseModel):
    domains: list[str] = Field(min_length=1)


class SetDNSRecordsRequest(BaseModel):
    records: list[DNSRecord]


class RenewRequest(BaseModel):
    years: int = Field(default=1, ge=1, le=10)


class ConnectionStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    connected: bool
    client_ip: str = Field(alias="clientIp")


class OperationResult(BaseModel):
    success: bool = True
