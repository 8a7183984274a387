"""Domain management API routes backed by the Namecheap client."""

from fastapi import APIRouter, Depends, HTTPException

from instanti8.namecheap.client import NamecheapClient, NamecheapError
from instanti8.namecheap.schemas import (
    CheckDomainsRequest,
    ConnectionStatus,
    DNSRecord,
    DomainAvailability,
    NamecheapDomain,
    OperationResult,
    RenewRequest,
    SetDNSRecordsRequest,
)

router = APIRouter(prefix="/api/domains", tags=["domains"])


def get_namecheap_client() -> NamecheapClient | None:
    """Dependency placeholder, overridden at startup (None when not configured)."""
    raise RuntimeError("NamecheapClient not configured")


def _require(client: NamecheapClient | None) -> NamecheapClient:
    if client is None:
        raise HTTPException(status_code=503, detail="Namecheap credentials not configured")
    return client


def _upstream_error(e: NamecheapError) -> HTTPException:
    return HTTPException(status_code=502, detail=str(e))


@router.get("/status")
async def connection_status(
    client: NamecheapClient | None = Depends(get_namecheap_client),
) -> ConnectionStatus:
    namecheap = _require(client)
    return ConnectionStatus(
        connected=await namecheap.test_connection(), client_ip=namecheap.client_ip
    )


@router.get("")
async def list_domains(
    client: NamecheapClient | None = Depends(get_namecheap_client),
) -> list[NamecheapDomain]:
    try:
        return await _require(client).get_domains()
    except NamecheapError as e:
        raise _upstream_error(e) from e


@router.post("/check")
async def check_availability(
    request: CheckDomainsRequest,
    client: NamecheapClient | None = Depends(get_namecheap_client),
) -> list[DomainAvailability]:
    try:
        return await _require(client).check_domain_availability(request.domains)
    except NamecheapError as e:
        raise _upstream_error(e) from e


@router.get("/ssl")
async def list_ssl_certificates(
    client: NamecheapClient | None = Depends(get_namecheap_client),
) -> list[dict[str, str]]:
    try:
        return await _require(client).get_ssl_certificates()
    except NamecheapError as e:
        raise _upstream_error(e) from e


@router.get("/{domain}/dns")
async def get_dns_records(
    domain: str,
    client: NamecheapClient | None = Depends(get_namecheap_client),
) -> list[DNSRecord]:
    try:
        return await _require(client).get_dns_records(domain)
    except NamecheapError as e:
        raise _upstream_error(e) from e


@router.put("/{domain}/dns")
async def set_dns_records(
    domain: str,
    request: SetDNSRecordsRequest,
    client: NamecheapClient | None = Depends(get_namecheap_client),
) -> OperationResult:
    """Replace every host record of the domain with the given list."""
    try:
        return OperationResult(
            success=await _require(client).set_dns_records(domain, request.records)
        )
    except NamecheapError as e:
        raise _upstream_error(e) from e


@router.post("/{domain}/cloudflare")
async def setup_cloudflare(
    domain: str,
    client: NamecheapClient | None = Depends(get_namecheap_client),
) -> OperationResult:
    try:
        return OperationResult(success=await _require(client).setup_cloudflare_integration(domain))
    except NamecheapError as e:
        raise _upstream_error(e) from e


@router.post("/{domain}/renew")
async def renew_domain(
    domain: str,
    request: RenewRequest,
    client: NamecheapClient | None = Depends(get_namecheap_client),
) -> OperationResult:
    try:
        return OperationResult(success=await _require(client).renew_domain(domain, request.years))
    except NamecheapError as e:
        raise _upstream_error(e) from e


@router.post("/{domain}/auto-renew")
async def enable_auto_renew(
    domain: str,
    client: NamecheapClient | None = Depends(get_namecheap_client),
) -> OperationResult:
    try:
        return OperationResult(success=await _require(client).enable_auto_renew(domain))
    except NamecheapError as e:
        raise _upstream_error(e) from e
