"""Async client for the Namecheap XML API.

Every command is a GET against a single endpoint with the credentials and
whitelisted client IP as query parameters. Responses are XML; element lookups
ignore the response namespace.
"""

import logging
import xml.etree.ElementTree as ET
from collections.abc import Sequence

import httpx

from instanti8.namecheap.schemas import DNSRecord, DomainAvailability, NamecheapDomain

logger = logging.getLogger(__name__)

NAMECHEAP_BASE_URL = "https://api.namecheap.com/xml.response"
IPIFY_URL = "https://api.ipify.org?format=json"
LOCALHOST_IP = "127.0.0.1"
CLOUDFLARE_NAMESERVERS = ("ns1.cloudflare.com", "ns2.cloudflare.com")


class NamecheapError(Exception):
    """The Namecheap API returned an error or could not be reached."""


def split_domain(domain: str) -> tuple[str, str]:
    """Split "example.co.uk" into SLD "example" and TLD "co.uk"."""
    sld, _, tld = domain.partition(".")
    return sld, tld


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _iter_named(element: ET.Element, name: str) -> list[ET.Element]:
    return [e for e in element.iter() if _local_name(e.tag) == name]


def _find_named(element: ET.Element, name: str) -> ET.Element | None:
    found = _iter_named(element, name)
    return found[0] if found else None


def _flag(element: ET.Element, attribute: str) -> bool:
    return element.get(attribute, "").lower() == "true"


class NamecheapClient:
    def __init__(
        self,
        api_user: str,
        api_key: str,
        username: str,
        *,
        client_ip: str = LOCALHOST_IP,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = NAMECHEAP_BASE_URL,
    ) -> None:
        self._api_user = api_user
        self._api_key = api_key
        self._username = username
        self._client_ip = client_ip
        self._base_url = base_url
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=30.0)

    @property
    def client_ip(self) -> str:
        return self._client_ip

    async def close(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def test_connection(self) -> bool:
        try:
            await self._request("namecheap.domains.getList")
        except NamecheapError as e:
            logger.warning("Namecheap connection test failed: %s", e)
            return False
        return True

    async def get_domains(self) -> list[NamecheapDomain]:
        response = await self._request("namecheap.domains.getList")
        return [
            NamecheapDomain(
                id=d.get("ID", ""),
                name=d.get("Name", ""),
                user=d.get("User"),
                created=d.get("Created"),
                expires=d.get("Expires"),
                is_expired=_flag(d, "IsExpired"),
                is_locked=_flag(d, "IsLocked"),
                auto_renew=_flag(d, "AutoRenew"),
                whois_guard=d.get("WhoisGuard"),
                is_premium=_flag(d, "IsPremium"),
                is_our_dns=_flag(d, "IsOurDNS"),
            )
            for d in _iter_named(response, "Domain")
        ]

    async def check_domain_availability(self, domains: Sequence[str]) -> list[DomainAvailability]:
        response = await self._request(
            "namecheap.domains.check", {"DomainList": ",".join(domains)}
        )
        return [
            DomainAvailability(
                domain=r.get("Domain", ""),
                available=_flag(r, "Available"),
                premium=_flag(r, "IsPremiumName"),
                price=r.get("PremiumRegistrationPrice") or None,
            )
            for r in _iter_named(response, "DomainCheckResult")
        ]

    async def get_dns_records(self, domain: str) -> list[DNSRecord]:
        sld, tld = split_domain(domain)
        response = await self._request("namecheap.domains.dns.getHosts", {"SLD": sld, "TLD": tld})
        records = []
        for host in _iter_named(response, "host"):
            mxpref = host.get("MXPref")
            records.append(
                DNSRecord(
                    type=host.get("Type", "A"),
                    hostname=host.get("Name", ""),
                    address=host.get("Address", ""),
                    ttl=int(host.get("TTL", "1800")),
                    mxpref=int(mxpref) if mxpref else None,
                    record_id=host.get("HostId"),
                )
            )
        return records

    async def set_dns_records(self, domain: str, records: Sequence[DNSRecord]) -> bool:
        """Replace all host records of a domain. Namecheap has no per-record update."""
        sld, tld = split_domain(domain)
        params = {"SLD": sld, "TLD": tld}
        for i, record in enumerate(records, start=1):
            params[f"HostName{i}"] = record.hostname
            params[f"RecordType{i}"] = record.type
            params[f"Address{i}"] = record.address
            params[f"TTL{i}"] = str(record.ttl)
            if record.mxpref:
                params[f"MXPref{i}"] = str(record.mxpref)
        await self._request("namecheap.domains.dns.setHosts", params)
        return True

    async def setup_cloudflare_integration(self, domain: str) -> bool:
        """Point the domain at Cloudflare's nameservers."""
        sld, tld = split_domain(domain)
        await self._request(
            "namecheap.domains.dns.setCustom",
            {"SLD": sld, "TLD": tld, "Nameservers": ",".join(CLOUDFLARE_NAMESERVERS)},
        )
        return True

    async def renew_domain(self, domain: str, years: int = 1) -> bool:
        sld, tld = split_domain(domain)
        await self._request(
            "namecheap.domains.renew", {"DomainName": f"{sld}.{tld}", "Years": str(years)}
        )
        return True

    async def enable_auto_renew(self, domain: str) -> bool:
        sld, tld = split_domain(domain)
        await self._request(
            "namecheap.domains.setRenewalMode",
            {"DomainName": f"{sld}.{tld}", "RenewalMode": "auto"},
        )
        return True

    async def get_ssl_certificates(self) -> list[dict[str, str]]:
        response = await self._request("namecheap.ssl.getList")
        return [dict(ssl.attrib) for ssl in _iter_named(response, "SSL")]

    # ------------------------------------------------------------------
    # Client IP
    # ------------------------------------------------------------------

    def update_client_ip(self, ip: str) -> None:
        self._client_ip = ip

    async def get_external_ip(self) -> str:
        """Public IP of this host via ipify, or 127.0.0.1 when it cannot be determined."""
        try:
            response = await self._http.get(IPIFY_URL)
            response.raise_for_status()
            return response.json()["ip"]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.warning("Failed to get external IP, using localhost: %s", e)
            return LOCALHOST_IP

    async def initialize(self) -> None:
        """Whitelist-match requests by sending this host's public IP as ClientIp."""
        self.update_client_ip(await self.get_external_ip())
        logger.info("Namecheap client IP set to %s", self._client_ip)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    async def _request(self, command: str, params: dict[str, str] | None = None) -> ET.Element:
        """Run one API command and return its CommandResponse element."""
        query = {
            "ApiUser": self._api_user,
            "ApiKey": self._api_key,
            "UserName": self._username,
            "Command": command,
            "ClientIp": self._client_ip,
            **(params or {}),
        }
        try:
            response = await self._http.get(self._base_url, params=query)
            root = ET.fromstring(response.content)
        except (httpx.HTTPError, ET.ParseError) as e:
            raise NamecheapError(f"Namecheap API request failed: {e}") from e

        if root.get("Status") == "ERROR":
            error = _find_named(root, "Error")
            message = (error.text or "").strip() if error is not None else "unknown error"
            raise NamecheapError(f"Namecheap API Error: {message}")

        command_response = _find_named(root, "CommandResponse")
        return command_response if command_response is not None else root
