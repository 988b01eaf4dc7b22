"""
URL validation utilities for outbound destination requests.

Destinations are configured by connector owners and then called by the
server, so every target URL is checked before use to prevent Server-Side
Request Forgery (SSRF) against internal services.
"""

import ipaddress
import socket
from collections.abc import Iterable
from urllib.parse import urlparse

# Chat notifications must go to the provider's incoming-webhook host
SLACK_WEBHOOK_DOMAINS = frozenset({"slack.com"})


class SSRFError(Exception):
    """Raised when a URL fails outbound request validation."""

    pass


def is_private_ip(ip_str: str) -> bool:
    """
    Check if an IP address is private, loopback, or otherwise internal.

    Args:
        ip_str: IP address string (IPv4 or IPv6)

    Returns:
        True if the IP is private/internal or unparseable, False if public
    """
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        return True

    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped

    return (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_multicast
        or ip.is_reserved
        or ip.is_unspecified
    )


def hostname_matches(hostname: str, allowed_domains: Iterable[str]) -> bool:
    """Return True if hostname equals, or is a subdomain of, an allowed domain."""
    hostname = hostname.lower().rstrip(".")
    return any(
        hostname == domain or hostname.endswith(f".{domain}") for domain in allowed_domains
    )


def validate_outbound_url(
    url: str,
    *,
    allowed_domains: Iterable[str] | None = None,
    resolve_dns: bool = True,
) -> str:
    """
    Validate a URL the server is about to POST to.

    Checks:
    1. URL uses HTTPS scheme
    2. Domain is in the allowlist, when one is given
    3. Host is not a literal private IP
    4. Resolved IPs are not private/internal (optional, defense against DNS rebinding)

    Args:
        url: The URL to validate
        allowed_domains: Optional domain allowlist (subdomains match)
        resolve_dns: Whether to resolve DNS and check for private IPs
                    (disabled in tests to avoid network calls)

    Returns:
        The validated URL (unchanged if valid)

    Raises:
        SSRFError: If the URL fails any validation check
    """
    if not url:
        raise SSRFError("Empty URL")

    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise SSRFError(f"Invalid URL format: {e}") from e

    if parsed.scheme != "https":
        raise SSRFError(f"URL must use HTTPS, got: {parsed.scheme or 'none'}")

    hostname = parsed.hostname
    if not hostname:
        raise SSRFError("URL has no hostname")

    hostname = hostname.lower()

    if allowed_domains is not None and not hostname_matches(hostname, allowed_domains):
        raise SSRFError(f"Domain not allowed: {hostname}")

    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        pass
    else:
        if is_private_ip(hostname):
            raise SSRFError(f"URL points to a private IP: {hostname}")

    if resolve_dns:
        try:
            addr_info = socket.getaddrinfo(hostname, parsed.port or 443, proto=socket.IPPROTO_TCP)
        except socket.gaierror as e:
            raise SSRFError(f"DNS resolution failed: {e}") from e
        for _family, _type, _proto, _canonname, sockaddr in addr_info:
            ip = str(sockaddr[0])
            if is_private_ip(ip):
                raise SSRFError(f"URL resolves to private IP: {ip}")

    return url
