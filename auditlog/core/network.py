"""
Network-origin fields for logged events

IPv4 addresses are anonymized by zeroing the last octet, IPv6 addresses by
zeroing everything after the first 48 bits.
"""

import ipaddress
import re
from typing import Iterable, Mapping

from auditlog.core.runtime import RequestInfo

IPV6_KEEP_BITS = 48


def is_valid_ip(value: str) -> bool:
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def is_valid_public_ip(value: str) -> bool:
    """True for IPv4 addresses outside the private and reserved ranges"""
    try:
        address = ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return not (
        address.is_private
        or address.is_reserved
        or address.is_loopback
        or address.is_link_local
        or address.is_unspecified
        or address.is_multicast
    )


def anonymize_ip(value: str) -> str:
    """Zero the host part of an address; invalid input yields ''"""
    try:
        address = ipaddress.ip_address(value)
    except ValueError:
        return ""
    if address.version == 4:
        network = ipaddress.ip_network(f"{address}/24", strict=False)
    else:
        network = ipaddress.ip_network(f"{address}/{IPV6_KEEP_BITS}", strict=False)
    return str(network.network_address)


def header_context_key(header_name: str, index: int) -> str:
    return f"_server_{header_name.lower()}_{index}"


def collect_network_fields(
    info: RequestInfo,
    context: Mapping,
    header_names: Iterable[str],
    anonymize: bool = True,
) -> dict:
    """Network-origin fields missing from `context`

    Args:
        info: Request the event is logged in
        context: Context bag collected so far (read only)
        header_names: Ordered proxy header names, WSGI environ style
        anonymize: Anonymize every stored address

    Returns:
        Fields to merge into the context bag
    """
    fields = {}

    if "_server_remote_addr" not in context:
        remote_addr = (info.remote_addr or "").strip()
        if is_valid_ip(remote_addr):
            fields["_server_remote_addr"] = anonymize_ip(remote_addr) if anonymize else remote_addr

        # Behind a load balancer REMOTE_ADDR is always the balancer; the
        # client is somewhere in the forwarding headers (which can be faked).
        for header_name in header_names:
            header_value = info.environ.get(header_name)
            if not header_value:
                continue
            for index, candidate in enumerate(str(header_value).split(",")):
                candidate = candidate.strip()
                if not is_valid_public_ip(candidate):
                    continue
                fields[header_context_key(header_name, index)] = (
                    anonymize_ip(candidate) if anonymize else candidate
                )

    if "_server_http_referer" not in context and info.referrer:
        fields["_server_http_referer"] = info.referrer

    return fields


def get_event_ip_number_headers(context: Mapping, header_names: Iterable[str]) -> dict:
    """Proxy header addresses stored in an event's context"""
    found = {}
    for header_name in header_names:
        pattern = re.compile(rf"^_server_{re.escape(header_name.lower())}_\d+$")
        for key, value in context.items():
            if pattern.match(key):
                found[key] = value
    return found
