"""Helpers for comparing address lists and deriving domains from PD member hosts."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

_URL_PATTERN = re.compile(r"https?://[A-Za-z0-9.:-]+")


def set_equal(a: Sequence[str], b: Sequence[str]) -> bool:
    """Compare two address lists ignoring order.

    Duplicates are not collapsed: ``["10.0.0.1", "10.0.0.1"]`` and ``["10.0.0.1"]``
    are different. Neither input is modified.
    """

    if len(a) != len(b):
        return False
    return sorted(a) == sorted(b)


def domain_from_host(host: str) -> str:
    """Drop the leftmost label; hosts with fewer than three labels have no parent."""

    parts = host.split(".")
    if len(parts) < 3:
        return ""
    return ".".join(parts[1:])


def unique_domains(hosts: Iterable[str]) -> list[str]:
    result: list[str] = []
    for host in hosts:
        domain = domain_from_host(host)
        if domain and domain not in result:
            result.append(domain)
    return result


def host_from_url(url: str) -> str:
    for prefix in ("http://", "https://"):
        if url.startswith(prefix):
            url = url.removeprefix(prefix)
            break
    return url.split("/", 1)[0].split(":", 1)[0]


def extract_urls(text: str) -> list[str]:
    """Return the distinct ``http(s)://host[:port]`` tokens of ``text`` in first-seen order."""

    return list(dict.fromkeys(_URL_PATTERN.findall(text)))


def unique_hosts(urls: Iterable[str]) -> list[str]:
    hosts: list[str] = []
    for url in urls:
        host = host_from_url(url)
        if host and host not in hosts:
            hosts.append(host)
    return hosts


__all__ = [
    "domain_from_host",
    "extract_urls",
    "host_from_url",
    "set_equal",
    "unique_domains",
    "unique_hosts",
]
