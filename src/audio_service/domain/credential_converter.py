"""Conversion of browser cookie exports into the yt-dlp cookie file format."""

import json
import os
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from pydantic import TypeAdapter

from .models import CookieRecord, CredentialSet

NATIVE_HEADER = "# Netscape HTTP Cookie File"
COOKIE_FILE_NAME = "cookies.txt"

_cookie_list = TypeAdapter(list[CookieRecord])


def _flag(value: bool) -> str:
    return "TRUE" if value else "FALSE"


def parse_cookie_export(raw: bytes | str) -> CredentialSet:
    """
    Parses a browser-exported JSON cookie list.

    Raises:
        ValueError: If the payload is not a JSON list of cookie objects.
    """
    payload = json.loads(raw)
    return CredentialSet(cookies=tuple(_cookie_list.validate_python(payload)))


def to_native_line(cookie: CookieRecord) -> str:
    """Renders one cookie as a tab-separated Netscape cookie line."""
    expiration = round(cookie.expiration) if cookie.expiration else 0
    fields = (
        cookie.domain,
        _flag(cookie.domain.startswith(".")),
        cookie.path,
        _flag(cookie.secure),
        str(expiration),
        cookie.name,
        cookie.value,
    )
    return "\t".join(fields)


def to_native_format(credentials: CredentialSet) -> str:
    """
    Renders a credential set as a Netscape cookie file.

    Every cookie is transcribed, expired ones included.
    """
    lines = [NATIVE_HEADER, *(to_native_line(c) for c in credentials.cookies)]
    return "\n".join(lines) + "\n"


def from_native_format(text: str) -> CredentialSet:
    """Parses a Netscape cookie file produced by :func:`to_native_format`."""
    cookies = []
    for line in text.splitlines():
        if not line or line.startswith("#"):
            continue
        domain, _subdomains, path, secure, expiration, name, value = line.split(
            "\t", 6
        )
        cookies.append(
            CookieRecord(
                domain=domain,
                path=path,
                secure=secure == "TRUE",
                expiration=float(expiration) or None,
                name=name,
                value=value,
            )
        )
    return CredentialSet(cookies=tuple(cookies))


@contextmanager
def credential_file(credentials: CredentialSet, directory: Path) -> Iterator[Path]:
    """Writes a short-lived cookie file into ``directory`` and removes it on exit."""
    path = directory / COOKIE_FILE_NAME
    path.write_text(to_native_format(credentials), encoding="utf-8")
    os.chmod(path, 0o600)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
